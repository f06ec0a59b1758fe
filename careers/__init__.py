"""
招聘门户后端
"""
__version__ = "1.0.0"
