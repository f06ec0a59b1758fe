"""
核心模块：配置、数据库、统一响应、异常、认证
"""
