"""
申请流程邮件服务

生成四类邮件（投递确认、面试邀请、录用、拒绝）的主题与正文，
经占位发送通道记录到日志，并为每次发送尝试写入一条 EmailLog。
不接入真实邮件网关。
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.config import settings
from careers.crud import email_log_crud, email_template_crud, system_setting_crud, user_crud
from careers.models import (
    Application, EmailStatus, EmailType, Interview, InterviewType, User
)

COMPANY_NAME_SETTING = "company_name"


@dataclass
class EmailRecipients:
    """收件人：申请人为 to，管理员与岗位 HR 为 cc"""
    to: str
    cc: List[str] = field(default_factory=list)


@dataclass
class EmailContent:
    subject: str
    body: str


def _format_datetime(value: datetime) -> str:
    return value.strftime("%B %d, %Y at %I:%M %p")


def _format_date(value: datetime) -> str:
    return value.strftime("%A, %B %d, %Y")


def _format_time(value: datetime) -> str:
    return value.strftime("%I:%M %p UTC")


# ========== 内置模板 ==========

SUBMISSION_SUBJECT = "Application Received - {job_title} at {company_name}"
SUBMISSION_BODY = """Dear {applicant_name},

Thank you for applying for the position of {job_title} at {company_name}.

We have successfully received your application submitted on {submission_date}. Our hiring team will carefully review your qualifications and experience.

Application Details:
- Position: {job_title}
- Application ID: {application_id}
- Submission Date: {submission_date}

We will keep you updated on the status of your application. If your qualifications match our requirements, we will contact you to discuss the next steps in our hiring process.

Thank you for your interest in joining our team.

Best regards,
{company_name} Recruitment Team

---
This is an automated message. Please do not reply to this email."""

INTERVIEW_SUBJECT = "Interview Scheduled - {job_title} at {company_name}"
INTERVIEW_BODY = """Dear {applicant_name},

Congratulations! We are pleased to invite you for an interview for the position of {job_title} at {company_name}.

Interview Details:
- Date: {interview_date}
- Time: {interview_time} (Duration: {interview_duration})
- Type: {interview_type}
- Location/Meeting Link: {interview_location}
- Interviewer: {interviewer_name}

Special Instructions:
{special_instructions}

Please confirm your availability by replying to this email. If you need to reschedule, please contact us at least 24 hours in advance.

What to Prepare:
- Bring a copy of your resume
- Be prepared to discuss your experience and qualifications
- {preparation_tip}

We look forward to meeting you and learning more about your qualifications.

Best regards,
{company_name} Recruitment Team

---
If you have any questions, please feel free to contact us."""

HIRED_SUBJECT = "Congratulations! Job Offer - {job_title} at {company_name}"
HIRED_BODY = """Dear {applicant_name},

Congratulations! We are delighted to inform you that you have been selected for the position of {job_title} at {company_name}.

We were impressed with your qualifications, experience, and performance throughout the interview process. We believe you will be a valuable addition to our team.

Next Steps:
Our HR team will contact you within the next 3-5 business days with:
- Formal offer letter
- Employment terms and conditions
- Joining date and onboarding details
- Required documentation

In the meantime, if you have any questions, please feel free to reach out to our HR department.

We are excited to welcome you to {company_name} and look forward to working with you.

Warm regards,
{admin_name}
{company_name} Management

---
Please keep this information confidential until you receive the formal offer letter."""

REJECTION_SUBJECT = "Application Status Update - {job_title} at {company_name}"
REJECTION_BODY = """Dear {applicant_name},

Thank you for your interest in the {job_title} position at {company_name}{interview_text}.

After careful consideration of your application{interview_performance_text}, we regret to inform you that we have decided to move forward with other candidates whose qualifications more closely match our current needs.

We genuinely appreciate the effort you put into your application{interview_text}. Your background and experience are impressive, and we encourage you to apply for future openings that align with your skills and career goals.

We will keep your resume on file and may reach out if a suitable opportunity arises in the future.

Thank you once again for considering {company_name} as your potential employer. We wish you every success in your career journey.

Best regards,
{company_name} Recruitment Team

---
This decision is final. We appreciate your understanding."""

BUILTIN_TEMPLATES: Dict[EmailType, EmailContent] = {
    EmailType.SUBMISSION: EmailContent(SUBMISSION_SUBJECT, SUBMISSION_BODY),
    EmailType.INTERVIEW: EmailContent(INTERVIEW_SUBJECT, INTERVIEW_BODY),
    EmailType.HIRED: EmailContent(HIRED_SUBJECT, HIRED_BODY),
    EmailType.REJECTED: EmailContent(REJECTION_SUBJECT, REJECTION_BODY),
}


class EmailService:
    """申请流程邮件服务"""

    def __init__(self):
        self.from_email = settings.mail_from
        self.from_name = settings.mail_from_name

    async def get_company_name(self, db: AsyncSession) -> str:
        """公司名：系统设置优先，其次配置"""
        return await system_setting_crud.get_value(
            db, COMPANY_NAME_SETTING, settings.company_name
        )

    async def get_recipients(self, db: AsyncSession, application: Application) -> EmailRecipients:
        """申请人为收件人，抄送全部启用中的管理员与岗位负责 HR"""
        to = application.applicant.email
        cc: List[str] = []
        for email in await user_crud.get_active_admin_emails(db):
            if email != to and email not in cc:
                cc.append(email)

        owner = application.job.created_by if application.job is not None else None
        if owner is not None and owner.is_active and owner.email not in cc and owner.email != to:
            cc.append(owner.email)
        return EmailRecipients(to=to, cc=cc)

    async def render(self, db: AsyncSession, email_type: EmailType, data: Dict[str, str]) -> EmailContent:
        """
        渲染邮件

        启用中的 EmailTemplate 覆盖内置模板；自定义模板占位符错误时回退到内置模板
        """
        builtin = BUILTIN_TEMPLATES[email_type]
        template = await email_template_crud.get_active_by_type(db, email_type.value)
        if template is not None:
            try:
                return EmailContent(
                    subject=template.subject.format_map(data),
                    body=template.body.format_map(data),
                )
            except (KeyError, IndexError, ValueError) as e:
                logger.warning(f"Email template {email_type.value} is invalid, using built-in: {e}")
        return EmailContent(
            subject=builtin.subject.format_map(data),
            body=builtin.body.format_map(data),
        )

    async def send_email(self, recipients: EmailRecipients, content: EmailContent) -> bool:
        """占位发送通道：只记录日志"""
        logger.info(
            f"Sending email from {self.from_name} <{self.from_email}> "
            f"to={recipients.to} cc={recipients.cc} subject={content.subject!r}"
        )
        return True

    async def _deliver(
        self,
        db: AsyncSession,
        application: Application,
        email_type: EmailType,
        data: Dict[str, str]
    ) -> bool:
        """渲染、发送并写入 EmailLog"""
        recipients = await self.get_recipients(db, application)
        content = await self.render(db, email_type, data)

        error_message: Optional[str] = None
        try:
            success = await self.send_email(recipients, content)
            if not success:
                error_message = "Email sending failed"
        except Exception as e:
            logger.exception(f"Email transport error: {e}")
            success = False
            error_message = str(e) or "Email sending failed"

        await email_log_crud.create(db, obj_in={
            "application_id": application.id,
            "email_type": email_type.value,
            "recipient_email": recipients.to,
            "cc_emails": recipients.cc,
            "subject": content.subject,
            "body": content.body,
            "status": EmailStatus.SENT.value if success else EmailStatus.FAILED.value,
            "error_message": error_message,
        })
        return success

    async def _base_data(self, db: AsyncSession, application: Application) -> Dict[str, str]:
        return {
            "applicant_name": application.applicant.full_name,
            "job_title": application.job.title if application.job is not None else application.job_title,
            "company_name": await self.get_company_name(db),
            "application_id": application.id,
        }

    async def send_application_submission_email(self, db: AsyncSession, application: Application) -> bool:
        """投递确认邮件"""
        data = await self._base_data(db, application)
        data["submission_date"] = _format_datetime(application.submitted_at)
        return await self._deliver(db, application, EmailType.SUBMISSION, data)

    async def send_interview_scheduled_email(
        self,
        db: AsyncSession,
        application: Application,
        interview: Interview
    ) -> bool:
        """面试邀请邮件"""
        data = await self._base_data(db, application)
        data.update({
            "interview_date": _format_date(interview.scheduled_at),
            "interview_time": _format_time(interview.scheduled_at),
            "interview_duration": f"{interview.duration_minutes} minutes",
            "interview_type": interview.interview_type.replace("_", " "),
            "interview_location": interview.location or interview.meeting_link or "To be confirmed",
            "interviewer_name": interview.interviewer or "HR Team",
            "special_instructions": interview.notes or "None provided",
            "preparation_tip": (
                "Ensure you have a stable internet connection and a quiet environment"
                if interview.interview_type == InterviewType.VIDEO.value
                else "Arrive 10 minutes early"
            ),
        })
        return await self._deliver(db, application, EmailType.INTERVIEW, data)

    async def send_hired_email(self, db: AsyncSession, application: Application, decided_by: User) -> bool:
        """录用邮件，署名为做出录用决定的管理员"""
        data = await self._base_data(db, application)
        data["admin_name"] = decided_by.full_name
        return await self._deliver(db, application, EmailType.HIRED, data)

    async def send_rejection_email(
        self,
        db: AsyncSession,
        application: Application,
        was_interviewed: bool = False
    ) -> bool:
        """拒绝邮件，参加过面试的候选人措辞不同"""
        data = await self._base_data(db, application)
        data["interview_text"] = (
            " and for taking the time to participate in our interview process" if was_interviewed else ""
        )
        data["interview_performance_text"] = " and interview performance" if was_interviewed else ""
        return await self._deliver(db, application, EmailType.REJECTED, data)


_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """获取 EmailService 单例"""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
