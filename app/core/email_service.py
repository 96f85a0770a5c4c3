import smtplib
import ssl
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from html import escape
from typing import List, Optional
from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME
        self.password = settings.SMTP_PASSWORD
        self.from_email = settings.FROM_EMAIL
        self.from_name = settings.FROM_NAME
        self.timeout = settings.EMAIL_TIMEOUT

    def send_email(
        self,
        to_emails: List[str],
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> bool:
        """Send an email over SMTP. Never raises: delivery is best-effort."""

        if not settings.SEND_EMAILS:
            logger.info(f"Email sending disabled. Would send: {subject} to {to_emails}")
            return True

        try:
            message = MIMEMultipart("alternative")
            message["Subject"] = subject
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = ", ".join(to_emails)

            if text_content:
                message.attach(MIMEText(text_content, "plain"))
            message.attach(MIMEText(html_content, "html"))

            context = ssl.create_default_context()

            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                server.starttls(context=context)
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.sendmail(self.from_email, to_emails, message.as_string())

            logger.info(f"Email sent successfully to {to_emails}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email '{subject}' to {to_emails}: {str(e)}")
            return False

    def send_notification_email(self, to_email: str, title: str, message: str, data: dict = None, action_url: str = None, action_label: str = "Log In Now") -> bool:
        """Send notification email with standard template"""

        button = ""
        if action_url:
            button = f'<a href="{escape(action_url)}" class="button">{escape(action_label)}</a>'

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="utf-8">
            <title>{escape(title)}</title>
            <style>
                body {{ font-family: Arial, sans-serif; margin: 0; padding: 20px; background-color: #f5f5f5; }}
                .container {{ max-width: 600px; margin: 0 auto; background-color: white; padding: 30px; border-radius: 10px; }}
                .title {{ color: #2563eb; font-size: 22px; margin: 20px 0; }}
                .message {{ color: #4b5563; line-height: 1.6; margin: 20px 0; }}
                .footer {{ text-align: center; margin-top: 30px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
                .button {{ display: inline-block; background-color: #2563eb; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; margin: 20px 0; }}
            </style>
        </head>
        <body>
            <div class="container">
                <h2 class="title">{escape(title)}</h2>
                <div class="message">
                    {message}
                </div>
                {self._format_data_section(data) if data else ""}
                {button}
                <div class="footer">
                    <p>This is an automated message from {escape(settings.PROJECT_NAME)}.</p>
                </div>
            </div>
        </body>
        </html>
        """

        text_content = f"""
        {title}

        {message}

        {self._format_data_text(data) if data else ""}
        {action_url or ""}

        ---
        This is an automated message from {settings.PROJECT_NAME}.
        """

        return self.send_email([to_email], title, html_content, text_content)

    def send_approval_email(self, to_email: str, full_name: str, department: str, role: str, is_new_account: bool) -> bool:
        """Tell an applicant their access request was approved."""
        if is_new_account:
            body = (
                f"<p>Hello {escape(full_name)},</p>"
                "<p>Your account has been approved!</p>"
                "<p><strong>Important:</strong> Please use the \"Forgot Password\" option "
                "on the login page to set your password.</p>"
            )
        else:
            body = (
                f"<p>Hello {escape(full_name)},</p>"
                "<p>Great news! Your access request has been approved. You can now log in "
                "with the credentials you created during sign up.</p>"
            )
        return self.send_notification_email(
            to_email=to_email,
            title=f"Your {settings.PROJECT_NAME} Account Has Been Approved",
            message=body,
            data={"email": to_email, "department": department, "role": role},
            action_url=settings.login_url,
        )

    def send_password_reset_email(self, to_email: str, reset_url: str) -> bool:
        body = (
            "<p>You requested a password reset.</p>"
            f"<p>This link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes. "
            "If you didn't request this reset, please ignore this email.</p>"
        )
        return self.send_notification_email(
            to_email=to_email,
            title="Reset your password",
            message=body,
            action_url=reset_url,
            action_label="Set New Password",
        )

    def _format_data_section(self, data: dict) -> str:
        """Format data dictionary as HTML"""
        html = "<div style='background-color: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;'>"
        for key, value in data.items():
            if value is not None:
                formatted_key = key.replace('_', ' ').title()
                html += f"<p style='margin: 5px 0;'><strong>{escape(formatted_key)}:</strong> {escape(str(value))}</p>"
        html += "</div>"
        return html

    def _format_data_text(self, data: dict) -> str:
        return "\n".join(
            f"{key.replace('_', ' ').title()}: {value}" for key, value in data.items() if value is not None
        )


email_service = EmailService()
