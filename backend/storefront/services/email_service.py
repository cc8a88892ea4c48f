"""
Email Service
Sends account emails over SMTP

When SMTP_HOST is not configured the message is logged instead of sent,
which keeps local development and tests free of a mail server.
"""
import logging
import smtplib
from email.message import EmailMessage

from storefront.core.config import Settings

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return self.settings.smtp_enabled

    def send_email(self, to: str, subject: str, body: str) -> bool:
        """
        Send a plain-text email

        Returns:
            True if the message was handed to the SMTP server
        """
        if not self.enabled:
            logger.info(f"SMTP disabled, email to {to} not sent. Subject: {subject}\n{body}")
            return False

        message = EmailMessage()
        message["From"] = self.settings.SMTP_FROM
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        try:
            with smtplib.SMTP(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=10) as smtp:
                if self.settings.SMTP_USE_TLS:
                    smtp.starttls()
                if self.settings.SMTP_USER:
                    smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False

        logger.info(f"Email sent to {to}: {subject}")
        return True

    def send_verification_email(self, to: str, name: str, token: str) -> bool:
        link = f"{self.settings.FRONTEND_URL.rstrip('/')}/verify-email?token={token}"
        body = (
            f"Hi {name},\n\n"
            f"Please confirm your email address by opening the link below:\n\n"
            f"{link}\n\n"
            f"The link expires in {self.settings.EMAIL_VERIFY_TOKEN_HOURS} hours.\n"
        )
        return self.send_email(to, "Verify your email", body)
