"""Email service for OTP delivery"""

import asyncio
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ...core.config import Settings
from ...domain.enums import OtpPurpose
from ...domain.exceptions import DeliveryFailure, DeliveryFailureReason
from ...domain.services.notification_gateway import INotificationGateway


logger = logging.getLogger(__name__)

SENDING_LIMIT_MARKER = "daily user sending limit exceeded"
# Transient "try later" replies
RATE_LIMIT_SMTP_CODES = {421, 450, 451, 452, 454}


def classify_smtp_error(error: Exception) -> DeliveryFailureReason:
    """Map a transport exception onto a delivery failure reason"""
    if SENDING_LIMIT_MARKER in str(error).lower():
        return DeliveryFailureReason.RATE_LIMIT

    if isinstance(error, smtplib.SMTPResponseException):
        if error.smtp_code in RATE_LIMIT_SMTP_CODES:
            return DeliveryFailureReason.RATE_LIMIT

    if isinstance(error, (
        smtplib.SMTPAuthenticationError,
        smtplib.SMTPSenderRefused,
        smtplib.SMTPNotSupportedError,
        ConnectionRefusedError,
    )):
        return DeliveryFailureReason.CONFIGURATION

    return DeliveryFailureReason.SEND


class EmailService(INotificationGateway):

    def __init__(self, settings: Settings):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_use_tls = settings.SMTP_USE_TLS
        self.smtp_timeout = settings.SMTP_TIMEOUT_SECONDS
        self.from_email = settings.FROM_EMAIL
        self.from_name = settings.FROM_NAME
        self.otp_expire_minutes = settings.OTP_EXPIRE_MINUTES

    async def send_email(self,
                         to_email: str,
                         subject: str,
                         html_content: str,
                         text_content: Optional[str] = None) -> None:
        """Send email with HTML content. Raises DeliveryFailure on transport errors."""
        logger.info("Sending email to %s: %s", to_email, subject)

        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = to_email

        if text_content:
            msg.attach(MIMEText(text_content, 'plain'))
        msg.attach(MIMEText(html_content, 'html'))

        try:
            await self._send_smtp_email(msg)
        except (smtplib.SMTPException, OSError) as e:
            reason = classify_smtp_error(e)
            logger.error("Error sending email to %s (%s): %s", to_email, reason.value, e)
            raise DeliveryFailure(reason) from e

        logger.info("Email sent successfully to %s", to_email)

    async def _send_smtp_email(self, msg: MIMEMultipart):
        """Send email via SMTP"""
        def send_sync():
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.smtp_timeout) as server:
                if self.smtp_use_tls:
                    server.starttls()
                if self.smtp_username and self.smtp_password:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

        # Run in thread pool to avoid blocking
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, send_sync)

    async def send_otp(self,
                       to_email: str,
                       recipient_name: str,
                       otp_code: str,
                       purpose: OtpPurpose) -> None:
        if purpose == OtpPurpose.PASSWORD_RESET:
            await self.send_password_reset_email(to_email, recipient_name, otp_code)
        else:
            await self.send_verification_email(to_email, recipient_name, otp_code)

    async def send_verification_email(self, to_email: str, recipient_name: str, otp_code: str) -> None:
        """Send email verification code"""
        subject = f"Verify your {self.from_name} account"

        html_content = self._render_otp_html(
            title=f"Welcome to {self.from_name}!",
            heading="Verify Your Email Address",
            greeting=f"Hi {html.escape(recipient_name)},",
            body="Thank you for signing up! Enter the code below to verify your email address.",
            otp_code=otp_code,
            footer=f"If you didn't sign up for {self.from_name}, you can safely ignore this email."
        )

        text_content = f"""
        Hi {recipient_name},

        Your {self.from_name} verification code is: {otp_code}

        This code will expire in {self.otp_expire_minutes} minutes.

        If you didn't sign up for {self.from_name}, you can safely ignore this email.
        """

        await self.send_email(to_email, subject, html_content, text_content)

    async def send_password_reset_email(self, to_email: str, recipient_name: str, otp_code: str) -> None:
        """Send password reset code"""
        subject = f"Reset Password - {self.from_name} Account Recovery"

        html_content = self._render_otp_html(
            title="Password Reset",
            heading="Reset Your Password",
            greeting=f"Hi {html.escape(recipient_name)},",
            body="We received a request to reset your password. Enter the code below to choose a new one. "
                 f"The {self.from_name} team will never ask you for this code.",
            otp_code=otp_code,
            footer="If you didn't request a password reset, please ignore this email or contact support."
        )

        text_content = f"""
        Hi {recipient_name},

        Your password reset code is: {otp_code}

        This code will expire in {self.otp_expire_minutes} minutes.

        If you didn't request a password reset, please ignore this email.
        """

        await self.send_email(to_email, subject, html_content, text_content)

    def _render_otp_html(self, title: str, heading: str, greeting: str, body: str,
                         otp_code: str, footer: str) -> str:
        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
                .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
                .content {{ background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }}
                .code {{ font-size: 32px; letter-spacing: 8px; font-weight: bold; text-align: center; margin: 20px 0; }}
                .footer {{ text-align: center; margin-top: 30px; color: #666; font-size: 14px; }}
            </style>
        </head>
        <body>
            <div class="container">
                <div class="header">
                    <h1>{title}</h1>
                </div>
                <div class="content">
                    <h2>{heading}</h2>
                    <p>{greeting}</p>
                    <p>{body}</p>
                    <div class="code">{otp_code}</div>
                    <p>This code will expire in {self.otp_expire_minutes} minutes.</p>
                </div>
                <div class="footer">
                    <p>{footer}</p>
                </div>
            </div>
        </body>
        </html>
        """
