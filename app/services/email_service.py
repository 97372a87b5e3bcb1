"""
Email Service
Transactional emails: verification codes and event notices
"""

import logging

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from app.config import settings

logger = logging.getLogger(__name__)

CODE_SUBJECTS = {
    "email_verify": "Confirm your email address",
    "two_factor": "Your sign-in code",
    "password_reset": "Reset your password",
    "password_change": "Confirm your password change",
}

CODE_INTROS = {
    "email_verify": "Use the code below to confirm your email address.",
    "two_factor": "Use the code below to finish signing in.",
    "password_reset": "Use the code below to reset your password.",
    "password_change": "Use the code below to confirm your new password.",
}


class EmailService:
    """Service for sending emails"""

    @staticmethod
    def _build_message(to_email: str, subject: str, text_body: str, html_body: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = f"{settings.APP_NAME} - {subject}"
        message["From"] = settings.EMAIL_FROM
        message["To"] = to_email
        message.attach(MIMEText(text_body, "plain"))
        message.attach(MIMEText(html_body, "html"))
        return message

    @staticmethod
    def _wrap_html(greeting: str, content: str) -> str:
        return f"""
            <html>
              <body style="font-family: Arial, sans-serif; color: #333;">
                <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                  <h2 style="color: #2c3e50;">{settings.APP_NAME}</h2>
                  <p>{greeting}</p>
                  {content}
                  <hr style="border: none; border-top: 1px solid #ddd; margin: 30px 0;">
                  <p>Best regards,<br><strong>{settings.UNIVERSITY_NAME} Events Team</strong></p>
                </div>
              </body>
            </html>
            """

    @staticmethod
    async def send_email(to_email: str, subject: str, text_body: str, html_body: str) -> bool:
        """
        Send one email, or log it when SMTP is not configured

        Returns:
            True if the message was delivered (or logged in development), False on failure
        """
        message = EmailService._build_message(to_email, subject, text_body, html_body)

        if not (settings.SMTP_HOST and settings.SMTP_USER and settings.SMTP_PASSWORD):
            logger.info(
                "--- EMAIL (Development Mode) ---\nTo: %s\nSubject: %s\n%s\n--- END EMAIL ---",
                to_email, message["Subject"], text_body
            )
            return True

        try:
            async with aiosmtplib.SMTP(hostname=settings.SMTP_HOST, port=settings.SMTP_PORT) as smtp:
                await smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                await smtp.sendmail(settings.EMAIL_FROM, to_email, message.as_string())
            return True
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.warning(f"Email send failed for {to_email} ({message['Subject']}): {e}")
            return False

    @staticmethod
    async def send_code_email(to_email: str, first_name: str, code: str, purpose: str) -> bool:
        """
        Send a one-time verification code

        Args:
            purpose: email_verify, two_factor, password_reset or password_change
        """
        intro = CODE_INTROS[purpose]
        minutes = settings.OTP_EXPIRY_MINUTES

        text_body = f"""
Hi {first_name},

{intro}

Code: {code}

The code expires in {minutes} minutes. If you did not request it, you can ignore this email.
        """

        html_body = EmailService._wrap_html(
            f"Hi {first_name},",
            f"""
                  <p>{intro}</p>
                  <div style="background-color: #f8f9fa; padding: 15px; border-left: 4px solid #007bff; margin: 20px 0;">
                    <p style="font-size: 28px; letter-spacing: 6px;"><strong>{code}</strong></p>
                  </div>
                  <p>The code expires in {minutes} minutes. If you did not request it, you can ignore this email.</p>
            """
        )

        return await EmailService.send_email(to_email, CODE_SUBJECTS[purpose], text_body, html_body)

    @staticmethod
    async def send_registration_email(to_email: str, first_name: str, event: dict) -> bool:
        """Confirmation for a confirmed event registration"""
        details = f"{event['title']} on {event['event_date']} at {event.get('venue') or 'TBA'}"

        text_body = f"""
Hi {first_name},

Your registration is confirmed: {details}.

Scan the event QR code at the venue to record your attendance.
        """

        html_body = EmailService._wrap_html(
            f"Hi {first_name},",
            f"""
                  <p>Your registration is confirmed:</p>
                  <p><strong>{details}</strong></p>
                  <p>Scan the event QR code at the venue to record your attendance.</p>
            """
        )

        return await EmailService.send_email(to_email, "Registration confirmed", text_body, html_body)

    @staticmethod
    async def send_certificate_email(to_email: str, first_name: str, event_title: str, certificate_number: str) -> bool:
        """Notice that a participation certificate is ready"""
        link = f"{settings.APP_URL}/certificates/verify/{certificate_number}"

        text_body = f"""
Hi {first_name},

Your certificate for {event_title} has been issued.
Certificate number: {certificate_number}

Verify it at: {link}
        """

        html_body = EmailService._wrap_html(
            f"Hi {first_name},",
            f"""
                  <p>Your certificate for <strong>{event_title}</strong> has been issued.</p>
                  <p>Certificate number: <code>{certificate_number}</code></p>
                  <p><a href="{link}" style="background-color: #007bff; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px; display: inline-block;">Verify certificate</a></p>
            """
        )

        return await EmailService.send_email(to_email, "Certificate issued", text_body, html_body)


# Create singleton instance
email_service = EmailService()
