import logging
import smtplib
from email.message import EmailMessage

from .. import config

logger = logging.getLogger(__name__)


class EmailNotConfigured(RuntimeError):
    pass


def send_email(*, to_email: str, subject: str, body: str) -> None:
    """
    Send a plain-text email over SMTP.

    Env vars:
      SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM, SMTP_TLS
    """
    host = config.SMTP_HOST
    user = config.SMTP_USER
    password = config.SMTP_PASS
    mail_from = config.SMTP_FROM or user

    if not host or not user or not password or not mail_from:
        raise EmailNotConfigured("Email service not configured")

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = f"CareerCraft <{mail_from}>"
    msg["To"] = to_email
    msg.set_content(body)

    logger.debug("Connecting to %s:%s (TLS=%s)", host, config.SMTP_PORT, config.SMTP_TLS)
    with smtplib.SMTP(host, config.SMTP_PORT, timeout=config.SMTP_TIMEOUT_S) as smtp:
        smtp.ehlo()
        if config.SMTP_TLS:
            smtp.starttls()
            smtp.ehlo()
        smtp.login(user, password)
        smtp.send_message(msg)
    logger.info("Email sent to %s (%s)", to_email, subject)
