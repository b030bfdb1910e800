"""
Outbound notification sink.

Messages are handed to FastAPI background tasks so delivery runs after the
response is sent. Every delivery attempt is recorded in `email_notifications`
as `sent` or `failed`; nothing here ever raises into the triggering request.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError

from .. import database
from ..models.notification import EmailNotification
from .emailer import send_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutboundEmail:
    user_id: int | None
    to_email: str
    subject: str
    body: str
    kind: str  # registration / status_update


Notifier = Callable[[OutboundEmail], None]


def welcome_email(user) -> OutboundEmail:  # noqa: ANN001
    lines = [
        f"Dear {user.first_name},",
        "",
        f"Thank you for registering as a {user.role}. Your account has been created successfully.",
        "You can now log in and start using CareerCraft.",
        "",
        "Best regards,",
        "The CareerCraft Team",
    ]
    return OutboundEmail(
        user_id=user.id,
        to_email=user.email,
        subject="Welcome to CareerCraft",
        body="\n".join(lines),
        kind="registration",
    )


def status_update_email(*, student, job, status: str, employer_notes: str | None = None) -> OutboundEmail:  # noqa: ANN001
    company = job.employer.display_name if job.employer else "the employer"
    lines = [
        f"Dear {student.first_name},",
        "",
        f"Your application for {job.title} at {company} has been {status}.",
    ]
    if employer_notes:
        lines += ["", "Notes from the employer:", employer_notes]
    lines += ["", "Best regards,", "The CareerCraft Team"]
    return OutboundEmail(
        user_id=student.id,
        to_email=student.email,
        subject=f"Application {status}: {job.title}",
        body="\n".join(lines),
        kind="status_update",
    )


def _record(message: OutboundEmail, *, status: str, stored_message: str) -> None:
    db = database.SessionLocal()
    try:
        db.add(
            EmailNotification(
                user_id=message.user_id,
                email=message.to_email,
                subject=message.subject,
                message=stored_message,
                type=message.kind,
                status=status,
                sent_at=datetime.now(timezone.utc) if status == "sent" else None,
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to record %s notification for %s: %s", message.kind, message.to_email, e)
    finally:
        db.close()


def deliver(message: OutboundEmail) -> str:
    """Send one message and log the outcome. Returns the recorded status."""
    try:
        send_email(to_email=message.to_email, subject=message.subject, body=message.body)
    except Exception as e:
        # Delivery problems never reach the caller; they are logged and persisted.
        logger.warning("Email to %s failed (%s): %s", message.to_email, message.kind, e)
        _record(message, status="failed", stored_message=str(e) or type(e).__name__)
        return "failed"

    _record(message, status="sent", stored_message=message.body)
    return "sent"


def background_notifier(background_tasks: BackgroundTasks) -> Notifier:
    def _notify(message: OutboundEmail) -> None:
        background_tasks.add_task(deliver, message)
    return _notify


def notify_safely(notify: Notifier | None, message: OutboundEmail) -> None:
    if notify is None:
        return
    try:
        notify(message)
    except Exception as e:
        logger.warning("Failed to queue %s notification for %s: %s", message.kind, message.to_email, e)
