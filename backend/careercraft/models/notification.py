from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from ..database import Base

NOTIFICATION_STATUSES = ("sent", "failed", "pending")


class EmailNotification(Base):
    __tablename__ = "email_notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    email = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(100), nullable=False, index=True)  # registration / status_update
    status = Column(
        Enum(*NOTIFICATION_STATUSES, name="notification_status", create_constraint=True),
        nullable=False,
        default="pending",
        index=True,
    )
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
