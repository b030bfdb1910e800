from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base

APPLICATION_STATUSES = ("pending", "accepted", "rejected")


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        # Authoritative duplicate guard: concurrent submissions for the same pair
        # cannot both commit.
        UniqueConstraint("job_id", "student_id", name="uq_applications_job_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    resume_path = Column(String(500), nullable=True)
    cover_letter = Column(Text, nullable=True)
    status = Column(
        Enum(*APPLICATION_STATUSES, name="application_status", create_constraint=True),
        nullable=False,
        default="pending",
        index=True,
    )
    employer_notes = Column(Text, nullable=True)
    applied_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    status_updated_at = Column(DateTime(timezone=True), nullable=True)

    job = relationship("Job", back_populates="applications")
    student = relationship("User", back_populates="applications")
