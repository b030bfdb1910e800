from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base

JOB_STATUSES = ("active", "closed", "draft")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    skills = Column(JSON, nullable=False)  # list of skill names
    experience_years = Column(Integer, nullable=False, default=0)
    experience_months = Column(Integer, nullable=False, default=0)
    location = Column(String(255), nullable=False)
    salary = Column(String(100), nullable=True)
    status = Column(
        Enum(*JOB_STATUSES, name="job_status", create_constraint=True),
        nullable=False,
        default="active",
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    employer = relationship("User", back_populates="jobs")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
