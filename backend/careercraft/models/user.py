from sqlalchemy import Column, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base

ACCOUNT_ROLES = ("student", "employer")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # store hashed password
    role = Column(Enum(*ACCOUNT_ROLES, name="user_role", create_constraint=True), nullable=False, index=True)

    # Employer profile
    company_name = Column(String(255), nullable=True)
    # Student profile
    college = Column(String(255), nullable=True)
    course = Column(String(255), nullable=True)
    graduation_year = Column(Integer, nullable=True)

    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    jobs = relationship("Job", back_populates="employer")
    applications = relationship("Application", back_populates="student")

    @property
    def display_name(self) -> str:
        """Company name for employers, falling back to the personal name."""
        if self.company_name:
            return self.company_name
        return " ".join(p for p in (self.first_name, self.last_name) if p)
