"""
Read-side aggregation over jobs and applications.

Every call queries the live tables, so counts are never stale.
"""
from sqlalchemy import case, distinct, func
from sqlalchemy.orm import Session

from ..models.application import Application
from ..models.job import Job
from ..models.user import User


def _status_count(status: str):
    return func.count(distinct(case((Application.status == status, Application.id))))


def employer_stats(db: Session, employer_id: int) -> dict:
    total_jobs, total, pending, accepted, rejected = (
        db.query(
            func.count(distinct(Job.id)),
            func.count(distinct(Application.id)),
            _status_count("pending"),
            _status_count("accepted"),
            _status_count("rejected"),
        )
        .select_from(Job)
        .outerjoin(Application, Application.job_id == Job.id)
        .filter(Job.employer_id == employer_id)
        .one()
    )
    return {
        "totalJobs": int(total_jobs or 0),
        "totalApplications": int(total or 0),
        "pendingApplications": int(pending or 0),
        "acceptedApplications": int(accepted or 0),
        "rejectedApplications": int(rejected or 0),
    }


def student_stats(db: Session, student_id: int) -> dict:
    total, pending, accepted, rejected = (
        db.query(
            func.count(distinct(Application.id)),
            _status_count("pending"),
            _status_count("accepted"),
            _status_count("rejected"),
        )
        .filter(Application.student_id == student_id)
        .one()
    )
    return {
        "totalApplications": int(total or 0),
        "pendingApplications": int(pending or 0),
        "acceptedApplications": int(accepted or 0),
        "rejectedApplications": int(rejected or 0),
    }


def platform_stats(db: Session) -> dict:
    role_counts = dict(db.query(User.role, func.count(User.id)).group_by(User.role).all())
    job_counts = dict(db.query(Job.status, func.count(Job.id)).group_by(Job.status).all())
    app_counts = dict(db.query(Application.status, func.count(Application.id)).group_by(Application.status).all())
    return {
        "totalStudents": int(role_counts.get("student", 0)),
        "totalEmployers": int(role_counts.get("employer", 0)),
        "totalJobs": int(sum(job_counts.values())),
        "activeJobs": int(job_counts.get("active", 0)),
        "totalApplications": int(sum(app_counts.values())),
        "pendingApplications": int(app_counts.get("pending", 0)),
        "acceptedApplications": int(app_counts.get("accepted", 0)),
        "rejectedApplications": int(app_counts.get("rejected", 0)),
    }
