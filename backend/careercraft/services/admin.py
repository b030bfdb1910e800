"""Read-only cross-account views for the admin panel."""
from datetime import datetime

from sqlalchemy.orm import Session, joinedload

from ..models.application import Application
from ..models.job import Job
from ..models.notification import EmailNotification
from ..models.user import User
from .accounts import account_to_public
from .jobs import application_counts, job_to_public


def list_users(db: Session, role: str | None = None) -> list[dict]:
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    return [account_to_public(u) for u in q.order_by(User.created_at.desc(), User.id.desc()).all()]


def list_jobs(db: Session) -> list[dict]:
    jobs = (
        db.query(Job)
        .options(joinedload(Job.employer))
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    counts = application_counts(db, [j.id for j in jobs])
    return [
        {**job_to_public(j), "applicationCount": counts.get(j.id, {}).get("applicationCount", 0)}
        for j in jobs
    ]


def list_applications(db: Session) -> list[dict]:
    rows = (
        db.query(Application)
        .options(
            joinedload(Application.student),
            joinedload(Application.job).joinedload(Job.employer),
        )
        .order_by(Application.applied_date.desc(), Application.id.desc())
        .all()
    )
    items: list[dict] = []
    for a in rows:
        items.append(
            {
                "id": a.id,
                "jobId": a.job_id,
                "jobTitle": a.job.title,
                "companyName": a.job.employer.display_name,
                "studentId": a.student_id,
                "studentName": " ".join(p for p in (a.student.first_name, a.student.last_name) if p),
                "studentEmail": a.student.email,
                "status": a.status,
                "appliedDate": a.applied_date.isoformat() if isinstance(a.applied_date, datetime) else a.applied_date,
            }
        )
    return items


def list_notifications(db: Session, limit: int = 200) -> list[dict]:
    rows = (
        db.query(EmailNotification)
        .order_by(EmailNotification.created_at.desc(), EmailNotification.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": n.id,
            "userId": n.user_id,
            "email": n.email,
            "subject": n.subject,
            "type": n.type,
            "status": n.status,
            "sentAt": n.sent_at.isoformat() if isinstance(n.sent_at, datetime) else n.sent_at,
            "createdAt": n.created_at.isoformat() if isinstance(n.created_at, datetime) else n.created_at,
        }
        for n in rows
    ]
