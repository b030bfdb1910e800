import logging
from datetime import datetime

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.application import Application
from ..models.job import Job
from ..schemas.job import JobCreate
from ..utils.dependencies import Principal
from ..utils.error_handlers import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
    get_error_message,
    handle_database_error,
)
from ..utils.validation import (
    normalize_skills,
    validate_integer_field,
    validate_job_status,
    validate_string_field,
)

logger = logging.getLogger(__name__)

_EMPTY_COUNTS = {
    "applicationCount": 0,
    "pendingApplications": 0,
    "acceptedApplications": 0,
    "rejectedApplications": 0,
}


def job_to_public(job: Job) -> dict:
    employer = job.employer
    return {
        "id": job.id,
        "employerId": job.employer_id,
        "title": job.title,
        "description": job.description,
        "skills": normalize_skills(job.skills),
        "experienceYears": job.experience_years or 0,
        "experienceMonths": job.experience_months or 0,
        "location": job.location,
        "salary": job.salary,
        "status": job.status,
        "employerName": employer.display_name if employer else None,
        "companyName": employer.company_name if employer else None,
        "createdAt": job.created_at.isoformat() if isinstance(job.created_at, datetime) else job.created_at,
    }


def post_job(db: Session, employer_id: int, payload: JobCreate) -> Job:
    try:
        title = validate_string_field(payload.title, "Title", max_length=255)
        description = validate_string_field(payload.description, "Description", max_length=20000)
        location = validate_string_field(payload.location, "Location", max_length=255)
    except ValidationError:
        raise ValidationError(get_error_message("invalid_job_data"))

    skills = normalize_skills(payload.skills)
    if not skills:
        raise ValidationError(get_error_message("skills_required"))

    job = Job(
        employer_id=employer_id,
        title=title,
        description=description,
        skills=skills,
        experience_years=validate_integer_field(payload.experience_years, "Experience years", min_value=0, max_value=50),
        experience_months=validate_integer_field(payload.experience_months, "Experience months", min_value=0, max_value=11),
        location=location,
        salary=validate_string_field(payload.salary, "Salary", max_length=100, required=False),
        status="active",
    )
    try:
        db.add(job)
        db.commit()
        db.refresh(job)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating job")

    logger.info("Employer id=%s posted job id=%s", employer_id, job.id)
    return job


def list_jobs(db: Session) -> list[dict]:
    """All active jobs, newest first, with the employer's display name."""
    jobs = (
        db.query(Job)
        .options(joinedload(Job.employer))
        .filter(Job.status == "active")
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    return [job_to_public(j) for j in jobs]


def application_counts(db: Session, job_ids: list[int]) -> dict[int, dict]:
    """Live per-job application counts, keyed by job id."""
    if not job_ids:
        return {}
    rows = (
        db.query(
            Application.job_id,
            func.count(Application.id),
            func.sum(case((Application.status == "pending", 1), else_=0)),
            func.sum(case((Application.status == "accepted", 1), else_=0)),
            func.sum(case((Application.status == "rejected", 1), else_=0)),
        )
        .filter(Application.job_id.in_(job_ids))
        .group_by(Application.job_id)
        .all()
    )
    return {
        int(job_id): {
            "applicationCount": int(total or 0),
            "pendingApplications": int(pending or 0),
            "acceptedApplications": int(accepted or 0),
            "rejectedApplications": int(rejected or 0),
        }
        for job_id, total, pending, accepted, rejected in rows
    }


def list_employer_jobs(db: Session, employer_id: int) -> list[dict]:
    jobs = (
        db.query(Job)
        .options(joinedload(Job.employer))
        .filter(Job.employer_id == employer_id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    counts = application_counts(db, [j.id for j in jobs])
    return [{**job_to_public(j), **counts.get(j.id, _EMPTY_COUNTS)} for j in jobs]


def get_job(db: Session, job_id: int, viewer: Principal) -> dict:
    job = db.query(Job).options(joinedload(Job.employer)).filter(Job.id == job_id).first()
    if job is None:
        raise NotFoundError(get_error_message("job_not_found"))

    is_owner = viewer.role == "employer" and job.employer_id == viewer.id
    if job.status != "active" and not (is_owner or viewer.is_admin):
        raise NotFoundError(get_error_message("job_not_found"))
    return job_to_public(job)


def get_owned_job(db: Session, employer_id: int, job_id: int) -> Job:
    """Fetch a job and verify the caller owns it. Missing -> 404, foreign -> 403."""
    job = db.query(Job).filter(Job.id == job_id).first()
    if job is None:
        raise NotFoundError(get_error_message("job_not_found"))
    if job.employer_id != employer_id:
        raise ForbiddenError(get_error_message("forbidden"))
    return job


def set_job_status(db: Session, employer_id: int, job_id: int, status: str) -> dict:
    status = validate_job_status(status)
    job = get_owned_job(db, employer_id, job_id)
    job.status = status
    try:
        db.commit()
        db.refresh(job)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating job status")

    logger.info("Employer id=%s set job id=%s to %s", employer_id, job_id, status)
    return job_to_public(job)
