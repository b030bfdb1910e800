"""
Application workflow.

A student applies once per job; the owning employer moves the application
from `pending` to `accepted` or `rejected`. Ownership is always derived from
the live job row, never from a client-supplied id.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.application import Application
from ..models.job import Job
from ..models.user import User
from ..utils.dependencies import Principal
from ..utils.error_handlers import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    get_error_message,
    handle_database_error,
)
from ..utils.validation import validate_application_status, validate_string_field
from .jobs import get_owned_job
from .notifications import Notifier, notify_safely, status_update_email

logger = logging.getLogger(__name__)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if isinstance(value, datetime) else value


def _application_fields(a: Application) -> dict:
    return {
        "id": a.id,
        "jobId": a.job_id,
        "studentId": a.student_id,
        "resumePath": a.resume_path,
        "coverLetter": a.cover_letter,
        "status": a.status,
        "employerNotes": a.employer_notes,
        "appliedDate": _iso(a.applied_date),
        "statusUpdatedAt": _iso(a.status_updated_at),
    }


def _newest_first(query):  # noqa: ANN001
    return query.order_by(Application.applied_date.desc(), Application.id.desc())


def find_application(db: Session, *, student_id: int, job_id: int) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.student_id == student_id, Application.job_id == job_id)
        .first()
    )


def ensure_can_apply(db: Session, *, student_id: int, job_id: int) -> Job:
    """
    Validate that the job accepts applications and the student has not applied.

    This pre-check only saves work (e.g. storing a résumé that would be thrown
    away). The unique constraint on (job_id, student_id) is what actually
    prevents duplicates.
    """
    job = db.query(Job).filter(Job.id == job_id).first()
    if job is None:
        raise ValidationError(get_error_message("job_not_found"))
    if job.status != "active":
        raise ValidationError(get_error_message("job_closed"))
    if find_application(db, student_id=student_id, job_id=job_id) is not None:
        raise ConflictError(get_error_message("already_applied"))
    return job


def apply(
    db: Session,
    *,
    student_id: int,
    job_id: int,
    resume_path: str | None = None,
    cover_letter: str | None = None,
) -> Application:
    ensure_can_apply(db, student_id=student_id, job_id=job_id)

    application = Application(
        job_id=job_id,
        student_id=student_id,
        resume_path=resume_path,
        cover_letter=validate_string_field(cover_letter, "Cover letter", max_length=10000, required=False),
        status="pending",
        applied_date=datetime.now(timezone.utc),
    )
    try:
        db.add(application)
        db.commit()
        db.refresh(application)
    except IntegrityError as e:
        db.rollback()
        # Lost the race against a concurrent submission for the same pair.
        logger.info("Duplicate application student=%s job=%s rejected by constraint: %s", student_id, job_id, e.orig)
        raise ConflictError(get_error_message("already_applied"))
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "submitting application")

    logger.info("Student id=%s applied to job id=%s (application id=%s)", student_id, job_id, application.id)
    return application


def list_for_student(db: Session, student_id: int) -> list[dict]:
    rows = _newest_first(
        db.query(Application)
        .options(joinedload(Application.job).joinedload(Job.employer))
        .filter(Application.student_id == student_id)
    ).all()

    items: list[dict] = []
    for a in rows:
        employer = a.job.employer
        items.append(
            {
                **_application_fields(a),
                "jobTitle": a.job.title,
                "location": a.job.location,
                "employerName": employer.display_name,
                "companyName": employer.company_name,
            }
        )
    return items


def list_for_job(db: Session, employer_id: int, job_id: int) -> list[dict]:
    get_owned_job(db, employer_id, job_id)

    rows = _newest_first(
        db.query(Application)
        .options(joinedload(Application.student))
        .filter(Application.job_id == job_id)
    ).all()

    items: list[dict] = []
    for a in rows:
        s = a.student
        items.append(
            {
                **_application_fields(a),
                "studentFirstName": s.first_name,
                "studentLastName": s.last_name,
                "studentEmail": s.email,
                "college": s.college,
                "course": s.course,
                "graduationYear": s.graduation_year,
                "phone": s.phone,
            }
        )
    return items


def _owned_application(db: Session, employer_id: int, application_id: int) -> Application:
    row = (
        db.query(Application, Job.employer_id)
        .join(Job, Application.job_id == Job.id)
        .filter(Application.id == application_id)
        .first()
    )
    if row is None:
        raise NotFoundError(get_error_message("application_not_found"))
    application, owner_id = row
    if owner_id != employer_id:
        raise ForbiddenError(get_error_message("forbidden"))
    return application


def update_status(
    db: Session,
    *,
    employer_id: int,
    application_id: int,
    new_status: str,
    employer_notes: str | None = None,
    notify: Notifier | None = None,
) -> dict:
    """
    Move a pending application to `accepted` or `rejected`.

    Both outcomes are final. Repeating the current status only re-stamps
    `status_updated_at` and sends no second email.
    """
    status = validate_application_status(new_status)
    application = _owned_application(db, employer_id, application_id)

    changed = application.status != status
    if changed and application.status != "pending":
        raise ValidationError(get_error_message("status_final"))

    application.status = status
    application.status_updated_at = datetime.now(timezone.utc)
    if employer_notes is not None:
        application.employer_notes = employer_notes.strip() or None
    try:
        db.commit()
        db.refresh(application)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating application status")

    logger.info("Employer id=%s set application id=%s to %s", employer_id, application_id, status)
    if not changed:
        return _application_fields(application)

    student = db.query(User).filter(User.id == application.student_id).first()
    job = db.query(Job).options(joinedload(Job.employer)).filter(Job.id == application.job_id).first()
    if student is not None and job is not None:
        notify_safely(
            notify,
            status_update_email(student=student, job=job, status=status, employer_notes=application.employer_notes),
        )
    return _application_fields(application)


def resume_for(db: Session, principal: Principal, application_id: int) -> str:
    """Stored résumé reference, for the applying student or the job's owner."""
    row = (
        db.query(Application, Job.employer_id)
        .join(Job, Application.job_id == Job.id)
        .filter(Application.id == application_id)
        .first()
    )
    if row is None:
        raise NotFoundError(get_error_message("application_not_found"))
    application, owner_id = row

    allowed = (
        (principal.role == "student" and application.student_id == principal.id)
        or (principal.role == "employer" and owner_id == principal.id)
        or principal.is_admin
    )
    if not allowed:
        raise ForbiddenError(get_error_message("forbidden"))
    if not application.resume_path:
        raise NotFoundError("No résumé was attached to this application")
    return application.resume_path
