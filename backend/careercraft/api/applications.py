import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.application import ApplicationStatusUpdate
from ..services import applications as workflow
from ..services import storage
from ..services.notifications import background_notifier
from ..utils.dependencies import Principal, get_current_user
from ..utils.error_handlers import AppError
from ..utils.roles import employer_only, student_only
from ..utils.validation import validate_integer_field

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["Applications"])


@router.post("", status_code=201)
async def submit_application(
    job_id: str = Form(..., alias="jobId"),
    cover_letter: str | None = Form(default=None, alias="coverLetter"),
    resume: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    user: Principal = Depends(student_only),
):
    job_id = validate_integer_field(job_id, "Job ID", min_value=1)

    # Fail fast before storing a file that would be discarded.
    workflow.ensure_can_apply(db, student_id=user.id, job_id=job_id)

    resume_path = None
    if resume is not None and resume.filename:
        resume_path = await storage.save_resume(resume, job_id=job_id, student_id=user.id)

    try:
        application = workflow.apply(
            db,
            student_id=user.id,
            job_id=job_id,
            resume_path=resume_path,
            cover_letter=cover_letter,
        )
    except AppError:
        storage.discard(resume_path)
        raise

    return {
        "message": "Application submitted successfully",
        "applicationId": application.id,
        "status": application.status,
    }


@router.get("/student")
def list_student_applications(
    db: Session = Depends(get_db),
    user: Principal = Depends(student_only),
):
    return workflow.list_for_student(db, user.id)


@router.get("/job/{job_id:int}")
def list_job_applications(
    job_id: int,
    db: Session = Depends(get_db),
    user: Principal = Depends(employer_only),
):
    return workflow.list_for_job(db, user.id, job_id)


@router.patch("/{application_id:int}/status")
def update_application_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    user: Principal = Depends(employer_only),
):
    application = workflow.update_status(
        db,
        employer_id=user.id,
        application_id=application_id,
        new_status=payload.status,
        employer_notes=payload.employer_notes,
        notify=background_notifier(background_tasks),
    )
    return {"message": f"Application {application['status']} successfully", "application": application}


@router.get("/{application_id:int}/resume")
def download_resume(
    application_id: int,
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    path = storage.resolve(workflow.resume_for(db, user, application_id))
    return FileResponse(path, filename=path.name)
