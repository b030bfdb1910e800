from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.job import JobCreate, JobStatusUpdate
from ..services import jobs as catalog
from ..utils.dependencies import Principal, get_current_user
from ..utils.roles import employer_only

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])


@router.post("", status_code=201)
def create_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    user: Principal = Depends(employer_only),
):
    job = catalog.post_job(db, user.id, payload)
    return {"message": "Job posted successfully", "jobId": job.id, "job": catalog.job_to_public(job)}


@router.get("")
def list_jobs(
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    return catalog.list_jobs(db)


@router.get("/employer")
def list_employer_jobs(
    db: Session = Depends(get_db),
    user: Principal = Depends(employer_only),
):
    return catalog.list_employer_jobs(db, user.id)


@router.get("/{job_id:int}")
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    return catalog.get_job(db, job_id, user)


@router.patch("/{job_id:int}/status")
def update_job_status(
    job_id: int,
    payload: JobStatusUpdate,
    db: Session = Depends(get_db),
    user: Principal = Depends(employer_only),
):
    return {"message": "Job status updated", "job": catalog.set_job_status(db, user.id, job_id, payload.status)}
