from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import admin as views
from ..services import stats
from ..utils.roles import admin_only

# Every route here requires the admin role.
router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(admin_only)])


@router.get("/users")
def list_users(db: Session = Depends(get_db)):
    return views.list_users(db)


@router.get("/students")
def list_students(db: Session = Depends(get_db)):
    return views.list_users(db, role="student")


@router.get("/employers")
def list_employers(db: Session = Depends(get_db)):
    return views.list_users(db, role="employer")


@router.get("/jobs")
def list_jobs(db: Session = Depends(get_db)):
    return views.list_jobs(db)


@router.get("/applications")
def list_applications(db: Session = Depends(get_db)):
    return views.list_applications(db)


@router.get("/stats")
def platform_stats(db: Session = Depends(get_db)):
    return stats.platform_stats(db)


@router.get("/notifications")
def list_notifications(
    limit: int = Query(default=200, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    return views.list_notifications(db, limit=limit)
