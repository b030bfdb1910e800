from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import stats
from ..utils.dependencies import Principal
from ..utils.roles import employer_only, student_only

router = APIRouter(prefix="/api/stats", tags=["Stats"])


@router.get("/employer")
def employer_stats(
    db: Session = Depends(get_db),
    user: Principal = Depends(employer_only),
):
    return stats.employer_stats(db, user.id)


@router.get("/student")
def student_stats(
    db: Session = Depends(get_db),
    user: Principal = Depends(student_only),
):
    return stats.student_stats(db, user.id)
