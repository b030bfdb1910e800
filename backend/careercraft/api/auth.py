import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.auth import LoginRequest, ProfileUpdate, RegisterRequest
from ..services import accounts
from ..services.notifications import background_notifier
from ..utils.dependencies import Principal, get_current_user
from ..utils.roles import account_only

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=201)
def register(
    payload: RegisterRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    user = accounts.register(db, payload, notify=background_notifier(background_tasks))
    return {
        "message": "Registration successful! Please check your email for confirmation.",
        "userId": user.id,
    }


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    result = accounts.login(db, payload)
    return {**result, "token_type": "bearer"}


@router.post("/logout")
def logout():
    # Tokens are stateless; the client discards its copy.
    return {"message": "Logged out successfully"}


@router.get("/profile")
def profile(
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    return accounts.get_profile(db, user)


@router.patch("/profile")
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: Principal = Depends(account_only),
):
    return accounts.update_profile(db, user, payload)
