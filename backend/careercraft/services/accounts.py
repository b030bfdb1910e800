"""
Credential & session issuer: registration, login and profile reads/edits.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.admin import Admin
from ..models.user import User
from ..schemas.auth import LoginRequest, ProfileUpdate, RegisterRequest
from ..utils.dependencies import Principal
from ..utils.error_handlers import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
    get_error_message,
    handle_database_error,
)
from ..utils.jwt import create_access_token
from ..utils.security import hash_password, verify_password
from ..utils.validation import (
    validate_email,
    validate_password,
    validate_role,
    validate_string_field,
    validate_username,
)
from .notifications import Notifier, notify_safely, welcome_email

logger = logging.getLogger(__name__)

# Profile fields each role may edit; anything else in the payload is ignored.
SHARED_PROFILE_FIELDS = frozenset({"first_name", "last_name", "phone", "address"})
ROLE_PROFILE_FIELDS = {
    "student": frozenset({"college", "course", "graduation_year"}),
    "employer": frozenset({"company_name"}),
}


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if isinstance(value, datetime) else value


def account_to_public(user: User) -> dict:
    # Never expose the password hash.
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "companyName": user.company_name,
        "college": user.college,
        "course": user.course,
        "graduationYear": user.graduation_year,
        "phone": user.phone,
        "address": user.address,
        "createdAt": _iso(user.created_at),
        "updatedAt": _iso(user.updated_at),
    }


def admin_to_public(admin: Admin) -> dict:
    return {
        "id": admin.id,
        "username": admin.username,
        "email": admin.email,
        "role": "admin",
        "createdAt": _iso(admin.created_at),
    }


def register(db: Session, payload: RegisterRequest, *, notify: Notifier | None = None) -> User:
    email = validate_email(payload.email)
    username = validate_username(payload.username)
    validate_password(payload.password)
    role = validate_role(payload.role)
    first_name = validate_string_field(payload.first_name, "First name", max_length=100)
    last_name = validate_string_field(payload.last_name, "Last name", max_length=100, required=False)
    company_name = validate_string_field(
        payload.company_name, "Company name", max_length=255, required=(role == "employer")
    )

    existing = (
        db.query(User.id)
        .filter(or_(User.email == email, User.username == username))
        .first()
    )
    if existing:
        raise ConflictError(get_error_message("account_exists"))

    user = User(
        first_name=first_name,
        last_name=last_name,
        username=username,
        email=email,
        password=hash_password(payload.password),
        role=role,
        company_name=company_name,
        college=payload.college or None,
        course=payload.course or None,
        graduation_year=payload.graduation_year,
        phone=payload.phone or None,
        address=payload.address or None,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        # A concurrent registration won the unique index.
        db.rollback()
        logger.info("Registration conflict for %s / %s: %s", email, username, e.orig)
        raise ConflictError(get_error_message("account_exists"))
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating user")

    logger.info("Registered %s account id=%s", user.role, user.id)
    notify_safely(notify, welcome_email(user))
    return user


def _issue_token(*, subject: str, role: str, email: str, username: str) -> str:
    return create_access_token({"sub": subject, "role": role, "email": email, "username": username})


def login(db: Session, payload: LoginRequest) -> dict:
    """
    Authenticate by email or username and issue a session token.

    The admin table is consulted first (by username). Unknown identifiers and
    wrong passwords fail with the same message.
    """
    identifier = (payload.identifier or "").strip()
    if not identifier or not payload.password:
        raise ValidationError("Email/username and password are required")

    now = datetime.now(timezone.utc)

    admin = db.query(Admin).filter(Admin.username == identifier).first()
    if admin is not None:
        if not verify_password(payload.password, admin.password):
            raise InvalidCredentialsError()
        admin.updated_at = now
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise handle_database_error(e, "refreshing admin login timestamp")
        token = _issue_token(subject=admin.username, role="admin", email=admin.email, username=admin.username)
        logger.info("Admin %s logged in", admin.username)
        return {"user": admin_to_public(admin), "token": token}

    lookup = identifier.lower()
    user = (
        db.query(User)
        .filter(or_(User.email == lookup, User.username == identifier))
        .first()
    )
    if user is None or not verify_password(payload.password, user.password):
        raise InvalidCredentialsError()

    user.updated_at = now
    try:
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "refreshing login timestamp")

    token = _issue_token(subject=str(user.id), role=user.role, email=user.email, username=user.username)
    logger.info("User id=%s logged in", user.id)
    return {"user": account_to_public(user), "token": token}


def get_account(db: Session, account_id: int) -> User:
    user = db.query(User).filter(User.id == account_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_profile(db: Session, principal: Principal) -> dict:
    if principal.is_admin:
        admin = db.query(Admin).filter(Admin.username == principal.username).first()
        if admin is None:
            raise NotFoundError("User not found")
        return admin_to_public(admin)
    return account_to_public(get_account(db, principal.id))


def update_profile(db: Session, principal: Principal, payload: ProfileUpdate) -> dict:
    user = get_account(db, principal.id)
    editable = SHARED_PROFILE_FIELDS | ROLE_PROFILE_FIELDS.get(user.role, frozenset())
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if k in editable}

    if "first_name" in changes:
        changes["first_name"] = validate_string_field(changes["first_name"], "First name", max_length=100)
    if "company_name" in changes:
        changes["company_name"] = validate_string_field(changes["company_name"], "Company name", max_length=255)

    for field, value in changes.items():
        setattr(user, field, value if value != "" else None)

    try:
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating profile")
    return account_to_public(user)
