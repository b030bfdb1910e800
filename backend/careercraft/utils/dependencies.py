import logging
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from .error_handlers import ForbiddenError, UnauthorizedError, get_error_message
from .jwt import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches us and becomes our own 401 body.
bearer_scheme = HTTPBearer(auto_error=False, description="JWT Bearer token")


@dataclass(frozen=True)
class Principal:
    """
    The authenticated caller, decoded from the session token.

    `id` is the account id for students and employers and None for admins,
    who are identified by `username`.
    """

    id: int | None
    role: str
    email: str | None = None
    username: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def principal_from_claims(claims: dict) -> Principal:
    role = claims.get("role")
    if role == "admin":
        return Principal(id=None, role=role, email=claims.get("email"), username=str(claims.get("sub")))
    try:
        account_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise JWTError("Token subject is not an account id")
    return Principal(id=account_id, role=role, email=claims.get("email"), username=claims.get("username"))


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(get_error_message("no_token"))

    try:
        return principal_from_claims(decode_access_token(credentials.credentials))
    except JWTError as e:
        logger.info("Token verification failed: %s", e)
        raise ForbiddenError(get_error_message("invalid_token"))
