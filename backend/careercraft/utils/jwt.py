from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from .. import config

ALGORITHM = "HS256"


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(hours=config.ACCESS_TOKEN_EXPIRE_HOURS)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry. Raises `jose.JWTError` on any failure."""
    claims = jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
    if not claims.get("sub") or not claims.get("role"):
        raise JWTError("Token is missing required claims")
    return claims
