"""Password hashing and JWT helpers."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from neurmatic.server.core.config import settings

ACCESS_SCOPE = "access"
REFRESH_SCOPE = "refresh"

BCRYPT_MAX_BYTES = 72


def _truncate_password(password: str) -> bytes:
    """
    bcrypt only looks at the first 72 bytes, so longer passwords are cut
    on a UTF-8 character boundary.
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) <= BCRYPT_MAX_BYTES:
        return password_bytes

    truncated = password
    while len(truncated.encode("utf-8")) > BCRYPT_MAX_BYTES:
        truncated = truncated[:-1]
    return truncated.encode("utf-8")


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_truncate_password(password), salt)
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_truncate_password(plain), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def _create_token(claims: dict, expires_delta: timedelta) -> str:
    to_encode = claims.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({"iat": now, "exp": now + expires_delta})
    jwt_config = settings.jwt
    return jwt.encode(to_encode, jwt_config.secret, algorithm=jwt_config.algorithm)


def create_access_token(sub: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    delta = expires_delta or timedelta(minutes=settings.jwt.access_token_expire_minutes)
    return _create_token({"sub": sub, "scope": ACCESS_SCOPE, "role": role}, delta)


def create_refresh_token(sub: str, expires_delta: Optional[timedelta] = None) -> str:
    delta = expires_delta or timedelta(days=settings.jwt.refresh_token_expire_days)
    return _create_token({"sub": sub, "scope": REFRESH_SCOPE}, delta)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and verify a token. Returns None for any invalid or expired token."""
    jwt_config = settings.jwt
    try:
        return jwt.decode(token, jwt_config.secret, algorithms=[jwt_config.algorithm])
    except JWTError:
        return None
