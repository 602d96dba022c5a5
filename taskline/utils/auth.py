from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Depends, Header
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from taskline.config import SECRET_KEY, ALGORITHM
from taskline.database import get_db
from taskline.errors import UnauthorizedError
from taskline.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as every service entry point sees it."""

    user_id: str
    email: str
    name: Optional[str] = None


def hash_password(password: str):
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if isinstance(password, str):
        b = password.encode("utf-8")
        if len(b) > 72:
            # make the failure explicit and consistent
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """Verify a plaintext password against a hash.

    Accounts without a password (OAuth-only) never verify. If verification
    raises a ValueError (for example plain >72 bytes), return False so the
    caller responds with an authentication failure instead of an error.
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_token(user: User) -> str:
    data = {"sub": user.id, "email": user.email, "name": user.name}
    # read expiry at call-time so tests (and runtime overrides) that modify
    # taskline.config.ACCESS_TOKEN_EXPIRE_MINUTES take effect immediately
    import taskline.config as _cfg
    expire = datetime.now(UTC) + timedelta(minutes=_cfg.ACCESS_TOKEN_EXPIRE_MINUTES)
    data.update({"exp": int(expire.timestamp())})  # JWT spec uses Unix timestamp
    return jwt.encode(data, SECRET_KEY, algorithm=ALGORITHM)


def _extract_token(authorization: Optional[str], token_query: Optional[str]) -> Optional[str]:
    """Return token from Authorization header (Bearer ...) or token query param (compat).
    Header has precedence.
    """
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return token_query


def get_current_user(
    authorization: Optional[str] = Header(None),
    token: Optional[str] = None,
    db: Session = Depends(get_db),
) -> Principal:
    tok = _extract_token(authorization, token)
    if not tok:
        raise UnauthorizedError("Missing token")
    try:
        # jwt.decode validates exp automatically
        payload = jwt.decode(tok, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError:
        raise UnauthorizedError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token: missing user")
    # The account may have been removed after the token was issued
    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("Invalid token: unknown user")
    return Principal(user_id=user.id, email=user.email, name=user.name)
