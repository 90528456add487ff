# salonsmart/auth.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from .config import settings
from .models import Role
from .schemas import Principal


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def demo_principal(email: Optional[str], full_name: Optional[str] = None, role: Optional[Role] = None) -> Principal:
    """Demo sign-in: any credentials are accepted.

    The user id is derived from the email so signing in again finds the same
    appointments.
    """
    email = email or settings.DEMO_EMAIL
    return Principal(
        id=f"user-{uuid.uuid5(uuid.NAMESPACE_URL, email.lower())}",
        email=email,
        full_name=full_name or "Demo User",
        role=role or Role(settings.DEFAULT_ROLE),
    )


def token_for(principal: Principal) -> str:
    return create_access_token({
        "sub": principal.id,
        "email": principal.email,
        "name": principal.full_name,
        "role": principal.role.value,
    })


def principal_from_token(token: str) -> Optional[Principal]:
    payload = decode_token(token)
    if not payload or "sub" not in payload:
        return None
    try:
        role = Role(payload.get("role"))
    except ValueError:
        return None
    return Principal(
        id=payload["sub"],
        email=payload.get("email") or settings.DEMO_EMAIL,
        full_name=payload.get("name") or "Demo User",
        role=role,
    )
