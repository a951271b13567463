"""
Authentication and Authorization for the business portal.

Supports:
- Password hashing (bcrypt)
- Bearer JWT issue/verify carrying {id, role, email}
- Identity dependency exposing the caller to route handlers explicitly
- Role allow-list dependencies (CEO, employee, client)
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends
from fastapi.security import APIKeyHeader

from bizportal.core.config import get_settings
from bizportal.core.errors import Unauthorized
from bizportal_shared.schemas.common import Role
from bizportal_shared.schemas.users import MAX_PASSWORD_BYTES

log = structlog.get_logger()
settings = get_settings()

auth_header = APIKeyHeader(name="Authorization", auto_error=False)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password using bcrypt with the configured cost factor."""
    return bcrypt.hashpw(
        password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    ).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    # Longer inputs can never have been hashed; bcrypt 5 raises on them.
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode(), hashed.encode())


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_access_token(
    user_id: uuid.UUID,
    role: str,
    email: str,
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed bearer token for an authenticated user."""
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "id": str(user_id),
        "role": role,
        "email": email,
        "iat": now,
        "exp": exp,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

class Identity:
    """The authenticated caller, as carried by the bearer token."""

    def __init__(self, user_id: uuid.UUID, role: Role, email: str):
        self.id = user_id
        self.role = role
        self.email = email

    def __repr__(self) -> str:
        return f"Identity(id={self.id}, role={self.role.value})"


def identity_from_token(token: str) -> Identity:
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except jwt.PyJWTError:
        raise Unauthorized("Token is not valid")

    try:
        return Identity(
            user_id=uuid.UUID(payload["id"]),
            role=Role(payload["role"]),
            email=payload["email"],
        )
    except (KeyError, ValueError, TypeError):
        raise Unauthorized("Token is not valid")


async def get_current_identity(
    authorization: Optional[str] = Depends(auth_header),
) -> Identity:
    """Main authentication dependency: verifies ``Authorization: Bearer <token>``."""
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("No token, authorization denied")

    token = authorization[7:].strip()
    if not token:
        raise Unauthorized("No token, authorization denied")
    return identity_from_token(token)


# ---------------------------------------------------------------------------
# Authorization dependencies (role checks)
# ---------------------------------------------------------------------------

def _check_role(identity: Identity, role: Role) -> Identity:
    # Role mismatch is reported as 401, same as a bad token.
    if identity.role != role:
        log.info(
            "auth.role_denied",
            user_id=str(identity.id),
            role=identity.role.value,
            required=role.value,
        )
        raise Unauthorized(f"Access denied: {role.value} role required")
    return identity


async def require_ceo(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """Requires the CEO role."""
    return _check_role(identity, Role.CEO)


async def require_employee(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """Requires the employee role."""
    return _check_role(identity, Role.EMPLOYEE)


async def require_client(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """Requires the client role."""
    return _check_role(identity, Role.CLIENT)
