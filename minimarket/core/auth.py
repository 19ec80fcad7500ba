# minimarket/core/auth.py
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from minimarket.core.config import get_settings
from minimarket.database import get_session
from minimarket.repositories.user_repo import SqlUserRepository
from minimarket.schemas.user import Identity

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support guest checkout (unauthenticated).
bearer_scheme = HTTPBearer(auto_error=False)

PBKDF2_ITERATIONS = 260_000


# -------- Passwords --------


def hash_password(password: str) -> str:
    """
    Salted PBKDF2-SHA256 digest, encoded as
    "pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>".
    """
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Constant-time check of `password` against a hash_password() value."""
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
        salt = bytes.fromhex(salt_hex)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(digest.hex(), digest_hex)


# -------- Tokens --------


def create_access_token(identity: Identity, expires_minutes: int | None = None) -> str:
    """
    Issue a signed JWT for `identity`.

    Claims: sub (identity id), email, name, exp.
    """
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    claims = {
        "sub": identity.id,
        "email": identity.email,
        "name": identity.name,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token.

    Verification:
      - signature (JWT_ALG using JWT_SECRET)
      - expiration time (exp)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


# -------- FastAPI dependencies --------


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Identity | None:
    """
    Resolve the caller from a bearer token.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub'.
      3. Look the user up; a token for a deleted account is rejected.

    Raises:
        HTTPException(401): if token is malformed or names no user.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    user = SqlUserRepository(session).get_by_id(sub)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )

    return Identity(id=user.id, name=user.name, email=user.email)


def require_identity(identity: Identity | None = Depends(get_current_identity)) -> Identity:
    """
    Enforce authentication.

    If attached to a route, guests will be rejected with 401.
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return identity
