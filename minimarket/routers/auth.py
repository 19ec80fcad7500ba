# minimarket/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from minimarket.core.auth import require_identity
from minimarket.database import get_session
from minimarket.repositories.user_repo import SqlUserRepository
from minimarket.schemas.user import AuthResult, Identity, LoginRequest, SignupRequest
from minimarket.services.identity_service import IdentityService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_identity_service(session: Session = Depends(get_session)) -> IdentityService:
    return IdentityService(SqlUserRepository(session))


@router.post("/signup", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    service: IdentityService = Depends(get_identity_service),
):
    """
    Create an account and return a bearer token for it.

    Errors:
      - 422 with `fields` for name/email/password problems
      - 409 if the email is taken
    """
    return service.signup(payload.name, payload.email, payload.password)


@router.post("/login", response_model=AuthResult)
def login(
    payload: LoginRequest,
    service: IdentityService = Depends(get_identity_service),
):
    """Exchange email + password for a bearer token (401 on mismatch)."""
    return service.login(payload.email, payload.password)


@router.get("/me", response_model=Identity)
def read_me(identity: Identity = Depends(require_identity)):
    """
    Return the authenticated caller.

    Auth:
      - Requires a valid bearer token.
    """
    return identity
