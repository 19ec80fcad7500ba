# minimarket/schemas/user.py
from pydantic import ConfigDict
from sqlmodel import SQLModel


class Identity(SQLModel):
    """
    An authenticated caller: what orders get tagged with and what order
    history is scoped to. Guests have no Identity (None).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str


class SignupRequest(SQLModel):
    """
    Payload for account creation.

    Fields are plain strings on purpose: the identity service validates
    them and reports every offending field at once (ValidationError).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(SQLModel):
    """Payload for email/password login."""

    model_config = ConfigDict(extra="forbid")

    email: str = ""
    password: str = ""


class AuthResult(SQLModel):
    """Response for signup/login: bearer token plus the identity it carries."""

    access_token: str
    token_type: str = "bearer"
    identity: Identity
