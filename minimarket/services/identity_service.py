# minimarket/services/identity_service.py
import logging
import secrets
import string
import time

from email_validator import EmailNotValidError, validate_email

from minimarket.core.auth import create_access_token, hash_password, verify_password
from minimarket.core.errors import DuplicateEmail, InvalidCredentials, ValidationError
from minimarket.models.user import User
from minimarket.repositories.protocols import UserStore
from minimarket.schemas.user import AuthResult, Identity

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_user_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"user-{int(time.time() * 1000)}-{suffix}"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityService:
    """
    Account creation and credential checks.

    Responsibilities:
      - validate signup input, reporting every bad field at once
      - keep emails unique (case-insensitive)
      - verify passwords and issue bearer tokens

    Everything downstream (orders, history) only ever sees the resulting
    Identity; it never touches credentials.
    """

    def __init__(self, users: UserStore):
        self.users = users

    def _issue(self, user: User) -> AuthResult:
        identity = Identity(id=user.id, name=user.name, email=user.email)
        return AuthResult(access_token=create_access_token(identity), identity=identity)

    def signup(self, name: str, email: str, password: str) -> AuthResult:
        """
        Create an account and log it in.

        Rules:
          - name is required
          - email must be well-formed (email-validator, no DNS lookup)
          - password must be at least 6 characters

        Raises:
            ValidationError: with a message per offending field.
            DuplicateEmail: an account with this email already exists.
        """
        errors: dict[str, str] = {}
        name = (name or "").strip()
        email = _normalize_email(email or "")
        password = password or ""

        if not name:
            errors["name"] = "Name is required"

        if not email:
            errors["email"] = "Email is required"
        else:
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError:
                errors["email"] = "Email is invalid"

        if not password:
            errors["password"] = "Password is required"
        elif len(password) < MIN_PASSWORD_LENGTH:
            errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

        if errors:
            raise ValidationError(errors)

        if self.users.get_by_email(email) is not None:
            raise DuplicateEmail()

        user = self.users.create(
            User(
                id=generate_user_id(),
                name=name,
                email=email,
                password_hash=hash_password(password),
            )
        )
        logger.info("New account %s", user.id)
        return self._issue(user)

    def login(self, email: str, password: str) -> AuthResult:
        """
        Check credentials and issue a token.

        Unknown email and wrong password report the same InvalidCredentials.
        """
        if not email or not password:
            raise InvalidCredentials("Email and password are required")

        user = self.users.get_by_email(_normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentials()

        return self._issue(user)
