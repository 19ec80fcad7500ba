import pytest

from minimarket.core.auth import decode_access_token, hash_password, verify_password
from minimarket.core.errors import DuplicateEmail, InvalidCredentials, ValidationError
from minimarket.repositories.user_repo import SqlUserRepository
from minimarket.services.identity_service import IdentityService


@pytest.fixture
def identities(session) -> IdentityService:
    return IdentityService(SqlUserRepository(session))


def test_password_hash_round_trip():
    encoded = hash_password("secret1")

    assert encoded.startswith("pbkdf2_sha256$")
    assert "secret1" not in encoded
    assert verify_password("secret1", encoded)
    assert not verify_password("secret2", encoded)
    assert not verify_password("secret1", "garbage")


def test_signup_returns_identity_and_token(identities):
    result = identities.signup("Ana", "Ana@Example.com", "hunter22")

    assert result.identity.name == "Ana"
    assert result.identity.email == "ana@example.com"
    assert result.identity.id.startswith("user-")
    assert decode_access_token(result.access_token)["sub"] == result.identity.id


def test_signup_reports_every_invalid_field(identities):
    with pytest.raises(ValidationError) as excinfo:
        identities.signup("  ", "not-an-email", "123")

    assert set(excinfo.value.fields) == {"name", "email", "password"}
    assert excinfo.value.fields["password"] == "Password must be at least 6 characters"


def test_signup_rejects_duplicate_email_case_insensitively(identities):
    identities.signup("Ana", "ana@example.com", "hunter22")

    with pytest.raises(DuplicateEmail):
        identities.signup("Other Ana", "ANA@example.com", "hunter33")


def test_login_with_correct_credentials(identities):
    created = identities.signup("Ana", "ana@example.com", "hunter22")

    result = identities.login("ana@example.com", "hunter22")

    assert result.identity == created.identity


@pytest.mark.parametrize(
    "email, password",
    [
        ("ana@example.com", "wrong-password"),
        ("nobody@example.com", "hunter22"),
        ("", "hunter22"),
        ("ana@example.com", ""),
    ],
)
def test_login_failures_are_indistinguishable(identities, email, password):
    identities.signup("Ana", "ana@example.com", "hunter22")

    with pytest.raises(InvalidCredentials):
        identities.login(email, password)
