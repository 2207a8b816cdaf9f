"""
Account registration and login

- Passwords are stored as bcrypt hashes, never in plaintext.
- Emails are unique, trimmed and case-insensitive.
- Every login failure raises the same generic error.
"""
import pytest

from messhub.application.dto import LoginRequest
from messhub.application.inputs import RegisterRequest
from messhub.domain.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)

from conftest import PASSWORD


def _register(email="asha@example.com", role="CUSTOMER", **overrides):
    fields = {"name": "Asha Rao", "email": email, "password": PASSWORD, "role": role}
    fields.update(overrides)
    return fields


async def test_register_stores_hash_not_password(factory):
    auth = factory.create_authentication_service()
    result = await auth.register(_register())

    stored = await factory.create_account_repository().get_by_email("asha@example.com")
    assert stored.password_hash != PASSWORD
    assert stored.password_hash.startswith("$2")
    assert result.token
    assert result.account.id == stored.id


async def test_register_then_login_returns_same_account(factory):
    auth = factory.create_authentication_service()
    registered = await auth.register(_register())
    logged_in = await auth.login(LoginRequest(email="asha@example.com", password=PASSWORD))
    assert logged_in.account.id == registered.account.id


async def test_email_is_trimmed_and_case_insensitive(factory):
    auth = factory.create_authentication_service()
    await auth.register(_register(email="  Asha@Example.COM "))
    with pytest.raises(DuplicateEmailError):
        await auth.register(_register(email="asha@example.com"))

    result = await auth.login(LoginRequest(email="ASHA@example.com", password=PASSWORD))
    assert result.account.email == "asha@example.com"


@pytest.mark.parametrize("email, password, role", [
    ("nobody@example.com", PASSWORD, None),
    ("asha@example.com", "wrong-password", None),
    ("asha@example.com", PASSWORD, "OWNER"),
])
async def test_login_failures_share_one_message(factory, email, password, role):
    auth = factory.create_authentication_service()
    await auth.register(_register())
    with pytest.raises(InvalidCredentialsError) as excinfo:
        await auth.login(LoginRequest(email=email, password=password, role=role))
    assert excinfo.value.message == "Invalid credentials"


async def test_login_with_matching_role(factory):
    auth = factory.create_authentication_service()
    await auth.register(_register(role="OWNER"))
    result = await auth.login(LoginRequest(email="asha@example.com", password=PASSWORD, role="OWNER"))
    assert result.account.role == "OWNER"


async def test_register_validates_fields(factory):
    auth = factory.create_authentication_service()
    with pytest.raises(ValidationError) as excinfo:
        await auth.register(_register(name="Al", email="not-an-email", password="123", role="CHEF"))
    joined = " ".join(excinfo.value.errors)
    for field in ("name", "email", "password", "role"):
        assert field in joined


async def test_get_account_unknown_id(factory):
    with pytest.raises(NotFoundError):
        await factory.create_authentication_service().get_account(404)


async def test_register_rejects_unknown_fields(factory):
    with pytest.raises(ValidationError) as excinfo:
        await factory.create_authentication_service().register(_register(is_admin=True))
    assert any(error.startswith("is_admin:") for error in excinfo.value.errors)


async def test_register_accepts_a_validated_request(factory):
    request = RegisterRequest(**_register(email="  Ravi@Example.com"))
    result = await factory.create_authentication_service().register(request)
    assert result.account.email == "ravi@example.com"
    assert result.account.role == "CUSTOMER"
