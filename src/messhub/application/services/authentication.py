"""
application.services.authentication - Account registration and login.

Handles password hashing (bcrypt) and coordinates the AccountRepository
with the TokenService. Accounts themselves stay inert records.
"""

from __future__ import annotations

import logging
from typing import Any

import bcrypt as _bcrypt

from messhub.application.dto import AuthResult, LoginRequest
from messhub.application.inputs import RegisterRequest, parse
from messhub.application.services.tokens import TokenService
from messhub.domain.entities import Account
from messhub.domain.exceptions import DuplicateEmailError, InvalidCredentialsError, NotFoundError
from messhub.domain.ports import AccountRepository

logger = logging.getLogger(__name__)

_INVALID_CREDENTIALS = "Invalid credentials"


# bcrypt only looks at the first 72 bytes and newer releases reject longer input
_BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    return password.encode()[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return _bcrypt.hashpw(_secret(password), _bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _bcrypt.checkpw(_secret(password), password_hash.encode())
    except ValueError:
        return False


class AuthenticationService:
    """Handles registration, login and account lookup."""

    def __init__(self, account_repo: AccountRepository, tokens: TokenService):
        self._account_repo = account_repo
        self._tokens = tokens
        # bcrypt is used directly (passlib is incompatible with bcrypt >= 4.0)

    async def register(self, request: RegisterRequest | dict[str, Any]) -> AuthResult:
        """Create a new account and return it with a token."""
        request = parse(RegisterRequest, request)
        email = request.email.lower()

        if await self._account_repo.get_by_email(email) is not None:
            raise DuplicateEmailError("User with this email already exists")

        account = Account(
            role=request.role,
            name=request.name,
            email=email,
            password_hash=hash_password(request.password),
        )
        # the UNIQUE constraint still catches a concurrent registration
        account.id = await self._account_repo.save(account)
        account = await self._account_repo.get_by_id(account.id)

        logger.info("Registered %s account %d", account.role, account.id)
        return AuthResult(account=account, token=self._issue(account))

    async def login(self, request: LoginRequest) -> AuthResult:
        """Verify credentials and return the account with a token.

        Unknown email, wrong password and role mismatch all raise the same
        InvalidCredentialsError so the response does not reveal which
        check failed.
        """
        account = await self._account_repo.get_by_email(request.email)
        if account is None:
            raise InvalidCredentialsError(_INVALID_CREDENTIALS)

        if not verify_password(request.password, account.password_hash):
            raise InvalidCredentialsError(_INVALID_CREDENTIALS)

        if request.role and request.role != account.role:
            raise InvalidCredentialsError(_INVALID_CREDENTIALS)

        logger.info("Account %d logged in", account.id)
        return AuthResult(account=account, token=self._issue(account))

    async def get_account(self, account_id: int) -> Account:
        account = await self._account_repo.get_by_id(account_id)
        if account is None:
            raise NotFoundError("User not found")
        return account

    def _issue(self, account: Account) -> str:
        return self._tokens.issue(account.id, account.name, account.role)
