"""
application.services.tokens - Signed bearer tokens.

Tokens are stateless JWTs carrying {account_id, name, role, exp}. There is
no revocation list: logging out only drops the cookie, and a copied token
stays valid until it expires.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from messhub.application.dto import TokenClaims
from messhub.domain.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and verifies JWT bearer tokens."""

    def __init__(
        self,
        jwt_secret: str,
        jwt_expiry_days: int = 30,
        jwt_algorithm: str = "HS256",
    ):
        self._jwt_secret = jwt_secret
        self._jwt_expiry = timedelta(days=jwt_expiry_days)
        self._jwt_algorithm = jwt_algorithm

    def issue(self, account_id: int, name: str, role: str) -> str:
        expire = datetime.now(timezone.utc) + self._jwt_expiry
        payload = {
            "account_id": account_id,
            "name": name,
            "role": role,
            "exp": expire,
        }
        return jwt.encode(payload, self._jwt_secret, algorithm=self._jwt_algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Decode and validate a JWT. Raises InvalidTokenError on any failure."""
        try:
            payload = jwt.decode(
                token, self._jwt_secret, algorithms=[self._jwt_algorithm],
            )
        except JWTError as exc:
            raise InvalidTokenError(f"Token verification failed: {exc}")

        account_id = payload.get("account_id")
        role = payload.get("role")
        if isinstance(account_id, bool) or not isinstance(account_id, int) or not isinstance(role, str):
            raise InvalidTokenError("Invalid token payload.")
        return TokenClaims(
            account_id=account_id,
            name=str(payload.get("name", "")),
            role=role,
        )
