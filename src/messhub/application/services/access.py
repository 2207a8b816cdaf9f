"""
application.services.access - The per-request auth pipeline.

Two stages, each of which may short-circuit:

1. identify:  pick the bearer token (cookie first, then the
               "Authorization: Bearer" header) and verify it.
               Missing or invalid token -> AuthenticationError.
2. authorize: check the identity's role against the route's allowed set.
               Not a member -> ForbiddenError. An empty set admits any
               authenticated identity.

Nothing here touches storage. Row-level ownership checks belong to the
individual services.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from messhub.application.context import Identity
from messhub.application.services.tokens import TokenService
from messhub.domain.exceptions import AuthenticationError, ForbiddenError, InvalidTokenError
from messhub.domain.models import Role

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


def extract_token(cookie_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Return the raw token, preferring the cookie over the header."""
    if cookie_token:
        return cookie_token
    if authorization and authorization.lower().startswith(_BEARER_PREFIX):
        token = authorization[len(_BEARER_PREFIX):].strip()
        return token or None
    return None


class AccessGuard:
    """Resolves identities from tokens and enforces role membership."""

    def __init__(self, tokens: TokenService):
        self._tokens = tokens

    def identify(
        self,
        cookie_token: Optional[str] = None,
        authorization: Optional[str] = None,
    ) -> Identity:
        token = extract_token(cookie_token, authorization)
        if token is None:
            raise AuthenticationError("Authentication invalid")
        try:
            claims = self._tokens.verify(token)
        except InvalidTokenError as exc:
            logger.debug("Rejected bearer token: %s", exc)
            raise AuthenticationError("Authentication invalid")
        return Identity(account_id=claims.account_id, name=claims.name, role=claims.role)

    @staticmethod
    def authorize(identity: Identity, roles: Iterable[Role | str] = ()) -> Identity:
        allowed = {getattr(r, "value", r) for r in roles}
        if allowed and identity.role not in allowed:
            logger.info(
                "Account %d (%s) denied; route requires %s",
                identity.account_id, identity.role, sorted(allowed),
            )
            raise ForbiddenError("Access denied")
        return identity
