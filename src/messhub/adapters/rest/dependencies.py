"""
Shared FastAPI dependencies.

- get_factory(): returns the initialized ServiceFactory (set at startup).
- get_identity(): runs the identify stage of the auth pipeline.
- require_roles(*roles): identify + authorize, for use in Depends().
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from messhub.application.context import Identity
from messhub.application.services.access import AccessGuard
from messhub.domain.models import Role
from messhub.factory import ServiceFactory

# Module-level reference set by app lifespan
_factory: ServiceFactory | None = None


def set_factory(factory: ServiceFactory) -> None:
    global _factory
    _factory = factory


def get_factory() -> ServiceFactory:
    if _factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return _factory


# --- Bearer token (cookie or Authorization header) ---

# auto_error=False: a missing header is fine when the cookie carries the token
_bearer_scheme = HTTPBearer(auto_error=False)


async def get_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    factory: ServiceFactory = Depends(get_factory),
) -> Identity:
    """Resolve the caller. Raises AuthenticationError (401) on failure."""
    cookie_token = request.cookies.get(factory.config.cookie_name)
    authorization = f"Bearer {credentials.credentials}" if credentials else None
    return factory.create_access_guard().identify(cookie_token, authorization)


def require_roles(*roles: Role):
    """Dependency factory: any authenticated caller whose role is in *roles*.

    With no roles, any authenticated caller is admitted.
    """
    async def _authorized(identity: Identity = Depends(get_identity)) -> Identity:
        return AccessGuard.authorize(identity, roles)

    return _authorized
