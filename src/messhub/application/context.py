"""
application.context - Request-scoped identity.

Produced by the auth pipeline once the bearer token is verified and passed
explicitly to every service call that needs to know who is asking. Two
concurrent requests get two different Identity instances.
"""

from __future__ import annotations

from dataclasses import dataclass

from messhub.domain.models import Role


@dataclass(frozen=True)
class Identity:
    """Authenticated caller.

    Attributes:
        account_id:  Account primary key from the token payload.
        name:        Display name embedded in the token.
        role:        One of Role's values.
    """
    account_id: int
    name: str
    role: str

    def has_role(self, *roles: Role | str) -> bool:
        return self.role in {getattr(r, "value", r) for r in roles}

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
