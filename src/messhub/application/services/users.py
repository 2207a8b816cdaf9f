"""
application.services.users - Read-only account administration.

Returns Account records; the REST layer serializes them without the
password hash.
"""

from __future__ import annotations

import logging

from messhub.application.dto import ProfileSummary
from messhub.domain.entities import Account
from messhub.domain.models import Role
from messhub.domain.ports import AccountRepository, ProfileRepository

logger = logging.getLogger(__name__)


class UserAdminService:

    def __init__(
        self,
        account_repo: AccountRepository,
        customer_repo: ProfileRepository,
        owner_repo: ProfileRepository,
    ):
        self._account_repo = account_repo
        self._customer_repo = customer_repo
        self._owner_repo = owner_repo

    async def list_accounts(self) -> list[Account]:
        return await self._account_repo.list_all()

    async def list_customers(self) -> list[ProfileSummary]:
        return await self._with_accounts(self._customer_repo)

    async def list_owners(self) -> list[ProfileSummary]:
        return await self._with_accounts(self._owner_repo)

    async def statistics(self) -> dict:
        accounts = await self._account_repo.list_all()
        return {
            "total_users": len(accounts),
            "total_customers": sum(1 for a in accounts if a.role == Role.CUSTOMER.value),
            "total_owners": sum(1 for a in accounts if a.role == Role.OWNER.value),
        }

    async def _with_accounts(self, repo: ProfileRepository) -> list[ProfileSummary]:
        accounts = {a.id: a for a in await self._account_repo.list_all()}
        return [
            ProfileSummary(profile=p, account=accounts.get(p.account_id))
            for p in await repo.list_all()
        ]
