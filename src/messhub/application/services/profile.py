"""
application.services.profile - Customer and owner profile management.

Each account may hold one customer profile or one owner profile (the REST
layer picks the kind from the caller's role). Creation is not idempotent:
a second attempt raises DuplicateProfileError and leaves the first
profile untouched.
"""

from __future__ import annotations

import logging
from typing import Any

from messhub.application.inputs import ProfileInput, ProfileUpdate, parse
from messhub.domain.entities import Profile
from messhub.domain.exceptions import DuplicateProfileError, NotFoundError
from messhub.domain.ports import ProfileRepository

logger = logging.getLogger(__name__)

CUSTOMER = "customer"
OWNER = "owner"


class ProfileService:
    """Creates, reads and updates customer and owner profiles."""

    def __init__(
        self,
        customer_repo: ProfileRepository,
        owner_repo: ProfileRepository,
    ):
        self._repos = {CUSTOMER: customer_repo, OWNER: owner_repo}

    # -- customer ----------------------------------------------------------

    async def create_customer_profile(self, account_id: int, phone: str, address: str) -> Profile:
        return await self._create(CUSTOMER, account_id, phone, address)

    async def get_customer_profile(self, account_id: int) -> Profile:
        return await self._get(CUSTOMER, account_id)

    async def update_customer_profile(self, account_id: int, fields: dict[str, Any]) -> Profile:
        return await self._update(CUSTOMER, account_id, fields)

    # -- owner -------------------------------------------------------------

    async def create_owner_profile(self, account_id: int, phone: str, address: str) -> Profile:
        return await self._create(OWNER, account_id, phone, address)

    async def get_owner_profile(self, account_id: int) -> Profile:
        return await self._get(OWNER, account_id)

    async def update_owner_profile(self, account_id: int, fields: dict[str, Any]) -> Profile:
        return await self._update(OWNER, account_id, fields)

    # -- shared ------------------------------------------------------------

    async def _create(self, kind: str, account_id: int, phone: str, address: str) -> Profile:
        data = parse(ProfileInput, {"phone": phone, "address": address})

        repo = self._repos[kind]
        if await repo.get_by_account(account_id) is not None:
            raise DuplicateProfileError(f"{kind.capitalize()} profile already exists")

        profile = Profile(
            account_id=account_id,
            phone=data.phone,
            address=data.address,
            is_completed=True,
        )
        try:
            await repo.save(profile)
        except DuplicateProfileError:
            raise DuplicateProfileError(f"{kind.capitalize()} profile already exists")
        logger.info("Created %s profile for account %d", kind, account_id)
        return await self._get(kind, account_id)

    async def _get(self, kind: str, account_id: int) -> Profile:
        profile = await self._repos[kind].get_by_account(account_id)
        if profile is None:
            raise NotFoundError(f"{kind.capitalize()} profile not found")
        return profile

    async def _update(self, kind: str, account_id: int, fields: dict[str, Any]) -> Profile:
        fields = {k: v for k, v in fields.items() if v is not None}
        changes = parse(ProfileUpdate, fields).model_dump(exclude_none=True)
        if not await self._repos[kind].update(account_id, changes):
            raise NotFoundError(f"{kind.capitalize()} profile not found")
        logger.info("Updated %s profile for account %d: %s", kind, account_id, sorted(changes))
        return await self._get(kind, account_id)
