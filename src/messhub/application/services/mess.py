"""
application.services.mess - Mess (catering business) catalog.

One owner may run several messes. Listing never fails on an empty result;
only lookups by id raise NotFoundError.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from messhub.application.context import Identity
from messhub.application.inputs import MessInput, MessUpdate, parse
from messhub.domain.entities import Mess
from messhub.domain.exceptions import ForbiddenError, NotFoundError
from messhub.domain.ports import MessRepository

logger = logging.getLogger(__name__)


class MessService:
    """CRUD and ownership checks for messes."""

    def __init__(self, mess_repo: MessRepository):
        self._mess_repo = mess_repo

    async def create(self, owner_id: int, fields: dict[str, Any]) -> Mess:
        fields = {k: v for k, v in fields.items() if v is not None}
        data = parse(MessInput, fields)

        mess = Mess(owner_id=owner_id, **data.model_dump())
        mess_id = await self._mess_repo.save(mess)
        logger.info("Owner %d created mess %d (%s)", owner_id, mess_id, mess.name)
        return await self.get(mess_id)

    async def get(self, mess_id: int) -> Mess:
        mess = await self._mess_repo.get_by_id(mess_id)
        if mess is None:
            raise NotFoundError("Mess not found")
        return mess

    async def list(
        self,
        area: Optional[str] = None,
        search: Optional[str] = None,
        active_only: bool = False,
    ) -> list[Mess]:
        """Filter messes. area is a case-insensitive substring; search looks
        at name and description. An empty list is a valid answer."""
        return await self._mess_repo.search(
            area=area or None,
            text=search or None,
            is_active=True if active_only else None,
        )

    async def list_by_owner(self, owner_id: int) -> list[Mess]:
        return await self._mess_repo.list_by_owner(owner_id)

    async def update(self, mess_id: int, fields: dict[str, Any]) -> Mess:
        fields = {k: v for k, v in fields.items() if v is not None}
        changes = parse(MessUpdate, fields).model_dump(exclude_none=True)
        if not await self._mess_repo.update(mess_id, changes):
            raise NotFoundError("Mess not found")
        logger.info("Updated mess %d: %s", mess_id, sorted(changes))
        return await self.get(mess_id)

    async def delete(self, mess_id: int) -> Mess:
        mess = await self.get(mess_id)
        await self._mess_repo.delete(mess_id)
        logger.info("Deleted mess %d", mess_id)
        return mess

    async def verify_ownership(self, mess_id: int, account_id: int) -> bool:
        """True if *account_id* owns the mess. NotFoundError if there is no such mess."""
        mess = await self.get(mess_id)
        return mess.owner_id == account_id

    async def get_managed(self, mess_id: int, identity: Identity) -> Mess:
        """Return the mess if *identity* may modify it (its owner, or an admin)."""
        mess = await self.get(mess_id)
        if not identity.is_admin and mess.owner_id != identity.account_id:
            raise ForbiddenError("You can only manage your own mess")
        return mess
