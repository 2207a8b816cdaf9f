"""
application.services.contact - Messages from customers to the administrators.

Messages are append-only. Grouping joins each author with their account
so admins see who wrote what, even when the message carries a different
name or email than the account.
"""

from __future__ import annotations

import logging
from typing import Optional

from messhub.application.dto import ContactGroup
from messhub.application.inputs import ContactInput, parse
from messhub.domain.entities import ContactMessage
from messhub.domain.exceptions import BadRequestError, NotFoundError
from messhub.domain.ports import AccountRepository, ContactRepository

logger = logging.getLogger(__name__)


class ContactService:

    def __init__(self, contact_repo: ContactRepository, account_repo: AccountRepository):
        self._contact_repo = contact_repo
        self._account_repo = account_repo

    async def create(
        self,
        author_account_id: Optional[int],
        name: Optional[str],
        email: Optional[str],
        message: Optional[str],
    ) -> ContactMessage:
        if not author_account_id or not name or not email or not message:
            raise BadRequestError("All fields are required")
        data = parse(ContactInput, {"name": name, "email": email, "message": message})

        contact_id = await self._contact_repo.save(ContactMessage(
            author_account_id=author_account_id,
            name=data.name,
            email=data.email.lower(),
            message=data.message,
        ))
        logger.info("Account %d sent contact message %d", author_account_id, contact_id)
        return await self.get(contact_id)

    async def list_all(self) -> list[ContactMessage]:
        return await self._contact_repo.list_all()

    async def get(self, contact_id: int) -> ContactMessage:
        contact = await self._contact_repo.get_by_id(contact_id)
        if contact is None:
            raise NotFoundError("Contact message not found")
        return contact

    async def group_by_user(self) -> list[ContactGroup]:
        """One group per author, newest message first within each group.

        Groups are ordered by their most recent message.
        """
        grouped: dict[int, list[ContactMessage]] = {}
        for contact in await self._contact_repo.list_all():
            grouped.setdefault(contact.author_account_id, []).append(contact)

        groups = []
        for author_id, messages in grouped.items():
            account = await self._account_repo.get_by_id(author_id)
            groups.append(ContactGroup(
                author_account_id=author_id,
                author_name=account.name if account else None,
                author_email=account.email if account else None,
                messages=messages,
            ))
        return groups

    async def delete(self, contact_id: int) -> ContactMessage:
        contact = await self.get(contact_id)
        await self._contact_repo.delete(contact_id)
        logger.info("Deleted contact message %d", contact_id)
        return contact

    async def delete_all(self) -> int:
        deleted = await self._contact_repo.delete_all()
        logger.info("Deleted all %d contact messages", deleted)
        return deleted

    async def statistics(self) -> dict:
        contacts = await self._contact_repo.list_all()
        return {
            "total_contacts": len(contacts),
            "unique_users": len({c.author_account_id for c in contacts}),
        }
