"""Contact endpoints. Customers write, admins read and delete."""

from fastapi import APIRouter, Depends, status

from messhub.adapters.rest.dependencies import get_factory, require_roles
from messhub.adapters.rest.schemas import ContactBody, ContactGroupOut, ContactOut, envelope
from messhub.application.context import Identity
from messhub.domain.models import Role
from messhub.factory import ServiceFactory

router = APIRouter(prefix="/contacts", tags=["contacts"])

_admin = require_roles(Role.ADMIN)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactBody,
    identity: Identity = Depends(require_roles(Role.CUSTOMER)),
    factory: ServiceFactory = Depends(get_factory),
):
    contact = await factory.create_contact_service().create(
        identity.account_id, body.name, body.email, body.message,
    )
    return envelope(contact=ContactOut.model_validate(contact))


@router.get("")
async def list_contacts(
    _: Identity = Depends(_admin),
    factory: ServiceFactory = Depends(get_factory),
):
    contacts = await factory.create_contact_service().list_all()
    return envelope(count=len(contacts), contacts=[ContactOut.model_validate(c) for c in contacts])


@router.delete("")
async def delete_all_contacts(
    _: Identity = Depends(_admin),
    factory: ServiceFactory = Depends(get_factory),
):
    deleted = await factory.create_contact_service().delete_all()
    return envelope(message=f"Deleted {deleted} contact messages", deleted_count=deleted)


@router.get("/grouped")
async def grouped_contacts(
    _: Identity = Depends(_admin),
    factory: ServiceFactory = Depends(get_factory),
):
    groups = await factory.create_contact_service().group_by_user()
    return envelope(count=len(groups), groups=[ContactGroupOut.model_validate(g) for g in groups])


@router.get("/stats")
async def contact_stats(
    _: Identity = Depends(_admin),
    factory: ServiceFactory = Depends(get_factory),
):
    return envelope(stats=await factory.create_contact_service().statistics())


@router.get("/{contact_id}")
async def get_contact(
    contact_id: int,
    _: Identity = Depends(_admin),
    factory: ServiceFactory = Depends(get_factory),
):
    contact = await factory.create_contact_service().get(contact_id)
    return envelope(contact=ContactOut.model_validate(contact))


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: int,
    _: Identity = Depends(_admin),
    factory: ServiceFactory = Depends(get_factory),
):
    await factory.create_contact_service().delete(contact_id)
    return envelope(message="Contact message deleted successfully")
