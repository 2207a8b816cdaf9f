"""Mess endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from messhub.adapters.rest.dependencies import get_factory, require_roles
from messhub.adapters.rest.schemas import MessBody, MessOut, MessUpdateBody, envelope
from messhub.application.context import Identity
from messhub.domain.models import Role
from messhub.factory import ServiceFactory

router = APIRouter(prefix="/mess", tags=["mess"])

_any = require_roles()
_manager = require_roles(Role.OWNER, Role.ADMIN)


@router.get("")
async def list_messes(
    area: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    active_only: bool = Query(False),
    _: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    messes = await factory.create_mess_service().list(area=area, search=search, active_only=active_only)
    return envelope(count=len(messes), messes=[MessOut.model_validate(m) for m in messes])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_mess(
    body: MessBody,
    identity: Identity = Depends(require_roles(Role.OWNER)),
    factory: ServiceFactory = Depends(get_factory),
):
    mess = await factory.create_mess_service().create(identity.account_id, body.model_dump())
    return envelope(mess=MessOut.model_validate(mess))


@router.get("/{mess_id}")
async def get_mess(
    mess_id: int,
    _: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    mess = await factory.create_mess_service().get(mess_id)
    return envelope(mess=MessOut.model_validate(mess))


@router.put("/{mess_id}")
async def update_mess(
    mess_id: int,
    body: MessUpdateBody,
    identity: Identity = Depends(_manager),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_mess_service()
    await service.get_managed(mess_id, identity)
    mess = await service.update(mess_id, body.model_dump(exclude_none=True))
    return envelope(mess=MessOut.model_validate(mess))


@router.delete("/{mess_id}")
async def delete_mess(
    mess_id: int,
    identity: Identity = Depends(_manager),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_mess_service()
    await service.get_managed(mess_id, identity)
    await service.delete(mess_id)
    return envelope(message="Mess deleted successfully")
