"""Profile endpoints. Customers manage /profile/customer, owners /profile/owner."""

from fastapi import APIRouter, Depends, status

from messhub.adapters.rest.dependencies import get_factory, require_roles
from messhub.adapters.rest.schemas import ProfileBody, ProfileOut, ProfileUpdateBody, envelope
from messhub.application.context import Identity
from messhub.domain.models import Role
from messhub.factory import ServiceFactory

router = APIRouter(prefix="/profile", tags=["profile"])

_customer = require_roles(Role.CUSTOMER)
_owner = require_roles(Role.OWNER)


# --- Customer ---

@router.post("/customer", status_code=status.HTTP_201_CREATED)
async def create_customer_profile(
    body: ProfileBody,
    identity: Identity = Depends(_customer),
    factory: ServiceFactory = Depends(get_factory),
):
    profile = await factory.create_profile_service().create_customer_profile(
        identity.account_id, body.phone, body.address,
    )
    return envelope(profile=ProfileOut.model_validate(profile))


@router.get("/customer")
async def get_customer_profile(
    identity: Identity = Depends(_customer),
    factory: ServiceFactory = Depends(get_factory),
):
    profile = await factory.create_profile_service().get_customer_profile(identity.account_id)
    return envelope(profile=ProfileOut.model_validate(profile))


@router.put("/customer")
async def update_customer_profile(
    body: ProfileUpdateBody,
    identity: Identity = Depends(_customer),
    factory: ServiceFactory = Depends(get_factory),
):
    profile = await factory.create_profile_service().update_customer_profile(
        identity.account_id, body.model_dump(exclude_none=True),
    )
    return envelope(profile=ProfileOut.model_validate(profile))


# --- Owner ---

@router.post("/owner", status_code=status.HTTP_201_CREATED)
async def create_owner_profile(
    body: ProfileBody,
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    profile = await factory.create_profile_service().create_owner_profile(
        identity.account_id, body.phone, body.address,
    )
    return envelope(profile=ProfileOut.model_validate(profile))


@router.get("/owner")
async def get_owner_profile(
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    profile = await factory.create_profile_service().get_owner_profile(identity.account_id)
    return envelope(profile=ProfileOut.model_validate(profile))


@router.put("/owner")
async def update_owner_profile(
    body: ProfileUpdateBody,
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    profile = await factory.create_profile_service().update_owner_profile(
        identity.account_id, body.model_dump(exclude_none=True),
    )
    return envelope(profile=ProfileOut.model_validate(profile))
