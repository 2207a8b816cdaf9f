"""User administration endpoints (admin only)."""

from fastapi import APIRouter, Depends

from messhub.adapters.rest.dependencies import get_factory, require_roles
from messhub.adapters.rest.schemas import AccountOut, ProfileSummaryOut, envelope
from messhub.domain.models import Role
from messhub.factory import ServiceFactory

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


@router.get("")
async def list_users(factory: ServiceFactory = Depends(get_factory)):
    accounts = await factory.create_user_admin_service().list_accounts()
    return envelope(count=len(accounts), users=[AccountOut.model_validate(a) for a in accounts])


@router.get("/customers")
async def list_customers(factory: ServiceFactory = Depends(get_factory)):
    profiles = await factory.create_user_admin_service().list_customers()
    return envelope(
        count=len(profiles),
        customers=[ProfileSummaryOut.model_validate(p) for p in profiles],
    )


@router.get("/owners")
async def list_owners(factory: ServiceFactory = Depends(get_factory)):
    profiles = await factory.create_user_admin_service().list_owners()
    return envelope(
        count=len(profiles),
        owners=[ProfileSummaryOut.model_validate(p) for p in profiles],
    )


@router.get("/stats")
async def user_stats(factory: ServiceFactory = Depends(get_factory)):
    return envelope(stats=await factory.create_user_admin_service().statistics())
