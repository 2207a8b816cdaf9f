"""Owner dashboard endpoints. Owners only ever see their own messes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from messhub.adapters.rest.dependencies import get_factory, require_roles
from messhub.adapters.rest.schemas import (
    MessStatsOut,
    MessSummaryOut,
    OrderOut,
    OwnerDashboardOut,
    envelope,
)
from messhub.application.context import Identity
from messhub.domain.models import OrderStatus, Role
from messhub.factory import ServiceFactory

router = APIRouter(prefix="/owner", tags=["owner"])

_owner = require_roles(Role.OWNER)


@router.get("/dashboard")
async def dashboard(
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    stats = await factory.create_owner_service().dashboard(identity.account_id)
    return envelope(dashboard=OwnerDashboardOut.model_validate(stats))


@router.get("/messes")
async def my_messes(
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    summaries = await factory.create_owner_service().messes(identity.account_id)
    return envelope(count=len(summaries), messes=[MessSummaryOut.model_validate(s) for s in summaries])


@router.get("/messes/{mess_id}/orders")
async def mess_orders(
    mess_id: int,
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    orders = await factory.create_owner_service().mess_orders(
        identity.account_id, mess_id, order_status.value if order_status else None,
    )
    return envelope(count=len(orders), orders=[OrderOut.model_validate(o) for o in orders])


@router.get("/messes/{mess_id}/stats")
async def mess_stats(
    mess_id: int,
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    stats = await factory.create_owner_service().mess_stats(identity.account_id, mess_id)
    return envelope(stats=MessStatsOut.model_validate(stats))
