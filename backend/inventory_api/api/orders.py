# backend/inventory_api/api/orders.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_api.api.deps import get_actor
from inventory_api.core.database import get_db
from inventory_api.schemas.common import PageResponse
from inventory_api.schemas.purchase_order import (
    PurchaseOrderCreate,
    PurchaseOrderResponse,
    PurchaseOrderUpdate,
    StatusUpdateRequest,
)
from inventory_api.services.permission_service import Actor
from inventory_api.services.purchase_order_service import PurchaseOrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=PageResponse[PurchaseOrderResponse])
async def list_orders(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1),
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    sort_by: str = Query("orderDate", alias="sortBy"),
    sort_direction: str = Query("desc", alias="sortDirection"),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Paginated order list. Unknown sortBy values are rejected with 400."""
    result = await PurchaseOrderService(db).list_orders(
        status=status_filter,
        search=search,
        sort_by=sort_by,
        sort_direction=sort_direction,
        page=page,
        size=size,
    )
    return PageResponse[PurchaseOrderResponse](
        items=[PurchaseOrderResponse.from_order(o) for o in result.items],
        total=result.total,
        page=result.page,
        size=result.size,
        total_pages=result.total_pages,
    )


@router.get("/{order_id}", response_model=PurchaseOrderResponse)
async def get_order(
    order_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    order = await PurchaseOrderService(db).get_order(order_id)
    return PurchaseOrderResponse.from_order(order)


@router.post("", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    req: PurchaseOrderCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    order = await PurchaseOrderService(db).create_order(req, actor)
    return PurchaseOrderResponse.from_order(order)


@router.put("/{order_id}", response_model=PurchaseOrderResponse)
async def update_order(
    order_id: int,
    req: PurchaseOrderUpdate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    order = await PurchaseOrderService(db).update_order(order_id, req, actor)
    return PurchaseOrderResponse.from_order(order)


@router.patch("/{order_id}/status", response_model=PurchaseOrderResponse)
async def change_order_status(
    order_id: int,
    req: StatusUpdateRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Set the status. DELIVERED runs the completion (stock receipt)."""
    order = await PurchaseOrderService(db).change_status(order_id, req.status, actor)
    return PurchaseOrderResponse.from_order(order)


@router.post("/{order_id}/complete", response_model=PurchaseOrderResponse)
async def complete_order(
    order_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    order = await PurchaseOrderService(db).complete_order(order_id, actor)
    return PurchaseOrderResponse.from_order(order)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    await PurchaseOrderService(db).delete_order(order_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
