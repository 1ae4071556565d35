# backend/inventory_api/api/inventory.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_api.api.deps import get_actor
from inventory_api.core.database import get_db
from inventory_api.schemas.catalog import ProductResponse
from inventory_api.schemas.dashboard import DashboardStats, MonthlyPurchaseTotal
from inventory_api.schemas.inventory import (
    InventoryTransactionResponse,
    InventoryValueResponse,
    SellProductRequest,
)
from inventory_api.schemas.purchase_order import PurchaseOrderResponse
from inventory_api.services.dashboard_service import DashboardService
from inventory_api.services.inventory_service import InventoryService
from inventory_api.services.permission_service import Actor

inventory_router = APIRouter(prefix="/api/inventory", tags=["inventory"])
dashboard_router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@inventory_router.post("/sell", response_model=InventoryTransactionResponse, status_code=status.HTTP_201_CREATED)
async def sell_product(
    req: SellProductRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    entry = await InventoryService(db).sell_product(req.product_id, req.quantity, req.notes, actor)
    return InventoryTransactionResponse.from_entry(entry)


@inventory_router.get("/transactions", response_model=List[InventoryTransactionResponse])
async def recent_transactions(
    transaction_type: Optional[str] = Query(None, alias="type"),
    limit: int = Query(10, ge=1, le=100),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    entries = await InventoryService(db).recent_transactions(transaction_type, limit)
    return [InventoryTransactionResponse.from_entry(e) for e in entries]


@inventory_router.get("/value", response_model=InventoryValueResponse)
async def inventory_value(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    value = await InventoryService(db).inventory_value()
    return InventoryValueResponse(total_value=float(value))


@dashboard_router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).stats()


@dashboard_router.get("/low-stock", response_model=List[ProductResponse])
async def low_stock(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return [ProductResponse.from_product(p) for p in await DashboardService(db).low_stock()]


@dashboard_router.get("/purchases", response_model=List[MonthlyPurchaseTotal])
async def monthly_purchases(
    months: int = Query(12, ge=1, le=60),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).monthly_purchases(months)


@dashboard_router.get("/recent-orders", response_model=List[PurchaseOrderResponse])
async def recent_orders(
    count: int = Query(5, ge=1, le=50),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return [PurchaseOrderResponse.from_order(o) for o in await DashboardService(db).recent_orders(count)]
