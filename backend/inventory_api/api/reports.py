# backend/inventory_api/api/reports.py
"""Reports and global search."""

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_api.api.deps import get_actor
from inventory_api.core.database import get_db
from inventory_api.schemas.catalog import ProductResponse, SupplierResponse
from inventory_api.schemas.dashboard import MonthlyPurchaseTotal, SupplierContribution
from inventory_api.schemas.purchase_order import PurchaseOrderResponse
from inventory_api.schemas.search import SearchResults
from inventory_api.services.permission_service import Actor
from inventory_api.services.report_service import ReportService
from inventory_api.services.search_service import SearchService

reports_router = APIRouter(prefix="/api/reports", tags=["reports"])
search_router = APIRouter(prefix="/api/search", tags=["search"])


@reports_router.get("/supplier-contribution", response_model=List[SupplierContribution])
async def supplier_contribution(
    period: int = Query(90, ge=1, le=3650),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await ReportService(db).supplier_contribution(period)


@reports_router.get("/order-value-trend", response_model=List[MonthlyPurchaseTotal])
async def order_value_trend(
    months: int = Query(6, ge=1, le=60),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await ReportService(db).order_value_trend(months)


@search_router.get("/global", response_model=SearchResults)
async def global_search(
    q: str = Query(""),
    limit: int = Query(5, ge=1, le=50),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    hits = await SearchService(db).global_search(q, limit)
    return SearchResults(
        orders=[PurchaseOrderResponse.from_order(o) for o in hits.orders],
        products=[ProductResponse.from_product(p) for p in hits.products],
        suppliers=[SupplierResponse.model_validate(s) for s in hits.suppliers],
    )


@search_router.get("/orders", response_model=List[PurchaseOrderResponse])
async def search_orders(
    q: str = Query(""),
    limit: int = Query(10, ge=1, le=50),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return [PurchaseOrderResponse.from_order(o) for o in await SearchService(db).search_orders(q, limit)]
