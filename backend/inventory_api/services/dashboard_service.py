# backend/inventory_api/services/dashboard_service.py
"""Aggregates for the dashboard: headline stats, monthly purchase totals."""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models.catalog import Product
from inventory_api.models.inventory_transaction import TransactionType
from inventory_api.models.purchase_order import PurchaseOrder
from inventory_api.repositories.inventory_transaction_repository import InventoryTransactionRepository
from inventory_api.repositories.product_repository import ProductRepository
from inventory_api.repositories.purchase_order_repository import PurchaseOrderRepository
from inventory_api.schemas.dashboard import DashboardStats, MonthlyPurchaseTotal

WINDOW = timedelta(days=30)
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def percent_change(current: float, previous: float) -> float:
    """Signed percentage change of ``current`` against ``previous``.

    A rise from nothing counts as 100%; no movement from nothing is 0%.
    """
    if previous > 0:
        return (current - previous) / previous * 100
    if current > 0:
        return 100.0
    return 0.0


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class DashboardService:
    def __init__(self, session: AsyncSession):
        self.products = ProductRepository(session)
        self.orders = PurchaseOrderRepository(session)
        self.ledger = InventoryTransactionRepository(session)

    async def stats(self, now: Optional[datetime] = None) -> DashboardStats:
        now = now or datetime.utcnow()
        current_start = now - WINDOW
        previous_start = current_start - WINDOW

        total_products = await self.products.count_active()
        low_stock = await self.products.count_low_stock()

        sales = await self.ledger.count_between(TransactionType.STOCK_OUT, current_start, now)
        previous_sales = await self.ledger.count_between(TransactionType.STOCK_OUT, previous_start, current_start)

        revenue = float(await self.ledger.revenue_between(current_start, now))
        previous_revenue = float(await self.ledger.revenue_between(previous_start, current_start))

        # Stock levels are not historized, so the previous window has the current count.
        previous_low_stock = low_stock

        orders_change = percent_change(sales, previous_sales)
        revenue_change = percent_change(revenue, previous_revenue)
        low_stock_change = percent_change(low_stock, previous_low_stock)

        return DashboardStats(
            total_products=total_products,
            total_orders=sales,
            low_stock_count=low_stock,
            monthly_revenue=revenue,
            total_orders_change=abs(orders_change),
            total_orders_is_positive=orders_change >= 0,
            monthly_revenue_change=abs(revenue_change),
            monthly_revenue_is_positive=revenue_change >= 0,
            low_stock_change=abs(low_stock_change),
            # fewer low-stock products is the good direction
            low_stock_is_positive=previous_low_stock > 0 and low_stock_change <= 0,
        )

    async def monthly_purchases(self, months: int = 12, now: Optional[datetime] = None) -> List[MonthlyPurchaseTotal]:
        """Order totalAmount per calendar month, oldest month first.

        Args:
            months: How many months back, the current month included
            now: Reference time, defaults to utcnow

        Returns:
            One entry per month labelled Jan..Dec; empty months are 0
        """
        now = now or datetime.utcnow()
        months = max(1, months)

        keys = [_shift_month(now.year, now.month, -offset) for offset in range(months - 1, -1, -1)]
        totals: Dict[Tuple[int, int], float] = {key: 0.0 for key in keys}

        first_year, first_month = keys[0]
        start = datetime(first_year, first_month, 1)
        for order_date, amount in await self.orders.totals_since(start):
            key = (order_date.year, order_date.month)
            if key in totals:
                totals[key] += float(amount or 0)

        return [
            MonthlyPurchaseTotal(month=MONTH_LABELS[month - 1], sales=totals[(year, month)])
            for year, month in keys
        ]

    async def recent_orders(self, count: int = 5) -> List[PurchaseOrder]:
        return await self.orders.recent(max(1, count))

    async def low_stock(self) -> List[Product]:
        return await self.products.list_low_stock()
