# backend/inventory_api/services/report_service.py
"""Purchase reports: how order value splits across suppliers and months."""

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.repositories.purchase_order_repository import PurchaseOrderRepository
from inventory_api.schemas.dashboard import MonthlyPurchaseTotal, SupplierContribution
from inventory_api.services.dashboard_service import DashboardService


class ReportService:
    def __init__(self, session: AsyncSession):
        self.orders = PurchaseOrderRepository(session)
        self.dashboard = DashboardService(session)

    async def supplier_contribution(
        self, period_days: int = 90, now: Optional[datetime] = None
    ) -> List[SupplierContribution]:
        """Order value per supplier over the last ``period_days`` days.

        Cancelled orders are ignored. Percentages are each supplier's share
        of the summed value, rounded to two decimals; all zero when nothing
        was ordered.
        """
        now = now or datetime.utcnow()
        rows = await self.orders.totals_by_supplier_since(now - timedelta(days=max(0, period_days)))

        grand_total = sum(float(total or 0) for _, _, total in rows)
        return [
            SupplierContribution(
                id=supplier_id,
                name=name,
                value=float(total or 0),
                percentage=round(float(total or 0) / grand_total * 100, 2) if grand_total > 0 else 0.0,
            )
            for supplier_id, name, total in rows
        ]

    async def order_value_trend(self, months: int = 6, now: Optional[datetime] = None) -> List[MonthlyPurchaseTotal]:
        return await self.dashboard.monthly_purchases(months, now=now)
