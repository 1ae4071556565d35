# backend/inventory_api/schemas/dashboard.py
from inventory_api.schemas.common import CamelModel


class DashboardStats(CamelModel):
    total_products: int
    total_orders: int
    low_stock_count: int
    monthly_revenue: float
    # Percentage deltas are absolute values; the flags say whether the move is good.
    total_products_change: float = 0.0
    total_products_is_positive: bool = True
    total_orders_change: float
    total_orders_is_positive: bool
    low_stock_change: float
    low_stock_is_positive: bool
    monthly_revenue_change: float
    monthly_revenue_is_positive: bool


class MonthlyPurchaseTotal(CamelModel):
    month: str
    sales: float


class SupplierContribution(CamelModel):
    id: int
    name: str
    value: float
    # Share of all suppliers' order value, 0-100 with two decimals
    percentage: float
