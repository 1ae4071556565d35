"""Repository layer for database operations.

Repositories add, flush and query; they never commit. Services own the
transaction boundary (see ``inventory_api.core.database.transactional``).
"""

from inventory_api.repositories.pagination import Page
from inventory_api.repositories.purchase_order_repository import (
    PurchaseOrderRepository,
    SORT_STRATEGIES,
)
from inventory_api.repositories.product_repository import ProductRepository
from inventory_api.repositories.inventory_transaction_repository import (
    InventoryTransactionRepository,
)
from inventory_api.repositories.catalog_repository import (
    CategoryRepository,
    SupplierRepository,
    UserRepository,
)

__all__ = [
    "Page",
    "PurchaseOrderRepository",
    "SORT_STRATEGIES",
    "ProductRepository",
    "InventoryTransactionRepository",
    "CategoryRepository",
    "SupplierRepository",
    "UserRepository",
]
