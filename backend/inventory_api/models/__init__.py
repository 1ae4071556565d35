# Database models
from inventory_api.models.user import User, UserRole, UserStatusReason
from inventory_api.models.catalog import Category, Supplier, Product
from inventory_api.models.purchase_order import OrderStatus, PurchaseOrder, PurchaseOrderItem
from inventory_api.models.inventory_transaction import InventoryTransaction, TransactionType

__all__ = [
    "User",
    "UserRole",
    "UserStatusReason",
    "Category",
    "Supplier",
    "Product",
    "OrderStatus",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "InventoryTransaction",
    "TransactionType",
]
