# backend/inventory_api/schemas/inventory.py
from datetime import datetime
from typing import Optional
from inventory_api.models.inventory_transaction import InventoryTransaction
from inventory_api.schemas.common import CamelModel


class SellProductRequest(CamelModel):
    product_id: int
    quantity: int
    notes: Optional[str] = None


class InventoryTransactionResponse(CamelModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    user_id: int
    username: Optional[str] = None
    transaction_type: str
    quantity: int
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    transaction_date: datetime

    @classmethod
    def from_entry(cls, entry: InventoryTransaction) -> "InventoryTransactionResponse":
        return cls(
            id=entry.id,
            product_id=entry.product_id,
            product_name=entry.product.name if entry.product else None,
            user_id=entry.user_id,
            username=entry.user.username if entry.user else None,
            transaction_type=entry.transaction_type,
            quantity=entry.quantity,
            reference_number=entry.reference_number,
            notes=entry.notes,
            transaction_date=entry.transaction_date,
        )


class InventoryValueResponse(CamelModel):
    total_value: float
