# backend/inventory_api/schemas/purchase_order.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from inventory_api.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from inventory_api.schemas.common import CamelModel, format_date


class PurchaseOrderItemIn(CamelModel):
    # Missing numbers are filled in by the input normalizer, not here.
    product_id: Optional[int] = None
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None
    received_quantity: Optional[int] = None
    notes: Optional[str] = None


class PurchaseOrderCreate(CamelModel):
    supplier_id: int
    # yyyy-MM-dd or dd-MM-yyyy
    order_date: Optional[str] = None
    expected_delivery_date: Optional[str] = None
    total_amount: Decimal = Decimal("0")
    notes: Optional[str] = None
    items: List[PurchaseOrderItemIn] = []


class PurchaseOrderUpdate(PurchaseOrderCreate):
    pass


class StatusUpdateRequest(CamelModel):
    status: str


class PurchaseOrderItemResponse(CamelModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    quantity: int
    received_quantity: int
    unit_price: float
    total: float
    notes: Optional[str] = None

    @classmethod
    def from_item(cls, item: PurchaseOrderItem) -> "PurchaseOrderItemResponse":
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product.name if item.product else None,
            product_sku=item.product.sku if item.product else None,
            quantity=item.quantity or 0,
            received_quantity=item.received_quantity or 0,
            unit_price=float(item.unit_price or 0),
            total=float(item.line_total),
            notes=item.notes,
        )


class PurchaseOrderResponse(CamelModel):
    id: int
    order_number: str
    supplier_id: int
    supplier_name: str = ""
    status: str
    total_amount: float
    order_date: Optional[str] = None
    expected_delivery_date: Optional[str] = None
    item_count: int = 0
    notes: Optional[str] = None
    created_by_id: int
    created_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[PurchaseOrderItemResponse] = []

    @classmethod
    def from_order(cls, order: PurchaseOrder) -> "PurchaseOrderResponse":
        items = list(order.items or [])
        return cls(
            id=order.id,
            order_number=order.order_number,
            supplier_id=order.supplier_id,
            supplier_name=order.supplier.name if order.supplier and order.supplier.name else "",
            status=order.status,
            total_amount=float(order.total_amount or 0),
            order_date=format_date(order.order_date),
            expected_delivery_date=format_date(order.expected_delivery_date),
            item_count=len(items),
            notes=order.notes,
            created_by_id=order.created_by_id,
            created_by_name=order.created_by.username if order.created_by else None,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[PurchaseOrderItemResponse.from_item(i) for i in items],
        )
