# backend/inventory_api/services/order_input.py
"""Normalization of order payloads before they reach the lifecycle engine.

Everything lenient about order input lives here: textual dates in two
formats, missing quantities and prices defaulting to zero, status tokens in
any case. The engine only ever sees fully-populated values.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from inventory_api.core.exceptions import BusinessValidationError
from inventory_api.models.purchase_order import OrderStatus
from inventory_api.schemas.purchase_order import PurchaseOrderCreate, PurchaseOrderItemIn

DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y")


@dataclass
class OrderItemInput:
    product_id: int
    quantity: int = 0
    unit_price: Decimal = Decimal("0")
    # None means "not provided": an existing item keeps its value
    received_quantity: Optional[int] = None
    notes: Optional[str] = None


@dataclass
class OrderInput:
    supplier_id: int
    # None means the caller did not send an order date
    order_date: Optional[datetime] = None
    expected_delivery_date: Optional[datetime] = None
    total_amount: Decimal = Decimal("0")
    notes: Optional[str] = None
    items: List[OrderItemInput] = field(default_factory=list)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse ``yyyy-MM-dd`` or ``dd-MM-yyyy`` to midnight of that day.

    Returns None for empty or unparseable text.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_status(token: Optional[str]) -> OrderStatus:
    """Upper-case a status token and check it names a known status."""
    if token is None or not token.strip():
        raise BusinessValidationError("Status cannot be empty")
    value = token.strip().upper()
    try:
        return OrderStatus(value)
    except ValueError:
        raise BusinessValidationError(f"Invalid status: {value}")


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise BusinessValidationError(f"Invalid amount: {value}")


def normalize_item(item: PurchaseOrderItemIn) -> OrderItemInput:
    if item.product_id is None:
        raise BusinessValidationError("Product information is missing for an order item")

    quantity = item.quantity if item.quantity is not None else 0
    if quantity < 0:
        raise BusinessValidationError(f"Quantity cannot be negative for product {item.product_id}")

    unit_price = _to_decimal(item.unit_price)
    if unit_price < 0:
        raise BusinessValidationError(f"Unit price cannot be negative for product {item.product_id}")

    if item.received_quantity is not None and item.received_quantity < 0:
        raise BusinessValidationError(
            f"Received quantity cannot be negative for product {item.product_id}"
        )

    return OrderItemInput(
        product_id=item.product_id,
        quantity=quantity,
        unit_price=unit_price,
        received_quantity=item.received_quantity,
        notes=item.notes,
    )


def normalize_items(items: Iterable[PurchaseOrderItemIn]) -> List[OrderItemInput]:
    normalized = [normalize_item(i) for i in items or []]
    seen = set()
    for item in normalized:
        if item.product_id in seen:
            raise BusinessValidationError(f"Product {item.product_id} appears more than once in the order")
        seen.add(item.product_id)
    return normalized


def normalize_order_input(data: PurchaseOrderCreate, now: Optional[datetime] = None) -> OrderInput:
    """Turn a create/update payload into an OrderInput.

    Args:
        data: Request payload
        now: Clock reading used when a supplied order date cannot be parsed

    Returns:
        OrderInput with defaults filled in

    Raises:
        BusinessValidationError: A line item has no productId, a negative
            number, or a productId repeats
    """
    now = now or datetime.utcnow()

    order_date = None
    if data.order_date is not None:
        order_date = parse_date(data.order_date) or now

    return OrderInput(
        supplier_id=data.supplier_id,
        order_date=order_date,
        expected_delivery_date=parse_date(data.expected_delivery_date),
        total_amount=_to_decimal(data.total_amount),
        notes=data.notes,
        items=normalize_items(data.items),
    )
