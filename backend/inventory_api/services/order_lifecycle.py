# backend/inventory_api/services/order_lifecycle.py
"""Purchase order state machine.

    PENDING <-> PROCESSING --complete--> DELIVERED
       \\           \\
        +-----------+------> CANCELLED

DELIVERED and CANCELLED are terminal. Completion is the only transition with
side effects outside the order: it receives stock for every line item and
writes one STOCK_IN ledger entry per item.

The engine never commits. Callers run each operation inside
``transactional(session)`` so a failure anywhere leaves no partial writes.
"""

import logging
from datetime import datetime
from typing import Dict, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.exceptions import IllegalStateError, NotFoundError, PermissionDeniedError
from inventory_api.models.catalog import Product, Supplier
from inventory_api.models.inventory_transaction import TransactionType
from inventory_api.models.purchase_order import OrderStatus, PurchaseOrder, PurchaseOrderItem
from inventory_api.repositories.catalog_repository import SupplierRepository, UserRepository
from inventory_api.repositories.inventory_transaction_repository import InventoryTransactionRepository
from inventory_api.repositories.product_repository import ProductRepository
from inventory_api.repositories.purchase_order_repository import PurchaseOrderRepository
from inventory_api.services.order_input import OrderInput, OrderItemInput, parse_status
from inventory_api.services.order_number import OrderNumberGenerator
from inventory_api.services.permission_service import Actor, PermissionService

logger = logging.getLogger(__name__)

CANCELLATION_NOTE = "Order cancelled on {:%Y-%m-%d %H:%M:%S}"
RECEIPT_NOTE = "Stock received from purchase order: {}"


class OrderLifecycleEngine:
    """Create, update, transition and complete purchase orders."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.orders = PurchaseOrderRepository(session)
        self.products = ProductRepository(session)
        self.suppliers = SupplierRepository(session)
        self.users = UserRepository(session)
        self.ledger = InventoryTransactionRepository(session)
        self.numbers = OrderNumberGenerator(session)

    async def load(self, order_id: int) -> PurchaseOrder:
        order = await self.orders.find_by_id(order_id, refresh=True)
        if order is None:
            raise NotFoundError(f"Purchase order not found with id: {order_id}")
        return order

    async def _resolve_references(self, data: OrderInput) -> Tuple[Supplier, Dict[int, Product]]:
        supplier = await self.suppliers.get_by_id(data.supplier_id)
        if supplier is None:
            raise NotFoundError(f"Supplier not found with id: {data.supplier_id}")

        products: Dict[int, Product] = {}
        for item in data.items:
            product = await self.products.get_by_id(item.product_id)
            if product is None:
                raise NotFoundError(f"Product not found with id: {item.product_id}")
            products[item.product_id] = product
        return supplier, products

    # -- create --------------------------------------------------------------

    async def create(self, data: OrderInput, actor: Actor) -> PurchaseOrder:
        """Insert a PENDING order and its line items.

        Args:
            data: Normalized order input
            actor: Creating user, recorded as createdBy

        Returns:
            The flushed PurchaseOrder with items

        Raises:
            PermissionDeniedError: Role may not create orders
            NotFoundError: Creator, supplier or a product does not exist
        """
        if not PermissionService.can_create(actor.role):
            raise PermissionDeniedError("You don't have permission to create purchase orders")

        creator = await self.users.get_by_id(actor.id)
        if creator is None:
            raise NotFoundError(f"User not found with id: {actor.id}")
        supplier, products = await self._resolve_references(data)

        order = PurchaseOrder(
            order_number=await self.numbers.next(),
            supplier_id=supplier.id,
            supplier=supplier,
            status=OrderStatus.PENDING.value,
            order_date=data.order_date or datetime.utcnow(),
            expected_delivery_date=data.expected_delivery_date,
            total_amount=data.total_amount,
            notes=data.notes,
            created_by_id=creator.id,
            created_by=creator,
            items=[self._new_item(item, products[item.product_id]) for item in data.items],
        )
        await self.orders.save(order)
        logger.info(f"Order {order.order_number} created by user {actor.id} with {len(order.items)} item(s)")
        return order

    @staticmethod
    def _new_item(item: OrderItemInput, product: Product) -> PurchaseOrderItem:
        return PurchaseOrderItem(
            product_id=product.id,
            product=product,
            quantity=item.quantity,
            unit_price=item.unit_price,
            received_quantity=item.received_quantity or 0,
            notes=item.notes,
        )

    # -- update --------------------------------------------------------------

    async def update(self, order_id: int, data: OrderInput, actor: Actor) -> PurchaseOrder:
        """Apply new header fields and diff the line items by productId.

        orderNumber, createdBy and createdAt are never touched. An omitted
        orderDate keeps the stored one.

        Raises:
            NotFoundError: Order, supplier or a product does not exist
            PermissionDeniedError: PermissionService.can_edit says no
        """
        order = await self.load(order_id)

        is_owner = order.created_by_id == actor.id
        if not PermissionService.can_edit(actor.role, order.status, is_owner):
            raise PermissionDeniedError("You don't have permission to edit this order")

        supplier, products = await self._resolve_references(data)

        order.supplier_id = supplier.id
        order.supplier = supplier
        if data.order_date is not None:
            order.order_date = data.order_date
        order.expected_delivery_date = data.expected_delivery_date
        order.total_amount = data.total_amount
        order.notes = data.notes

        await self._apply_item_diff(order, data.items, products)
        await self.orders.save(order)
        return order

    async def _apply_item_diff(
        self,
        order: PurchaseOrder,
        incoming: List[OrderItemInput],
        products: Dict[int, Product],
    ) -> None:
        existing = {item.product_id: item for item in order.items}
        kept = set()

        for item in incoming:
            current = existing.get(item.product_id)
            if current is None:
                order.items.append(self._new_item(item, products[item.product_id]))
                continue
            current.quantity = item.quantity
            current.unit_price = item.unit_price
            current.notes = item.notes
            if item.received_quantity is not None:
                current.received_quantity = item.received_quantity
            kept.add(item.product_id)

        for product_id, item in existing.items():
            if product_id not in kept:
                order.items.remove(item)
                await self.session.delete(item)

    # -- status --------------------------------------------------------------

    async def transition(self, order_id: int, requested: str, actor: Actor) -> PurchaseOrder:
        """Move an order to ``requested``.

        DELIVERED is routed through :meth:`complete_order`. CANCELLED appends
        a timestamped note. Everything else is a plain assignment.

        Raises:
            PermissionDeniedError: Role may not change status
            BusinessValidationError: Empty or unknown status token
            NotFoundError: Order does not exist
            IllegalStateError: Order is in a terminal state
        """
        if not PermissionService.can_change_status(actor.role):
            raise PermissionDeniedError("You don't have permission to change order status")

        status = parse_status(requested)
        order = await self.load(order_id)

        if status is OrderStatus.DELIVERED:
            return await self.complete_order(order, actor)

        current = OrderStatus(order.status)
        if current.is_terminal:
            if current is OrderStatus.CANCELLED and status is OrderStatus.CANCELLED:
                return order
            raise IllegalStateError(f"Cannot change status from {current.value} to {status.value}")

        if status is OrderStatus.CANCELLED:
            note = CANCELLATION_NOTE.format(datetime.utcnow())
            order.notes = f"{order.notes}\n{note}" if order.notes else note

        order.status = status.value
        await self.orders.save(order)
        logger.info(f"Order {order.order_number} moved {current.value} -> {status.value} by user {actor.id}")
        return order

    async def complete(self, order_id: int, actor: Actor) -> PurchaseOrder:
        if not PermissionService.can_change_status(actor.role):
            raise PermissionDeniedError("You don't have permission to complete orders")
        order = await self.load(order_id)
        return await self.complete_order(order, actor)

    async def complete_order(self, order: PurchaseOrder, actor: Actor) -> PurchaseOrder:
        """Receive every line item into stock and mark the order DELIVERED.

        Items are processed one at a time with the product row locked.
        A missing product aborts the whole completion.

        Raises:
            IllegalStateError: Order is not PROCESSING
            NotFoundError: A line item's product does not exist
        """
        if order.status != OrderStatus.PROCESSING.value:
            raise IllegalStateError(
                f"Only orders in PROCESSING status can be completed. Current status: {order.status}"
            )

        now = datetime.utcnow()
        for item in list(order.items):
            product = await self.products.get_for_update(item.product_id)
            if product is None:
                raise NotFoundError(f"Product not found with id: {item.product_id}")

            received = item.received_quantity if item.received_quantity and item.received_quantity > 0 else item.quantity
            received = received or 0
            if item.received_quantity != received:
                item.received_quantity = received

            product.quantity = (product.quantity or 0) + received
            await self.products.save(product)

            await self.ledger.append(
                product_id=product.id,
                transaction_type=TransactionType.STOCK_IN,
                quantity=received,
                reference=order.order_number,
                actor_id=actor.id,
                timestamp=now,
                notes=RECEIPT_NOTE.format(order.order_number),
            )

        order.status = OrderStatus.DELIVERED.value
        await self.orders.save(order)
        logger.info(
            f"Order {order.order_number} completed by user {actor.id}: {len(order.items)} item(s) received"
        )
        return order
