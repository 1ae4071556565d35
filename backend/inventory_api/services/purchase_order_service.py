# backend/inventory_api/services/purchase_order_service.py
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.config import settings
from inventory_api.core.database import transactional
from inventory_api.core.exceptions import (
    BusinessValidationError,
    IllegalStateError,
    NotFoundError,
    PermissionDeniedError,
)
from inventory_api.models.purchase_order import OrderStatus, PurchaseOrder
from inventory_api.repositories.pagination import Page
from inventory_api.repositories.purchase_order_repository import PurchaseOrderRepository
from inventory_api.schemas.purchase_order import PurchaseOrderCreate, PurchaseOrderUpdate
from inventory_api.services.order_input import normalize_order_input
from inventory_api.services.order_lifecycle import OrderLifecycleEngine
from inventory_api.services.permission_service import Actor, PermissionService

logger = logging.getLogger(__name__)


def is_order_number_collision(error: IntegrityError) -> bool:
    """True when ``error`` came from the unique index on order_number.

    SQLite reports ``purchase_orders.order_number``, PostgreSQL the index
    name ``ix_purchase_orders_order_number``.
    """
    return "order_number" in str(error.orig)


class PurchaseOrderService:
    """Entry point for every purchase order operation.

    Each write runs as one transaction on the request's session. The acting
    user is always passed in explicitly.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.orders = PurchaseOrderRepository(session)
        self.engine = OrderLifecycleEngine(session)

    async def list_orders(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "orderDate",
        sort_direction: str = "desc",
        page: int = 0,
        size: Optional[int] = None,
    ) -> Page[PurchaseOrder]:
        if size is None:
            size = settings.DEFAULT_PAGE_SIZE
        if page < 0:
            raise BusinessValidationError("Page index must not be negative")
        if size < 1 or size > settings.MAX_PAGE_SIZE:
            raise BusinessValidationError(f"Page size must be between 1 and {settings.MAX_PAGE_SIZE}")
        if (sort_direction or "").lower() not in ("asc", "desc"):
            raise BusinessValidationError(f"Invalid sort direction: {sort_direction}")

        return await self.orders.find_filtered(
            status=status,
            search=search,
            sort_field=sort_by,
            sort_direction=sort_direction,
            page=page,
            page_size=size,
        )

    async def get_order(self, order_id: int) -> PurchaseOrder:
        order = await self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Purchase order not found with id: {order_id}")
        return order

    async def create_order(self, data: PurchaseOrderCreate, actor: Actor) -> PurchaseOrder:
        """Create an order, retrying when a concurrent create took the same number.

        Raises:
            BusinessValidationError: Malformed line items
            PermissionDeniedError: Role may not create orders
            NotFoundError: Supplier or product does not exist
        """
        order_input = normalize_order_input(data)
        attempts = max(1, settings.ORDER_NUMBER_MAX_RETRIES)

        for attempt in range(1, attempts + 1):
            try:
                async with transactional(self.session):
                    return await self.engine.create(order_input, actor)
            except IntegrityError as e:
                if not is_order_number_collision(e):
                    raise
                if attempt >= attempts:
                    logger.error(f"Giving up creating order after {attempt} attempt(s): {e.orig}")
                    raise
                logger.warning(f"Order number collision on attempt {attempt}, retrying")

    async def update_order(self, order_id: int, data: PurchaseOrderUpdate, actor: Actor) -> PurchaseOrder:
        order_input = normalize_order_input(data)
        async with transactional(self.session):
            order = await self.engine.update(order_id, order_input, actor)
        logger.info(f"Order {order.order_number} updated by user {actor.id}")
        return order

    async def change_status(self, order_id: int, status: str, actor: Actor) -> PurchaseOrder:
        async with transactional(self.session):
            return await self.engine.transition(order_id, status, actor)

    async def complete_order(self, order_id: int, actor: Actor) -> PurchaseOrder:
        async with transactional(self.session):
            return await self.engine.complete(order_id, actor)

    async def delete_order(self, order_id: int, actor: Actor) -> None:
        """Delete an order and its line items.

        Delivered orders have already moved stock and are kept. Deleting
        never touches product quantities or the ledger.

        Raises:
            PermissionDeniedError: Role may not delete orders
            NotFoundError: Order does not exist
            IllegalStateError: Order is DELIVERED
        """
        if not PermissionService.can_delete(actor.role):
            raise PermissionDeniedError("You don't have permission to delete orders")

        async with transactional(self.session):
            order = await self.orders.find_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Purchase order not found with id: {order_id}")
            if order.status == OrderStatus.DELIVERED.value:
                raise IllegalStateError("Delivered orders cannot be deleted")

            order_number = order.order_number
            items = await self.orders.find_items_by_order_id(order_id)
            if items:
                await self.orders.delete_items_by_order_id(order_id)
            await self.orders.delete_by_id(order_id)

        logger.info(f"Order {order_number} deleted by user {actor.id} with {len(items)} item(s)")
