# backend/inventory_api/services/order_number.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_api.repositories.purchase_order_repository import PurchaseOrderRepository

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "PO-"
FIRST_SEQUENCE = 10001


class OrderNumberGenerator:
    """Allocates ``PO-<n>`` numbers one above the most recent order's.

    Two concurrent callers can read the same latest order and produce the
    same number; the unique index on order_number turns that into an
    IntegrityError and the order service retries the whole create.
    """

    def __init__(self, session: AsyncSession):
        self.orders = PurchaseOrderRepository(session)

    async def next(self) -> str:
        latest = await self.orders.latest()
        if latest is None:
            return f"{ORDER_NUMBER_PREFIX}{FIRST_SEQUENCE}"

        last_id, last_number = latest
        sequence = None
        if last_number and last_number.startswith(ORDER_NUMBER_PREFIX):
            try:
                sequence = int(last_number[len(ORDER_NUMBER_PREFIX):]) + 1
            except ValueError:
                logger.warning(f"Order number {last_number!r} has no numeric suffix, falling back to id")
        if sequence is None:
            sequence = last_id + FIRST_SEQUENCE
        return f"{ORDER_NUMBER_PREFIX}{sequence}"
