# backend/inventory_api/services/inventory_service.py
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.database import transactional
from inventory_api.core.exceptions import BusinessValidationError, IllegalStateError, NotFoundError
from inventory_api.models.inventory_transaction import InventoryTransaction, TransactionType
from inventory_api.repositories.inventory_transaction_repository import InventoryTransactionRepository
from inventory_api.repositories.product_repository import ProductRepository
from inventory_api.services.permission_service import Actor

logger = logging.getLogger(__name__)


class InventoryService:
    """Stock movements outside the purchase order lifecycle."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.products = ProductRepository(session)
        self.ledger = InventoryTransactionRepository(session)

    async def sell_product(
        self, product_id: int, quantity: int, notes: Optional[str], actor: Actor
    ) -> InventoryTransaction:
        """Take ``quantity`` units out of stock and record a STOCK_OUT entry.

        Args:
            product_id: Product being sold
            quantity: Units sold, must be positive
            notes: Optional free text stored on the ledger entry
            actor: User making the sale

        Returns:
            The new ledger entry

        Raises:
            BusinessValidationError: quantity is not positive
            NotFoundError: Product does not exist
            IllegalStateError: Not enough stock
        """
        if quantity is None or quantity <= 0:
            raise BusinessValidationError("Quantity must be greater than zero")

        async with transactional(self.session):
            product = await self.products.get_for_update(product_id)
            if product is None:
                raise NotFoundError(f"Product not found with id: {product_id}")
            if product.quantity < quantity:
                raise IllegalStateError(f"Insufficient stock. Available: {product.quantity}")

            product.quantity -= quantity
            await self.products.save(product)
            entry = await self.ledger.append(
                product_id=product.id,
                transaction_type=TransactionType.STOCK_OUT,
                quantity=quantity,
                reference=None,
                actor_id=actor.id,
                notes=notes,
            )
            entry = await self.ledger.get_by_id(entry.id)

        logger.info(f"Sold {quantity} x product {product_id} by user {actor.id}, {product.quantity} left")
        return entry

    async def recent_transactions(
        self, transaction_type: Optional[str] = None, limit: int = 10
    ) -> List[InventoryTransaction]:
        kind = None
        if transaction_type:
            try:
                kind = TransactionType(transaction_type.strip().upper())
            except ValueError:
                raise BusinessValidationError(f"Invalid transaction type: {transaction_type}")
        return await self.ledger.recent(kind, limit)

    async def inventory_value(self) -> Decimal:
        return await self.products.inventory_value()
