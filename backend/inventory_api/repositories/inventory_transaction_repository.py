"""The inventory ledger: append-only stock movements."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models.catalog import Product
from inventory_api.models.inventory_transaction import InventoryTransaction, TransactionType


class InventoryTransactionRepository:
    """Repository for InventoryTransaction rows.

    There is no update or delete: corrections are new entries.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def append(
        self,
        product_id: int,
        transaction_type: TransactionType,
        quantity: int,
        reference: Optional[str],
        actor_id: int,
        timestamp: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> InventoryTransaction:
        """Append one ledger entry.

        Args:
            product_id: Product whose stock moved
            transaction_type: STOCK_IN, STOCK_OUT or ADJUSTMENT
            quantity: Units moved (always positive; the type gives the sign)
            reference: Free reference text, e.g. a purchase order number
            actor_id: User responsible for the movement
            timestamp: When it happened, defaults to now
            notes: Optional description

        Returns:
            The flushed InventoryTransaction
        """
        entry = InventoryTransaction(
            product_id=product_id,
            user_id=actor_id,
            transaction_type=TransactionType(transaction_type).value,
            quantity=quantity,
            reference_number=reference,
            notes=notes,
            transaction_date=timestamp or datetime.utcnow(),
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def get_by_id(self, entry_id: int) -> Optional[InventoryTransaction]:
        """Load an entry with its product and user, replacing any in-session copy."""
        result = await self.session.execute(
            select(InventoryTransaction)
            .where(InventoryTransaction.id == entry_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def recent(
        self,
        transaction_type: Optional[TransactionType] = None,
        limit: int = 10,
    ) -> List[InventoryTransaction]:
        """Most recent entries first, optionally of one type."""
        query = select(InventoryTransaction)
        if transaction_type is not None:
            query = query.where(
                InventoryTransaction.transaction_type == TransactionType(transaction_type).value
            )
        query = query.order_by(
            InventoryTransaction.transaction_date.desc(), InventoryTransaction.id.desc()
        ).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_by_reference(self, reference: str) -> List[InventoryTransaction]:
        result = await self.session.execute(
            select(InventoryTransaction)
            .where(InventoryTransaction.reference_number == reference)
            .order_by(InventoryTransaction.id)
        )
        return list(result.scalars().all())

    async def count_between(
        self, transaction_type: TransactionType, start: datetime, end: datetime
    ) -> int:
        """Entries of a type with start <= transaction_date < end."""
        result = await self.session.execute(
            select(func.count(InventoryTransaction.id)).where(
                InventoryTransaction.transaction_type == TransactionType(transaction_type).value,
                InventoryTransaction.transaction_date >= start,
                InventoryTransaction.transaction_date < end,
            )
        )
        return result.scalar() or 0

    async def revenue_between(self, start: datetime, end: datetime) -> Decimal:
        """Sum of quantity * product unit price over STOCK_OUT entries in [start, end)."""
        result = await self.session.execute(
            select(
                func.coalesce(func.sum(InventoryTransaction.quantity * Product.unit_price), 0)
            )
            .join(Product, InventoryTransaction.product_id == Product.id)
            .where(
                InventoryTransaction.transaction_type == TransactionType.STOCK_OUT.value,
                InventoryTransaction.transaction_date >= start,
                InventoryTransaction.transaction_date < end,
            )
        )
        return Decimal(str(result.scalar() or 0))
