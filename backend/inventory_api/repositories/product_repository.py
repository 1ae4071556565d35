"""Repository for product stock records."""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models.catalog import Product
from inventory_api.repositories.pagination import Page


class ProductRepository:
    """Repository for Product database operations.

    Stock quantities are read-modify-written by the order lifecycle and by
    sales; use ``get_for_update`` on those paths so the row stays locked
    until the surrounding transaction ends.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get a product by ID.

        Args:
            product_id: Product ID

        Returns:
            Product instance or None
        """
        result = await self.session.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def get_for_update(self, product_id: int) -> Optional[Product]:
        """Get a product and lock its row for the rest of the transaction.

        SQLite ignores FOR UPDATE; it serializes writers on its own.

        Args:
            product_id: Product ID

        Returns:
            Product instance or None
        """
        result = await self.session.execute(
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        result = await self.session.execute(select(Product).where(Product.sku == sku))
        return result.scalar_one_or_none()

    async def find_existing_ids(self, product_ids: List[int]) -> set[int]:
        """Subset of ``product_ids`` that resolve to a product row."""
        if not product_ids:
            return set()
        result = await self.session.execute(select(Product.id).where(Product.id.in_(product_ids)))
        return {row[0] for row in result.all()}

    async def save(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.flush()
        return product

    async def list(
        self,
        search: Optional[str] = None,
        page: int = 0,
        page_size: int = 10,
    ) -> Page[Product]:
        """List active products, optionally matching name or SKU.

        Args:
            search: Case-insensitive substring of name or SKU
            page: Zero-based page index
            page_size: Rows per page

        Returns:
            Page of Product instances ordered by name
        """
        query = select(Product).where(Product.is_active == True)
        if search:
            query = query.where(
                or_(
                    Product.name.ilike(f"%{search}%"),
                    Product.sku.ilike(f"%{search}%"),
                )
            )

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.session.execute(count_query)).scalar() or 0

        query = query.order_by(Product.name, Product.id).offset(page * page_size).limit(page_size)
        result = await self.session.execute(query)
        return Page(items=list(result.scalars().all()), total=total, page=page, size=page_size)

    async def list_low_stock(self) -> List[Product]:
        """Active products at or below their reorder level."""
        result = await self.session.execute(
            select(Product)
            .where(Product.is_active == True, Product.quantity <= Product.reorder_level)
            .order_by(Product.quantity, Product.name)
        )
        return list(result.scalars().all())

    async def count_active(self) -> int:
        result = await self.session.execute(
            select(func.count(Product.id)).where(Product.is_active == True)
        )
        return result.scalar() or 0

    async def count_by_category(self, category_id: int) -> int:
        """Products in the category, inactive ones included."""
        result = await self.session.execute(
            select(func.count(Product.id)).where(Product.category_id == category_id)
        )
        return result.scalar() or 0

    async def count_low_stock(self) -> int:
        result = await self.session.execute(
            select(func.count(Product.id)).where(
                Product.is_active == True, Product.quantity <= Product.reorder_level
            )
        )
        return result.scalar() or 0

    async def inventory_value(self) -> Decimal:
        """Sum of quantity * cost_price over active products."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(Product.quantity * Product.cost_price), 0)).where(
                Product.is_active == True
            )
        )
        return Decimal(str(result.scalar() or 0))
