"""Repository for purchase orders and their line items.

Repositories here only add, flush and delete. Committing is the caller's
job, so that one service operation is one transaction.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from inventory_api.core.exceptions import BusinessValidationError
from inventory_api.models.catalog import Supplier
from inventory_api.models.purchase_order import OrderStatus, PurchaseOrder, PurchaseOrderItem
from inventory_api.models.user import User
from inventory_api.repositories.pagination import Page


# ---------------------------------------------------------------------------
# Sort strategies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ColumnSort:
    """Sort on a column of the purchase_orders table."""

    column: Any

    def apply(self, stmt: Select, descending: bool) -> Select:
        return stmt.order_by(self.column.desc() if descending else self.column.asc())


@dataclass(frozen=True)
class JoinedSort:
    """Sort on a column reached through a join, one ORDER BY per direction."""

    ascending: Tuple[Any, ...]
    descending: Tuple[Any, ...]

    def apply(self, stmt: Select, descending: bool) -> Select:
        return stmt.order_by(*(self.descending if descending else self.ascending))


_CREATOR_USERNAME_SORT = JoinedSort(
    ascending=(User.username.asc(),),
    descending=(User.username.desc(),),
)

SORT_STRATEGIES = {
    "id": ColumnSort(PurchaseOrder.id),
    "orderNumber": ColumnSort(PurchaseOrder.order_number),
    "orderDate": ColumnSort(PurchaseOrder.order_date),
    "expectedDeliveryDate": ColumnSort(PurchaseOrder.expected_delivery_date),
    "status": ColumnSort(PurchaseOrder.status),
    "totalAmount": ColumnSort(PurchaseOrder.total_amount),
    "createdAt": ColumnSort(PurchaseOrder.created_at),
    "updatedAt": ColumnSort(PurchaseOrder.updated_at),
    "users.username": _CREATOR_USERNAME_SORT,
    "createdByName": _CREATOR_USERNAME_SORT,
}


def resolve_sort(sort_field: str):
    strategy = SORT_STRATEGIES.get(sort_field)
    if strategy is None:
        raise BusinessValidationError(
            f"Invalid sort field: {sort_field}. Allowed: {', '.join(sorted(SORT_STRATEGIES))}"
        )
    return strategy


def normalize_status_filter(status: Optional[str]) -> Optional[str]:
    """Empty or "all" means no filter; anything else is matched upper-cased."""
    if status is None:
        return None
    status = status.strip()
    if not status or status.lower() == "all":
        return None
    return status.upper()


class PurchaseOrderRepository:
    """Storage and queries for PurchaseOrder aggregates."""

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _filtered(self, status: Optional[str], search: Optional[str]) -> Select:
        stmt = select(PurchaseOrder).outerjoin(User, PurchaseOrder.created_by_id == User.id)

        status = normalize_status_filter(status)
        if status:
            stmt = stmt.where(PurchaseOrder.status == status)

        if search and search.strip():
            text = search.strip()
            pattern = f"%{text.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(PurchaseOrder.order_number).like(pattern),
                    func.lower(PurchaseOrder.status).like(pattern),
                    func.lower(User.username).like(pattern),
                    cast(PurchaseOrder.order_date, String).like(f"%{text}%"),
                    cast(PurchaseOrder.expected_delivery_date, String).like(f"%{text}%"),
                )
            )
        return stmt

    async def find_filtered(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort_field: str = "orderDate",
        sort_direction: str = "desc",
        page: int = 0,
        page_size: int = 10,
    ) -> Page[PurchaseOrder]:
        """Filtered, sorted, paginated order listing.

        Args:
            status: Exact status (case-insensitive); empty or "all" for any
            search: Case-insensitive substring over order number, status,
                creator username and the rendered order/expected dates
            sort_field: Key of SORT_STRATEGIES
            sort_direction: "asc" or "desc"
            page: Zero-based page index
            page_size: Rows per page

        Returns:
            Page of PurchaseOrder instances

        Raises:
            BusinessValidationError: Unknown sort field
        """
        strategy = resolve_sort(sort_field)
        descending = (sort_direction or "").lower() == "desc"

        stmt = self._filtered(status, search)

        count_query = select(func.count()).select_from(stmt.subquery())
        total = (await self.session.execute(count_query)).scalar() or 0

        stmt = strategy.apply(stmt, descending)
        stmt = stmt.order_by(PurchaseOrder.id.desc() if descending else PurchaseOrder.id.asc())
        stmt = stmt.offset(page * page_size).limit(page_size)

        result = await self.session.execute(stmt)
        return Page(items=list(result.scalars().all()), total=total, page=page, size=page_size)

    async def find_by_id(self, order_id: int, refresh: bool = False) -> Optional[PurchaseOrder]:
        """Get an order with its items.

        Args:
            order_id: Order ID
            refresh: Overwrite any state already held in the session with
                what is in the database (items collection included)

        Returns:
            PurchaseOrder instance or None
        """
        stmt = select(PurchaseOrder).where(PurchaseOrder.id == order_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def latest(self) -> Optional[Tuple[int, str]]:
        """(id, order_number) of the most recently inserted order."""
        result = await self.session.execute(
            select(PurchaseOrder.id, PurchaseOrder.order_number)
            .order_by(PurchaseOrder.id.desc())
            .limit(1)
        )
        row = result.first()
        return (row[0], row[1]) if row else None

    async def save(self, order: PurchaseOrder) -> PurchaseOrder:
        """Insert or update an order header and flush it."""
        self.session.add(order)
        await self.session.flush()
        return order

    async def delete_by_id(self, order_id: int) -> None:
        """Hard delete of the order row only; line items are not touched."""
        await self.session.execute(delete(PurchaseOrder).where(PurchaseOrder.id == order_id))

    # -- line items ----------------------------------------------------------

    async def find_items_by_order_id(self, order_id: int) -> List[PurchaseOrderItem]:
        result = await self.session.execute(
            select(PurchaseOrderItem)
            .where(PurchaseOrderItem.order_id == order_id)
            .order_by(PurchaseOrderItem.id)
        )
        return list(result.scalars().all())

    async def delete_items_by_order_id(self, order_id: int) -> None:
        await self.session.execute(
            delete(PurchaseOrderItem).where(PurchaseOrderItem.order_id == order_id)
        )

    # -- reporting -----------------------------------------------------------

    async def recent(self, count: int) -> List[PurchaseOrder]:
        result = await self.session.execute(
            select(PurchaseOrder)
            .order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc())
            .limit(count)
        )
        return list(result.scalars().all())

    async def totals_since(self, start: datetime) -> Sequence[Tuple[datetime, Any]]:
        """(order_date, total_amount) for every order dated on/after ``start``."""
        result = await self.session.execute(
            select(PurchaseOrder.order_date, PurchaseOrder.total_amount).where(
                PurchaseOrder.order_date >= start
            )
        )
        return [(row[0], row[1]) for row in result.all()]

    async def totals_by_supplier_since(self, start: datetime) -> List[Tuple[int, str, Any]]:
        """(supplier_id, supplier_name, summed total_amount) per supplier.

        Counts orders dated on/after ``start``; cancelled orders are left out.
        Largest total first.
        """
        total = func.coalesce(func.sum(PurchaseOrder.total_amount), 0)
        result = await self.session.execute(
            select(Supplier.id, Supplier.name, total)
            .join(Supplier, PurchaseOrder.supplier_id == Supplier.id)
            .where(
                PurchaseOrder.order_date >= start,
                PurchaseOrder.status != OrderStatus.CANCELLED.value,
            )
            .group_by(Supplier.id, Supplier.name)
            .order_by(total.desc(), Supplier.name)
        )
        return [(row[0], row[1], row[2]) for row in result.all()]

    # -- lookups by supplier and creator -------------------------------------

    async def count_by_supplier_and_status(self, supplier_id: int, statuses: Sequence[OrderStatus]) -> int:
        result = await self.session.execute(
            select(func.count(PurchaseOrder.id)).where(
                PurchaseOrder.supplier_id == supplier_id,
                PurchaseOrder.status.in_([s.value for s in statuses]),
            )
        )
        return result.scalar() or 0

    async def search_by_number_or_creator(self, text: str, limit: int = 10) -> List[PurchaseOrder]:
        """Orders whose number, or creator's username or name, contains ``text``.

        Args:
            text: Case-insensitive substring
            limit: Maximum rows returned

        Returns:
            Matching orders, newest order date first
        """
        pattern = f"%{text.strip().lower()}%"
        result = await self.session.execute(
            select(PurchaseOrder)
            .outerjoin(User, PurchaseOrder.created_by_id == User.id)
            .where(
                or_(
                    func.lower(PurchaseOrder.order_number).like(pattern),
                    func.lower(User.username).like(pattern),
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                )
            )
            .order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
