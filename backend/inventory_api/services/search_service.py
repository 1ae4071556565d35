# backend/inventory_api/services/search_service.py
import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.exceptions import BusinessValidationError
from inventory_api.models.catalog import Product, Supplier
from inventory_api.models.purchase_order import PurchaseOrder
from inventory_api.repositories.catalog_repository import SupplierRepository
from inventory_api.repositories.product_repository import ProductRepository
from inventory_api.repositories.purchase_order_repository import PurchaseOrderRepository

logger = logging.getLogger(__name__)


@dataclass
class SearchHits:
    orders: List[PurchaseOrder] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    suppliers: List[Supplier] = field(default_factory=list)


def clean_query(query: str) -> str:
    text = (query or "").strip()
    if not text:
        raise BusinessValidationError("Search query must not be empty")
    return text


class SearchService:
    """Free-text lookup across orders, active products and active suppliers."""

    def __init__(self, session: AsyncSession):
        self.orders = PurchaseOrderRepository(session)
        self.products = ProductRepository(session)
        self.suppliers = SupplierRepository(session)

    async def search_orders(self, query: str, limit: int = 10) -> List[PurchaseOrder]:
        """Orders by number or creator name, case-insensitive substring."""
        return await self.orders.search_by_number_or_creator(clean_query(query), limit)

    async def global_search(self, query: str, limit: int = 5) -> SearchHits:
        """Up to ``limit`` hits per kind of record.

        Raises:
            BusinessValidationError: Blank query
        """
        text = clean_query(query)
        hits = SearchHits(
            orders=await self.orders.search_by_number_or_creator(text, limit),
            products=(await self.products.list(search=text, page=0, page_size=limit)).items,
            suppliers=(await self.suppliers.list_active(search=text, page=0, page_size=limit)).items,
        )
        logger.debug(
            f"Search '{text}': {len(hits.orders)} orders, {len(hits.products)} products, "
            f"{len(hits.suppliers)} suppliers"
        )
        return hits
