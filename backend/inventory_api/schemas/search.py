# backend/inventory_api/schemas/search.py
from typing import List

from inventory_api.schemas.catalog import ProductResponse, SupplierResponse
from inventory_api.schemas.common import CamelModel
from inventory_api.schemas.purchase_order import PurchaseOrderResponse


class SearchResults(CamelModel):
    orders: List[PurchaseOrderResponse] = []
    products: List[ProductResponse] = []
    suppliers: List[SupplierResponse] = []
