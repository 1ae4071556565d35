# backend/inventory_api/api/catalog.py
"""Categories, suppliers and products."""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_api.api.deps import get_current_user, require_admin
from inventory_api.core.database import get_db, transactional
from inventory_api.core.exceptions import (
    BusinessValidationError,
    DuplicateResourceError,
    IllegalStateError,
    NotFoundError,
)
from inventory_api.models.catalog import Category, Product, Supplier
from inventory_api.models.purchase_order import OrderStatus
from inventory_api.models.user import User
from inventory_api.repositories.catalog_repository import CategoryRepository, SupplierRepository
from inventory_api.repositories.product_repository import ProductRepository
from inventory_api.repositories.purchase_order_repository import PurchaseOrderRepository
from inventory_api.schemas.catalog import (
    CategoryCreate,
    CategoryResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    SupplierCreate,
    SupplierResponse,
    SupplierUpdate,
)
from inventory_api.schemas.common import PageResponse

logger = logging.getLogger(__name__)

categories_router = APIRouter(prefix="/api/categories", tags=["categories"])
suppliers_router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])
products_router = APIRouter(prefix="/api/products", tags=["products"])


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


@categories_router.get("", response_model=List[CategoryResponse])
async def list_categories(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return [CategoryResponse.model_validate(c) for c in await CategoryRepository(db).list_all()]


@categories_router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    req: CategoryCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    categories = CategoryRepository(db)
    async with transactional(db):
        if await categories.get_by_name(req.name):
            raise DuplicateResourceError(f"Category already exists: {req.name}")
        category = await categories.save(Category(name=req.name, description=req.description))
    return CategoryResponse.model_validate(category)


@categories_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    categories = CategoryRepository(db)
    async with transactional(db):
        category = await categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category not found with id: {category_id}")
        if await ProductRepository(db).count_by_category(category_id):
            raise IllegalStateError(
                "Cannot delete category with associated products. Remove or reassign products first."
            )
        await categories.delete(category)
    logger.info(f"Category {category_id} deleted by {current_user.username}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------------


@suppliers_router.get("", response_model=PageResponse[SupplierResponse])
async def list_suppliers(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await SupplierRepository(db).list_active(search=search, page=page, page_size=size)
    return PageResponse[SupplierResponse](
        items=[SupplierResponse.model_validate(s) for s in result.items],
        total=result.total,
        page=result.page,
        size=result.size,
        total_pages=result.total_pages,
    )


@suppliers_router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(
    supplier_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    supplier = await SupplierRepository(db).get_by_id(supplier_id)
    if supplier is None:
        raise NotFoundError(f"Supplier not found with id: {supplier_id}")
    return SupplierResponse.model_validate(supplier)


@suppliers_router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    req: SupplierCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    suppliers = SupplierRepository(db)
    async with transactional(db):
        if await suppliers.get_by_name(req.name):
            raise DuplicateResourceError(f"Supplier already exists: {req.name}")
        supplier = await suppliers.save(Supplier(**req.model_dump()))
    logger.info(f"Supplier {supplier.name} created by {current_user.username}")
    return SupplierResponse.model_validate(supplier)


@suppliers_router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    req: SupplierUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    suppliers = SupplierRepository(db)
    async with transactional(db):
        supplier = await suppliers.get_by_id(supplier_id)
        if supplier is None:
            raise NotFoundError(f"Supplier not found with id: {supplier_id}")

        changes = req.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] != supplier.name:
            if await suppliers.get_by_name(changes["name"]):
                raise DuplicateResourceError(f"Supplier already exists: {changes['name']}")
        for key, value in changes.items():
            setattr(supplier, key, value)
        await suppliers.save(supplier)
    return SupplierResponse.model_validate(supplier)


# Orders still moving through the pipeline keep their supplier alive
OPEN_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.PROCESSING)


@suppliers_router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(
    supplier_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate a supplier that has no PENDING or PROCESSING orders."""
    suppliers = SupplierRepository(db)
    async with transactional(db):
        supplier = await suppliers.get_by_id(supplier_id)
        if supplier is None or not supplier.is_active:
            raise NotFoundError(f"Supplier not found with id: {supplier_id}")

        open_orders = await PurchaseOrderRepository(db).count_by_supplier_and_status(
            supplier_id, OPEN_ORDER_STATUSES
        )
        if open_orders:
            raise BusinessValidationError(
                f"Cannot delete supplier with ID {supplier_id} because there are {open_orders} "
                "active purchase orders (PENDING or PROCESSING) associated with this supplier. "
                "Please complete or cancel these orders before deleting the supplier."
            )

        supplier.is_active = False
        await suppliers.save(supplier)
    logger.info(f"Supplier {supplier_id} deactivated by {current_user.username}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


async def _check_category(db: AsyncSession, category_id: Optional[int]) -> Optional[Category]:
    if category_id is None:
        return None
    category = await CategoryRepository(db).get_by_id(category_id)
    if category is None:
        raise NotFoundError(f"Category not found with id: {category_id}")
    return category


@products_router.get("", response_model=PageResponse[ProductResponse])
async def list_products(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await ProductRepository(db).list(search=search, page=page, page_size=size)
    return PageResponse[ProductResponse](
        items=[ProductResponse.from_product(p) for p in result.items],
        total=result.total,
        page=result.page,
        size=result.size,
        total_pages=result.total_pages,
    )


@products_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    product = await ProductRepository(db).get_by_id(product_id)
    if product is None:
        raise NotFoundError(f"Product not found with id: {product_id}")
    return ProductResponse.from_product(product)


@products_router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    req: ProductCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    products = ProductRepository(db)
    async with transactional(db):
        if req.sku and await products.get_by_sku(req.sku):
            raise DuplicateResourceError(f"Product with SKU {req.sku} already exists")
        category = await _check_category(db, req.category_id)
        product = Product(**req.model_dump())
        product.category = category
        await products.save(product)
    logger.info(f"Product {product.name} created by {current_user.username}")
    return ProductResponse.from_product(product)


@products_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    req: ProductUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update catalogue fields. Stock quantity only moves through orders and sales."""
    products = ProductRepository(db)
    async with transactional(db):
        product = await products.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product not found with id: {product_id}")

        changes = req.model_dump(exclude_unset=True)
        if changes.get("sku") and changes["sku"] != product.sku:
            if await products.get_by_sku(changes["sku"]):
                raise DuplicateResourceError(f"Product with SKU {changes['sku']} already exists")
        if "category_id" in changes:
            product.category = await _check_category(db, changes["category_id"])
        for key, value in changes.items():
            setattr(product, key, value)
        await products.save(product)
    return ProductResponse.from_product(product)


@products_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: the product leaves listings but order history keeps it."""
    products = ProductRepository(db)
    async with transactional(db):
        product = await products.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product not found with id: {product_id}")
        product.is_active = False
        await products.save(product)
    logger.info(f"Product {product_id} deactivated by {current_user.username}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
