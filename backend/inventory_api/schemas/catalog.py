# backend/inventory_api/schemas/catalog.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import Field
from inventory_api.models.catalog import Product
from inventory_api.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None


class SupplierBase(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None


class SupplierResponse(SupplierBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    sku: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    quantity: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=5, ge=0)
    unit_price: Decimal = Decimal("0")
    cost_price: Decimal = Decimal("0")
    image_url: Optional[str] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    sku: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    reorder_level: Optional[int] = Field(default=None, ge=0)
    unit_price: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None


class ProductResponse(CamelModel):
    id: int
    name: str
    sku: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    quantity: int
    reorder_level: int
    unit_price: float
    cost_price: float
    image_url: Optional[str] = None
    is_active: bool
    low_stock: bool

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            sku=product.sku,
            barcode=product.barcode,
            description=product.description,
            category_id=product.category_id,
            category_name=product.category.name if product.category else None,
            quantity=product.quantity,
            reorder_level=product.reorder_level,
            unit_price=float(product.unit_price or 0),
            cost_price=float(product.cost_price or 0),
            image_url=product.image_url,
            is_active=product.is_active,
            low_stock=product.is_low_stock,
        )
