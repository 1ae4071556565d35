"""Shared fixtures: in-memory database, seeded users, supplier and products."""

import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.pop("POSTGRES_HOST", None)

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from inventory_api.core.database import Base
from inventory_api.core.security import hash_password
from inventory_api.models import Category, Product, Supplier, User, UserRole
from inventory_api.services.permission_service import Actor

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# bcrypt is slow on purpose; hash once for every seeded user
PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


async def _add_user(db: AsyncSession, username: str, role: str, is_active: bool = True) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=PASSWORD_HASH,
        role=role,
        is_active=is_active,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def admin_user(db) -> User:
    return await _add_user(db, "admin", UserRole.ADMIN.value)


@pytest.fixture
async def staff_user(db) -> User:
    return await _add_user(db, "alice", UserRole.STAFF.value)


@pytest.fixture
async def other_staff_user(db) -> User:
    return await _add_user(db, "bob", UserRole.STAFF.value)


@pytest.fixture
def admin(admin_user) -> Actor:
    return Actor.from_user(admin_user)


@pytest.fixture
def staff(staff_user) -> Actor:
    return Actor.from_user(staff_user)


@pytest.fixture
def other_staff(other_staff_user) -> Actor:
    return Actor.from_user(other_staff_user)


@pytest.fixture
async def supplier(db) -> Supplier:
    supplier = Supplier(name="Acme Supplies", contact_person="Jo Smith", email="sales@acme.test")
    db.add(supplier)
    await db.commit()
    return supplier


@pytest.fixture
async def products(db) -> list[Product]:
    """Three products: P1 (qty 10), P2 (qty 0), P3 (qty 3, reorder level 5)."""
    category = Category(name="Hardware")
    db.add(category)
    items = [
        Product(name="Widget", sku="W-1", quantity=10, reorder_level=2,
                unit_price=Decimal("25.00"), cost_price=Decimal("10.00"), category=category),
        Product(name="Gadget", sku="G-1", quantity=0, reorder_level=0,
                unit_price=Decimal("40.00"), cost_price=Decimal("20.00"), category=category),
        Product(name="Doohickey", sku="D-1", quantity=3, reorder_level=5,
                unit_price=Decimal("5.00"), cost_price=Decimal("2.50"), category=category),
    ]
    db.add_all(items)
    await db.commit()
    return items
