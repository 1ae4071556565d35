"""Repository classes for users, suppliers and categories."""

from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models.catalog import Category, Supplier
from inventory_api.models.user import User
from inventory_api.repositories.pagination import Page


class UserRepository:
    """Repository for User lookups used by authentication and the services."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def save(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def list(self, search: Optional[str] = None, page: int = 0, page_size: int = 10) -> Page[User]:
        """List users, optionally matching username, email or name.

        Args:
            search: Case-insensitive substring
            page: Zero-based page index
            page_size: Rows per page

        Returns:
            Page of User instances ordered by username
        """
        query = select(User)
        if search:
            query = query.where(
                or_(
                    User.username.ilike(f"%{search}%"),
                    User.email.ilike(f"%{search}%"),
                    User.first_name.ilike(f"%{search}%"),
                    User.last_name.ilike(f"%{search}%"),
                )
            )

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.session.execute(count_query)).scalar() or 0

        query = query.order_by(User.username).offset(page * page_size).limit(page_size)
        result = await self.session.execute(query)
        return Page(items=list(result.scalars().all()), total=total, page=page, size=page_size)


class SupplierRepository:
    """Repository for Supplier database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, supplier_id: int) -> Optional[Supplier]:
        result = await self.session.execute(select(Supplier).where(Supplier.id == supplier_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Supplier]:
        result = await self.session.execute(select(Supplier).where(Supplier.name == name))
        return result.scalar_one_or_none()

    async def save(self, supplier: Supplier) -> Supplier:
        self.session.add(supplier)
        await self.session.flush()
        return supplier

    async def list_active(
        self, search: Optional[str] = None, page: int = 0, page_size: int = 10
    ) -> Page[Supplier]:
        query = select(Supplier).where(Supplier.is_active == True)
        if search:
            query = query.where(Supplier.name.ilike(f"%{search}%"))

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.session.execute(count_query)).scalar() or 0

        query = query.order_by(Supplier.name).offset(page * page_size).limit(page_size)
        result = await self.session.execute(query)
        return Page(items=list(result.scalars().all()), total=total, page=page, size=page_size)


class CategoryRepository:
    """Repository for Category database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, category_id: int) -> Optional[Category]:
        result = await self.session.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Category]:
        result = await self.session.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def save(self, category: Category) -> Category:
        self.session.add(category)
        await self.session.flush()
        return category

    async def list_all(self) -> List[Category]:
        result = await self.session.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def delete(self, category: Category) -> None:
        await self.session.delete(category)
        await self.session.flush()
