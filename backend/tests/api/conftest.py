"""Fixtures for API tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from inventory_api.core.database import get_db
from inventory_api.core.security import create_user_token
from inventory_api.main import app


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app, one database session per request."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def bearer(user) -> dict:
    token = create_user_token(user.id, user.username, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    return bearer(admin_user)


@pytest.fixture
def staff_headers(staff_user):
    return bearer(staff_user)


@pytest.fixture
def other_staff_headers(other_staff_user):
    return bearer(other_staff_user)


@pytest.fixture
def ids(supplier, products):
    return {"supplier": supplier.id, "p1": products[0].id, "p2": products[1].id, "p3": products[2].id}
