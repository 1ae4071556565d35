# backend/tests/test_repositories.py
import pytest
from datetime import datetime
from decimal import Decimal

from db_helpers import item_rows
from inventory_api.core.exceptions import BusinessValidationError
from inventory_api.models import PurchaseOrder, PurchaseOrderItem, Supplier
from inventory_api.models.purchase_order import OrderStatus
from inventory_api.repositories import (
    InventoryTransactionRepository,
    ProductRepository,
    PurchaseOrderRepository,
)
from inventory_api.repositories.purchase_order_repository import normalize_status_filter
from inventory_api.models.inventory_transaction import TransactionType


@pytest.fixture
async def orders(db, supplier, admin_user, staff_user, other_staff_user):
    """Five orders across creators, statuses and dates."""
    rows = [
        ("PO-10001", "PENDING", datetime(2026, 1, 5), staff_user, "11.00"),
        ("PO-10002", "PROCESSING", datetime(2026, 2, 5), other_staff_user, "22.00"),
        ("PO-10003", "DELIVERED", datetime(2026, 3, 5), admin_user, "33.00"),
        ("PO-10004", "CANCELLED", datetime(2026, 4, 5), staff_user, "44.00"),
        ("PO-10005", "PENDING", datetime(2026, 5, 5), admin_user, "55.00"),
    ]
    created = []
    for number, status, order_date, user, amount in rows:
        order = PurchaseOrder(
            order_number=number,
            supplier_id=supplier.id,
            status=status,
            order_date=order_date,
            total_amount=Decimal(amount),
            created_by_id=user.id,
        )
        db.add(order)
        created.append(order)
    await db.commit()
    return created


def numbers(page):
    return [o.order_number for o in page.items]


class TestPurchaseOrderRepository:
    """Listing, lookup and deletion of purchase orders"""

    @pytest.mark.asyncio
    async def test_default_listing_is_newest_first(self, db, orders):
        page = await PurchaseOrderRepository(db).find_filtered()

        assert page.total == 5
        assert numbers(page) == ["PO-10005", "PO-10004", "PO-10003", "PO-10002", "PO-10001"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["pending", "PENDING", " Pending "])
    async def test_status_filter_ignores_case(self, db, orders, status):
        page = await PurchaseOrderRepository(db).find_filtered(status=status, sort_direction="asc")
        assert numbers(page) == ["PO-10001", "PO-10005"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [None, "", "all", "ALL"])
    async def test_no_status_filter(self, db, orders, status):
        page = await PurchaseOrderRepository(db).find_filtered(status=status)
        assert page.total == 5

    @pytest.mark.asyncio
    async def test_search_by_order_number(self, db, orders):
        page = await PurchaseOrderRepository(db).find_filtered(search="po-10003")
        assert numbers(page) == ["PO-10003"]

    @pytest.mark.asyncio
    async def test_search_by_creator_username(self, db, orders):
        page = await PurchaseOrderRepository(db).find_filtered(search="BOB")
        assert numbers(page) == ["PO-10002"]

    @pytest.mark.asyncio
    async def test_search_by_status_text(self, db, orders):
        page = await PurchaseOrderRepository(db).find_filtered(search="cancel")
        assert numbers(page) == ["PO-10004"]

    @pytest.mark.asyncio
    async def test_search_by_order_date(self, db, orders):
        page = await PurchaseOrderRepository(db).find_filtered(search="2026-04")
        assert numbers(page) == ["PO-10004"]

    @pytest.mark.asyncio
    async def test_search_and_status_combine(self, db, orders):
        page = await PurchaseOrderRepository(db).find_filtered(status="PENDING", search="alice")
        assert numbers(page) == ["PO-10001"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["users.username", "createdByName"])
    async def test_sort_by_creator_username(self, db, orders, field):
        repo = PurchaseOrderRepository(db)

        ascending = await repo.find_filtered(sort_field=field, sort_direction="asc")
        descending = await repo.find_filtered(sort_field=field, sort_direction="desc")

        # admin < alice < bob; ties broken by id in the same direction
        assert numbers(ascending) == ["PO-10003", "PO-10005", "PO-10001", "PO-10004", "PO-10002"]
        assert numbers(descending) == ["PO-10002", "PO-10004", "PO-10001", "PO-10005", "PO-10003"]

    @pytest.mark.asyncio
    async def test_sort_by_total_amount(self, db, orders):
        page = await PurchaseOrderRepository(db).find_filtered(sort_field="totalAmount", sort_direction="asc")
        assert numbers(page)[0] == "PO-10001"

    @pytest.mark.asyncio
    async def test_unknown_sort_field(self, db, orders):
        with pytest.raises(BusinessValidationError, match="Invalid sort field"):
            await PurchaseOrderRepository(db).find_filtered(sort_field="password")

    @pytest.mark.asyncio
    async def test_pagination(self, db, orders):
        repo = PurchaseOrderRepository(db)

        first = await repo.find_filtered(sort_direction="asc", page=0, page_size=2)
        last = await repo.find_filtered(sort_direction="asc", page=2, page_size=2)
        beyond = await repo.find_filtered(sort_direction="asc", page=5, page_size=2)

        assert numbers(first) == ["PO-10001", "PO-10002"]
        assert numbers(last) == ["PO-10005"]
        assert beyond.items == []
        assert first.total == last.total == beyond.total == 5
        assert first.total_pages == 3

    @pytest.mark.asyncio
    async def test_find_by_id(self, db, orders):
        repo = PurchaseOrderRepository(db)

        found = await repo.find_by_id(orders[1].id)

        assert found.order_number == "PO-10002"
        assert found.supplier.name == "Acme Supplies"
        assert await repo.find_by_id(999) is None

    @pytest.mark.asyncio
    async def test_latest(self, db, orders):
        latest_id, latest_number = await PurchaseOrderRepository(db).latest()
        assert (latest_id, latest_number) == (orders[-1].id, "PO-10005")

    @pytest.mark.asyncio
    async def test_delete_by_id_leaves_items(self, db, orders, products):
        repo = PurchaseOrderRepository(db)
        order_id = orders[0].id
        db.add(PurchaseOrderItem(order_id=order_id, product_id=products[0].id, quantity=1, unit_price=Decimal("1")))
        await db.commit()

        await repo.delete_by_id(order_id)
        await db.commit()

        assert await repo.find_by_id(order_id) is None
        assert len(await item_rows(db, order_id)) == 1
        assert [i.quantity for i in await repo.find_items_by_order_id(order_id)] == [1]

        await repo.delete_items_by_order_id(order_id)
        await db.commit()
        assert await item_rows(db, order_id) == []

    @pytest.mark.asyncio
    async def test_recent(self, db, orders):
        recent = await PurchaseOrderRepository(db).recent(2)
        assert [o.order_number for o in recent] == ["PO-10005", "PO-10004"]

    @pytest.mark.asyncio
    async def test_totals_since(self, db, orders):
        totals = await PurchaseOrderRepository(db).totals_since(datetime(2026, 4, 1))
        assert sorted(float(amount) for _, amount in totals) == [44.0, 55.0]

    @pytest.mark.asyncio
    async def test_count_by_supplier_and_status(self, db, orders, supplier):
        repo = PurchaseOrderRepository(db)

        open_statuses = (OrderStatus.PENDING, OrderStatus.PROCESSING)
        assert await repo.count_by_supplier_and_status(supplier.id, open_statuses) == 3
        assert await repo.count_by_supplier_and_status(supplier.id, (OrderStatus.DELIVERED,)) == 1
        assert await repo.count_by_supplier_and_status(supplier.id + 1, open_statuses) == 0

    @pytest.mark.asyncio
    async def test_search_by_number_or_creator(self, db, orders):
        repo = PurchaseOrderRepository(db)

        by_creator = await repo.search_by_number_or_creator("ALICE")
        by_number = await repo.search_by_number_or_creator("po-1000", limit=2)

        assert [o.order_number for o in by_creator] == ["PO-10004", "PO-10001"]
        assert [o.order_number for o in by_number] == ["PO-10005", "PO-10004"]
        assert await repo.search_by_number_or_creator("nobody") == []

    @pytest.mark.asyncio
    async def test_search_matches_creator_first_name(self, db, orders, staff_user):
        staff_user.first_name = "Alison"
        await db.commit()

        found = await PurchaseOrderRepository(db).search_by_number_or_creator("lison")

        assert [o.order_number for o in found] == ["PO-10004", "PO-10001"]

    @pytest.mark.asyncio
    async def test_totals_by_supplier_since(self, db, orders, staff_user):
        bolt = Supplier(name="Bolt Bros")
        db.add(bolt)
        await db.flush()
        for number, status, amount in [("PO-20001", "PENDING", "200.00"), ("PO-20002", "CANCELLED", "999.00")]:
            db.add(PurchaseOrder(order_number=number, supplier_id=bolt.id, status=status,
                                 order_date=datetime(2026, 5, 1), total_amount=Decimal(amount),
                                 created_by_id=staff_user.id))
        await db.commit()
        repo = PurchaseOrderRepository(db)

        all_year = await repo.totals_by_supplier_since(datetime(2026, 1, 1))
        spring = await repo.totals_by_supplier_since(datetime(2026, 3, 1))

        # Acme: 11 + 22 + 33 + 55, the cancelled 44 is left out
        assert [(name, float(total)) for _, name, total in all_year] == [("Bolt Bros", 200.0), ("Acme Supplies", 121.0)]
        assert [(name, float(total)) for _, name, total in spring] == [("Bolt Bros", 200.0), ("Acme Supplies", 88.0)]
        assert await repo.totals_by_supplier_since(datetime(2027, 1, 1)) == []


@pytest.mark.parametrize(
    "raw, expected",
    [(None, None), ("", None), ("  ", None), ("all", None), ("All", None), ("processing", "PROCESSING")],
)
def test_normalize_status_filter(raw, expected):
    assert normalize_status_filter(raw) == expected


class TestProductRepository:
    @pytest.mark.asyncio
    async def test_list_searches_name_and_sku(self, db, products):
        repo = ProductRepository(db)

        by_name = await repo.list(search="gadg")
        by_sku = await repo.list(search="d-1")

        assert [p.sku for p in by_name.items] == ["G-1"]
        assert [p.sku for p in by_sku.items] == ["D-1"]

    @pytest.mark.asyncio
    async def test_inactive_products_hidden(self, db, products):
        products[0].is_active = False
        await db.commit()

        page = await ProductRepository(db).list()

        assert page.total == 2
        assert await ProductRepository(db).count_active() == 2

    @pytest.mark.asyncio
    async def test_low_stock(self, db, products):
        repo = ProductRepository(db)

        low = await repo.list_low_stock()

        # Gadget: 0 <= 0, Doohickey: 3 <= 5
        assert [p.sku for p in low] == ["G-1", "D-1"]
        assert await repo.count_low_stock() == 2

    @pytest.mark.asyncio
    async def test_inventory_value(self, db, products):
        # 10 * 10.00 + 0 * 20.00 + 3 * 2.50
        assert await ProductRepository(db).inventory_value() == Decimal("107.5")

    @pytest.mark.asyncio
    async def test_count_by_category(self, db, products):
        products[0].is_active = False
        await db.commit()

        assert await ProductRepository(db).count_by_category(products[0].category_id) == 3
        assert await ProductRepository(db).count_by_category(9999) == 0

    @pytest.mark.asyncio
    async def test_find_existing_ids(self, db, products):
        ids = [products[0].id, 9999]
        assert await ProductRepository(db).find_existing_ids(ids) == {products[0].id}
        assert await ProductRepository(db).find_existing_ids([]) == set()


class TestInventoryTransactionRepository:
    @pytest.mark.asyncio
    async def test_append_and_query(self, db, products, admin_user):
        repo = InventoryTransactionRepository(db)
        widget, gadget = products[0], products[1]
        await repo.append(widget.id, TransactionType.STOCK_IN, 5, "PO-10001", admin_user.id,
                          timestamp=datetime(2026, 3, 1))
        await repo.append(gadget.id, TransactionType.STOCK_OUT, 2, None, admin_user.id,
                          timestamp=datetime(2026, 3, 2))
        await repo.append(widget.id, "STOCK_OUT", 1, None, admin_user.id,
                          timestamp=datetime(2026, 3, 3))
        await db.commit()

        recent = await repo.recent(limit=2)
        assert [e.transaction_date.day for e in recent] == [3, 2]

        sales = await repo.recent(TransactionType.STOCK_OUT)
        assert len(sales) == 2

        assert [e.quantity for e in await repo.find_by_reference("PO-10001")] == [5]

        start, end = datetime(2026, 3, 2), datetime(2026, 3, 3)
        # end is exclusive
        assert await repo.count_between(TransactionType.STOCK_OUT, start, end) == 1
        # 2 * 40.00
        assert await repo.revenue_between(start, end) == Decimal("80")
        assert await repo.revenue_between(datetime(2026, 1, 1), datetime(2026, 1, 2)) == Decimal("0")
