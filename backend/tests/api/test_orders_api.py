"""Purchase order endpoints over HTTP."""

from datetime import datetime

import pytest

from db_helpers import ledger_rows, product_quantity


async def create(client, headers, supplier_id, items=(), **fields):
    body = {"supplierId": supplier_id, "items": list(items), **fields}
    return await client.post("/api/orders", json=body, headers=headers)


def assert_error(response, status_code, message=None):
    assert response.status_code == status_code
    body = response.json()
    assert set(body) == {"timestamp", "message"}
    datetime.fromisoformat(body["timestamp"])
    if message is not None:
        assert body["message"] == message


class TestCreateAndRead:
    @pytest.mark.asyncio
    async def test_create_returns_camel_case_order(self, client, staff_headers, ids):
        response = await create(
            client,
            staff_headers,
            ids["supplier"],
            [{"productId": ids["p1"], "quantity": 5, "unitPrice": 10.0}],
            orderDate="2026-03-14",
            totalAmount=50.0,
        )

        assert response.status_code == 201
        order = response.json()
        assert order["orderNumber"] == "PO-10001"
        assert order["status"] == "PENDING"
        assert order["orderDate"] == "14-03-2026"
        assert order["supplierName"] == "Acme Supplies"
        assert order["createdByName"] == "alice"
        assert order["totalAmount"] == 50.0
        assert order["itemCount"] == 1
        item = order["items"][0]
        assert (item["productName"], item["quantity"], item["receivedQuantity"], item["total"]) == ("Widget", 5, 0, 50.0)

    @pytest.mark.asyncio
    async def test_get_by_id(self, client, staff_headers, ids):
        created = (await create(client, staff_headers, ids["supplier"])).json()

        response = await client.get(f"/api/orders/{created['id']}", headers=staff_headers)

        assert response.status_code == 200
        assert response.json()["orderNumber"] == created["orderNumber"]

    @pytest.mark.asyncio
    async def test_unknown_order_is_404(self, client, staff_headers):
        response = await client.get("/api/orders/999", headers=staff_headers)
        assert_error(response, 404, "Purchase order not found with id: 999")

    @pytest.mark.asyncio
    async def test_unknown_product_is_404(self, client, staff_headers, ids):
        response = await create(client, staff_headers, ids["supplier"], [{"productId": 9999, "quantity": 1}])
        assert_error(response, 404, "Product not found with id: 9999")

    @pytest.mark.asyncio
    async def test_missing_supplier_id_is_400(self, client, staff_headers):
        response = await client.post("/api/orders", json={"items": []}, headers=staff_headers)
        assert_error(response, 400)
        assert "supplierId" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_item_without_product_is_400(self, client, staff_headers, ids):
        response = await create(client, staff_headers, ids["supplier"], [{"quantity": 2}])
        assert_error(response, 400, "Product information is missing for an order item")

    @pytest.mark.asyncio
    async def test_requires_token(self, client):
        response = await client.get("/api/orders")
        assert_error(response, 401)
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_rejects_garbage_token(self, client):
        response = await client.get("/api/orders", headers={"Authorization": "Bearer nope"})
        assert_error(response, 401, "Could not validate credentials")


class TestList:
    @pytest.mark.asyncio
    async def test_filter_search_and_page(self, client, staff_headers, other_staff_headers, ids):
        for headers in (staff_headers, staff_headers, other_staff_headers):
            await create(client, headers, ids["supplier"])

        response = await client.get(
            "/api/orders",
            params={"search": "alice", "sortBy": "orderNumber", "sortDirection": "asc", "size": 1},
            headers=staff_headers,
        )

        assert response.status_code == 200
        page = response.json()
        assert page["total"] == 2
        assert page["totalPages"] == 2
        assert [o["orderNumber"] for o in page["items"]] == ["PO-10001"]

    @pytest.mark.asyncio
    async def test_status_filter(self, client, staff_headers, ids):
        first = (await create(client, staff_headers, ids["supplier"])).json()
        await create(client, staff_headers, ids["supplier"])
        await client.patch(f"/api/orders/{first['id']}/status", json={"status": "cancelled"}, headers=staff_headers)

        response = await client.get("/api/orders", params={"status": "cancelled"}, headers=staff_headers)

        assert [o["id"] for o in response.json()["items"]] == [first["id"]]

    @pytest.mark.parametrize(
        "params",
        [{"sortBy": "supplier.name"}, {"sortDirection": "up"}, {"size": 500}, {"page": -1}],
    )
    @pytest.mark.asyncio
    async def test_bad_listing_parameters(self, client, staff_headers, params):
        response = await client.get("/api/orders", params=params, headers=staff_headers)
        assert_error(response, 400)


class TestStatus:
    @pytest.mark.asyncio
    async def test_delivery_receives_stock(self, client, db, admin_headers, ids):
        order = (await create(client, admin_headers, ids["supplier"], [{"productId": ids["p1"], "quantity": 5}])).json()

        processing = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "PROCESSING"}, headers=admin_headers)
        delivered = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "DELIVERED"}, headers=admin_headers)

        assert processing.json()["status"] == "PROCESSING"
        assert delivered.status_code == 200
        assert delivered.json()["status"] == "DELIVERED"
        assert delivered.json()["items"][0]["receivedQuantity"] == 5
        assert await product_quantity(db, ids["p1"]) == 15
        assert len(await ledger_rows(db, order["orderNumber"])) == 1

    @pytest.mark.asyncio
    async def test_complete_endpoint(self, client, db, staff_headers, ids):
        order = (await create(client, staff_headers, ids["supplier"], [{"productId": ids["p2"], "quantity": 3}])).json()
        await client.patch(f"/api/orders/{order['id']}/status", json={"status": "processing"}, headers=staff_headers)

        response = await client.post(f"/api/orders/{order['id']}/complete", headers=staff_headers)

        assert response.json()["status"] == "DELIVERED"
        assert await product_quantity(db, ids["p2"]) == 3

    @pytest.mark.asyncio
    async def test_pending_cannot_be_delivered(self, client, db, staff_headers, ids):
        order = (await create(client, staff_headers, ids["supplier"], [{"productId": ids["p1"], "quantity": 5}])).json()

        response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "DELIVERED"}, headers=staff_headers)

        assert_error(response, 400, "Only orders in PROCESSING status can be completed. Current status: PENDING")
        assert await product_quantity(db, ids["p1"]) == 10

    @pytest.mark.asyncio
    async def test_unknown_status_is_400(self, client, staff_headers, ids):
        order = (await create(client, staff_headers, ids["supplier"])).json()
        response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "lost"}, headers=staff_headers)
        assert_error(response, 400, "Invalid status: LOST")

    @pytest.mark.asyncio
    async def test_cancel_appends_note(self, client, staff_headers, ids):
        order = (await create(client, staff_headers, ids["supplier"], notes="foo")).json()

        response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "CANCELLED"}, headers=staff_headers)

        assert response.json()["notes"].startswith("foo\nOrder cancelled on ")


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_owner_updates_pending_order(self, client, staff_headers, ids):
        order = (await create(client, staff_headers, ids["supplier"], [{"productId": ids["p1"], "quantity": 1}])).json()
        item_id = order["items"][0]["id"]

        response = await client.put(
            f"/api/orders/{order['id']}",
            json={
                "supplierId": ids["supplier"],
                "items": [
                    {"productId": ids["p1"], "quantity": 3, "unitPrice": 2},
                    {"productId": ids["p3"], "quantity": 1, "unitPrice": 5},
                ],
            },
            headers=staff_headers,
        )

        assert response.status_code == 200
        items = response.json()["items"]
        assert [i["productId"] for i in items] == [ids["p1"], ids["p3"]]
        assert items[0]["id"] == item_id
        assert items[0]["quantity"] == 3

    @pytest.mark.asyncio
    async def test_other_staff_cannot_update(self, client, staff_headers, other_staff_headers, ids):
        order = (await create(client, staff_headers, ids["supplier"])).json()

        response = await client.put(
            f"/api/orders/{order['id']}", json={"supplierId": ids["supplier"]}, headers=other_staff_headers
        )

        assert_error(response, 403, "You don't have permission to edit this order")

    @pytest.mark.asyncio
    async def test_admin_updates_someone_elses_order(self, client, staff_headers, admin_headers, ids):
        order = (await create(client, staff_headers, ids["supplier"])).json()

        response = await client.put(
            f"/api/orders/{order['id']}", json={"supplierId": ids["supplier"], "notes": "checked"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "checked"
        assert response.json()["createdByName"] == "alice"

    @pytest.mark.asyncio
    async def test_delete(self, client, staff_headers, ids):
        order = (await create(client, staff_headers, ids["supplier"], [{"productId": ids["p1"], "quantity": 1}])).json()

        response = await client.delete(f"/api/orders/{order['id']}", headers=staff_headers)

        assert response.status_code == 204
        assert (await client.get(f"/api/orders/{order['id']}", headers=staff_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_delivered_order_cannot_be_deleted(self, client, admin_headers, ids):
        order = (await create(client, admin_headers, ids["supplier"])).json()
        await client.patch(f"/api/orders/{order['id']}/status", json={"status": "PROCESSING"}, headers=admin_headers)
        await client.post(f"/api/orders/{order['id']}/complete", headers=admin_headers)

        response = await client.delete(f"/api/orders/{order['id']}", headers=admin_headers)

        assert_error(response, 400, "Delivered orders cannot be deleted")
