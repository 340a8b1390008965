"""HTTP-level tests for the order, customer and invoice endpoints."""

from factories import order_payload


def _create(client, **overrides) -> dict:
    response = client.post("/api/new-customer", json=order_payload(**overrides))
    assert response.status_code == 200, response.text
    return response.json()


class TestOrderEndpoints:

    def test_new_customer_order(self, client):
        body = _create(client)
        assert body["success"] is True
        assert body["total"] == 450.0
        assert isinstance(body["customerId"], int)
        assert isinstance(body["orderId"], int)

    def test_repeat_phone_returns_same_customer(self, client):
        first = _create(client)
        second = _create(client, address="Y", items=[{"product": "Mat", "price": 30, "quantity": 1}])

        assert second["customerId"] == first["customerId"]
        assert second["orderId"] != first["orderId"]

        details = client.get("/api/customer-details", params={"id": first["customerId"]}).json()
        assert details["customer"]["address"] == "Y"
        assert [d["order"]["total"] for d in details["orderDetails"]] == [30.0, 450.0]

    def test_missing_fields(self, client):
        response = client.post("/api/new-customer", json=order_payload(address=""))
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "missing required fields"}

    def test_no_items(self, client):
        response = client.post("/api/new-customer", json=order_payload(items=[]))
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "no items"}

    def test_malformed_item_rejected_before_persistence(self, client):
        response = client.post("/api/new-customer", json=order_payload(
            items=[{"product": "Chair", "price": "lots", "quantity": 1}]
        ))
        assert response.status_code == 422
        assert client.get("/api/customers").json()["rows"] == []

    def test_generate_bill(self, client):
        first = _create(client)
        response = client.post("/api/generate-bill", json=order_payload(name="Other", address="Y"))
        body = response.json()

        assert body["success"] is True
        assert body["customerId"] == first["customerId"]
        rows = client.get("/api/customers", params={"q": "111"}).json()["rows"]
        assert rows[0]["name"] == "A"

    def test_order_full_details(self, client):
        created = _create(client, alt_phone="222", rent_start="2024-05-01", rent_end="2024-05-03")
        body = client.get("/api/order-full-details", params={"orderId": created["orderId"]}).json()

        assert body["success"] is True
        assert body["order"]["cname"] == "A"
        assert body["order"]["caltphone"] == "222"
        assert body["order"]["rent_start"] == "2024-05-01"
        assert [(i["product"], i["line_total"]) for i in body["items"]] == [("Chair", 200.0), ("Table", 250.0)]

    def test_order_full_details_unknown(self, client):
        response = client.get("/api/order-full-details", params={"orderId": 404})
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestCustomerEndpoints:

    def test_search(self, client):
        _create(client, name="Ravi", phone="9000011111")
        _create(client, name="Suma", phone="8000022222")

        rows = client.get("/api/customers", params={"q": "suma"}).json()["rows"]
        assert [r["phone"] for r in rows] == ["8000022222"]
        assert len(client.get("/api/customers").json()["rows"]) == 2

    def test_customer_orders(self, client):
        first = _create(client, order_date="2024-01-10")
        _create(client, order_date="2024-02-10")

        rows = client.get("/api/customer-orders", params={"id": first["customerId"]}).json()["rows"]
        assert [r["order_date"] for r in rows] == ["2024-02-10", "2024-01-10"]

    def test_unknown_customer(self, client):
        response = client.get("/api/customer-details", params={"id": 77})
        assert response.status_code == 404


class TestInvoiceEndpoints:

    def test_invoice_pdf_inline(self, client):
        created = _create(client)
        response = client.get(f"/api/invoice/{created['orderId']}")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == "inline; filename=bill.pdf"
        assert response.content.startswith(b"%PDF")

    def test_invoice_not_found(self, client):
        response = client.get("/api/invoice/999")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "order not found"}

    def test_batch(self, client):
        first = _create(client)
        second = _create(client, phone="222")

        response = client.post("/api/invoices/batch", json={"order_ids": [first["orderId"], second["orderId"]]})
        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")

    def test_batch_nothing_found(self, client):
        response = client.post("/api/invoices/batch", json={"order_ids": [999]})
        assert response.status_code == 404


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
