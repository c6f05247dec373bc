"""
API tests for the pricing endpoints.
"""
from datetime import date

from conftest import add_entry

HEADER = "SupplierId,Sku,ValidFrom,ValidTo,Currency,PricePerUom,MinQty"


def upload(client, content: str, filename: str = "prices.csv"):
    return client.post(
        "/api/pricing/prices/upload-csv",
        files={"file": (filename, content.encode("utf-8"), "text/csv")},
    )


class TestBestPriceEndpoint:
    """Test GET /api/pricing/best."""

    def test_returns_cheapest_offer(self, client, db, suppliers):
        add_entry(db, suppliers["acme"], price="30.00", min_qty=1)
        add_entry(db, suppliers["delta"], price="25.00", min_qty=1)
        add_entry(db, suppliers["euro"], price="28.00", min_qty=1)

        response = client.get(
            "/api/pricing/best",
            params={"sku": "SKU-1001", "qty": 10, "currency": "USD", "date": "2025-03-01"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["supplier_id"] == suppliers["delta"].id
        assert data["supplier_name"] == "DeltaChem Ltd"
        assert data["unit_price"] == "25.0000"
        assert data["total"] == "250.00"
        assert data["currency"] == "USD"
        assert data["quantity"] == 10
        assert data["reason"] == "Lowest unit price (then Preferred, LeadTime, SupplierId)"

    def test_converts_to_requested_currency(self, client, db, suppliers):
        # Default rates: 1 EUR = 1.09 USD
        add_entry(db, suppliers["acme"], currency="EUR", price="20.00")

        response = client.get(
            "/api/pricing/best",
            params={"sku": "SKU-1001", "qty": 10, "currency": "USD", "date": "2025-03-01"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["unit_price"] == "21.8000"
        assert data["total"] == "218.00"

    def test_minimum_quantity_respected(self, client, db, suppliers):
        add_entry(db, suppliers["acme"], price="10.00", min_qty=100)
        add_entry(db, suppliers["delta"], price="12.00", min_qty=1)

        response = client.get(
            "/api/pricing/best",
            params={"sku": "SKU-1001", "qty": 10, "currency": "USD", "date": "2025-03-01"},
        )
        assert response.json()["supplier_id"] == suppliers["delta"].id

    def test_no_offer_returns_404(self, client, db, suppliers):
        add_entry(db, suppliers["acme"], valid_from=date(2025, 1, 1), valid_to=date(2025, 1, 31))

        response = client.get(
            "/api/pricing/best",
            params={"sku": "SKU-1001", "qty": 1, "currency": "USD", "date": "2025-03-01"},
        )
        assert response.status_code == 404

    def test_invalid_date_returns_400(self, client, db):
        response = client.get(
            "/api/pricing/best",
            params={"sku": "SKU-1001", "qty": 1, "currency": "USD", "date": "03/01/2025"},
        )
        assert response.status_code == 400
        assert "date" in response.json()["detail"]

    def test_unsupported_currency_returns_400(self, client, db):
        response = client.get(
            "/api/pricing/best",
            params={"sku": "SKU-1001", "qty": 1, "currency": "GBP", "date": "2025-03-01"},
        )
        assert response.status_code == 400
        assert "GBP" in response.json()["detail"]

    def test_zero_quantity_returns_400(self, client, db):
        response = client.get(
            "/api/pricing/best",
            params={"sku": "SKU-1001", "qty": 0, "currency": "USD", "date": "2025-03-01"},
        )
        assert response.status_code == 400

    def test_quantity_above_int32_returns_400(self, client, db):
        response = client.get(
            "/api/pricing/best",
            params={"sku": "SKU-1001", "qty": 99999999999, "currency": "USD", "date": "2025-03-01"},
        )
        assert response.status_code == 400
        assert "2147483647" in response.json()["detail"]


class TestListPricesEndpoint:
    """Test GET /api/pricing/prices."""

    def test_filters_and_paging(self, client, db, suppliers):
        for supplier in suppliers.values():
            add_entry(db, supplier, sku="SKU-1001")
        add_entry(db, suppliers["acme"], sku="SKU-1002", currency="EUR")

        response = client.get("/api/pricing/prices", params={"sku": "SKU-1001", "page": 1, "page_size": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["total_count"] == 3
        assert data["total_pages"] == 2
        assert len(data["items"]) == 2
        assert data["has_next_page"] is True
        assert data["has_previous_page"] is False
        assert all(item["sku"] == "SKU-1001" for item in data["items"])

    def test_currency_filter(self, client, db, suppliers):
        add_entry(db, suppliers["acme"], sku="SKU-1001", currency="USD")
        add_entry(db, suppliers["acme"], sku="SKU-1002", currency="EUR")

        data = client.get("/api/pricing/prices", params={"currency": "eur"}).json()
        assert [item["sku"] for item in data["items"]] == ["SKU-1002"]

    def test_page_size_clamped(self, client, db, suppliers):
        data = client.get("/api/pricing/prices", params={"page": 0, "page_size": 1000}).json()
        assert data["page"] == 1
        assert data["page_size"] == 100

    def test_invalid_valid_on_returns_400(self, client, db):
        response = client.get("/api/pricing/prices", params={"valid_on": "yesterday"})
        assert response.status_code == 400


class TestUploadEndpoint:
    """Test POST /api/pricing/prices/upload-csv."""

    def test_successful_upload(self, client, db, suppliers, products):
        acme = suppliers["acme"]
        content = "\n".join([
            HEADER,
            f"{acme.id},SKU-1001,2025-01-01,2025-06-30,USD,25.50,10",
            f"{acme.id},SKU-1002,2025-01-01,,EUR,18.75,5",
        ])
        response = upload(client, content)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["importedCount"] == 2
        assert data["summary"]["ValidRows"] == 2

    def test_overlapping_rows_return_400(self, client, db, suppliers, products):
        acme = suppliers["acme"]
        content = "\n".join([
            HEADER,
            f"{acme.id},SKU-1001,2025-01-01,2025-06-30,USD,25.50,10",
            f"{acme.id},SKU-1001,2025-03-01,2025-12-31,USD,24.00,10",
        ])
        response = upload(client, content)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["importedCount"] == 0
        assert data["summary"]["InvalidRows"] == 2
        assert data["summary"]["OverlapErrorsCount"] == 1
        assert [e["rowNumber"] for e in data["validationDetails"]["errors"]] == [2, 3]
        assert data["validationDetails"]["overlapErrors"][0]["row1"] == 2
        assert data["validationDetails"]["overlapErrors"][0]["row2"] == 3

    def test_header_only_file_returns_400_with_global_error(self, client, db):
        response = upload(client, HEADER + "\n")

        assert response.status_code == 400
        assert response.json()["validationDetails"]["globalErrors"] == [
            "CSV file is empty or contains no valid data rows."
        ]

    def test_non_csv_rejected(self, client, db):
        response = upload(client, HEADER, filename="prices.xlsx")
        assert response.status_code == 400

    def test_empty_file_rejected(self, client, db):
        response = upload(client, "")
        assert response.status_code == 400

    def test_csv_template(self, client):
        response = client.get("/api/pricing/prices/csv-template")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.splitlines()[0] == HEADER


class TestReferenceDataEndpoints:
    """Test supplier and product endpoints."""

    def test_create_and_get_supplier(self, client, db):
        response = client.post(
            "/api/suppliers",
            json={"name": "Alpine Chemicals", "country": "CH", "preferred": True, "lead_time_days": 4},
        )
        assert response.status_code == 201
        supplier_id = response.json()["id"]

        response = client.get(f"/api/suppliers/{supplier_id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Alpine Chemicals"
        assert response.json()["preferred"] is True

    def test_negative_lead_time_rejected(self, client, db):
        response = client.post("/api/suppliers", json={"name": "X", "lead_time_days": -1})
        assert response.status_code == 422

    def test_oversized_lead_time_rejected(self, client, db):
        response = client.post("/api/suppliers", json={"name": "X", "lead_time_days": 2147483648})
        assert response.status_code == 422

    def test_missing_supplier_returns_404(self, client, db):
        assert client.get("/api/suppliers/12345").status_code == 404

    def test_list_suppliers(self, client, db, suppliers):
        data = client.get("/api/suppliers").json()
        assert data["total"] == 3
        assert len(data["items"]) == 3

    def test_create_product_normalizes_sku(self, client, db):
        response = client.post("/api/products", json={"sku": "sku-2001", "name": "Resin", "hazard_class": "Toxic"})

        assert response.status_code == 201
        assert response.json()["sku"] == "SKU-2001"
        assert response.json()["is_hazardous"] is True

        response = client.get("/api/products/sku-2001")
        assert response.status_code == 200
        assert response.json()["name"] == "Resin"

    def test_duplicate_product_returns_409(self, client, db, products):
        response = client.post("/api/products", json={"sku": "SKU-1001", "name": "Duplicate"})
        assert response.status_code == 409

    def test_invalid_sku_returns_400(self, client, db):
        response = client.post("/api/products", json={"sku": "BAD SKU", "name": "Broken"})
        assert response.status_code == 400


class TestHealthEndpoints:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_api_health_checks_database(self, client, db):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["services"]["database"]["status"] == "ok"
