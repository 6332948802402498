"""HTTP surface: auth, envelopes, CRUD and the analysis endpoints."""

import io
import json
from datetime import datetime, timedelta

from openpyxl import load_workbook

from conftest import PASSWORD

PRODUCT = {
    "name": "Sensor",
    "category": "Electronics",
    "supplier": "Acme Corp",
    "origin": "Shenzhen, China",
    "unitCost": 12.5,
    "leadTime": 14,
    "minOrderQuantity": 10,
    "maxOrderQuantity": 500,
    "riskLevel": "medium",
    "certifications": ["ISO 9001"],
}

SUPPLIER = {
    "name": "Northwind Parts",
    "location": "Hamburg",
    "country": "Germany",
    "contactPerson": "Anna Berg",
    "email": "anna@northwind-parts.com",
    "phone": "+49 40 1234",
    "rating": 4.5,
}


class TestPublic:

    def test_root_and_health(self, client):
        assert client.get("/").json() == "Supply Chain Risk Monitor API"
        body = client.get("/health").json()
        assert body["status"] == "ok"

    def test_protected_route_requires_token(self, client):
        res = client.get("/products")
        assert res.status_code == 401
        assert res.json() == {"success": False, "error": "Authentication required"}

    def test_garbage_token_rejected(self, client):
        res = client.get("/products", headers={"Authorization": "Bearer not-a-jwt"})
        assert res.status_code == 401


class TestAuth:

    def test_register_then_me(self, client):
        res = client.post(
            "/auth/register",
            json={"name": "Sam", "email": "Sam@Freight-Co.com", "password": "s3cret-pass"},
        )
        assert res.status_code == 201
        data = res.json()["data"]
        assert data["user"]["email"] == "sam@freight-co.com"
        assert "passwordHash" not in data["user"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.json()["data"]["name"] == "Sam"

    def test_duplicate_register_conflicts(self, client):
        payload = {"name": "Sam", "email": "sam@freight-co.com", "password": "s3cret-pass"}
        client.post("/auth/register", json=payload)
        res = client.post("/auth/register", json=payload)
        assert res.status_code == 409
        assert res.json()["success"] is False

    def test_short_password_rejected(self, client):
        res = client.post(
            "/auth/register",
            json={"name": "Sam", "email": "sam@freight-co.com", "password": "short"},
        )
        assert res.status_code == 400
        assert res.json()["error"].startswith("password:")

    def test_login_with_password(self, client, user):
        res = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
        assert res.status_code == 200
        token = res.json()["data"]["token"]
        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["data"]["email"] == "planner@acme-logistics.com"

    def test_login_without_password_is_invalid(self, client, user):
        res = client.post("/auth/login", json={"email": user.email})
        assert res.status_code == 400

    def test_wrong_password_cannot_read_data(self, client, user, seeded):
        res = client.post("/auth/login", json={"email": user.email, "password": "guessing-1"})
        assert res.status_code == 401
        assert res.json() == {"success": False, "error": "Authentication required"}
        assert "token" not in res.text

    def test_unknown_email_is_not_created(self, client, db_session):
        from app.models.user import User

        res = client.post(
            "/auth/login", json={"email": "new.planner@freight-co.com", "password": PASSWORD}
        )
        assert res.status_code == 401
        assert db_session.query(User).filter(User.email == "new.planner@freight-co.com").count() == 0


class TestProducts:

    def test_crud_cycle(self, client, auth_headers):
        created = client.post("/products", json=PRODUCT, headers=auth_headers)
        assert created.status_code == 201
        body = created.json()
        assert body["success"] is True
        assert body["message"] == "Product created successfully"
        pid = body["data"]["id"]

        listed = client.get("/products", headers=auth_headers).json()["data"]
        assert [p["id"] for p in listed] == [pid]

        updated = client.put(f"/products/{pid}", json={"leadTime": 21}, headers=auth_headers)
        assert updated.json()["data"]["leadTime"] == 21

        assert client.delete(f"/products/{pid}", headers=auth_headers).status_code == 200
        missing = client.get(f"/products/{pid}", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json()["error"] == "Product not found"

    def test_order_bounds_rejected(self, client, auth_headers):
        bad = dict(PRODUCT, minOrderQuantity=500, maxOrderQuantity=10)
        res = client.post("/products", json=bad, headers=auth_headers)
        assert res.status_code == 400
        assert "Maximum order quantity" in res.json()["error"]

    def test_update_cannot_invert_bounds(self, client, auth_headers):
        pid = client.post("/products", json=PRODUCT, headers=auth_headers).json()["data"]["id"]
        res = client.put(
            f"/products/{pid}", json={"minOrderQuantity": 1000}, headers=auth_headers
        )
        assert res.status_code == 400

    def test_missing_field_names_the_field(self, client, auth_headers):
        res = client.post(
            "/products", json={k: v for k, v in PRODUCT.items() if k != "origin"}, headers=auth_headers
        )
        assert res.status_code == 400
        assert res.json()["error"].startswith("origin:")


class TestSuppliers:

    def test_create_and_list(self, client, auth_headers):
        res = client.post("/suppliers", json=SUPPLIER, headers=auth_headers)
        assert res.status_code == 201
        assert res.json()["data"]["status"] == "pending"
        assert len(client.get("/suppliers", headers=auth_headers).json()["data"]) == 1

    def test_invalid_email(self, client, auth_headers):
        res = client.post(
            "/suppliers", json=dict(SUPPLIER, email="not-an-email"), headers=auth_headers
        )
        assert res.status_code == 400


class TestShipments:

    def test_create_embeds_product_summary(self, client, auth_headers, seeded):
        product_id = seeded["products"][0].id
        payload = {
            "productId": product_id,
            "origin": "Ningbo, China",
            "destination": "Felixstowe, UK",
            "expectedDelivery": (datetime.utcnow() + timedelta(days=20)).isoformat(),
            "quantity": 4,
            "totalValue": 1200,
            "shippingMethod": "Sea",
            "carrier": "Maersk Line",
        }
        res = client.post("/shipments", json=payload, headers=auth_headers)
        assert res.status_code == 201
        data = res.json()["data"]
        assert data["product"]["name"] == "Widget"
        assert data["status"] == "On-Time"

    def test_unknown_product_rejected(self, client, auth_headers):
        payload = {
            "productId": 9999,
            "origin": "A",
            "destination": "B",
            "expectedDelivery": "2025-01-01T00:00:00Z",
            "quantity": 1,
            "totalValue": 1,
            "shippingMethod": "Air",
            "carrier": "DHL",
        }
        res = client.post("/shipments", json=payload, headers=auth_headers)
        assert res.status_code == 400

    def test_mark_delivered_sets_actual_delivery(self, client, auth_headers, seeded):
        sid = seeded["shipments"][1].id
        res = client.put(f"/shipments/{sid}", json={"status": "Delivered"}, headers=auth_headers)
        assert res.json()["data"]["actualDelivery"] is not None

    def test_other_users_rows_are_hidden(self, client, seeded):
        other = client.post(
            "/auth/register",
            json={"name": "Other", "email": "other@freight-co.com", "password": "other-pass-1"},
        ).json()
        headers = {"Authorization": f"Bearer {other['data']['token']}"}
        assert client.get("/shipments", headers=headers).json()["data"] == []
        sid = seeded["shipments"][0].id
        assert client.get(f"/shipments/{sid}", headers=headers).status_code == 404


class TestAnalysisEndpoints:

    def test_alerts(self, client, auth_headers, seeded):
        data = client.get("/alerts", headers=auth_headers).json()["data"]
        # the on-time Taipei shipment still crosses a border
        assert data["summary"] == {"total": 3, "high": 2, "medium": 1, "low": 0}
        assert [a["status"] for a in data["alerts"]][-1] == "On-Time"

    def test_analytics_and_export(self, client, auth_headers, seeded):
        data = client.get("/analytics?timeRange=7d", headers=auth_headers).json()["data"]
        assert data["timeRange"] == "7d"
        assert data["keyMetrics"]["totalShipments"] == 3

        res = client.get("/analytics/export", headers=auth_headers)
        assert res.status_code == 200
        assert res.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "analytics-report-" in res.headers["content-disposition"]
        wb = load_workbook(io.BytesIO(res.content))
        assert "Key Metrics" in wb.sheetnames

    def test_dashboard_stats(self, client, auth_headers, seeded):
        data = client.get("/dashboard-stats", headers=auth_headers).json()["data"]
        assert data["totalShipments"] == 3
        assert data["delayedShipments"] == 1
        assert data["inTransitShipments"] == 1
        assert data["highRiskSuppliers"] == 1
        assert data["totalValue"] == 30000

    def test_vulnerabilities(self, client, auth_headers, seeded):
        data = client.get("/vulnerabilities", headers=auth_headers).json()["data"]
        assert data["summary"]["totalVulnerabilities"] == 6
        assert {v["nodeType"] for v in data["vulnerabilities"]} == {
            "shipment",
            "product",
            "supplier",
        }
        assert "networkAnalysis" in data


class TestSimulations:

    def test_catalog(self, client, auth_headers):
        data = client.get("/simulations", headers=auth_headers).json()["data"]
        assert data["totalScenarios"] == 5

    def test_run_predefined(self, client, auth_headers, seeded, fake_llm):
        res = client.post(
            "/simulations", json={"scenarioId": "scenario_002"}, headers=auth_headers
        )
        assert res.status_code == 200
        data = res.json()["data"]
        assert len(data["affectedShipments"]) == 2
        assert len(data["timeline"]) == 5

    def test_requires_scenario(self, client, auth_headers):
        res = client.post("/simulations", json={}, headers=auth_headers)
        assert res.status_code == 400

    def test_unknown_scenario(self, client, auth_headers):
        res = client.post(
            "/simulations", json={"scenarioId": "scenario_999"}, headers=auth_headers
        )
        assert res.status_code == 404

    def test_custom_scenario(self, client, auth_headers, seeded):
        res = client.post(
            "/simulations",
            json={"customScenario": {"affectedElements": ["Hamburg"], "severity": "high"}},
            headers=auth_headers,
        )
        data = res.json()["data"]
        assert data["scenarioId"].startswith("custom_")
        assert len(data["affectedShipments"]) == 1

    def test_compare(self, client, auth_headers, seeded):
        res = client.post(
            "/simulations/compare",
            json={"scenarioIds": ["scenario_001", "scenario_002"]},
            headers=auth_headers,
        )
        comparison = res.json()["data"]["comparison"]
        assert comparison["worstCase"]["scenarioId"] == "scenario_002"


class TestEvents:

    def test_list_has_statistics(self, client, auth_headers):
        data = client.get("/events", headers=auth_headers).json()["data"]
        assert data["statistics"]["totalEvents"] == 4

    def test_ingest(self, client, auth_headers, fake_llm):
        fake_llm.replies.append(
            json.dumps(
                {
                    "type": "port_closure",
                    "severity": "critical",
                    "location": "Port of Santos",
                    "title": "Santos closed",
                    "durationDays": 3,
                }
            )
        )
        res = client.post("/events", json={"newsText": "Santos shut"}, headers=auth_headers)
        assert res.status_code == 201
        assert res.json()["data"]["location"] == "Port of Santos"
        stats = client.get("/events", headers=auth_headers).json()["data"]["statistics"]
        assert stats["totalEvents"] == 5

    def test_ingest_rejected(self, client, auth_headers, fake_llm):
        fake_llm.replies.append("null")
        res = client.post("/events", json={"newsText": "Weather is nice"}, headers=auth_headers)
        assert res.status_code == 400
        assert res.json()["error"] == "Failed to process news event"

    def test_search(self, client, auth_headers):
        res = client.get("/events/search?type=strike", headers=auth_headers)
        assert [e["id"] for e in res.json()["data"]] == ["event_003"]
        assert client.get("/events/search", headers=auth_headers).status_code == 400

    def test_scan(self, client, auth_headers, fake_search):
        fake_search.snippets = ["Nothing relevant"]
        res = client.post("/events/scan", json={"query": "port strike"}, headers=auth_headers)
        assert res.status_code == 201
        assert res.json()["data"] == []
        assert fake_search.queries == ["port strike"]

    def test_impact(self, client, auth_headers, seeded):
        res = client.get("/events/event_002/impact", headers=auth_headers)
        data = res.json()["data"]
        assert len(data["affectedShipments"]) == 2
        assert data["delayDays"] == 9.8
        assert data["additionalCost"] == 3900.0

    def test_impact_unknown_event(self, client, auth_headers):
        assert client.get("/events/nope/impact", headers=auth_headers).status_code == 404


class TestCompanyAndNetwork:

    def test_company_upsert(self, client, auth_headers):
        assert client.get("/company", headers=auth_headers).status_code == 404
        first = client.post("/company", json={"name": "Freight Co"}, headers=auth_headers)
        assert first.status_code == 201
        assert first.json()["data"]["isProfileComplete"] is True
        second = client.post("/company", json={"name": "Freight Co Ltd"}, headers=auth_headers)
        assert second.status_code == 200
        assert client.get("/company", headers=auth_headers).json()["data"]["name"] == "Freight Co Ltd"

    def test_network_nodes(self, client, auth_headers):
        node = {"code": "WH-1", "name": "Central", "location": "Rotterdam", "capacity": 1000}
        res = client.post("/supply-chain/warehouses", json=node, headers=auth_headers)
        assert res.status_code == 201
        listed = client.get("/supply-chain/warehouses", headers=auth_headers).json()["data"]
        assert [n["code"] for n in listed] == ["WH-1"]

    def test_network_node_validation(self, client, auth_headers):
        res = client.post(
            "/supply-chain/retailers", json={"code": "R1", "name": "Shop"}, headers=auth_headers
        )
        assert res.status_code == 400
        assert client.get("/supply-chain/ports", headers=auth_headers).status_code == 404


class TestUploads:

    CSV = (
        "Name,Category,Supplier Name,Origin,Unit Cost,Lead Time,"
        "Min Order Quantity,Max Order Quantity,Risk Level,Certifications\n"
        "Valve,Hardware,Acme Corp,Ningbo,3.5,12,10,100,low,\"ISO 9001, CE\"\n"
        "Bolt,Hardware,Acme Corp,Ningbo,0.2,5,100,10,low,\n"
    )

    def test_csv_products(self, client, auth_headers):
        res = client.post(
            "/data-upload",
            files={"file": ("products.csv", self.CSV.encode(), "text/csv")},
            data={"dataType": "products"},
            headers=auth_headers,
        )
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["stored"] == 1
        assert data["errors"][0].startswith("Row 3")
        assert data["log"]["status"] == "Success"

        products = client.get("/products", headers=auth_headers).json()["data"]
        assert products[0]["certifications"] == ["ISO 9001", "CE"]

        logs = client.get("/upload-logs", headers=auth_headers).json()["data"]
        assert logs[0]["fileName"] == "products.csv"
        assert logs[0]["rowCount"] == 1

    def test_rejects_other_extensions(self, client, auth_headers):
        res = client.post(
            "/data-upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            data={"dataType": "products"},
            headers=auth_headers,
        )
        assert res.status_code == 400

    def test_unknown_data_type(self, client, auth_headers):
        res = client.post(
            "/data-upload",
            files={"file": ("x.csv", self.CSV.encode(), "text/csv")},
            data={"dataType": "invoices"},
            headers=auth_headers,
        )
        assert res.status_code == 400
        assert "Unknown data type" in res.json()["error"]

    def test_oversized_file(self, client, auth_headers, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "upload_max_bytes", 16)
        res = client.post(
            "/data-upload",
            files={"file": ("products.csv", self.CSV.encode(), "text/csv")},
            data={"dataType": "products"},
            headers=auth_headers,
        )
        assert res.status_code == 400
        assert "upload limit" in res.json()["error"]

    def test_undecodable_csv_is_a_bad_request(self, client, auth_headers):
        res = client.post(
            "/data-upload",
            files={"file": ("products.csv", b"Name\n\xff\xfe\x00bad\n", "text/csv")},
            data={"dataType": "products"},
            headers=auth_headers,
        )
        assert res.status_code == 400
        assert res.json()["error"].startswith("Could not read CSV")

    def test_malformed_csv_is_a_bad_request(self, client, auth_headers, monkeypatch):
        import csv

        from app.services import data_upload

        def broken_reader(*args, **kwargs):
            raise csv.Error("line contains NUL")

        monkeypatch.setattr(data_upload.csv, "reader", broken_reader)
        res = client.post(
            "/data-upload",
            files={"file": ("products.csv", self.CSV.encode(), "text/csv")},
            data={"dataType": "products"},
            headers=auth_headers,
        )
        assert res.status_code == 400
        assert "line contains NUL" in res.json()["error"]
