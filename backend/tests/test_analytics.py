"""Analytics aggregates, dashboard cards and the Excel export."""

import io
from datetime import timedelta

import pytest
from openpyxl import load_workbook

from app.core.analytics import build_analytics, build_dashboard_stats
from app.core.excel_export import (
    SHEET_NAMES,
    build_analytics_workbook,
    export_analytics_workbook,
    export_filename,
)

from conftest import NOW, product_record, shipment_record, supplier_record


@pytest.fixture
def records():
    shipments = [
        shipment_record(id="a", created_at=NOW - timedelta(days=2), total_value=5000.0),
        shipment_record(
            id="b",
            status="Delayed",
            created_at=NOW - timedelta(days=5),
            total_value=3000.0,
            shipping_method="Air",
        ),
        shipment_record(
            id="c",
            status="Stuck",
            origin="Busan",
            destination="Los Angeles",
            created_at=NOW - timedelta(days=10),
            total_value=2000.0,
        ),
        shipment_record(id="old", created_at=NOW - timedelta(days=60), total_value=9999.0),
    ]
    products = [
        product_record(id="p1", risk_level="high"),
        product_record(id="p2", unit_cost=30.0, lead_time=20),
    ]
    suppliers = [
        supplier_record(id="s1"),
        supplier_record(id="s2", name="Bolt Ltd", rating=5.0, status="inactive", risk_level="high"),
    ]
    return shipments, products, suppliers


class TestBuildAnalytics:

    def test_key_metrics_for_thirty_days(self, records):
        result = build_analytics(*records, time_range="30d", now=NOW)
        km = result["keyMetrics"]
        assert km["totalRevenue"] == 10000.0
        assert km["onTimeRate"] == pytest.approx(33.33)
        assert km["avgLeadTime"] == 15
        assert km["costEfficiency"] == pytest.approx(99.6)
        assert km["totalShipments"] == 3
        assert km["activeProducts"] == 2
        assert km["activeSuppliers"] == 1

    def test_wider_range_includes_older_rows(self, records):
        result = build_analytics(*records, time_range="90d", now=NOW)
        assert result["keyMetrics"]["totalShipments"] == 4
        assert result["timeRange"] == "90d"

    def test_unknown_range_falls_back(self, records):
        assert build_analytics(*records, time_range="5y", now=NOW)["timeRange"] == "30d"

    def test_method_and_route_breakdown(self, records):
        result = build_analytics(*records, now=NOW)
        assert result["shippingMethodStats"]["Sea"] == {
            "total": 2,
            "onTime": 1,
            "delayed": 0,
            "stuck": 1,
        }
        route = result["geographicStats"]["Shenzhen → Rotterdam"]
        assert route["total"] == 2
        assert route["delayed"] == 1
        assert route["totalValue"] == 8000.0
        assert result["topRoutes"][0]["route"] == "Shenzhen → Rotterdam"
        assert result["topRoutes"][0]["onTimeRate"] == 50.0

    def test_risk_analysis(self, records):
        risk = build_analytics(*records, now=NOW)["riskAnalysis"]
        assert risk == {
            "highRiskShipments": 1,
            "mediumRiskShipments": 1,
            "lowRiskShipments": 1,
            "highRiskProducts": 1,
            "highRiskSuppliers": 1,
        }

    def test_top_suppliers_only_active(self, records):
        top = build_analytics(*records, now=NOW)["topSuppliers"]
        assert [s["name"] for s in top] == ["Acme Corp"]

    def test_twelve_monthly_buckets(self, records):
        trends = build_analytics(*records, now=NOW)["monthlyTrends"]
        assert len(trends) == 12
        assert trends[0]["month"] == "Jul 2024"
        assert trends[-1]["month"] == "Jun 2025"
        assert trends[-1]["totalShipments"] == 3
        assert trends[-1]["revenue"] == 10000.0
        assert trends[0]["onTimeRate"] == 0.0

    def test_empty_inputs(self):
        result = build_analytics([], [], [], now=NOW)
        assert result["keyMetrics"]["onTimeRate"] == 0.0
        assert result["keyMetrics"]["costEfficiency"] == 0.0
        assert result["topRoutes"] == []


class TestDashboardStats:

    def test_cards(self, records):
        shipments = [
            records[0][0],
            shipment_record(id="b", status="Delayed", expected_delivery=NOW - timedelta(days=10), total_value=3000.0),
            shipment_record(id="c", status="Stuck", expected_delivery=NOW - timedelta(days=3), total_value=2000.0),
            shipment_record(
                id="d",
                status="Delivered",
                expected_delivery=NOW - timedelta(days=3),
                actual_delivery=NOW - timedelta(days=1),
                total_value=1000.0,
            ),
        ]
        stats = build_dashboard_stats(shipments, records[1], records[2], now=NOW)
        assert stats["totalShipments"] == 4
        assert stats["onTimeDeliveries"] == 2
        assert stats["delayedShipments"] == 1
        assert stats["inTransitShipments"] == 1
        assert stats["totalValue"] == 11000
        assert stats["averageDeliveryTime"] == 5.0
        assert stats["highRiskSuppliers"] == 1
        assert stats["activeAlerts"] == 2
        assert stats["riskScore"] == 40
        assert stats["onTimeDeliveryRate"] == 50.0
        assert stats["averageOrderValue"] == 2750
        assert stats["lastUpdated"] == NOW.isoformat()

    def test_empty_dashboard(self):
        stats = build_dashboard_stats([], [], [], now=NOW)
        assert stats["riskScore"] == 0
        assert stats["averageOrderValue"] == 0
        assert stats["onTimeDeliveryRate"] == 0.0


class TestExcelExport:

    def test_filename(self):
        assert export_filename(NOW) == "analytics-report-2025-06-15.xlsx"

    def test_workbook_sheets_and_content(self, records):
        wb = build_analytics_workbook(build_analytics(*records, now=NOW), NOW)
        assert wb.sheetnames == list(SHEET_NAMES)

        metrics = wb["Key Metrics"]
        assert metrics["A1"].value == "Metric"
        assert metrics["B2"].value == "$10,000.00"
        assert wb["Monthly Trends"].max_row == 13
        assert wb["Top Suppliers"]["A2"].value == "Acme Corp"

    def test_column_widths_are_bounded(self, records):
        wb = build_analytics_workbook(build_analytics(*records, now=NOW), NOW)
        metrics = wb["Key Metrics"]
        assert metrics.column_dimensions["A"].width == 19
        assert metrics.column_dimensions["C"].width == 39
        assert wb["Risk Analysis"].column_dimensions["B"].width == 12

    def test_export_bytes_load_back(self, records):
        data = export_analytics_workbook(build_analytics(*records, now=NOW), NOW)
        assert data[:2] == b"PK"
        wb = load_workbook(io.BytesIO(data))
        assert wb.sheetnames == list(SHEET_NAMES)
