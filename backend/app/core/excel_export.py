"""Multi-sheet analytics workbook built with openpyxl."""

from __future__ import annotations

import io
import logging
from datetime import datetime

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 50

SHEET_NAMES = (
    "Key Metrics",
    "Shipping Methods",
    "Geographic Performance",
    "Supplier Performance",
    "Monthly Trends",
    "Risk Analysis",
    "Top Routes",
    "Top Suppliers",
)

_SUPPLIER_HEADER = [
    "Supplier Name",
    "Rating",
    "Status",
    "Risk Level",
    "Lead Time (days)",
    "Specialties Count",
]


def export_filename(now: datetime | None = None) -> str:
    now = now or datetime.utcnow()
    return f"analytics-report-{now:%Y-%m-%d}.xlsx"


def _money(v: float) -> str:
    return f"{v:,.2f}"


def _rate(stats: dict) -> str:
    rate = stats["onTime"] / stats["total"] * 100 if stats["total"] else 0.0
    return f"{rate:.1f}"


def _supplier_rows(suppliers: list[dict]) -> list[list]:
    return [
        [
            s["name"],
            s["rating"],
            s["status"],
            s["riskLevel"],
            s["leadTime"],
            s["specialties"],
        ]
        for s in suppliers
    ]


def _sheet_rows(analytics: dict, generated: datetime) -> dict[str, list[list]]:
    km = analytics["keyMetrics"]
    risk = analytics["riskAnalysis"]
    return {
        "Key Metrics": [
            ["Metric", "Value", "Description"],
            ["Total Revenue", f"${_money(km['totalRevenue'])}", "Total revenue from all shipments"],
            ["On-Time Rate", f"{km['onTimeRate']}%", "Percentage of on-time deliveries"],
            ["Average Lead Time", f"{km['avgLeadTime']} days", "Average lead time across all products"],
            ["Cost Efficiency", f"{km['costEfficiency']}%", "Profit margin percentage"],
            ["Total Shipments", km["totalShipments"], "Total number of shipments"],
            ["Active Products", km["activeProducts"], "Number of active products"],
            ["Active Suppliers", km["activeSuppliers"], "Number of active suppliers"],
            ["", "", ""],
            ["Time Range", analytics["timeRange"], "Analysis period"],
            ["Generated", generated.strftime("%Y-%m-%d %H:%M:%S"), "Report generation timestamp"],
        ],
        "Shipping Methods": [
            ["Shipping Method", "Total Shipments", "On-Time", "Delayed", "Stuck", "On-Time Rate (%)"],
            *(
                [method, st["total"], st["onTime"], st["delayed"], st["stuck"], _rate(st)]
                for method, st in analytics["shippingMethodStats"].items()
            ),
        ],
        "Geographic Performance": [
            ["Route", "Total Shipments", "On-Time", "Delayed", "Stuck", "On-Time Rate (%)", "Total Value ($)"],
            *(
                [
                    route,
                    st["total"],
                    st["onTime"],
                    st["delayed"],
                    st["stuck"],
                    _rate(st),
                    _money(st["totalValue"]),
                ]
                for route, st in analytics["geographicStats"].items()
            ),
        ],
        "Supplier Performance": [_SUPPLIER_HEADER, *_supplier_rows(analytics["supplierStats"])],
        "Monthly Trends": [
            ["Month", "Revenue ($)", "On-Time Rate (%)", "Total Shipments"],
            *(
                [t["month"], _money(t["revenue"]), f"{t['onTimeRate']:.1f}", t["totalShipments"]]
                for t in analytics["monthlyTrends"]
            ),
        ],
        "Risk Analysis": [
            ["Risk Category", "Count", "Description"],
            ["High Risk Shipments", risk["highRiskShipments"], 'Shipments with "Stuck" status'],
            ["Medium Risk Shipments", risk["mediumRiskShipments"], 'Shipments with "Delayed" status'],
            ["Low Risk Shipments", risk["lowRiskShipments"], 'Shipments with "On-Time" status'],
            ["High Risk Products", risk["highRiskProducts"], "Products with high risk level"],
            ["High Risk Suppliers", risk["highRiskSuppliers"], "Suppliers with high risk level"],
        ],
        "Top Routes": [
            ["Route", "On-Time Rate (%)", "Total Value ($)", "Total Shipments"],
            *(
                [r["route"], f"{r['onTimeRate']:.1f}", _money(r["totalValue"]), r["totalShipments"]]
                for r in analytics["topRoutes"]
            ),
        ],
        "Top Suppliers": [_SUPPLIER_HEADER, *_supplier_rows(analytics["topSuppliers"])],
    }


def _autosize(ws) -> None:
    for idx, column in enumerate(ws.iter_cols(values_only=True), start=1):
        longest = max((len(str(v)) for v in column if v is not None), default=0)
        width = min(max(MIN_COLUMN_WIDTH, longest) + 2, MAX_COLUMN_WIDTH)
        ws.column_dimensions[get_column_letter(idx)].width = width


def build_analytics_workbook(analytics: dict, generated: datetime | None = None) -> Workbook:
    generated = generated or datetime.utcnow()
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in _sheet_rows(analytics, generated).items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
        _autosize(ws)
    return wb


def export_analytics_workbook(analytics: dict, generated: datetime | None = None) -> bytes:
    wb = build_analytics_workbook(analytics, generated)
    buf = io.BytesIO()
    wb.save(buf)
    logger.info("Exported analytics workbook (%d sheets)", len(wb.sheetnames))
    return buf.getvalue()
