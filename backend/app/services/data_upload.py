"""Spreadsheet ingestion for shipments, products and suppliers.

Reads the first sheet of an ``.xlsx`` workbook or a ``.csv`` file, maps the
header row onto schema field names and stores every row that validates.
"""

from __future__ import annotations

import csv
import io
import logging
import re
import zipfile
from typing import Any, Callable

from fastapi import HTTPException
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from app.models.product import Product
from app.models.upload_log import UploadLog
from app.schemas.product import ProductCreate
from app.schemas.shipment import ShipmentCreate
from app.schemas.supplier import SupplierCreate
from app.services.products import create_product
from app.services.shipments import create_shipment
from app.services.suppliers import create_supplier
from app.services.upload_logs import record_upload

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".csv")

_LIST_FIELDS = {"certifications", "specialties", "riskFactors"}

# Extra spellings seen in exported sheets, keyed by normalized header.
_ALIASES = {
    "products": {"suppliername": "supplier", "cost": "unitCost", "risk": "riskLevel"},
    "suppliers": {"suppliername": "name", "contact": "contactPerson", "risk": "riskLevel"},
    "shipments": {"method": "shippingMethod", "value": "totalValue", "eta": "expectedDelivery"},
}


class DataType:
    def __init__(
        self,
        schema: type[BaseModel],
        create: Callable[[Session, int, Any], Any],
    ):
        self.schema = schema
        self.create = create


DATA_TYPES: dict[str, DataType] = {
    "shipments": DataType(ShipmentCreate, create_shipment),
    "products": DataType(ProductCreate, create_product),
    "suppliers": DataType(SupplierCreate, create_supplier),
}


def _normalize_header(h: Any) -> str:
    return re.sub(r"[^a-z0-9]", "", str(h or "").lower())


def _header_map(data_type: str) -> dict[str, str]:
    fields = DATA_TYPES[data_type].schema.model_fields
    mapping = {_normalize_header(name): name for name in fields}
    mapping.update(_ALIASES.get(data_type, {}))
    return mapping


def read_rows(file_name: str, content: bytes) -> list[dict[str, Any]]:
    """Return the first sheet as dicts keyed by the raw header text."""
    lower = file_name.lower()
    if lower.endswith(".csv"):
        try:
            text = content.decode("utf-8-sig")
            rows = list(csv.reader(io.StringIO(text)))
        except (UnicodeDecodeError, csv.Error) as e:
            raise ValueError(f"Could not read CSV: {e}") from e
    elif lower.endswith(".xlsx"):
        import openpyxl
        from openpyxl.utils.exceptions import InvalidFileException

        try:
            wb = openpyxl.load_workbook(
                io.BytesIO(content), read_only=True, data_only=True
            )
        except (InvalidFileException, zipfile.BadZipFile) as e:
            raise ValueError(f"Could not read workbook: {e}") from e
        ws = wb.worksheets[0]
        rows = [list(r) for r in ws.iter_rows(values_only=True)]
        wb.close()
    else:
        raise ValueError("Invalid file type. Only .xlsx and .csv files are supported.")

    if not rows:
        return []
    headers = [str(h).strip() if h is not None else "" for h in rows[0]]
    return [
        dict(zip(headers, row))
        for row in rows[1:]
        if any(v not in (None, "") for v in row)
    ]


def _coerce(field: str, value: Any) -> Any:
    if field in _LIST_FIELDS and isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if isinstance(value, str):
        return value.strip()
    return value


def map_row(data_type: str, raw: dict[str, Any]) -> dict[str, Any]:
    mapping = _header_map(data_type)
    out: dict[str, Any] = {}
    extras: dict[str, Any] = {}
    for header, value in raw.items():
        if value is None or value == "":
            continue
        key = _normalize_header(header)
        field = mapping.get(key)
        if field:
            out[field] = _coerce(field, value)
        else:
            extras[key] = value
    if data_type == "shipments" and "productId" not in out:
        name = extras.get("product") or extras.get("productname")
        if name:
            out["productName"] = str(name).strip()
    return out


def _resolve_product(db: Session, user_id: int, row: dict[str, Any]) -> None:
    name = row.pop("productName", None)
    if name is None:
        return
    product = (
        db.query(Product)
        .filter(Product.userId == user_id, Product.name == name)
        .first()
    )
    if product is not None:
        row["productId"] = product.id


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def import_rows(
    db: Session, user_id: int, data_type: str, rows: list[dict[str, Any]]
) -> tuple[int, list[str]]:
    handler = DATA_TYPES[data_type]
    stored = 0
    errors: list[str] = []
    for row_num, raw in enumerate(rows, start=2):
        row = map_row(data_type, raw)
        if data_type == "shipments":
            _resolve_product(db, user_id, row)
        try:
            dto = handler.schema.model_validate(row)
        except ValidationError as e:
            errors.append(f"Row {row_num}: {_first_error(e)}")
            continue
        try:
            handler.create(db, user_id, dto)
        except HTTPException as e:
            db.rollback()
            errors.append(f"Row {row_num}: {e.detail}")
            continue
        stored += 1
    return stored, errors


def process_upload(
    db: Session, user_id: int, data_type: str, file_name: str, content: bytes
) -> tuple[UploadLog, int, list[str]]:
    if data_type not in DATA_TYPES:
        raise ValueError(
            f"Unknown data type '{data_type}'. Use one of: {', '.join(DATA_TYPES)}"
        )
    rows = read_rows(file_name, content)
    if not rows:
        stored, errors = 0, ["No valid data found in file"]
    else:
        stored, errors = import_rows(db, user_id, data_type, rows)
    log = record_upload(db, user_id, file_name, data_type, stored)
    logger.info(
        "Upload %s (%s): %d stored, %d rejected", file_name, data_type, stored, len(errors)
    )
    return log, stored, errors
