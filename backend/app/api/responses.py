"""JSON envelope shared by every route: ``{success, data, message}``."""

from typing import Any

from fastapi.encoders import jsonable_encoder


def envelope(data: Any = None, message: str | None = None) -> dict:
    body: dict[str, Any] = {"success": True, "data": jsonable_encoder(data)}
    if message:
        body["message"] = message
    return body


def error_body(error: str) -> dict:
    return {"success": False, "error": error}
