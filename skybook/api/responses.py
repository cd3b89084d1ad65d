from typing import Any


def ok(data: Any, count: int | None = None) -> dict:
    """Uniform success envelope: {success, count?, data}."""
    body: dict[str, Any] = {"success": True}
    if count is not None:
        body["count"] = count
    body["data"] = data
    return body


def fail(error: str) -> dict:
    return {"success": False, "error": error}
