# api/v1/schemas/envelope.py
# Success bodies are {success: true, data?, ...}; errors are rendered by core/errors.py.
from typing import Any


def ok(data: Any = None, **extra) -> dict:
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body
