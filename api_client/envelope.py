"""Response envelope unwrapping

The backend wraps most payloads as ``{"success": bool, "data": ..., "message": ...}``.
Some list endpoints instead put the payload beside ``success`` (for example
``{"success": true, "branches": [...]}``); those are passed through whole.
"""

from typing import Any


def unwrap_envelope(body: Any) -> Any:
    """Return ``body["data"]`` for an enveloped object, ``body`` otherwise"""
    if is_envelope(body) and "data" in body:
        return body["data"]
    return body


def is_envelope(body: Any) -> bool:
    return isinstance(body, dict) and isinstance(body.get("success"), bool)
