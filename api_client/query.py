"""Query string helpers for list endpoints (pagination, filters)"""

from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def clean_params(params: Optional[Mapping[str, Any]]) -> List[Tuple[str, str]]:
    """Flatten query parameters, dropping None and empty values

    Lists become repeated keys.

    Example:
        clean_params({"status": "active", "empty": None, "ids": [1, 2]})
        # [("status", "active"), ("ids", "1"), ("ids", "2")]
    """
    if not isinstance(params, Mapping):
        return []

    pairs = []
    for key, value in params.items():
        if _is_blank(value):
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _stringify(item)) for item in value if not _is_blank(item))
        else:
            pairs.append((key, _stringify(value)))
    return pairs


def _stringify(value: Any) -> str:
    # Match the backend's expectation of lowercase booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """Build ``?a=1&b=2`` from a params mapping, or "" when nothing is left"""
    query = urlencode(clean_params(params))
    return f"?{query}" if query else ""


def build_pagination_params(page: int, limit: int = 20) -> Dict[str, int]:
    """Pagination params with a 1-indexed page"""
    return {"page": max(1, page), "limit": limit}
