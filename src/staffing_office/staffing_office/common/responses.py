from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional

_STATUS_BY_ERROR_TYPE = {
    "ValidationError": 400,
    "InvalidTimeFormat": 400,
    "InvalidTimeRange": 400,
    "ReferentialError": 404,
    "ConflictError": 409,
}


def http_status(success: bool, error_type: Optional[str]) -> int:
    if success:
        return 200
    return _STATUS_BY_ERROR_TYPE.get(error_type or "", 500)


def plain(value: Any) -> Any:
    """Dates as ISO strings and Decimals as strings, recursively."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [plain(v) for v in value]
    return value
