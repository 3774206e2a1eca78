from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Sequence

from ..attendance.model import SkippedRecord
from ..core.constants import MONEY_QUANT
from ..core.enums import SkipReason

SKIP_LABELS = {
    SkipReason.MISSING_ATTENDANCE_DATA: "missing data",
    SkipReason.INVALID_OR_ZERO_WORKED_HOURS: "invalid hours",
    SkipReason.NO_VALID_ASSIGNMENT: "no assignment",
    SkipReason.NOT_YET_STARTED: "not started",
    SkipReason.IN_PROGRESS: "in progress",
}


def format_number(value: Decimal) -> str:
    """2-decimal rounding without trailing zeros: 12.50 -> '12.5', 10.00 -> '10'."""
    q = Decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP).normalize()
    return format(q, "f")


def build_info(days_worked: Decimal, rate_buckets: Mapping[Decimal, Decimal], skipped: Sequence[SkippedRecord]) -> str:
    """Human readable breakdown, e.g.

    ``12.5 days [10 days (500/day), 2.5 days (600/day)] | SKIPPED: 3 records (2 missing data, 1 invalid hours)``
    """
    info = f"{format_number(days_worked)} days"

    if rate_buckets:
        parts = [f"{format_number(days)} days ({format_number(rate)}/day)" for rate, days in rate_buckets.items()]
        info += f" [{', '.join(parts)}]"

    if skipped:
        info += f" | SKIPPED: {len(skipped)} records"
        details = []
        for reason, label in SKIP_LABELS.items():
            n = sum(1 for s in skipped if s.reason == reason)
            if n:
                details.append(f"{n} {label}")
        info += f" ({', '.join(details)})"

    return info
