from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional, Union

from ..core.enums import ShiftKind
from ..core.exceptions import InvalidTimeFormat, InvalidTimeRange, ValidationError
from .interval import TimeInterval, parse_time_of_day


@dataclass(frozen=True)
class ShiftValidation:
    ok: bool
    kind: Optional[ShiftKind] = None
    interval: Optional[TimeInterval] = None
    error: Optional[str] = None
    error_type: Optional[str] = None


class ShiftValidator:
    """Parse a shift's clock strings and classify it.

    - FULL_DAY: start and end are both midnight (the whole day, not zero length)
    - OVERNIGHT: end falls before start on the clock
    - SAME_DAY: everything else; must end strictly after it starts
    """

    def validate(self, start: Union[str, time, None], end: Union[str, time, None]) -> ShiftValidation:
        try:
            kind, interval = self._classify(start, end)
        except ValidationError as e:
            return ShiftValidation(ok=False, error=str(e), error_type=e.error_type)
        return ShiftValidation(ok=True, kind=kind, interval=interval)

    def require(self, start: Union[str, time, None], end: Union[str, time, None]) -> TimeInterval:
        """Like :meth:`validate` but raises on invalid input."""
        _, interval = self._classify(start, end)
        return interval

    @staticmethod
    def _classify(start, end) -> tuple[ShiftKind, TimeInterval]:
        if start is None or end is None or (isinstance(start, str) and not start.strip()) or (
            isinstance(end, str) and not end.strip()
        ):
            raise InvalidTimeFormat("Shift start and end times are required")

        start_s = parse_time_of_day(start)
        end_s = parse_time_of_day(end)

        if start_s == 0 and end_s == 0:
            return ShiftKind.FULL_DAY, TimeInterval.full_day()
        if end_s < start_s:
            return ShiftKind.OVERNIGHT, TimeInterval(start_s, end_s)
        if end_s == start_s:
            raise InvalidTimeRange(
                "Shift end time must be after shift start time, unless it's an overnight or 24-hour shift"
            )
        return ShiftKind.SAME_DAY, TimeInterval(start_s, end_s)
