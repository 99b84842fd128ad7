"""
Date and Time utilities

This module handles XMLTV timestamp parsing, output formatting and the conversion time window.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging

from xmltv_converter.exceptions import DateFormatError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ConversionWindow:
    """Time window shared by ingestion and serialization for one run."""
    now: datetime
    end: datetime

    @classmethod
    def starting_at(cls, now: datetime, hours: float) -> "ConversionWindow":
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return cls(now=now, end=now + timedelta(hours=hours))

    def includes(self, start_time: datetime, stop_time: datetime) -> bool:
        """Programme still running or ending now, and starting before the window end"""
        return stop_time >= self.now and start_time < self.end


def parse_xmltv_time(time_str: str) -> datetime:
    """
    Parse XMLTV time format keeping the source UTC offset

    Args:
        time_str: XMLTV time like '20080715003000 -0600'

    Returns:
        Timezone-aware datetime carrying the offset from the source

    Raises:
        DateFormatError: If the timestamp or its offset is malformed
    """
    try:
        # Split time and timezone
        parts = time_str.strip().split()
        time_part = parts[0]  # YYYYMMDDHHMMSS
        tz_part = parts[1] if len(parts) > 1 else '+0000'

        dt = datetime.strptime(time_part, '%Y%m%d%H%M%S')

        # Parse timezone offset (±HHMM or ±HH:MM)
        tz_digits = tz_part[1:].replace(':', '')
        if tz_part[0] not in '+-' or len(tz_digits) != 4 or not tz_digits.isdigit():
            raise ValueError(f"bad offset '{tz_part}'")
        tz_sign = 1 if tz_part[0] == '+' else -1
        tz_offset = timedelta(hours=int(tz_digits[:2]), minutes=int(tz_digits[2:]))
    except (ValueError, IndexError) as e:
        raise DateFormatError(f"Invalid XMLTV datetime format: '{time_str}'") from e

    return dt.replace(tzinfo=timezone(tz_sign * tz_offset))


def format_utc_timestamp(value: datetime) -> str:
    """Format as 'YYYY-MM-DDTHH:MM:SS.fffZ' in UTC"""
    dt_utc = value.astimezone(timezone.utc)
    return f"{dt_utc.strftime('%Y-%m-%dT%H:%M:%S')}.{dt_utc.microsecond // 1000:03d}Z"
