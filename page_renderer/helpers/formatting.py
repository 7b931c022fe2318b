"""Formatting helpers for sizes, dates and time-series periods.

Upstream content stores these values as loosely formatted strings. Every
helper here is pure: the same input always renders the same output.
"""

import re
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from page_renderer.exceptions import FormatException
from page_renderer.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

DEFAULT_TIMEZONE = "Europe/London"

# RFC3339 date-time: full date, 'T', time with optional fraction, 'Z' or offset
RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)
INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
WORD_PATTERN = re.compile(r"\w+")

# Binary byte units, largest first
BYTE_UNITS = (
    ("EB", 1 << 60),
    ("PB", 1 << 50),
    ("TB", 1 << 40),
    ("GB", 1 << 30),
    ("MB", 1 << 20),
    ("KB", 1 << 10),
)

QUARTERS = (
    ("Q1", "Jan - Mar"),
    ("Q2", "Apr - Jun"),
    ("Q3", "Jul - Sep"),
    ("Q4", "Oct - Dec"),
)


def human_size(size: str) -> str:
    """Render a byte count as a human readable size (e.g. '1.5 MB').

    Args:
        size: Byte count as a decimal string, or '' for no size

    Returns:
        Readable size, or '' when no size was given

    Raises:
        FormatException: If the size is not a non-negative integer
    """
    if size == "":
        return ""

    if not INTEGER_PATTERN.fullmatch(size):
        raise FormatException("not a number", details={"size": size})

    byte_count = int(size)
    if byte_count < 0:
        raise FormatException("size must not be negative", details={"size": size})

    for unit, magnitude in BYTE_UNITS:
        if byte_count > magnitude:
            return f"{byte_count / magnitude:.1f} {unit}"
    return f"{byte_count} B"


def _parse_rfc3339(timestamp: str) -> datetime | None:
    if not RFC3339_PATTERN.fullmatch(timestamp):
        log_with_context(
            logger,
            "error",
            "failed to parse time",
            timestamp=timestamp,
            event_type="date_parse_error",
        )
        return None
    try:
        return datetime.fromisoformat(timestamp)
    except ValueError as e:
        log_with_context(
            logger,
            "error",
            "failed to parse time",
            timestamp=timestamp,
            error=str(e),
            event_type="date_parse_error",
        )
        return None


def _localise_time(moment: datetime, timezone: str) -> datetime:
    try:
        zone = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        log_with_context(
            logger,
            "error",
            "failed to load time zone location",
            timezone=timezone,
            error=str(e),
            event_type="timezone_load_error",
        )
        return moment
    return moment.astimezone(zone)


def _format_timestamp(timestamp: str, pattern: str, timezone: str) -> str:
    moment = _parse_rfc3339(timestamp)
    if moment is None:
        return timestamp
    return _localise_time(moment, timezone).strftime(pattern)


def date_format(timestamp: str, timezone: str = DEFAULT_TIMEZONE) -> str:
    """Format an RFC3339 timestamp as '02 January 2006' in the display timezone.

    Unparseable input is returned unchanged.
    """
    return _format_timestamp(timestamp, "%d %B %Y", timezone)


def date_format_yyyymmdd(timestamp: str, timezone: str = DEFAULT_TIMEZONE) -> str:
    """Format an RFC3339 timestamp as '2006/01/02' in the display timezone.

    Unparseable input is returned unchanged.
    """
    return _format_timestamp(timestamp, "%Y/%m/%d", timezone)


def _title_case(text: str) -> str:
    # Word characters continue a word, anything else starts a new one
    return WORD_PATTERN.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:], text)


def date_period_format(period: str) -> str:
    """Format a time-series period code for display.

    "2019 JAN-FEB" becomes "Jan - Feb 2019" and "2010 Q1" becomes
    "Jan - Mar 2010".
    """
    # 1. Space out the first dash
    dash_index = period.find("-")
    if dash_index > -1:
        period = period[:dash_index] + " - " + period[dash_index + 1 :]

    # 2. Quarters become their month range
    for quarter, months in QUARTERS:
        period = period.replace(quarter, months, 1)

    # 3. Leading year moves to the end, dropping the separator after it
    if len(period) >= 4 and INTEGER_PATTERN.fullmatch(period[:4]) and len(period) > 5:
        period = period[5:] + " " + period[:4]

    # 4. BLOCK CAPS to Title Caps
    return _title_case(period.lower())
