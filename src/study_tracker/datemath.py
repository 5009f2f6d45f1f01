"""Date helpers: midnight normalization, flexible parsing, day differences.

All datetimes handled here are naive and in local time. Values with an
explicit UTC offset are converted to local wall-clock time when parsed so the
calendar day matches what the user sees.
"""
import math
import re
from datetime import datetime, timedelta
from typing import Optional

RELATIVE_DAYS_RE = re.compile(r"^\d+d$")
DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ISO_PREFIX_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:T.*)?$")

DAY_NAMES = [
    "Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado",
]
MONTH_NAMES = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]


def normalize_to_midnight(dt: datetime) -> datetime:
    return datetime(dt.year, dt.month, dt.day)


def js_weekday(dt: datetime) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return (dt.weekday() + 1) % 7


def parse_flexible(value: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """Parse "Nd", "YYYY-MM-DD" or an ISO datetime string.

    Returns None for empty or unparseable input instead of raising.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    now = now or datetime.now()

    if RELATIVE_DAYS_RE.match(text):
        try:
            return now + timedelta(days=int(text[:-1]))
        except OverflowError:
            return None

    if DATE_ONLY_RE.match(text):
        year, month, day = (int(part) for part in text.split("-"))
        try:
            return datetime(year, month, day)
        except ValueError:
            return None

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def days_between(start: datetime, end: datetime) -> int:
    """Calendar days from start to end. Negative when end is earlier."""
    delta = normalize_to_midnight(end) - normalize_to_midnight(start)
    return math.ceil(delta.total_seconds() / 86400)


def days_remaining(target: datetime, today: Optional[datetime] = None) -> int:
    """Days until target, clamped at zero for overdue dates."""
    return max(days_between(today or datetime.now(), target), 0)


def format_for_storage(dt: datetime) -> str:
    return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"


def format_spanish_date(dt: datetime) -> str:
    """e.g. "Jueves 5 de Marzo"."""
    return f"{DAY_NAMES[js_weekday(dt)]} {dt.day} de {MONTH_NAMES[dt.month - 1]}"


def format_date_label(value: Optional[str], today: Optional[datetime] = None) -> Optional[str]:
    """Short label for a stored date: "Nd" within a week, long form otherwise."""
    if not value:
        return None
    match = ISO_PREFIX_RE.match(value)
    if not match:
        return value
    parsed = parse_flexible(match.group(1))
    if parsed is None:
        return value
    diff = days_between(today or datetime.now(), parsed)
    if 0 <= diff <= 7:
        return f"{diff}d"
    return format_spanish_date(parsed)


def prepare_date_for_saving(value: Optional[str], now: Optional[datetime] = None) -> Optional[str]:
    """Convert user or display input into the "YYYY-MM-DD" storage form."""
    if not value:
        return None
    match = ISO_PREFIX_RE.match(value)
    if match:
        return match.group(1)
    if RELATIVE_DAYS_RE.match(value):
        parsed = parse_flexible(value, now=now)
        if parsed is not None:
            return format_for_storage(parsed)
    return None
