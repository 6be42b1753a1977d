import calendar
import math
import re
from datetime import date, datetime

_MONTH_KEY_RE = re.compile(r"\d{4}-\d{2}")


def parse_ymd(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("Date must be a YYYY-MM-DD string")
    value = value.strip()
    if not value:
        raise ValueError("Date value is empty")
    if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        raise ValueError("Invalid date format")
    year, month, day = map(int, value.split("-"))
    if not (1 <= month <= 12):
        raise ValueError("Invalid month")
    last_day = calendar.monthrange(year, month)[1]
    if not (1 <= day <= last_day):
        raise ValueError("Invalid day")
    return date(year, month, day)


def month_key_of(value: str | date) -> str:
    """Return the ``YYYY-MM`` key of a date. The only place month keys are derived."""
    parsed = parse_ymd(value)
    return f"{parsed.year:04d}-{parsed.month:02d}"


def is_month_key(value: object) -> bool:
    if not isinstance(value, str) or not _MONTH_KEY_RE.fullmatch(value):
        return False
    return 1 <= int(value[5:7]) <= 12


def parse_month_key(value: str) -> tuple[int, int]:
    if not is_month_key(value):
        raise ValueError(f"Invalid month key: {value!r}. Use YYYY-MM")
    year, month = value.split("-")
    return int(year), int(month)


def shift_month_key(month_key: str, months: int) -> str:
    year, month = parse_month_key(month_key)
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def previous_month_key(month_key: str) -> str:
    return shift_month_key(month_key, -1)


def as_positive_amount(value: object) -> float | None:
    """Return ``value`` as a float when it is a finite positive number, else None.

    Numeric strings are accepted the same way a form field would submit them.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_finite_amount(value: object) -> float | None:
    """Lenient amount coercion for stored and imported documents.

    Any finite number or numeric string is kept, including zero and negatives.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        amount = float(value)
    except (ValueError, OverflowError):
        return None
    return amount if math.isfinite(amount) else None
