# src/sqlab/database/formatters.py
import datetime
import math
from decimal import Decimal
from typing import Any, Iterable, List

HASH_SUFFIX = "hash"
ADVENTURE_PREFIX = "sqlab_"


def normalize_value(value: Any) -> Any:
    """
    Convert a driver value to a JSON-safe string, number or None.

    Decimals become strings so no precision is lost; dates and times use ISO
    format; bytes are decoded as UTF-8.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        # MariaDB TIME columns come back as timedelta
        total = int(value.total_seconds())
        sign = "-" if total < 0 else ""
        hours, remainder = divmod(abs(total), 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def normalize_row(row: Iterable[Any]) -> List[Any]:
    return [normalize_value(value) for value in row]


def is_hash_column(column_name: str) -> bool:
    """Hash columns back the answer checks and are hidden from students."""
    return str(column_name).lower().endswith(HASH_SUFFIX)


def format_adventure_name(db_name: str) -> str:
    """
    Format the database name for display.

    ``sqlab_island`` becomes ``Island``; other names are returned unchanged.
    """
    if not db_name:
        return "Unknown"

    if db_name.lower().startswith(ADVENTURE_PREFIX):
        adventure = db_name[len(ADVENTURE_PREFIX):]
        return adventure[:1].upper() + adventure[1:]

    return db_name
