# src/sqlab/pagination/params.py
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

DEFAULT_PAGE_OFFSET = 0
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 1000

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_int(value: Any) -> Optional[int]:
    """
    Parse an offset or limit the way browsers' ``parseInt`` does.

    ``"20"``, ``" 20 "`` and ``"20rows"`` all give 20; ``"abc"``, ``""`` and
    ``None`` give None. Floats are truncated.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float('inf'), float('-inf')):
            return None
        return int(value)
    if isinstance(value, (str, bytes)):
        text = value.decode('utf-8', 'replace') if isinstance(value, bytes) else value
        match = _LEADING_INT.match(text)
        return int(match.group(1)) if match else None
    return None


@dataclass(frozen=True)
class PaginationParams:
    """Offset and limit actually applied to a paginated fetch."""

    offset: int = DEFAULT_PAGE_OFFSET
    limit: int = DEFAULT_PAGE_LIMIT

    @classmethod
    def coerce(cls,
               offset: Any = None,
               limit: Any = None,
               default_limit: int = DEFAULT_PAGE_LIMIT,
               max_limit: int = MAX_PAGE_LIMIT) -> 'PaginationParams':
        """
        Build parameters from raw request values without ever rejecting them.

        Unparsable or negative offsets become 0. Unparsable or non-positive
        limits fall back to ``default_limit``; limits above ``max_limit`` are
        clamped.
        """
        parsed_offset = parse_int(offset)
        if parsed_offset is None or parsed_offset < 0:
            parsed_offset = DEFAULT_PAGE_OFFSET

        parsed_limit = parse_int(limit)
        if parsed_limit is None or parsed_limit <= 0:
            parsed_limit = default_limit
        if max_limit and parsed_limit > max_limit:
            parsed_limit = max_limit

        return cls(offset=parsed_offset, limit=parsed_limit)

    @property
    def page(self) -> int:
        """1-based page number containing ``offset``."""
        return self.offset // self.limit + 1


class PageEnvelope(BaseModel):
    """Response shape shared by every paginated data endpoint."""
    columns: List[str]
    rows: List[List[Any]]
    total: Optional[int] = None
    offset: int = DEFAULT_PAGE_OFFSET
    limit: int = DEFAULT_PAGE_LIMIT
    table_name: Optional[str] = Field(None, description="Set for table browsing")


def build_envelope(columns: Sequence[str],
                   rows: Sequence[Sequence[Any]],
                   total: Optional[int],
                   params: PaginationParams,
                   **extra: Any) -> Dict[str, Any]:
    """Assemble ``{columns, rows, total, offset, limit}`` plus any extra keys."""
    envelope = {
        'columns': list(columns),
        'rows': [list(row) for row in rows],
        'total': total,
        'offset': params.offset,
        'limit': params.limit,
    }
    envelope.update(extra)
    return envelope
