"""
Job listing query construction.

Turns the raw, optional query-string parameters of GET /jobs into a JobQuery:
filter terms, sort keys and pagination. Nothing here touches the database;
app.crud.job executes the result.

Parsing is lenient. Malformed or out-of-range numbers fall back to defaults
and unknown sort fields are dropped, so a listing request never fails on its
query string.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 3
MAX_LIMIT = 100
DESCENDING_PREFIX = "-"
DEFAULT_SORT_KEY = ("createdAt", True)
# Largest OFFSET a signed 64-bit database integer can hold
MAX_OFFSET = 2 ** 63 - 1

# Public sort key -> Job column attribute
SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "title": "title",
    "company": "company",
    "location": "location",
    "salary": "salary",
    "id": "id",
}

_SORT_SEPARATOR = re.compile(r"[,\s]+")

SortKey = Tuple[str, bool]


@dataclass(frozen=True)
class JobQuery:
    """A fully resolved listing request."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort: Tuple[SortKey, ...] = (DEFAULT_SORT_KEY,)
    location: Optional[str] = None
    search: Optional[str] = None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def parse_positive_int(value: Optional[str], default: int, maximum: Optional[int] = None) -> int:
    """
    Parse a query-string integer.

    Missing, non-numeric, zero or negative input returns the default, as does
    anything above maximum when one is given.
    """
    if value is None:
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    if parsed < 1 or (maximum is not None and parsed > maximum):
        return default
    return parsed


def parse_sort(value: Optional[str]) -> Tuple[SortKey, ...]:
    """
    Parse a sort expression such as "-salary,title" or "-salary title".

    A leading "-" means descending, no prefix means ascending. Unknown
    fields are skipped; if nothing usable remains the default sort
    (newest first) is returned.
    """
    keys: List[SortKey] = []
    for token in _SORT_SEPARATOR.split(value or ""):
        if not token:
            continue
        descending = token.startswith(DESCENDING_PREFIX)
        field = token[len(DESCENDING_PREFIX):] if descending else token
        if field not in SORTABLE_FIELDS:
            logger.debug(f"Ignoring unknown sort field: {field!r}")
            continue
        keys.append((field, descending))

    if not keys:
        return (DEFAULT_SORT_KEY,)
    return tuple(keys)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_job_query(
    *,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
    search: Optional[str] = None,
    location: Optional[str] = None,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> JobQuery:
    """
    Build a JobQuery from raw request parameters.

    An empty or whitespace-only search term is treated as no search at all,
    never as an empty pattern.
    """
    resolved_limit = min(parse_positive_int(limit, default_limit), max_limit)
    # Pages whose offset would not fit in the database are treated as bad input
    max_page = MAX_OFFSET // resolved_limit + 1

    return JobQuery(
        page=parse_positive_int(page, DEFAULT_PAGE, maximum=max_page),
        limit=resolved_limit,
        sort=parse_sort(sort),
        location=location or None,
        search=_clean_text(search),
    )
