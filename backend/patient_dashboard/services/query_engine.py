"""
Query Engine - search, sort and paginate the patient collection in memory.

``query_patients`` is a pure function of (records, params): it never mutates
the records and never fails. Out-of-range pages simply come back empty; the
caller decides whether that is an error.
"""
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import cmp_to_key
from typing import Any, List, Optional, Sequence, Tuple

from patient_dashboard.models.patient import PaginationInfo, PatientRecord


class SortField(str, Enum):
    """Derived sort keys understood by the engine."""
    NAME = "name"
    DOB = "dob"
    STATUS = "status"
    LOCATION = "location"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class QueryParams:
    """One list request.

    ``sort_by`` is a SortField value, any other wire attribute name (sorted by
    its raw value), or None to keep store order.
    """
    search: str = ""
    sort_by: Optional[str] = None
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1
    limit: int = 10


def matches_search(record: PatientRecord, term: str) -> bool:
    """Case-insensitive substring match on name, location and status."""
    if not term:
        return True
    needle = term.lower()
    haystack = (
        record.first_name,
        record.middle_name or "",
        record.last_name,
        record.city,
        record.state,
        record.status.value,
    )
    return any(needle in value.lower() for value in haystack)


def _timestamp(value: str) -> Optional[float]:
    try:
        d = date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None
    return float(d.toordinal())


def sort_key(record: PatientRecord, sort_by: Optional[str]) -> Any:
    """Comparable key for ``record``; None means it has no usable key (bad dob)."""
    if sort_by == SortField.NAME.value:
        # An absent middle name leaves a double space, as the dashboard always did.
        return f"{record.first_name} {record.middle_name or ''} {record.last_name}".lower()
    if sort_by == SortField.DOB.value:
        return _timestamp(record.date_of_birth)
    if sort_by == SortField.STATUS.value:
        return record.status.value.lower()
    if sort_by == SortField.LOCATION.value:
        return f"{record.city} {record.state} {record.zip_code}".lower()
    value = record.to_wire().get(sort_by or "") or ""
    return value.lower() if isinstance(value, str) else value


def compare_keys(a: Any, b: Any) -> int:
    """Three-way comparison of two keys of the same field."""
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def sort_records(
    records: Sequence[PatientRecord],
    sort_by: Optional[str],
    sort_order: SortOrder = SortOrder.ASC,
) -> List[PatientRecord]:
    """Stable sort. ``desc`` flips less/greater only, so ties keep input order.

    Records without a usable key (an unparseable dob) follow all the others in
    either direction, in input order.
    """
    sign = -1 if sort_order == SortOrder.DESC else 1
    keyed = []
    unkeyed = []
    for r in records:
        key = sort_key(r, sort_by)
        if key is None:
            unkeyed.append(r)
        else:
            keyed.append((key, r))
    keyed.sort(key=cmp_to_key(lambda x, y: sign * compare_keys(x[0], y[0])))
    return [r for _, r in keyed] + unkeyed


def paginate(
    records: Sequence[PatientRecord], page: int, limit: int
) -> Tuple[List[PatientRecord], PaginationInfo]:
    """Slice one page out of ``records`` and describe it."""
    total = len(records)
    total_pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit
    page_records = list(records[start:start + limit])
    return page_records, PaginationInfo(
        current_page=page,
        total_pages=total_pages,
        total_patients=total,
        limit=limit,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


def query_patients(
    records: Sequence[PatientRecord], params: QueryParams
) -> Tuple[List[PatientRecord], PaginationInfo]:
    """Filter, sort and paginate ``records`` according to ``params``."""
    filtered = [r for r in records if matches_search(r, params.search)]
    ordered = sort_records(filtered, params.sort_by, params.sort_order)
    return paginate(ordered, params.page, params.limit)
