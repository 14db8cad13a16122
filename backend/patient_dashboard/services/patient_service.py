"""
Patient Service - validation and orchestration behind the /patients routes.

Every list request fetches the whole collection from the record store and hands
it to the query engine; nothing is cached between requests.
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from patient_dashboard.config import get_settings
from patient_dashboard.exceptions import NotFoundError, ValidationError
from patient_dashboard.models.patient import (
    PaginationInfo,
    PatientRecord,
    STATUS_VALUES,
    is_valid_status,
    missing_required_fields,
)
from patient_dashboard.services.query_engine import QueryParams, SortOrder, query_patients
from patient_dashboard.services.record_store import RecordStore

logger = logging.getLogger(__name__)

settings = get_settings()

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Optional[str], default: int) -> int:
    """Leading-integer parse of a query string value.

    ``"3"`` and ``"3abc"`` give 3; absent, empty or non-numeric values give
    ``default``. Zero and negatives are returned as-is for range checks.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else default


def parse_sort_order(value: Optional[str]) -> SortOrder:
    """``asc`` (or nothing) sorts ascending; any other value sorts descending."""
    if not value or value.lower() == SortOrder.ASC.value:
        return SortOrder.ASC
    return SortOrder.DESC


def parse_query_params(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    search: Optional[str] = None,
) -> QueryParams:
    """Turn raw request strings into validated QueryParams."""
    page_number = parse_int(page, 1)
    page_size = parse_int(limit, settings.default_page_limit)

    if page_number < 1:
        raise ValidationError("Page must be greater than 0")
    if page_size < 1 or page_size > settings.max_page_limit:
        raise ValidationError(f"Limit must be between 1 and {settings.max_page_limit}")

    return QueryParams(
        search=search or "",
        sort_by=sort_by or None,
        sort_order=parse_sort_order(sort_order),
        page=page_number,
        limit=page_size,
    )


def validate_patient_payload(payload: Dict[str, Any]) -> PatientRecord:
    """Check required fields and status, then build the record to persist."""
    if missing_required_fields(payload):
        raise ValidationError(
            "Missing required fields: firstName, lastName, dob, and status are required"
        )
    if not is_valid_status(payload.get("status")):
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(STATUS_VALUES)}")

    data = {k: v for k, v in payload.items() if k != "id"}
    try:
        return PatientRecord.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"])
        raise ValidationError(f"Invalid value for {field}: {first['msg']}")


class PatientService:
    """CRUD and listing operations over a record store."""

    def __init__(self, store: RecordStore):
        self.store = store

    def _load_all(self) -> List[PatientRecord]:
        return [PatientRecord.from_document(pid, data) for pid, data in self.store.list()]

    def create_patient(self, payload: Dict[str, Any]) -> str:
        """Validate and store a new patient, returning its id."""
        record = validate_patient_payload(payload)
        patient_id = self.store.insert(record.to_document())
        logger.info(f"Created patient {patient_id}")
        return patient_id

    def list_patients(self, params: QueryParams) -> Tuple[List[PatientRecord], PaginationInfo]:
        """One page of patients plus pagination metadata.

        A page beyond the last one is rejected once the full result is known;
        an empty collection accepts any page and returns nothing.
        """
        logger.info(
            f"Listing patients: page={params.page} limit={params.limit} "
            f"sortBy={params.sort_by} sortOrder={params.sort_order.value} search={params.search!r}"
        )
        page, pagination = query_patients(self._load_all(), params)

        if params.page > pagination.total_pages and pagination.total_pages > 0:
            raise ValidationError("Page number exceeds total pages")
        return page, pagination

    def get_patient(self, patient_id: str) -> PatientRecord:
        data = self.store.get(patient_id)
        if data is None:
            raise NotFoundError("Patient not found")
        return PatientRecord.from_document(patient_id, data)

    def update_patient(self, patient_id: str, payload: Dict[str, Any]) -> str:
        """Replace a patient's fields; the id never changes."""
        record = validate_patient_payload(payload)
        self.store.update(patient_id, record.to_document())
        logger.info(f"Updated patient {patient_id}")
        return patient_id

    def delete_patient(self, patient_id: str) -> str:
        self.store.delete(patient_id)
        return patient_id
