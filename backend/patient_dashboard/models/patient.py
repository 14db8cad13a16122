"""
Patient models for the record store, the REST API and the dashboard form.

Wire and store documents use camelCase keys (``firstName``, ``zipCode``...);
the Python attributes are snake_case and mapped through field aliases.
"""
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class PatientStatus(str, Enum):
    """Patient lifecycle status."""
    INQUIRY = "Inquiry"
    ONBOARDING = "Onboarding"
    ACTIVE = "Active"
    CHURNED = "Churned"


STATUS_VALUES = [s.value for s in PatientStatus]

REQUIRED_FIELDS = ("firstName", "lastName", "dob", "status")


class PatientRecord(BaseModel):
    """A patient as persisted in the record store and returned by the API."""
    id: Optional[str] = None
    first_name: str = Field(..., alias="firstName")
    middle_name: Optional[str] = Field(None, alias="middleName")
    last_name: str = Field(..., alias="lastName")
    date_of_birth: str = Field(..., alias="dob", description="ISO date, e.g. 1980-01-31")
    status: PatientStatus
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = Field("", alias="zipCode")

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, patient_id: str, data: Dict[str, Any]) -> "PatientRecord":
        """Build a record from a stored document and its identifier."""
        return cls.model_validate({**data, "id": patient_id})

    def to_document(self) -> Dict[str, Any]:
        """Store representation: wire keys, without the identifier."""
        return self.model_dump(by_alias=True, mode="json", exclude={"id"}, exclude_none=True)

    def to_wire(self) -> Dict[str, Any]:
        """JSON representation used in API responses."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


NAME_PATTERN = r"^[a-zA-Z\s'-]+$"
MIN_DOB = date(1900, 1, 1)
MAX_AGE_YEARS = 120


class PatientForm(BaseModel):
    """Data entered in the add/edit patient form.

    The form calls the street line ``street``; the API and store call it
    ``address``. ``to_payload`` and ``from_record`` are the only places where
    that rename happens.
    """
    first_name: str = Field(..., alias="firstName", min_length=2, max_length=50, pattern=NAME_PATTERN)
    middle_name: str = Field("", alias="middleName", max_length=50, pattern=r"^[a-zA-Z\s'-]*$")
    last_name: str = Field(..., alias="lastName", min_length=2, max_length=50, pattern=NAME_PATTERN)
    date_of_birth: str = Field(..., alias="dob")
    status: PatientStatus
    street: str = Field(..., min_length=5, max_length=200)
    city: str = Field(..., min_length=2, max_length=100, pattern=NAME_PATTERN)
    state: str = Field(..., min_length=2, max_length=50, pattern=r"^[a-zA-Z\s]+$")
    zip_code: str = Field(..., alias="zipCode", pattern=r"^\d{5}(-\d{4})?$")

    class Config:
        populate_by_name = True

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: str) -> str:
        try:
            dob = date.fromisoformat(v.strip())
        except ValueError:
            raise ValueError("Please enter a valid date of birth between 1900 and today")
        today = date.today()
        if dob > today or dob < MIN_DOB or today.year - dob.year > MAX_AGE_YEARS:
            raise ValueError("Please enter a valid date of birth between 1900 and today")
        return v

    def sanitized(self) -> "PatientForm":
        """Return a copy with leading/trailing whitespace trimmed from every text field."""
        return self.model_copy(update={
            "first_name": self.first_name.strip(),
            "middle_name": (self.middle_name or "").strip(),
            "last_name": self.last_name.strip(),
            "date_of_birth": self.date_of_birth.strip(),
            "street": self.street.strip(),
            "city": self.city.strip(),
            "state": self.state.strip(),
            "zip_code": self.zip_code.strip(),
        })

    def to_payload(self) -> Dict[str, Any]:
        """Request body for create/update: ``street`` is sent as ``address``."""
        return {
            "firstName": self.first_name,
            "middleName": self.middle_name,
            "lastName": self.last_name,
            "dob": self.date_of_birth,
            "status": self.status.value,
            "address": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
        }

    @classmethod
    def from_record(cls, record: PatientRecord) -> "PatientForm":
        """Prefill the edit form from a stored record (``address`` becomes ``street``)."""
        # Stored records are not re-validated against the form rules.
        return cls.model_construct(**{
            "firstName": record.first_name,
            "middleName": record.middle_name or "",
            "lastName": record.last_name,
            "dob": record.date_of_birth,
            "status": record.status,
            "street": record.address,
            "city": record.city,
            "state": record.state,
            "zipCode": record.zip_code,
        })


def missing_required_fields(payload: Dict[str, Any]) -> List[str]:
    """Names of required fields that are absent or empty in a request body."""
    return [name for name in REQUIRED_FIELDS if not payload.get(name)]


def is_valid_status(value: Any) -> bool:
    return value in STATUS_VALUES


class PaginationInfo(BaseModel):
    """Pagination metadata returned with every listing."""
    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    total_patients: int = Field(..., alias="totalPatients")
    limit: int
    has_next_page: bool = Field(..., alias="hasNextPage")
    has_previous_page: bool = Field(..., alias="hasPreviousPage")

    class Config:
        populate_by_name = True


class PatientListResponse(BaseModel):
    """Body of ``GET /patients``."""
    patients: List[PatientRecord]
    pagination: PaginationInfo
    message: str


class PatientResponse(BaseModel):
    """Body of ``GET /patients/{id}``."""
    patient: PatientRecord
    message: str


class PatientMutationResponse(BaseModel):
    """Body of create, update and delete responses."""
    id: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
