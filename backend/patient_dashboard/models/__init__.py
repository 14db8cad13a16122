"""
Pydantic models for the Patient Dashboard.
"""
from patient_dashboard.models.patient import (
    PatientStatus,
    PatientRecord,
    PatientForm,
    PaginationInfo,
    PatientListResponse,
    PatientResponse,
    PatientMutationResponse,
    ErrorResponse,
)

__all__ = [
    "PatientStatus", "PatientRecord", "PatientForm",
    "PaginationInfo", "PatientListResponse", "PatientResponse",
    "PatientMutationResponse", "ErrorResponse",
]
