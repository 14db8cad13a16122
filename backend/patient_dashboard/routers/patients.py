"""
Patient management routes.
"""
import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from patient_dashboard.database import get_db
from patient_dashboard.models.patient import (
    ErrorResponse,
    PatientListResponse,
    PatientMutationResponse,
    PatientResponse,
)
from patient_dashboard.services.patient_service import PatientService, parse_query_params
from patient_dashboard.services.record_store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Patients"])

INVALID_REQUEST = {400: {"model": ErrorResponse}}
NOT_FOUND = {404: {"model": ErrorResponse}}
STORE_FAILURE = {500: {"model": ErrorResponse}}


def get_patient_service(db: Session = Depends(get_db)) -> PatientService:
    """Dependency building the service over a request-scoped session."""
    return PatientService(RecordStore(db))


@router.post(
    "",
    response_model=PatientMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**INVALID_REQUEST, **STORE_FAILURE},
)
def create_patient(
    payload: Dict[str, Any] = Body(...),
    service: PatientService = Depends(get_patient_service)
):
    """Create a new patient record."""
    patient_id = service.create_patient(payload)
    return PatientMutationResponse(id=patient_id, message="Patient created successfully")


@router.get(
    "",
    response_model=PatientListResponse,
    response_model_exclude_none=True,
    responses={**INVALID_REQUEST, **STORE_FAILURE},
)
def list_patients(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Page size, 1-100"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="name, dob, status or location"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    search: Optional[str] = Query(None, description="Search name, city, state and status"),
    service: PatientService = Depends(get_patient_service)
):
    """List patients with search, sorting and pagination."""
    params = parse_query_params(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order, search=search)
    patients, pagination = service.list_patients(params)
    return PatientListResponse(
        patients=patients,
        pagination=pagination,
        message="Patients retrieved successfully"
    )


@router.get(
    "/{patient_id}",
    response_model=PatientResponse,
    response_model_exclude_none=True,
    responses={**NOT_FOUND, **STORE_FAILURE},
)
def get_patient(
    patient_id: str,
    service: PatientService = Depends(get_patient_service)
):
    """Get a specific patient by ID."""
    patient = service.get_patient(patient_id)
    return PatientResponse(patient=patient, message="Patient retrieved successfully")


@router.put(
    "/{patient_id}",
    response_model=PatientMutationResponse,
    responses={**INVALID_REQUEST, **STORE_FAILURE},
)
def update_patient(
    patient_id: str,
    payload: Dict[str, Any] = Body(...),
    service: PatientService = Depends(get_patient_service)
):
    """Update a patient record."""
    service.update_patient(patient_id, payload)
    return PatientMutationResponse(id=patient_id, message="Patient updated successfully")


@router.delete(
    "/{patient_id}",
    response_model=PatientMutationResponse,
    responses=STORE_FAILURE,
)
def delete_patient(
    patient_id: str,
    service: PatientService = Depends(get_patient_service)
):
    """Delete a patient."""
    service.delete_patient(patient_id)
    return PatientMutationResponse(id=patient_id, message="Patient deleted successfully")
