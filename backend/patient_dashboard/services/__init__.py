"""
Services for the Patient Dashboard.
"""
from patient_dashboard.services.record_store import RecordStore
from patient_dashboard.services.query_engine import QueryParams, SortField, SortOrder, query_patients
from patient_dashboard.services.patient_service import PatientService

__all__ = [
    "RecordStore",
    "QueryParams",
    "SortField",
    "SortOrder",
    "query_patients",
    "PatientService"
]
