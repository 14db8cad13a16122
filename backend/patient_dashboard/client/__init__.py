"""
Dashboard client: list view state, API client and the page controller.
"""
from patient_dashboard.client.list_state import ListState, PAGE_SIZE_OPTIONS
from patient_dashboard.client.api_client import PatientApiClient
from patient_dashboard.client.dashboard import PatientDashboard, Notification

__all__ = [
    "ListState",
    "PAGE_SIZE_OPTIONS",
    "PatientApiClient",
    "PatientDashboard",
    "Notification"
]
