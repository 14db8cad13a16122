"""
API Routers for the Patient Dashboard.
"""
from patient_dashboard.routers.patients import router as patients_router

__all__ = [
    "patients_router",
]
