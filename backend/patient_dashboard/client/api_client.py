"""
Async HTTP client for the Patient Dashboard REST API.

Failures come back as two distinct exceptions: TransportError when no response
arrived at all, ApiError when the server answered with an error status.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from patient_dashboard.config import get_settings
from patient_dashboard.exceptions import ApiError, TransportError
from patient_dashboard.models.patient import PatientListResponse, PatientRecord

logger = logging.getLogger(__name__)


class PatientApiClient:
    """Thin wrapper around ``httpx.AsyncClient`` for the /patients routes."""

    def __init__(self, base_url: Optional[str] = None, http: Optional[httpx.AsyncClient] = None):
        settings = get_settings()
        self._http = http or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=settings.client_timeout,
        )

    async def aclose(self):
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.warning(f"No response for {method} {url}: {e}")
            raise TransportError("No response received from server", cause=e) from e

        if response.is_error:
            server_message = None
            try:
                body = response.json()
                if isinstance(body, dict):
                    server_message = body.get("error")
            except ValueError:
                pass
            raise ApiError(response.status_code, server_message)
        return response.json()

    async def list_patients(self, params: Dict[str, str]) -> PatientListResponse:
        data = await self._request("GET", "/patients", params=params)
        return PatientListResponse.model_validate(data)

    async def get_patient(self, patient_id: str) -> PatientRecord:
        data = await self._request("GET", f"/patients/{patient_id}")
        return PatientRecord.model_validate(data["patient"])

    async def create_patient(self, payload: Dict[str, Any]) -> str:
        data = await self._request("POST", "/patients", json=payload)
        return data["id"]

    async def update_patient(self, patient_id: str, payload: Dict[str, Any]) -> str:
        data = await self._request("PUT", f"/patients/{patient_id}", json=payload)
        return data["id"]

    async def delete_patient(self, patient_id: str) -> str:
        data = await self._request("DELETE", f"/patients/{patient_id}")
        return data["id"]
