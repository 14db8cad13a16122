"""
Patient Dashboard controller - drives the list view from user interactions.

Holds the current ListState, a cache of fetched listings keyed by query, and
the notifications shown to the user. After every successful mutation the cache
is invalidated and the current listing is fetched again.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from patient_dashboard.client import list_state as transitions
from patient_dashboard.client.api_client import PatientApiClient
from patient_dashboard.client.list_state import ListState
from patient_dashboard.config import get_settings
from patient_dashboard.exceptions import ApiError, PatientDashboardError, TransportError
from patient_dashboard.models.patient import (
    PaginationInfo,
    PatientForm,
    PatientListResponse,
    PatientRecord,
)

logger = logging.getLogger(__name__)

NO_RESPONSE_MESSAGE = "No response from server. Please check if the backend is running."
DELETE_FAILED_MESSAGE = "Failed to delete patient. Please try again."


@dataclass(frozen=True)
class Notification:
    """A dismissible toast."""
    level: str  # "success" or "error"
    message: str


class PatientDashboard:
    """The patient list page."""

    def __init__(self, api: PatientApiClient, state: Optional[ListState] = None,
                 refetch_delay: Optional[float] = None):
        self.api = api
        self.state = state or ListState()
        self.refetch_delay = get_settings().refetch_delay if refetch_delay is None else refetch_delay
        self.listing: Optional[PatientListResponse] = None
        self.load_error: Optional[str] = None
        self.notifications: List[Notification] = []
        self._cache: Dict[Tuple, PatientListResponse] = {}
        self._generation = 0

    @property
    def patients(self) -> List[PatientRecord]:
        return self.listing.patients if self.listing else []

    @property
    def pagination(self) -> Optional[PaginationInfo]:
        return self.listing.pagination if self.listing else None

    def _notify(self, level: str, message: str):
        self.notifications.append(Notification(level, message))

    def dismiss_notifications(self):
        self.notifications.clear()

    def invalidate(self):
        """Mark every cached listing stale."""
        self._cache.clear()
        self._generation += 1

    def _is_current(self, key: Tuple, generation: int) -> bool:
        return key == self.state.query_key() and generation == self._generation

    async def refresh(self) -> Optional[PatientListResponse]:
        """Show the listing for the current state, fetching it unless cached.

        A response that arrives after the state moved on to another query, or
        after the listing was invalidated by a mutation, is dropped, so the
        latest interaction always decides what is displayed.
        """
        key = self.state.query_key()
        cached = self._cache.get(key)
        if cached is not None:
            self.listing = cached
            return cached

        generation = self._generation
        try:
            response = await self.api.list_patients(self.state.query_params())
        except ApiError as e:
            if self._is_current(key, generation):
                self.load_error = e.message
            raise
        except TransportError:
            if self._is_current(key, generation):
                self.load_error = NO_RESPONSE_MESSAGE
            raise

        if not self._is_current(key, generation):
            logger.debug(f"Discarding stale listing for {key}")
            return None
        self._cache[key] = response
        self.listing = response
        self.load_error = None
        return response

    async def _refetch(self):
        """Refetch after a mutation; a failure stays visible in ``load_error``."""
        try:
            await self.refresh()
        except PatientDashboardError as e:
            logger.error(f"Error refreshing patients: {e}")

    async def _move_to(self, new_state: ListState) -> Optional[PatientListResponse]:
        if new_state == self.state:
            return self.listing
        self.state = new_state
        return await self.refresh()

    async def sort_by(self, field: str):
        return await self._move_to(transitions.sort_clicked(self.state, field))

    async def change_page_size(self, limit: int):
        return await self._move_to(transitions.page_size_changed(self.state, limit))

    async def search(self, term: str):
        return await self._move_to(transitions.search_changed(self.state, term))

    async def go_to_page(self, page: int):
        return await self._move_to(transitions.navigate_to(self.state, page, self.pagination))

    async def next_page(self):
        return await self._move_to(transitions.next_page(self.state, self.pagination))

    async def previous_page(self):
        return await self._move_to(transitions.previous_page(self.state, self.pagination))

    def request_delete(self, patient_id: str, name: str):
        self.state = transitions.delete_requested(self.state, patient_id, name)

    def cancel_delete(self):
        self.state = transitions.delete_finished(self.state)

    async def confirm_delete(self) -> bool:
        """Delete the patient awaiting confirmation and refresh the list."""
        patient_id = self.state.pending_delete_id
        if patient_id is None:
            return False
        name = self.state.pending_delete_name or "Patient"
        try:
            await self.api.delete_patient(patient_id)
        except PatientDashboardError as e:
            logger.error(f"Error deleting patient {patient_id}: {e}")
            self._notify("error", DELETE_FAILED_MESSAGE)
            return False
        finally:
            self.state = transitions.delete_finished(self.state)

        self.invalidate()
        self._notify("success", f"{name} deleted successfully!")
        await self._refetch()
        return True

    def open_add_form(self):
        self.state = transitions.add_started(self.state)

    def open_edit_form(self, record: PatientRecord):
        self.state = transitions.edit_started(self.state, record)

    def close_form(self):
        self.state = transitions.form_closed(self.state)

    def edit_form_defaults(self) -> Optional[PatientForm]:
        """Form prefilled from the record being edited."""
        if self.state.editing_record is None:
            return None
        return PatientForm.from_record(self.state.editing_record)

    async def submit(self, form: PatientForm) -> bool:
        """Create or update a patient from the open form.

        On success the form closes and, after ``refetch_delay``, the current
        listing is fetched again. On failure the form stays open and an error
        notification explains whether the server rejected the request or never
        answered.
        """
        editing = self.state.editing_record
        action = "updating" if editing is not None else "adding"
        payload = form.sanitized().to_payload()
        try:
            if editing is not None:
                await self.api.update_patient(editing.id, payload)
            else:
                await self.api.create_patient(payload)
        except ApiError as e:
            logger.error(f"Error {action} patient: {e}")
            if e.server_message:
                self._notify("error", f"Server error: {e.server_message}")
            else:
                self._notify("error", f"Error {action} patient. Please try again.")
            return False
        except TransportError as e:
            logger.error(f"Error {action} patient: {e}")
            self._notify("error", NO_RESPONSE_MESSAGE)
            return False

        self._notify("success", f"Patient {'updated' if editing is not None else 'added'} successfully!")
        self.close_form()
        self.invalidate()
        if self.refetch_delay:
            await asyncio.sleep(self.refetch_delay)
        await self._refetch()
        return True
