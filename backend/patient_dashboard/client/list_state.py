"""
List State - the dashboard's list view as one immutable value.

Every user interaction is a pure function from the current ListState to the
next one. Transitions that do not apply (clicking a disabled pager button,
jumping past the last page) return the state unchanged.
"""
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from patient_dashboard.models.patient import PaginationInfo, PatientRecord
from patient_dashboard.services.query_engine import SortOrder

PAGE_SIZE_OPTIONS = (5, 10, 20, 50)
VISIBLE_PAGE_BUTTONS = 5


@dataclass(frozen=True)
class ListState:
    page: int = 1
    limit: int = 10
    sort_field: Optional[str] = None
    sort_order: SortOrder = SortOrder.ASC
    search: str = ""
    pending_delete_id: Optional[str] = None
    pending_delete_name: Optional[str] = None
    editing_record: Optional[PatientRecord] = None
    adding: bool = False

    def query_key(self) -> Tuple:
        """Identity of the listing this state displays."""
        return (self.page, self.limit, self.sort_field, self.sort_order.value, self.search)

    def query_params(self) -> Dict[str, str]:
        """Request parameters for ``GET /patients``; sortBy only once a column was clicked."""
        params = {"page": str(self.page), "limit": str(self.limit)}
        if self.sort_field:
            params["sortBy"] = self.sort_field
        params["sortOrder"] = self.sort_order.value
        if self.search:
            params["search"] = self.search
        return params

    @property
    def form_open(self) -> bool:
        return self.adding or self.editing_record is not None


def sort_clicked(state: ListState, field: str) -> ListState:
    """Same column flips direction, a new column sorts ascending. Back to page 1."""
    if state.sort_field == field:
        order = SortOrder.DESC if state.sort_order == SortOrder.ASC else SortOrder.ASC
        return replace(state, sort_order=order, page=1)
    return replace(state, sort_field=field, sort_order=SortOrder.ASC, page=1)


def page_size_changed(state: ListState, limit: int) -> ListState:
    return replace(state, limit=limit, page=1)


def search_changed(state: ListState, search: str) -> ListState:
    return replace(state, search=search, page=1)


def navigate_to(state: ListState, target: int, pagination: Optional[PaginationInfo]) -> ListState:
    """Jump to ``target`` if it is an existing page."""
    if pagination is None or not 1 <= target <= pagination.total_pages:
        return state
    return replace(state, page=target)


def next_page(state: ListState, pagination: Optional[PaginationInfo]) -> ListState:
    if pagination is None or not pagination.has_next_page:
        return state
    return navigate_to(state, state.page + 1, pagination)


def previous_page(state: ListState, pagination: Optional[PaginationInfo]) -> ListState:
    if pagination is None or not pagination.has_previous_page:
        return state
    return navigate_to(state, state.page - 1, pagination)


def delete_requested(state: ListState, patient_id: str, name: str) -> ListState:
    return replace(state, pending_delete_id=patient_id, pending_delete_name=name)


def delete_finished(state: ListState) -> ListState:
    """Close the confirmation dialog, whether the delete ran or was cancelled."""
    return replace(state, pending_delete_id=None, pending_delete_name=None)


def add_started(state: ListState) -> ListState:
    return replace(state, adding=True, editing_record=None)


def edit_started(state: ListState, record: PatientRecord) -> ListState:
    return replace(state, editing_record=record, adding=False)


def form_closed(state: ListState) -> ListState:
    return replace(state, editing_record=None, adding=False)


def visible_page_numbers(pagination: Optional[PaginationInfo]) -> List[int]:
    """Page buttons to show: at most five, centred on the current page."""
    if pagination is None:
        return []
    total, current = pagination.total_pages, pagination.current_page
    count = min(VISIBLE_PAGE_BUTTONS, total)
    if total <= VISIBLE_PAGE_BUTTONS or current <= 3:
        first = 1
    elif current >= total - 2:
        first = total - VISIBLE_PAGE_BUTTONS + 1
    else:
        first = current - 2
    return list(range(first, first + count))


def row_number(index: int, pagination: Optional[PaginationInfo]) -> int:
    """1-based row number of the ``index``-th row, counted across pages."""
    if pagination is None:
        return index + 1
    return (pagination.current_page - 1) * pagination.limit + index + 1
