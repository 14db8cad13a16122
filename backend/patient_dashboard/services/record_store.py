"""
Record Store - document persistence for patients.

A thin adapter over the ``patients`` document table. It knows nothing about
validation or querying: it inserts, lists, reads, replaces and deletes JSON
documents by id. Every database failure is rolled back and surfaced as a
StoreError carrying a generic message; the cause is logged.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patient_dashboard.database import PatientDocument
from patient_dashboard.exceptions import StoreError

logger = logging.getLogger(__name__)


class RecordStore:
    """Patient document store backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, message: str, error: Exception) -> StoreError:
        self.db.rollback()
        logger.error(f"{message}: {error}")
        return StoreError(message)

    def _find(self, patient_id: str) -> Optional[PatientDocument]:
        return self.db.query(PatientDocument).filter(PatientDocument.id == patient_id).first()

    def insert(self, document: Dict[str, Any]) -> str:
        """Persist a new document and return its store-assigned id."""
        try:
            row = PatientDocument(data=document)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("Failed to create patient", e) from e
        logger.info(f"Stored patient document {row.id}")
        return row.id

    def list(self) -> List[Tuple[str, Dict[str, Any]]]:
        """Every stored document as ``(id, document)`` pairs, in store order."""
        try:
            rows = self.db.query(PatientDocument).order_by(PatientDocument.seq).all()
        except SQLAlchemyError as e:
            raise self._fail("Failed to fetch patients", e) from e
        return [(row.id, dict(row.data)) for row in rows]

    def get(self, patient_id: str) -> Optional[Dict[str, Any]]:
        try:
            row = self._find(patient_id)
        except SQLAlchemyError as e:
            raise self._fail("Failed to fetch patient", e) from e
        return dict(row.data) if row else None

    def update(self, patient_id: str, document: Dict[str, Any]) -> None:
        """Replace a stored document. A missing id is a store failure."""
        try:
            row = self._find(patient_id)
            if row is None:
                raise self._fail("Failed to update patient", LookupError(f"no document {patient_id}"))
            row.data = document
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("Failed to update patient", e) from e

    def delete(self, patient_id: str) -> None:
        """Delete a document. Deleting an id that does not exist succeeds."""
        try:
            row = self._find(patient_id)
            if row is not None:
                self.db.delete(row)
                self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("Failed to delete patient", e) from e
        logger.info(f"Deleted patient document {patient_id}")
