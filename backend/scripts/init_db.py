"""
Database initialization script.
Creates the patients table and optionally seeds sample patients.

Usage:
    python scripts/init_db.py [--seed]
"""
import argparse
import logging

from patient_dashboard.config import get_settings
from patient_dashboard.database import SessionLocal, init_db
from patient_dashboard.services.patient_service import PatientService
from patient_dashboard.services.record_store import RecordStore

logger = logging.getLogger(__name__)

settings = get_settings()

SAMPLE_PATIENTS = [
    {"firstName": "Amy", "middleName": "", "lastName": "Lee", "dob": "1990-05-05", "status": "Inquiry",
     "address": "12 Elm Street", "city": "Denver", "state": "CO", "zipCode": "80202"},
    {"firstName": "Bob", "middleName": "", "lastName": "Ng", "dob": "1980-01-01", "status": "Active",
     "address": "400 Harbor Road", "city": "Boston", "state": "MA", "zipCode": "02110"},
    {"firstName": "Carla", "middleName": "Jean", "lastName": "Diaz", "dob": "1975-03-12", "status": "Onboarding",
     "address": "77 Lakeview Drive", "city": "Chicago", "state": "IL", "zipCode": "60601"},
    {"firstName": "Dev", "middleName": "", "lastName": "Patel", "dob": "2001-11-30", "status": "Churned",
     "address": "5 Congress Avenue", "city": "Austin", "state": "TX", "zipCode": "73301-0001"},
]


def init_database(seed: bool = False):
    """Create tables and, when asked, insert the sample patients."""
    print(f"Initializing database at {settings.database_url}...")
    init_db()

    if seed:
        db = SessionLocal()
        try:
            service = PatientService(RecordStore(db))
            for payload in SAMPLE_PATIENTS:
                patient_id = service.create_patient(payload)
                print(f"Created {payload['firstName']} {payload['lastName']} ({patient_id})")
        finally:
            db.close()

    print("Database initialization complete!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    parser = argparse.ArgumentParser(description="Initialize the patient database")
    parser.add_argument("--seed", action="store_true", help="Insert sample patients")
    args = parser.parse_args()
    init_database(seed=args.seed)
