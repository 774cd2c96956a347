"""
Demo data seeder for MedLedger.

Walks the basic ledger scenario so a fresh instance has something to look at:
a registered patient and provider, the patient's authorization of that
provider, and one active prescription.

  Patient : demo-patient   (send as X-Caller-Id)
  Provider: demo-provider  (send as X-Caller-Id)

This seeder is idempotent: it is safe to call on every startup.
"""
import logging

from .models.base import SessionLocal, Base, engine
from .services.ledger_state import LedgerState
from .services import patient_records, provider_directory, prescription_ledger

logger = logging.getLogger(__name__)

DEMO_PATIENT_ID = "demo-patient"
DEMO_PROVIDER_ID = "demo-provider"
DEMO_SPECIALTY = "Cardio"
DEMO_LICENSE_NUMBER = "DEMO-LIC-001"
DEMO_MEDICATION = "Aspirin"


def seed_demo_data() -> None:
    """Create the demo patient, provider, authorization and prescription if missing."""
    # Ensure tables exist (no-op when already created at startup)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        state = LedgerState(db)
        _seed_patient(state)
        _seed_provider(state)
        _seed_prescription(state)
    finally:
        db.close()


# ── helpers ──────────────────────────────────────────────────────────────────

def _seed_patient(state: LedgerState) -> None:
    if patient_records.get_patient_record(state, DEMO_PATIENT_ID) is None:
        patient_records.register_patient(
            state, DEMO_PATIENT_ID, "Demo history: no known allergies", "Demo genetic panel"
        )
        logger.info("[seed] Created demo patient : %s", DEMO_PATIENT_ID)


def _seed_provider(state: LedgerState) -> None:
    if provider_directory.get_provider_profile(state, DEMO_PROVIDER_ID) is None:
        provider_directory.register_provider(
            state, DEMO_PROVIDER_ID, DEMO_SPECIALTY, DEMO_LICENSE_NUMBER
        )
        logger.info("[seed] Created demo provider: %s", DEMO_PROVIDER_ID)

    patient = patient_records.get_patient_record(state, DEMO_PATIENT_ID)
    if DEMO_PROVIDER_ID not in patient.authorized_providers:
        patient_records.authorize_provider(state, DEMO_PATIENT_ID, DEMO_PROVIDER_ID)
        logger.info("[seed] %s authorized %s", DEMO_PATIENT_ID, DEMO_PROVIDER_ID)


def _seed_prescription(state: LedgerState) -> None:
    if prescription_ledger.get_prescription_count(state) > 0:
        return
    prescription_id = prescription_ledger.create_prescription(
        state, DEMO_PROVIDER_ID, DEMO_PATIENT_ID, DEMO_MEDICATION, "1/day", 100, 200
    )
    logger.info("[seed] Created demo prescription: %s (id: %s)", DEMO_MEDICATION, prescription_id)
