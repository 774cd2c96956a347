"""
Patient Record Store.

Patients register once under their caller identity and grant providers the
right to prescribe for them. ``authorize_provider`` is the only writer of
``authorized_providers``; the active-medication helpers are the only writers
of ``active_medications``.
"""
import logging
from typing import Optional

from ..core.config import settings
from ..core.errors import (
    AlreadyAuthorized,
    DuplicateRecord,
    MaxProvidersReached,
    RecordNotFound,
)
from ..core.validation import validate_identity, validate_text
from ..models.patient import PatientRecord
from ..schemas import PatientRecordSnapshot
from .ledger_state import LedgerState

logger = logging.getLogger(__name__)


def register_patient(
    state: LedgerState, caller_id: str, history: str, genetic_data: str
) -> PatientRecordSnapshot:
    """Create the caller's patient record with no medications and no authorized providers."""
    validate_text(history, "history", settings.MAX_HISTORY_LENGTH)
    validate_text(genetic_data, "genetic_data", settings.MAX_GENETIC_DATA_LENGTH)

    with state.transaction():
        if state.get_patient(caller_id) is not None:
            logger.warning("Rejected duplicate patient registration for %s", caller_id)
            raise DuplicateRecord(f"Patient {caller_id} is already registered")

        patient = state.put_patient(
            PatientRecord(
                patient_id=caller_id,
                history=history,
                genetic_data=genetic_data,
                active_medications=[],
                authorized_providers=[],
            )
        )
        snapshot = PatientRecordSnapshot.model_validate(patient)

    logger.info("Patient %s registered", caller_id)
    return snapshot


def get_patient_record(state: LedgerState, patient_id: str) -> Optional[PatientRecordSnapshot]:
    patient = state.get_patient(patient_id)
    if patient is None:
        return None
    return PatientRecordSnapshot.model_validate(patient)


def authorize_provider(state: LedgerState, caller_id: str, provider_id: str) -> PatientRecordSnapshot:
    """Append ``provider_id`` to the caller's authorized providers, preserving grant order."""
    validate_identity(provider_id, "provider_id")

    with state.transaction():
        patient = state.get_patient(caller_id)
        if patient is None:
            raise RecordNotFound(f"No patient record for {caller_id}")

        providers = list(patient.authorized_providers or [])
        if provider_id in providers:
            logger.warning("Provider %s already authorized by %s", provider_id, caller_id)
            raise AlreadyAuthorized(f"Provider {provider_id} is already authorized")
        if len(providers) >= settings.MAX_AUTHORIZED_PROVIDERS:
            logger.warning("Patient %s hit the authorized provider limit", caller_id)
            raise MaxProvidersReached(
                f"At most {settings.MAX_AUTHORIZED_PROVIDERS} providers may be authorized"
            )

        patient.authorized_providers = providers + [provider_id]
        state.put_patient(patient)
        snapshot = PatientRecordSnapshot.model_validate(patient)

    logger.info("Patient %s authorized provider %s", caller_id, provider_id)
    return snapshot


def add_active_medication(state: LedgerState, patient_id: str, prescription_id: int) -> bool:
    """
    Append a prescription ID to the patient's active medications.

    Must run inside an open transaction. Returns False, leaving the list
    untouched, when the patient is unknown or the list is full.
    """
    patient = state.get_patient(patient_id)
    if patient is None:
        return False

    medications = list(patient.active_medications or [])
    if len(medications) >= settings.MAX_ACTIVE_MEDICATIONS:
        logger.warning(
            "Active medication list full for patient %s; prescription %s not listed",
            patient_id, prescription_id,
        )
        return False

    patient.active_medications = medications + [prescription_id]
    state.put_patient(patient)
    return True


def remove_active_medication(state: LedgerState, patient_id: str, prescription_id: int) -> bool:
    """Drop a prescription ID from the patient's active medications. Must run inside a transaction."""
    patient = state.get_patient(patient_id)
    if patient is None:
        return False

    medications = list(patient.active_medications or [])
    if prescription_id not in medications:
        return False

    patient.active_medications = [m for m in medications if m != prescription_id]
    state.put_patient(patient)
    return True
