"""
Prescription Ledger.

Prescriptions get IDs from a ledger-wide counter (0, 1, 2, ...) that is read
and incremented inside the same serialized transaction, so no two creations
can ever share an ID. Every issued ID is appended to a bounded tracking list,
which is the only index the active-prescription scan walks.

Known quirk: when the tracking list is full, creation raises
PrescriptionListOverflow but keeps the prescription row and the counter
increment. Such a prescription exists and can be fetched by ID, yet never
shows up in ``get_active_patient_prescriptions``.
"""
import logging
from typing import List, Optional

from ..core.config import settings
from ..core.errors import InvalidPrescriptionData, PrescriptionListOverflow, Unauthorized
from ..core.permissions import can_deactivate, is_authorized
from ..core.validation import validate_text
from ..models.prescription import MAX_TIMESTAMP, Prescription
from ..schemas import PrescriptionSnapshot
from .ledger_state import LedgerState
from .patient_records import add_active_medication, remove_active_medication

logger = logging.getLogger(__name__)


def _is_timestamp(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_TIMESTAMP


def create_prescription(
    state: LedgerState,
    caller_id: str,
    patient_id: str,
    medication_name: str,
    instructions: str,
    valid_from: int,
    valid_until: int,
) -> int:
    """
    Issue a prescription for ``patient_id`` written by ``caller_id``.

    Checks run in a fixed order: authorization, validity window, then text
    fields. Returns the new prescription ID.
    """
    with state.transaction():
        if not is_authorized(state, patient_id, caller_id):
            logger.warning("Provider %s not authorized for patient %s", caller_id, patient_id)
            raise Unauthorized(f"{caller_id} is not authorized to prescribe for {patient_id}")

        if not (_is_timestamp(valid_from) and _is_timestamp(valid_until)):
            raise InvalidPrescriptionData(
                f"valid_from and valid_until must be integers between 0 and {MAX_TIMESTAMP}"
            )
        if valid_from >= valid_until:
            raise InvalidPrescriptionData("valid_from must be earlier than valid_until")

        validate_text(medication_name, "medication_name", settings.MAX_MEDICATION_NAME_LENGTH)
        validate_text(instructions, "instructions", settings.MAX_INSTRUCTIONS_LENGTH)

        counters = state.get_counters()
        prescription_id = counters.prescription_counter
        counters.prescription_counter = prescription_id + 1

        state.put_prescription(
            Prescription(
                id=prescription_id,
                patient_id=patient_id,
                prescriber_id=caller_id,
                medication_name=medication_name,
                instructions=instructions,
                valid_from=valid_from,
                valid_until=valid_until,
                is_active=True,
            )
        )

        tracked = list(counters.prescription_tracking_list or [])
        if len(tracked) >= settings.MAX_TRACKED_PRESCRIPTIONS:
            logger.warning(
                "Tracking list full; prescription %s stored but not tracked", prescription_id
            )
            raise PrescriptionListOverflow(
                f"Tracking list holds at most {settings.MAX_TRACKED_PRESCRIPTIONS} prescriptions",
                prescription_id=prescription_id,
            )
        counters.prescription_tracking_list = tracked + [prescription_id]
        state.db.flush()

        add_active_medication(state, patient_id, prescription_id)

    logger.info(
        "Prescription %s created for patient %s by %s", prescription_id, patient_id, caller_id
    )
    return prescription_id


def get_prescription_details(state: LedgerState, prescription_id: int) -> Optional[PrescriptionSnapshot]:
    prescription = state.get_prescription(prescription_id)
    if prescription is None:
        return None
    return PrescriptionSnapshot.model_validate(prescription)


def deactivate_prescription(state: LedgerState, caller_id: str, prescription_id: int) -> PrescriptionSnapshot:
    """
    Move a prescription to Inactive. Repeating the call on an inactive
    prescription is a no-op for an authorized caller.
    """
    with state.transaction():
        prescription = state.get_prescription(prescription_id)
        if prescription is None:
            raise InvalidPrescriptionData(f"Prescription {prescription_id} does not exist")
        if not can_deactivate(prescription, caller_id):
            logger.warning("%s may not deactivate prescription %s", caller_id, prescription_id)
            raise Unauthorized(f"{caller_id} may not deactivate prescription {prescription_id}")

        if prescription.is_active:
            prescription.is_active = False
            state.put_prescription(prescription)
            remove_active_medication(state, prescription.patient_id, prescription.id)
            logger.info("Prescription %s deactivated by %s", prescription_id, caller_id)

        snapshot = PrescriptionSnapshot.model_validate(prescription)

    return snapshot


def get_active_patient_prescriptions(state: LedgerState, caller_id: str) -> List[int]:
    """Scan the tracking list in issue order for the caller's active prescriptions."""
    active = []
    for prescription_id in state.tracking_list():
        prescription = state.get_prescription(prescription_id)
        if prescription is None:
            continue
        if prescription.patient_id == caller_id and prescription.is_active:
            active.append(prescription.id)
            if len(active) >= settings.MAX_TRACKED_PRESCRIPTIONS:
                break
    return active


def get_prescription_count(state: LedgerState) -> int:
    """Number of prescription IDs issued so far, including untracked ones."""
    return state.prescription_counter()


def get_tracked_prescriptions(state: LedgerState) -> List[int]:
    return state.tracking_list()
