"""
Authorization checks for the records ledger.

Authorization is never cached: every check re-reads the patient record, so a
grant made by ``authorize_provider`` is visible to the very next call.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.prescription import Prescription
    from ..services.ledger_state import LedgerState


def is_authorized(state: "LedgerState", patient_id: str, provider_id: str) -> bool:
    """Check if ``provider_id`` is in the patient's authorized-provider list."""
    patient = state.get_patient(patient_id)
    if patient is None:
        return False
    return provider_id in (patient.authorized_providers or [])


def can_deactivate(prescription: "Prescription", caller_id: str) -> bool:
    """Only the prescriber or the patient may deactivate a prescription."""
    return caller_id in (prescription.prescriber_id, prescription.patient_id)
