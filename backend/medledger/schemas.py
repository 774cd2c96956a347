"""
Read-only snapshots returned by the ledger operations.

Snapshots are detached copies of the persisted rows: mutating one never
touches ledger state.
"""
from typing import List

from pydantic import BaseModel, ConfigDict


class PatientRecordSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    patient_id: str
    history: str
    genetic_data: str
    active_medications: List[int]
    authorized_providers: List[str]


class ProviderRecordSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    provider_id: str
    specialty: str
    license_number: str
    license_status: bool


class PrescriptionSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: str
    prescriber_id: str
    medication_name: str
    instructions: str
    valid_from: int
    valid_until: int
    is_active: bool
