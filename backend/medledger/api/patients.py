from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pydantic import BaseModel
from ..models.base import get_db
from ..core.errors import RecordNotFound
from ..core.permissions import is_authorized
from ..core.security import get_caller_id
from ..schemas import PatientRecordSnapshot
from ..services.ledger_state import LedgerState
from ..services import patient_records

router = APIRouter(prefix="/patients", tags=["patients"])


class PatientCreate(BaseModel):
    history: str
    genetic_data: str


class ProviderAuthorization(BaseModel):
    provider_id: str


class AuthorizationResponse(BaseModel):
    patient_id: str
    provider_id: str
    authorized: bool


@router.post("/", response_model=PatientRecordSnapshot, status_code=status.HTTP_201_CREATED)
def register_patient(
    patient_in: PatientCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """Register the caller as a patient. Each identity may register once."""
    return patient_records.register_patient(
        LedgerState(db), caller_id, patient_in.history, patient_in.genetic_data
    )


@router.post("/me/providers", response_model=PatientRecordSnapshot)
def authorize_provider(
    req: ProviderAuthorization,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """Grant a provider the right to prescribe for the calling patient."""
    return patient_records.authorize_provider(LedgerState(db), caller_id, req.provider_id)


@router.get("/{patient_id}", response_model=PatientRecordSnapshot)
def get_patient(patient_id: str, db: Session = Depends(get_db)):
    patient = patient_records.get_patient_record(LedgerState(db), patient_id)
    if patient is None:
        raise RecordNotFound(f"No patient record for {patient_id}")
    return patient


@router.get("/{patient_id}/authorized/{provider_id}", response_model=AuthorizationResponse)
def check_authorization(patient_id: str, provider_id: str, db: Session = Depends(get_db)):
    return AuthorizationResponse(
        patient_id=patient_id,
        provider_id=provider_id,
        authorized=is_authorized(LedgerState(db), patient_id, provider_id),
    )
