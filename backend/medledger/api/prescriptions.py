from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from ..models.base import get_db
from ..models.prescription import MAX_TIMESTAMP
from ..core.security import get_caller_id
from ..schemas import PrescriptionSnapshot
from ..services.ledger_state import LedgerState
from ..services import prescription_ledger

router = APIRouter(prefix="/prescriptions", tags=["prescriptions"])


class PrescriptionCreate(BaseModel):
    patient_id: str
    medication_name: str
    instructions: str
    valid_from: int = Field(ge=0, le=MAX_TIMESTAMP)
    valid_until: int = Field(ge=0, le=MAX_TIMESTAMP)


class PrescriptionCreated(BaseModel):
    id: int


class LedgerStatsResponse(BaseModel):
    prescription_count: int
    tracked_prescriptions: List[int]


@router.post("/", response_model=PrescriptionCreated, status_code=status.HTTP_201_CREATED)
def create_prescription(
    req: PrescriptionCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """Issue a prescription. The caller must be authorized by the patient."""
    prescription_id = prescription_ledger.create_prescription(
        LedgerState(db),
        caller_id,
        req.patient_id,
        req.medication_name,
        req.instructions,
        req.valid_from,
        req.valid_until,
    )
    return PrescriptionCreated(id=prescription_id)


@router.get("/active", response_model=List[int])
def get_active_prescriptions(
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """Active prescription IDs for the calling patient, in issue order."""
    return prescription_ledger.get_active_patient_prescriptions(LedgerState(db), caller_id)


@router.get("/stats", response_model=LedgerStatsResponse)
def get_ledger_stats(db: Session = Depends(get_db)):
    state = LedgerState(db)
    return LedgerStatsResponse(
        prescription_count=prescription_ledger.get_prescription_count(state),
        tracked_prescriptions=prescription_ledger.get_tracked_prescriptions(state),
    )


@router.get("/{prescription_id}", response_model=PrescriptionSnapshot)
def get_prescription(prescription_id: int, db: Session = Depends(get_db)):
    prescription = prescription_ledger.get_prescription_details(LedgerState(db), prescription_id)
    if prescription is None:
        raise HTTPException(status_code=404, detail="Prescription not found")
    return prescription


@router.post("/{prescription_id}/deactivate", response_model=PrescriptionSnapshot)
def deactivate_prescription(
    prescription_id: int,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    return prescription_ledger.deactivate_prescription(LedgerState(db), caller_id, prescription_id)
