from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pydantic import BaseModel
from ..models.base import get_db
from ..core.errors import ProviderNotFound
from ..core.security import get_caller_id
from ..schemas import ProviderRecordSnapshot
from ..services.ledger_state import LedgerState
from ..services import provider_directory

router = APIRouter(prefix="/providers", tags=["providers"])


class ProviderCreate(BaseModel):
    specialty: str
    license_number: str


class CredentialResponse(BaseModel):
    provider_id: str
    verified: bool


@router.post("/", response_model=ProviderRecordSnapshot, status_code=status.HTTP_201_CREATED)
def register_provider(
    provider_in: ProviderCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    return provider_directory.register_provider(
        LedgerState(db), caller_id, provider_in.specialty, provider_in.license_number
    )


@router.get("/{provider_id}", response_model=ProviderRecordSnapshot)
def get_provider(provider_id: str, db: Session = Depends(get_db)):
    provider = provider_directory.get_provider_profile(LedgerState(db), provider_id)
    if provider is None:
        raise ProviderNotFound(f"No provider record for {provider_id}")
    return provider


@router.get("/{provider_id}/verify", response_model=CredentialResponse)
def verify_provider(provider_id: str, db: Session = Depends(get_db)):
    """Unknown providers are reported as not verified rather than 404."""
    return CredentialResponse(
        provider_id=provider_id,
        verified=provider_directory.verify_provider_credentials(LedgerState(db), provider_id),
    )
