"""Provider Directory: credential records for prescribing providers."""
import logging
from typing import Optional

from ..core.config import settings
from ..core.errors import DuplicateProvider
from ..core.validation import validate_text
from ..models.provider import ProviderRecord
from ..schemas import ProviderRecordSnapshot
from .ledger_state import LedgerState

logger = logging.getLogger(__name__)


def register_provider(
    state: LedgerState, caller_id: str, specialty: str, license_number: str
) -> ProviderRecordSnapshot:
    validate_text(specialty, "specialty", settings.MAX_SPECIALTY_LENGTH)
    validate_text(license_number, "license_number", settings.MAX_LICENSE_NUMBER_LENGTH)

    with state.transaction():
        if state.get_provider(caller_id) is not None:
            logger.warning("Rejected duplicate provider registration for %s", caller_id)
            raise DuplicateProvider(f"Provider {caller_id} is already registered")

        provider = state.put_provider(
            ProviderRecord(
                provider_id=caller_id,
                specialty=specialty,
                license_number=license_number,
                license_status=True,
            )
        )
        snapshot = ProviderRecordSnapshot.model_validate(provider)

    logger.info("Provider %s registered (%s)", caller_id, specialty)
    return snapshot


def get_provider_profile(state: LedgerState, provider_id: str) -> Optional[ProviderRecordSnapshot]:
    provider = state.get_provider(provider_id)
    if provider is None:
        return None
    return ProviderRecordSnapshot.model_validate(provider)


def verify_provider_credentials(state: LedgerState, provider_id: str) -> bool:
    """Return the provider's license status; an unknown provider is simply not verified."""
    provider = state.get_provider(provider_id)
    if provider is None:
        return False
    return bool(provider.license_status)
