from sqlalchemy import Column, String, Boolean
from .base import Base, TimestampMixin


class ProviderRecord(Base, TimestampMixin):
    __tablename__ = "providers"

    provider_id = Column(String(128), primary_key=True)
    specialty = Column(String(64), nullable=False)
    license_number = Column(String(32), nullable=False)
    # Self-asserted at registration; revocation happens outside the ledger
    license_status = Column(Boolean, nullable=False, default=True)
