from sqlalchemy import Column, String, Integer, BigInteger, Boolean, JSON
from .base import Base, TimestampMixin

# Largest value a signed 64-bit BigInteger column can hold
MAX_TIMESTAMP = 2 ** 63 - 1


class Prescription(Base, TimestampMixin):
    __tablename__ = "prescriptions"

    # Assigned from LedgerCounters.prescription_counter, never generated by the database
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=False)
    patient_id = Column(String(128), nullable=False, index=True)
    prescriber_id = Column(String(128), nullable=False, index=True)
    medication_name = Column(String(64), nullable=False)
    instructions = Column(String(32), nullable=False)
    valid_from = Column(BigInteger, nullable=False)
    valid_until = Column(BigInteger, nullable=False)
    # Active -> Inactive is the only transition
    is_active = Column(Boolean, nullable=False, default=True)


class LedgerCounters(Base):
    """Single-row table holding the ledger-wide scalars."""
    __tablename__ = "ledger_counters"

    SINGLETON_ID = 1

    id = Column(Integer, primary_key=True)
    prescription_counter = Column(BigInteger, nullable=False, default=0)
    prescription_tracking_list = Column(JSON, nullable=False, default=list)  # capacity 100, append-only
