"""
Shared key-value state layer for the records ledger.

Three keyed tables (patients, providers, prescriptions) and two ledger-wide
scalars (prescription counter, tracking list) sit behind one interface.
Mutating operations run inside ``transaction()``, which serializes them on a
single process-wide lock and commits or rolls back as a unit.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from ..core.errors import LedgerError
from ..models.patient import PatientRecord
from ..models.provider import ProviderRecord
from ..models.prescription import Prescription, LedgerCounters

logger = logging.getLogger(__name__)

# One writer at a time across every session in the process
_transaction_lock = threading.RLock()


class LedgerState:
    """Key-value view over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator["LedgerState"]:
        """
        Run the enclosed writes as one serialized transaction.

        Any exception rolls back every write made inside the block, except a
        LedgerError flagged ``preserves_writes``: those writes are committed
        before the error propagates.

        Nested blocks join the outermost one; only the outermost level
        commits or rolls back.
        """
        with _transaction_lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            self._depth = 1
            try:
                yield self
            except LedgerError as exc:
                if exc.preserves_writes:
                    self.db.commit()
                    logger.warning("Committed partial transaction before %s", exc.code)
                else:
                    self.db.rollback()
                raise
            except Exception:
                self.db.rollback()
                raise
            else:
                self.db.commit()
            finally:
                self._depth = 0

    # ── Patients ────────────────────────────────────────────────────────────

    def get_patient(self, patient_id: str) -> Optional[PatientRecord]:
        return self.db.get(PatientRecord, patient_id)

    def put_patient(self, patient: PatientRecord) -> PatientRecord:
        self.db.add(patient)
        self.db.flush()
        return patient

    # ── Providers ───────────────────────────────────────────────────────────

    def get_provider(self, provider_id: str) -> Optional[ProviderRecord]:
        return self.db.get(ProviderRecord, provider_id)

    def put_provider(self, provider: ProviderRecord) -> ProviderRecord:
        self.db.add(provider)
        self.db.flush()
        return provider

    # ── Prescriptions ───────────────────────────────────────────────────────

    def get_prescription(self, prescription_id: int) -> Optional[Prescription]:
        return self.db.get(Prescription, prescription_id)

    def put_prescription(self, prescription: Prescription) -> Prescription:
        self.db.add(prescription)
        self.db.flush()
        return prescription

    # ── Ledger-wide scalars ─────────────────────────────────────────────────

    def peek_counters(self) -> Optional[LedgerCounters]:
        """Return the counters row without creating it."""
        return self.db.get(LedgerCounters, LedgerCounters.SINGLETON_ID)

    def get_counters(self) -> LedgerCounters:
        """Return the counters row locked for update, creating it on first use."""
        counters = (
            self.db.query(LedgerCounters)
            .filter(LedgerCounters.id == LedgerCounters.SINGLETON_ID)
            .with_for_update()
            .first()
        )
        if counters is None:
            counters = LedgerCounters(
                id=LedgerCounters.SINGLETON_ID,
                prescription_counter=0,
                prescription_tracking_list=[],
            )
            self.db.add(counters)
            self.db.flush()
        return counters

    def prescription_counter(self) -> int:
        counters = self.peek_counters()
        return counters.prescription_counter if counters else 0

    def tracking_list(self) -> List[int]:
        counters = self.peek_counters()
        return list(counters.prescription_tracking_list) if counters else []