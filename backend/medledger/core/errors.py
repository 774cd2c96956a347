"""
Typed failures raised by the ledger core.

Every failure carries a stable ``code`` (the error kind reported to clients)
and the HTTP status the API layer answers with. Raising any of these inside
``LedgerState.transaction()`` rolls the transaction back, except for errors
flagged with ``preserves_writes``.
"""
from typing import Optional


class LedgerError(Exception):
    code = "LedgerError"
    status_code = 400
    preserves_writes = False

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.code
        super().__init__(self.detail)


class Unauthorized(LedgerError):
    code = "Unauthorized"
    status_code = 403


class DuplicateRecord(LedgerError):
    code = "DuplicateRecord"
    status_code = 409


class DuplicateProvider(LedgerError):
    code = "DuplicateProvider"
    status_code = 409


class RecordNotFound(LedgerError):
    code = "RecordNotFound"
    status_code = 404


class ProviderNotFound(LedgerError):
    code = "ProviderNotFound"
    status_code = 404


class InvalidPrescriptionData(LedgerError):
    code = "InvalidPrescriptionData"
    status_code = 400


class InvalidInput(LedgerError):
    code = "InvalidInput"
    status_code = 422


class AlreadyAuthorized(LedgerError):
    code = "AlreadyAuthorized"
    status_code = 409


class MaxProvidersReached(LedgerError):
    code = "MaxProvidersReached"
    status_code = 409


class PrescriptionListOverflow(LedgerError):
    """The tracking list is full.

    The prescription record and the counter increment written before the
    append are kept: the prescription exists but is never returned by the
    active-prescription scan.
    """
    code = "PrescriptionListOverflow"
    status_code = 507
    preserves_writes = True

    def __init__(self, detail: Optional[str] = None, prescription_id: Optional[int] = None):
        super().__init__(detail)
        self.prescription_id = prescription_id
