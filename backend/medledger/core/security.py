"""
Caller identity binding.

Authentication happens upstream (gateway or session layer); the ledger only
receives the authenticated principal and threads it through every mutating
operation as ``caller_id``.
"""
from typing import Optional

from fastapi import HTTPException, Request, status

from .config import settings
from .validation import IDENTITY_PATTERN


def extract_caller_id(request: Request) -> Optional[str]:
    """Return the caller identity header if present and well-formed, else None."""
    caller_id = request.headers.get(settings.CALLER_HEADER, "").strip()
    if not caller_id or not IDENTITY_PATTERN.fullmatch(caller_id):
        return None
    return caller_id


def get_caller_id(request: Request) -> str:
    caller_id = extract_caller_id(request)
    if caller_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing or malformed {settings.CALLER_HEADER} header",
        )
    return caller_id
