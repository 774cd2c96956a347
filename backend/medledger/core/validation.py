# Validation helpers for bounded ledger text fields and identities
import re

from .errors import InvalidInput


def _is_printable_ascii(value: str) -> bool:
    return all(32 <= ord(ch) < 127 for ch in value)


def validate_text(value, field: str, max_length: int, min_length: int = 1) -> str:
    """Return ``value`` unchanged if it is acceptable ledger text, else raise InvalidInput."""
    if not isinstance(value, str):
        raise InvalidInput(f"{field} must be a string")
    if len(value) < min_length:
        raise InvalidInput(f"{field} must be at least {min_length} characters")
    if len(value) > max_length:
        raise InvalidInput(f"{field} too long. Maximum {max_length} characters.")
    if not _is_printable_ascii(value):
        raise InvalidInput(f"{field} contains unsupported characters. Use printable ASCII only.")
    return value


# Shared with the caller header check so stored identities can always match a caller
IDENTITY_PATTERN = re.compile(r"^[A-Za-z0-9_.:@-]{1,128}$")


def validate_identity(value, field: str) -> str:
    """Return ``value`` if it is a well-formed caller identity, else raise InvalidInput."""
    if not isinstance(value, str) or not IDENTITY_PATTERN.fullmatch(value):
        raise InvalidInput(
            f"{field} must be 1-128 characters of letters, digits or _.:@-"
        )
    return value
