"""Key status package exports."""
from .evaluator import (
    encryption_subkey_warnings,
    get_key_warnings,
    most_recent_encryption_subkey,
    primary_key_warnings,
)
from .expiry import earliest_expiry_time, earliest_identity_expiry, resolve_expiry
from .policy import is_expiry_too_long, next_expiry_time, next_rotation_time
from .warnings import KeyWarning, WarningType

__all__ = [
    "get_key_warnings",
    "primary_key_warnings",
    "encryption_subkey_warnings",
    "most_recent_encryption_subkey",
    "resolve_expiry",
    "earliest_identity_expiry",
    "earliest_expiry_time",
    "next_rotation_time",
    "next_expiry_time",
    "is_expiry_too_long",
    "KeyWarning",
    "WarningType",
]
