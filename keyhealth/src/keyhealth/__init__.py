"""Key health checks: rotation and expiry warnings for OpenPGP keys."""
from .exceptions import KeyDocumentError, KeyHealthError, PreconditionViolation
from .models import Identity, Key, Signature, Subkey
from .status import KeyWarning, WarningType, get_key_warnings

__version__ = "0.1.0"

__all__ = [
    "Identity",
    "Key",
    "Signature",
    "Subkey",
    "KeyWarning",
    "WarningType",
    "get_key_warnings",
    "KeyHealthError",
    "KeyDocumentError",
    "PreconditionViolation",
    "__version__",
]
