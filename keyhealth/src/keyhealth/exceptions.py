"""Central exception hierarchy"""
from __future__ import annotations


class KeyHealthError(Exception):
    """Base exception for all failures"""


class PreconditionViolation(KeyHealthError):
    """Raised when a helper is called with inputs its caller should have ruled out"""


class KeyDocumentError(KeyHealthError):
    """Raised when a key description document is missing or malformed"""


__all__ = ["KeyHealthError", "PreconditionViolation", "KeyDocumentError"]
