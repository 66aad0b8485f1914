"""Evaluate a key against the rotation policy and collect warnings."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

import structlog

from ..models import ExpiresAt, Key, Subkey, as_aware, as_utc, format_key_id
from .expiry import earliest_identity_expiry, subkey_expiry
from .policy import RotationState, days_since, days_until, is_expiry_too_long, rotation_state
from .warnings import (
    KeyWarning,
    NoValidEncryptionSubkey,
    PrimaryKeyDueForRotation,
    PrimaryKeyExpired,
    PrimaryKeyLongExpiry,
    PrimaryKeyNoExpiry,
    PrimaryKeyOverdueForRotation,
    SubkeyDueForRotation,
    SubkeyLongExpiry,
    SubkeyNoExpiry,
    SubkeyOverdueForRotation,
)

logger = structlog.get_logger(__name__)


def get_key_warnings(key: Key, now: Optional[datetime] = None) -> List[KeyWarning]:
    """Return the warnings for ``key``: primary key first, then encryption subkey.

    ``now`` defaults to the current local time; pass it explicitly for
    deterministic results. Both evaluators see the same ``now``. Its timezone
    decides which calendar month the too-long ceiling is counted from; a naive
    ``now`` is read as UTC.
    """

    now = datetime.now().astimezone() if now is None else as_aware(now)
    warnings: List[KeyWarning] = []
    warnings.extend(primary_key_warnings(key, now))
    warnings.extend(encryption_subkey_warnings(key, now))
    logger.debug(
        "key_status.evaluated",
        identities=len(key.identities),
        subkeys=len(key.subkeys),
        warnings=[warning.type.value for warning in warnings],
    )
    return warnings


def primary_key_warnings(key: Key, now: datetime) -> List[KeyWarning]:
    now = as_aware(now)
    expiry = earliest_identity_expiry(key)
    if not isinstance(expiry, ExpiresAt):
        logger.debug("key_status.primary.no_expiry")
        return [PrimaryKeyNoExpiry()]

    warnings: List[KeyWarning] = []
    state = rotation_state(expiry.time, now)
    if state is RotationState.EXPIRED:
        warnings.append(PrimaryKeyExpired(days_since_expiry=days_since(expiry.time, now)))
    elif state is RotationState.OVERDUE:
        warnings.append(PrimaryKeyOverdueForRotation(days_until_expiry=days_until(expiry.time, now)))
    elif state is RotationState.DUE:
        warnings.append(PrimaryKeyDueForRotation())

    if is_expiry_too_long(expiry.time, now):
        warnings.append(PrimaryKeyLongExpiry())

    logger.debug(
        "key_status.primary.evaluated",
        expiry=expiry.time.isoformat(),
        state=state.value if state else None,
    )
    return warnings


def most_recent_encryption_subkey(key: Key) -> Optional[Subkey]:
    """Return the encryption subkey with the latest creation time, or ``None``.

    The sort is stable, so among subkeys created at the same instant the one
    listed first on the key wins.
    """

    candidates = [subkey for subkey in key.subkeys if subkey.is_encryption_capable]
    if not candidates:
        return None
    candidates.sort(key=lambda subkey: as_utc(subkey.creation_time), reverse=True)
    return candidates[0]


def encryption_subkey_warnings(key: Key, now: datetime) -> List[KeyWarning]:
    now = as_aware(now)
    subkey = most_recent_encryption_subkey(key)
    if subkey is None:
        logger.debug("key_status.subkey.none_valid", subkeys=len(key.subkeys))
        return [NoValidEncryptionSubkey()]

    subkey_id = subkey.key_id
    expiry = subkey_expiry(subkey)
    if not isinstance(expiry, ExpiresAt):
        logger.debug("key_status.subkey.no_expiry", subkey=format_key_id(subkey_id))
        return [SubkeyNoExpiry(subkey_id=subkey_id)]

    warnings: List[KeyWarning] = []
    state = rotation_state(expiry.time, now)
    if state is RotationState.EXPIRED:
        # An expired encryption subkey is as good as none at all.
        warnings.append(NoValidEncryptionSubkey())
    elif state is RotationState.OVERDUE:
        warnings.append(
            SubkeyOverdueForRotation(subkey_id=subkey_id, days_until_expiry=days_until(expiry.time, now))
        )
    elif state is RotationState.DUE:
        warnings.append(SubkeyDueForRotation(subkey_id=subkey_id))

    if is_expiry_too_long(expiry.time, now):
        warnings.append(SubkeyLongExpiry(subkey_id=subkey_id))

    logger.debug(
        "key_status.subkey.evaluated",
        subkey=format_key_id(subkey_id),
        expiry=expiry.time.isoformat(),
        state=state.value if state else None,
    )
    return warnings


__all__ = [
    "get_key_warnings",
    "primary_key_warnings",
    "encryption_subkey_warnings",
    "most_recent_encryption_subkey",
]
