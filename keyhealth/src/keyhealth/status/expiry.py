"""Resolve absolute expiry times from creation times and key lifetimes."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from ..models import NO_EXPIRY, ExpiresAt, Expiry, Key, Subkey, as_utc


def resolve_expiry(creation_time: datetime, lifetime_secs: Optional[int]) -> Expiry:
    """Return the expiry implied by a key lifetime.

    Per RFC 4880 section 5.2.3.6, a lifetime that is absent or zero means the
    key never expires. ``creation_time`` is the creation time of the *key*, not
    of the signature carrying the lifetime.
    """

    if not lifetime_secs:
        return NO_EXPIRY
    return ExpiresAt(as_utc(creation_time) + timedelta(seconds=lifetime_secs))


def earliest(first: datetime, *rest: datetime) -> datetime:
    earliest_so_far = first
    for candidate in rest:
        if candidate < earliest_so_far:
            earliest_so_far = candidate
    return earliest_so_far


def subkey_expiry(subkey: Subkey) -> Expiry:
    return resolve_expiry(subkey.creation_time, subkey.sig.key_lifetime_secs)


def _identity_expiry_times(key: Key) -> List[datetime]:
    times = []
    for identity in key.identities:
        expiry = resolve_expiry(key.creation_time, identity.self_signature.key_lifetime_secs)
        if isinstance(expiry, ExpiresAt):
            times.append(expiry.time)
    return times


def earliest_identity_expiry(key: Key) -> Expiry:
    """Return the expiry of the primary key, taken from its identities.

    Each identity is self-signed with its own lifetime. When the last identity
    expires the primary key stops working, so with several identities the
    earliest expiry is the one that matters. Identities without an expiry are
    ignored; if none has one the primary key has no expiry.
    """

    times = _identity_expiry_times(key)
    if not times:
        return NO_EXPIRY
    return ExpiresAt(earliest(*times))


def earliest_expiry_time(key: Key) -> Expiry:
    """Return the soonest expiry on the key that would cause it to lose functionality.

    This covers identity self-signatures and every subkey binding signature,
    whatever the subkey is used for.
    """

    times = _identity_expiry_times(key)
    for subkey in key.subkeys:
        expiry = subkey_expiry(subkey)
        if isinstance(expiry, ExpiresAt):
            times.append(expiry.time)
    if not times:
        return NO_EXPIRY
    return ExpiresAt(earliest(*times))


__all__ = [
    "resolve_expiry",
    "earliest",
    "subkey_expiry",
    "earliest_identity_expiry",
    "earliest_expiry_time",
]
