"""Rotation policy: when a key is due, overdue, expired, or set to expire too late.

Naive datetimes passed to these helpers are read as UTC.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from ..exceptions import PreconditionViolation
from ..models import as_aware, as_utc

ROTATION_LEAD = timedelta(days=30)
OVERDUE_GRACE = timedelta(days=10)
MONTH_ADVANCE = timedelta(days=45)
EXPIRY_GRACE = timedelta(days=30)
SECONDS_PER_DAY = 86400


class RotationState(str, Enum):
    EXPIRED = "EXPIRED"
    OVERDUE = "OVERDUE"
    DUE = "DUE"


def next_rotation_time(expiry: datetime) -> datetime:
    """Return the point, 30 days before ``expiry``, at which rotation becomes due."""
    return as_aware(expiry) - ROTATION_LEAD


def is_expired(expiry: datetime, now: datetime) -> bool:
    return as_aware(expiry) < as_aware(now)


def is_overdue_for_rotation(next_rotation: datetime, now: datetime) -> bool:
    """True if ``now`` is more than 10 days after ``next_rotation``."""
    return as_aware(next_rotation) + OVERDUE_GRACE < as_aware(now)


def is_due_for_rotation(next_rotation: datetime, now: datetime) -> bool:
    """True any time after ``next_rotation``."""
    return as_aware(next_rotation) < as_aware(now)


def rotation_state(expiry: datetime, now: datetime) -> Optional[RotationState]:
    """Classify ``expiry`` against ``now``; at most one state applies.

    Overdue implies due, and expired implies both, so the checks run from the
    most to the least severe. ``None`` means the key is comfortably inside its
    rotation window.
    """

    next_rotation = next_rotation_time(expiry)
    if is_expired(expiry, now):
        return RotationState.EXPIRED
    if is_overdue_for_rotation(next_rotation, now):
        return RotationState.OVERDUE
    if is_due_for_rotation(next_rotation, now):
        return RotationState.DUE
    return None


def beginning_of_month(moment: datetime) -> datetime:
    """Midnight on the 1st of ``moment``'s month in its own timezone, as UTC."""
    first = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return as_utc(first)


def first_of_next_month(today: datetime) -> datetime:
    first_of_this_month = beginning_of_month(today)
    return beginning_of_month(first_of_this_month + MONTH_ADVANCE)


def next_expiry_time(now: datetime) -> datetime:
    """Return the expiry the policy sets: 30 days after the 1st of next month.

    For example on 15th September this is 1st October + 30 days. It stays the
    same for a whole calendar month, so an expiry set to it is exactly on the
    cusp of being too long and can only become shorter afterwards.
    """

    return (first_of_next_month(now) + EXPIRY_GRACE).astimezone(timezone.utc)


def is_expiry_too_long(expiry: datetime, now: datetime) -> bool:
    """True if ``expiry`` is later than the policy would ever set it."""
    return as_aware(expiry) > next_expiry_time(now)


def _in_days(delta: timedelta) -> int:
    return math.floor(delta.total_seconds() / SECONDS_PER_DAY)


def days_until(expiry: datetime, now: datetime) -> int:
    """Return the number of whole 24-hour periods until ``expiry``."""
    days = _in_days(as_aware(expiry) - as_aware(now))
    if days < 0:
        raise PreconditionViolation(f"days_until: expiry has already passed: {expiry.isoformat()}")
    return days


def days_since(expiry: datetime, now: datetime) -> int:
    """Return the number of whole 24-hour periods elapsed since ``expiry``."""
    days = _in_days(as_aware(now) - as_aware(expiry))
    if days < 0:
        raise PreconditionViolation(f"days_since: expiry is in the future: {expiry.isoformat()}")
    return days


__all__ = [
    "ROTATION_LEAD",
    "OVERDUE_GRACE",
    "MONTH_ADVANCE",
    "EXPIRY_GRACE",
    "SECONDS_PER_DAY",
    "RotationState",
    "next_rotation_time",
    "is_expired",
    "is_overdue_for_rotation",
    "is_due_for_rotation",
    "rotation_state",
    "beginning_of_month",
    "first_of_next_month",
    "next_expiry_time",
    "is_expiry_too_long",
    "days_until",
    "days_since",
]
