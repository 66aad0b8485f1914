"""Key warnings: one dataclass per kind, each carrying only its own payload."""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Union

from ..models import format_key_id


class WarningType(str, Enum):
    PRIMARY_KEY_DUE_FOR_ROTATION = "PrimaryKeyDueForRotation"
    PRIMARY_KEY_OVERDUE_FOR_ROTATION = "PrimaryKeyOverdueForRotation"
    PRIMARY_KEY_EXPIRED = "PrimaryKeyExpired"
    PRIMARY_KEY_NO_EXPIRY = "PrimaryKeyNoExpiry"
    PRIMARY_KEY_LONG_EXPIRY = "PrimaryKeyLongExpiry"
    NO_VALID_ENCRYPTION_SUBKEY = "NoValidEncryptionSubkey"
    SUBKEY_DUE_FOR_ROTATION = "SubkeyDueForRotation"
    SUBKEY_OVERDUE_FOR_ROTATION = "SubkeyOverdueForRotation"
    SUBKEY_NO_EXPIRY = "SubkeyNoExpiry"
    SUBKEY_LONG_EXPIRY = "SubkeyLongExpiry"


class _Warning:
    """Base for warning kinds; subclasses set ``type``."""

    __slots__ = ()

    type: ClassVar[WarningType]

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type.value}
        for item in fields(self):  # type: ignore[arg-type]
            name = item.name
            value = getattr(self, name)
            payload[name] = format_key_id(value) if name == "subkey_id" else value
        return payload


@dataclass(frozen=True, slots=True)
class PrimaryKeyNoExpiry(_Warning):
    type: ClassVar[WarningType] = WarningType.PRIMARY_KEY_NO_EXPIRY


@dataclass(frozen=True, slots=True)
class PrimaryKeyExpired(_Warning):
    type: ClassVar[WarningType] = WarningType.PRIMARY_KEY_EXPIRED
    days_since_expiry: int


@dataclass(frozen=True, slots=True)
class PrimaryKeyOverdueForRotation(_Warning):
    type: ClassVar[WarningType] = WarningType.PRIMARY_KEY_OVERDUE_FOR_ROTATION
    days_until_expiry: int


@dataclass(frozen=True, slots=True)
class PrimaryKeyDueForRotation(_Warning):
    type: ClassVar[WarningType] = WarningType.PRIMARY_KEY_DUE_FOR_ROTATION


@dataclass(frozen=True, slots=True)
class PrimaryKeyLongExpiry(_Warning):
    type: ClassVar[WarningType] = WarningType.PRIMARY_KEY_LONG_EXPIRY


@dataclass(frozen=True, slots=True)
class NoValidEncryptionSubkey(_Warning):
    type: ClassVar[WarningType] = WarningType.NO_VALID_ENCRYPTION_SUBKEY


@dataclass(frozen=True, slots=True)
class SubkeyNoExpiry(_Warning):
    type: ClassVar[WarningType] = WarningType.SUBKEY_NO_EXPIRY
    subkey_id: int


@dataclass(frozen=True, slots=True)
class SubkeyOverdueForRotation(_Warning):
    type: ClassVar[WarningType] = WarningType.SUBKEY_OVERDUE_FOR_ROTATION
    subkey_id: int
    days_until_expiry: int


@dataclass(frozen=True, slots=True)
class SubkeyDueForRotation(_Warning):
    type: ClassVar[WarningType] = WarningType.SUBKEY_DUE_FOR_ROTATION
    subkey_id: int


@dataclass(frozen=True, slots=True)
class SubkeyLongExpiry(_Warning):
    type: ClassVar[WarningType] = WarningType.SUBKEY_LONG_EXPIRY
    subkey_id: int


KeyWarning = Union[
    PrimaryKeyNoExpiry,
    PrimaryKeyExpired,
    PrimaryKeyOverdueForRotation,
    PrimaryKeyDueForRotation,
    PrimaryKeyLongExpiry,
    NoValidEncryptionSubkey,
    SubkeyNoExpiry,
    SubkeyOverdueForRotation,
    SubkeyDueForRotation,
    SubkeyLongExpiry,
]


__all__ = [
    "WarningType",
    "KeyWarning",
    "PrimaryKeyNoExpiry",
    "PrimaryKeyExpired",
    "PrimaryKeyOverdueForRotation",
    "PrimaryKeyDueForRotation",
    "PrimaryKeyLongExpiry",
    "NoValidEncryptionSubkey",
    "SubkeyNoExpiry",
    "SubkeyOverdueForRotation",
    "SubkeyDueForRotation",
    "SubkeyLongExpiry",
]
