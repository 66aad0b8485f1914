"""Documents describing an already-parsed key.

These let the surrounding tool (and test fixtures) hand a key to the status
engine as YAML or JSON instead of building :mod:`keyhealth.models` objects by
hand. They describe metadata only; no key material is read here.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import KeyDocumentError
from .models import Identity, Key, Signature, Subkey

# The OpenPGP key expiration time subpacket is a four-octet count of seconds.
MAX_LIFETIME_SECS = 2**32 - 1


class SignatureDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key_lifetime_secs: Optional[int] = Field(default=None, ge=0, le=MAX_LIFETIME_SECS)
    flags_valid: bool = False
    flag_encrypt_communications: bool = False
    flag_encrypt_storage: bool = False

    def to_signature(self) -> Signature:
        return Signature(
            key_lifetime_secs=self.key_lifetime_secs,
            flags_valid=self.flags_valid,
            flag_encrypt_communications=self.flag_encrypt_communications,
            flag_encrypt_storage=self.flag_encrypt_storage,
        )


class IdentityDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    self_signature: SignatureDocument = Field(default_factory=SignatureDocument)


class SubkeyDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key_id: int = Field(ge=0, le=2**64 - 1)
    creation_time: datetime
    sig: SignatureDocument = Field(default_factory=SignatureDocument)

    @field_validator("key_id", mode="before")
    @classmethod
    def _parse_key_id(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            if text.lower().startswith("0x"):
                text = text[2:]
            try:
                return int(text, 16)
            except ValueError:
                raise ValueError(f"key_id is not a hex key id: {value!r}") from None
        return value


class KeyDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    creation_time: datetime
    identities: List[IdentityDocument] = Field(default_factory=list)
    subkeys: List[SubkeyDocument] = Field(default_factory=list)

    def to_key(self) -> Key:
        return Key(
            creation_time=self.creation_time,
            identities=tuple(
                Identity(name=identity.name, self_signature=identity.self_signature.to_signature())
                for identity in self.identities
            ),
            subkeys=tuple(
                Subkey(
                    key_id=subkey.key_id,
                    creation_time=subkey.creation_time,
                    sig=subkey.sig.to_signature(),
                )
                for subkey in self.subkeys
            ),
        )


def key_from_mapping(data: Mapping[str, Any]) -> Key:
    try:
        return KeyDocument.model_validate(data).to_key()
    except ValidationError as exc:
        raise KeyDocumentError(f"Invalid key document: {exc}") from exc


def key_from_path(path: Path) -> Key:
    import json

    import yaml

    try:
        with path.open("r", encoding="utf-8") as handle:
            if path.suffix.lower() in {".yaml", ".yml"}:
                raw = yaml.safe_load(handle)
            else:
                raw = json.load(handle)
    except OSError as exc:
        raise KeyDocumentError(f"Cannot read key document {path}: {exc}") from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise KeyDocumentError(f"Cannot parse key document {path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise KeyDocumentError(f"Key document {path} must contain a mapping")
    return key_from_mapping(raw)


__all__ = [
    "MAX_LIFETIME_SECS",
    "SignatureDocument",
    "IdentityDocument",
    "SubkeyDocument",
    "KeyDocument",
    "key_from_mapping",
    "key_from_path",
]
