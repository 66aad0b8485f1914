from datetime import datetime, timedelta, timezone

from keyhealth.models import Identity, Key, Signature, Subkey
from keyhealth.status import get_key_warnings, most_recent_encryption_subkey
from keyhealth.status.evaluator import encryption_subkey_warnings, primary_key_warnings
from keyhealth.status.policy import next_expiry_time
from keyhealth.status.warnings import (
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

NOW = datetime(2018, 9, 15, 12, 0, 0, tzinfo=timezone.utc)
CREATED = NOW - timedelta(days=400)

SUBKEY_ID = 0x1B2C3D4E5F607182
OTHER_SUBKEY_ID = 0x0A0B0C0D0E0F1011


def _lifetime(created: datetime, expiry: datetime) -> int:
    return int((expiry - created).total_seconds())


def _identity(expiry: datetime | None, name: str = "alice@example.com") -> Identity:
    lifetime = None if expiry is None else _lifetime(CREATED, expiry)
    return Identity(name=name, self_signature=Signature(key_lifetime_secs=lifetime))


def _subkey(
    expiry: datetime | None,
    key_id: int = SUBKEY_ID,
    created: datetime = CREATED,
    flags_valid: bool = True,
    encrypt: bool = True,
) -> Subkey:
    lifetime = None if expiry is None else _lifetime(created, expiry)
    return Subkey(
        key_id=key_id,
        creation_time=created,
        sig=Signature(
            key_lifetime_secs=lifetime,
            flags_valid=flags_valid,
            flag_encrypt_communications=encrypt,
            flag_encrypt_storage=encrypt,
        ),
    )


def _healthy_identity() -> Identity:
    return _identity(NOW + timedelta(days=40))


def _key_with_subkeys(*subkeys: Subkey) -> Key:
    return Key(creation_time=CREATED, identities=(_healthy_identity(),), subkeys=subkeys)


def test_empty_key_has_no_expiry_and_no_encryption_subkey():
    key = Key(creation_time=CREATED)
    assert get_key_warnings(key, now=NOW) == [PrimaryKeyNoExpiry(), NoValidEncryptionSubkey()]


def test_empty_key_without_explicit_now():
    key = Key(creation_time=CREATED)
    assert get_key_warnings(key) == [PrimaryKeyNoExpiry(), NoValidEncryptionSubkey()]


def test_primary_key_expired_reports_days_since_expiry():
    key = Key(creation_time=CREATED, identities=(_identity(NOW - timedelta(days=40)),))
    assert primary_key_warnings(key, NOW) == [PrimaryKeyExpired(days_since_expiry=40)]


def test_primary_key_uses_earliest_identity_expiry():
    key = Key(
        creation_time=CREATED,
        identities=(
            _identity(NOW + timedelta(days=100), name="late@example.com"),
            _identity(NOW + timedelta(days=5), name="soon@example.com"),
        ),
    )
    # the 100 day identity alone would be too long; only the 5 day one counts
    assert primary_key_warnings(key, NOW) == [PrimaryKeyOverdueForRotation(days_until_expiry=5)]


def test_identity_without_expiry_is_ignored_when_another_has_one():
    key = Key(
        creation_time=CREATED,
        identities=(_identity(None), _identity(NOW + timedelta(days=25))),
    )
    assert primary_key_warnings(key, NOW) == [PrimaryKeyDueForRotation()]


def test_identities_without_expiry_mean_primary_key_has_none():
    key = Key(creation_time=CREATED, identities=(_identity(None), _identity(None)))
    assert primary_key_warnings(key, NOW) == [PrimaryKeyNoExpiry()]


def test_zero_lifetime_means_no_expiry():
    identity = Identity(name="alice@example.com", self_signature=Signature(key_lifetime_secs=0))
    key = Key(creation_time=CREATED, identities=(identity,))
    assert primary_key_warnings(key, NOW) == [PrimaryKeyNoExpiry()]


def test_primary_key_comfortably_inside_rotation_window():
    key = Key(creation_time=CREATED, identities=(_identity(NOW + timedelta(days=40)),))
    assert primary_key_warnings(key, NOW) == []


def test_primary_key_long_expiry_alone():
    key = Key(creation_time=CREATED, identities=(_identity(NOW + timedelta(days=60)),))
    assert primary_key_warnings(key, NOW) == [PrimaryKeyLongExpiry()]


def test_primary_key_expiry_at_ceiling_is_not_too_long():
    ceiling = next_expiry_time(NOW)
    key = Key(creation_time=CREATED, identities=(_identity(ceiling),))
    assert primary_key_warnings(key, NOW) == []

    key = Key(creation_time=CREATED, identities=(_identity(ceiling + timedelta(seconds=1)),))
    assert primary_key_warnings(key, NOW) == [PrimaryKeyLongExpiry()]


def test_no_subkeys_means_no_valid_encryption_subkey():
    assert encryption_subkey_warnings(_key_with_subkeys(), NOW) == [NoValidEncryptionSubkey()]


def test_subkeys_without_valid_encryption_flags_are_ignored():
    key = _key_with_subkeys(
        _subkey(NOW + timedelta(days=40), flags_valid=False),
        _subkey(NOW + timedelta(days=40), key_id=OTHER_SUBKEY_ID, encrypt=False),
    )
    assert most_recent_encryption_subkey(key) is None
    assert encryption_subkey_warnings(key, NOW) == [NoValidEncryptionSubkey()]


def test_storage_only_subkey_is_eligible():
    subkey = Subkey(
        key_id=SUBKEY_ID,
        creation_time=CREATED,
        sig=Signature(flags_valid=True, flag_encrypt_storage=True),
    )
    key = _key_with_subkeys(subkey)
    assert encryption_subkey_warnings(key, NOW) == [SubkeyNoExpiry(subkey_id=SUBKEY_ID)]


def test_expired_subkey_counts_as_no_valid_encryption_subkey():
    key = _key_with_subkeys(_subkey(NOW - timedelta(days=3)))
    assert encryption_subkey_warnings(key, NOW) == [NoValidEncryptionSubkey()]


def test_subkey_overdue_one_second_past_grace():
    # next rotation + 10 days is one second before now
    key = _key_with_subkeys(_subkey(NOW + timedelta(days=20) - timedelta(seconds=1)))
    assert encryption_subkey_warnings(key, NOW) == [
        SubkeyOverdueForRotation(subkey_id=SUBKEY_ID, days_until_expiry=19)
    ]


def test_subkey_due_at_end_of_grace():
    key = _key_with_subkeys(_subkey(NOW + timedelta(days=20)))
    assert encryption_subkey_warnings(key, NOW) == [SubkeyDueForRotation(subkey_id=SUBKEY_ID)]


def test_subkey_not_due_at_rotation_time():
    key = _key_with_subkeys(_subkey(NOW + timedelta(days=30)))
    assert encryption_subkey_warnings(key, NOW) == []


def test_subkey_long_expiry():
    key = _key_with_subkeys(_subkey(NOW + timedelta(days=60)))
    assert encryption_subkey_warnings(key, NOW) == [SubkeyLongExpiry(subkey_id=SUBKEY_ID)]


def test_only_most_recent_encryption_subkey_is_evaluated():
    older = _subkey(NOW - timedelta(days=3), key_id=OTHER_SUBKEY_ID, created=CREATED)
    newer = _subkey(NOW + timedelta(days=40), created=NOW - timedelta(days=10))
    key = _key_with_subkeys(older, newer)
    assert most_recent_encryption_subkey(key) == newer
    assert encryption_subkey_warnings(key, NOW) == []


def test_most_recent_subkey_without_expiry():
    older = _subkey(NOW + timedelta(days=40), key_id=OTHER_SUBKEY_ID, created=CREATED)
    newer = _subkey(None, created=NOW - timedelta(days=10))
    key = _key_with_subkeys(newer, older)
    assert encryption_subkey_warnings(key, NOW) == [SubkeyNoExpiry(subkey_id=SUBKEY_ID)]


def test_subkeys_created_together_prefer_first_listed():
    first = _subkey(NOW + timedelta(days=40), key_id=OTHER_SUBKEY_ID)
    second = _subkey(NOW + timedelta(days=40))
    key = _key_with_subkeys(first, second)
    assert most_recent_encryption_subkey(key) == first


def test_primary_key_warnings_come_before_subkey_warnings():
    key = Key(
        creation_time=CREATED,
        identities=(_identity(NOW + timedelta(days=25)),),
        subkeys=(_subkey(NOW + timedelta(days=15)),),
    )
    assert get_key_warnings(key, now=NOW) == [
        PrimaryKeyDueForRotation(),
        SubkeyOverdueForRotation(subkey_id=SUBKEY_ID, days_until_expiry=15),
    ]


def test_primary_key_can_carry_two_warnings_with_subkey_warning():
    key = Key(
        creation_time=CREATED,
        identities=(_identity(None),),
        subkeys=(_subkey(NOW + timedelta(days=90)),),
    )
    assert get_key_warnings(key, now=NOW) == [
        PrimaryKeyNoExpiry(),
        SubkeyLongExpiry(subkey_id=SUBKEY_ID),
    ]


def test_naive_now_is_treated_as_utc():
    key = Key(creation_time=CREATED, identities=(_identity(NOW - timedelta(days=40)),))
    naive = NOW.replace(tzinfo=None)
    assert get_key_warnings(key, now=naive) == get_key_warnings(key, now=NOW)


def test_evaluation_does_not_mutate_key():
    key = _key_with_subkeys(
        _subkey(NOW + timedelta(days=40), key_id=OTHER_SUBKEY_ID),
        _subkey(NOW + timedelta(days=40), created=NOW - timedelta(days=1)),
    )
    before = (key.identities, key.subkeys)
    get_key_warnings(key, now=NOW)
    assert (key.identities, key.subkeys) == before
    assert key.subkeys[0].key_id == OTHER_SUBKEY_ID


def test_long_expiry_ceiling_uses_the_callers_month():
    # 1st October in UTC+2 is still 30th September in UTC
    plus_two = timezone(timedelta(hours=2))
    local_now = datetime(2018, 10, 1, 1, 0, tzinfo=plus_two)
    key = Key(
        creation_time=CREATED,
        identities=(_identity(datetime(2018, 11, 15, tzinfo=timezone.utc)),),
    )
    assert get_key_warnings(key, now=local_now) == [NoValidEncryptionSubkey()]
    assert get_key_warnings(key, now=local_now.astimezone(timezone.utc)) == [
        PrimaryKeyLongExpiry(),
        NoValidEncryptionSubkey(),
    ]


def test_subkey_long_expiry_ceiling_uses_the_callers_month():
    plus_two = timezone(timedelta(hours=2))
    local_now = datetime(2018, 10, 1, 1, 0, tzinfo=plus_two)
    key = Key(
        creation_time=CREATED,
        identities=(_identity(datetime(2018, 11, 15, tzinfo=timezone.utc)),),
        subkeys=(_subkey(datetime(2018, 11, 20, tzinfo=timezone.utc)),),
    )
    assert encryption_subkey_warnings(key, local_now) == []
    assert encryption_subkey_warnings(key, local_now.astimezone(timezone.utc)) == [
        SubkeyLongExpiry(subkey_id=SUBKEY_ID)
    ]
