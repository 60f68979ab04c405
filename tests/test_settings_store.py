"""
Tests for the settings store and the API key codec
"""
import pytest

from app.core.exceptions import NotFound
from app.models import UserSettings
from app.services.secret_codec import FALLBACK_PREFIX, OBFUSCATED_PREFIX, decode_secret, encode_secret
from app.services.settings_store import SettingsStore
from app.services.user_directory import UserDirectory


def test_secret_round_trip(db, alice):
    store = SettingsStore(db)
    store.set_secret_for_external_id(alice, "sk-abc123")

    assert store.get_secret_plaintext_for_external_id(alice) == "sk-abc123"
    assert store.has_secret_for_external_id(alice) is True


def test_secret_is_not_stored_in_plaintext(db, alice):
    store = SettingsStore(db)
    store.set_secret_for_external_id(alice, "sk-abc123")

    stored = store.get_for_external_id(alice).openai_api_key
    assert stored.startswith(OBFUSCATED_PREFIX)
    assert "sk-abc123" not in stored


def test_clear_secret_keeps_record(db, alice):
    store = SettingsStore(db)
    store.set_secret_for_external_id(alice, "sk-abc123")
    store.clear_secret_for_external_id(alice)

    assert store.has_secret_for_external_id(alice) is False
    assert store.get_secret_plaintext_for_external_id(alice) is None
    assert store.get_for_external_id(alice) is not None


def test_set_secret_creates_missing_settings_record(db, alice):
    user_id = UserDirectory(db).find_by_external_id(alice).id
    db.query(UserSettings).filter(UserSettings.user_id == user_id).delete()
    db.commit()

    store = SettingsStore(db)
    store.set_secret(user_id, "sk-late")
    assert store.get_secret_plaintext(user_id) == "sk-late"


def test_unknown_user(db):
    store = SettingsStore(db)
    assert store.has_secret_for_external_id("nobody") is False
    assert store.get_secret_plaintext_for_external_id("nobody") is None
    with pytest.raises(NotFound):
        store.set_secret_for_external_id("nobody", "sk-x")
    with pytest.raises(NotFound):
        store.clear_secret_for_external_id("nobody")


def test_codec_falls_back_without_key():
    encoded = encode_secret("sk-abc123", "")
    assert encoded.startswith(FALLBACK_PREFIX)
    assert decode_secret(encoded, "") == "sk-abc123"


def test_codec_passes_legacy_values_through():
    assert decode_secret("sk-legacy", "any-key") == "sk-legacy"


def test_codec_handles_unicode():
    encoded = encode_secret("clé-ünïcode", "k")
    assert decode_secret(encoded, "k") == "clé-ünïcode"


def test_secret_under_rotated_key_reads_as_absent(db, alice):
    SettingsStore(db, obfuscation_key="key-one").set_secret_for_external_id(alice, "sk-abc123def456ghi789")

    rotated = SettingsStore(db, obfuscation_key="key-two")
    assert rotated.get_secret_plaintext_for_external_id(alice) is None
    # the record itself is still there; the user can overwrite it
    assert rotated.has_secret_for_external_id(alice) is True


def test_codec_returns_none_for_undecodable_values():
    assert decode_secret(OBFUSCATED_PREFIX + "not-base64", "k") is None
    assert decode_secret(FALLBACK_PREFIX + "gA==", "k") is None
