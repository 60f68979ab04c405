"""Reversible obfuscation for stored API keys.

This is NOT encryption. Anyone with database access and the obfuscation key
can recover the plaintext. It only keeps keys from being readable at a glance
in dumps and admin tools.

Stored formats:

    b64:<urlsafe base64 of plaintext XOR key pad>
    plain:<urlsafe base64 of plaintext>      (fallback, no XOR)
    <anything else>                          (legacy value, returned as-is)
"""
import base64
import binascii
import hashlib
import logging
from itertools import cycle
from typing import Optional

logger = logging.getLogger(__name__)

OBFUSCATED_PREFIX = "b64:"
FALLBACK_PREFIX = "plain:"


def _pad(key: str) -> bytes:
    return hashlib.sha256(key.encode("utf-8")).digest()


def _xor(data: bytes, key: str) -> bytes:
    return bytes(b ^ k for b, k in zip(data, cycle(_pad(key))))


def encode_secret(plaintext: str, key: str) -> str:
    """Encode ``plaintext`` for storage.

    Falls back to the un-XORed representation when the obfuscation step
    fails so that saving settings never fails because of the codec.
    """
    raw = plaintext.encode("utf-8")
    try:
        if not key:
            raise ValueError("obfuscation key is empty")
        return OBFUSCATED_PREFIX + base64.urlsafe_b64encode(_xor(raw, key)).decode("ascii")
    except (ValueError, TypeError, UnicodeError) as e:
        logger.warning("Secret obfuscation unavailable, storing fallback encoding: %s", e)
        return FALLBACK_PREFIX + base64.urlsafe_b64encode(raw).decode("ascii")


def decode_secret(stored: str, key: str) -> Optional[str]:
    """Inverse of :func:`encode_secret`.

    Returns None when the stored value cannot be decoded, e.g. it is corrupt
    or was written under a different obfuscation key.
    """
    try:
        if stored.startswith(OBFUSCATED_PREFIX):
            data = base64.urlsafe_b64decode(stored[len(OBFUSCATED_PREFIX):])
            return _xor(data, key).decode("utf-8")
        if stored.startswith(FALLBACK_PREFIX):
            return base64.urlsafe_b64decode(stored[len(FALLBACK_PREFIX):]).decode("utf-8")
    except (ValueError, binascii.Error):
        # UnicodeDecodeError is a ValueError; never log the stored value
        logger.warning("Stored secret could not be decoded")
        return None
    return stored
