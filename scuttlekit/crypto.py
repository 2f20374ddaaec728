"""Conversion between raw key material and its textual SSB form."""

import base64
import binascii

from .errors import CryptoError

CURVE_ED25519_SUFFIX = ".ed25519"
ED25519_SIGNATURE_SUFFIX = ".sig.ed25519"
SHA256_SUFFIX = ".sha256"

PUBLIC_KEY_BYTES = 32
SECRET_KEY_BYTES = 64
SIGNATURE_BYTES = 64
DIGEST_BYTES = 32


def to_ssb_id(data, suffix=CURVE_ED25519_SUFFIX):
    """Return the base64 text of ``data`` followed by ``suffix``."""
    return base64.b64encode(bytes(data)).decode("ascii") + suffix


def _b64decode(text):
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as err:
        raise CryptoError("error decoding base64") from err


def _without_suffix(text, suffix):
    if not text.endswith(suffix):
        raise CryptoError("invalid suffix")
    return text[: len(text) - len(suffix)]


def _sized(data, size, message):
    if len(data) != size:
        raise CryptoError(message)
    return data


def to_ed25519_pk(text):
    """Decode ``<base64>.ed25519`` into a 32-byte public key."""
    return to_ed25519_pk_no_suffix(_without_suffix(text, CURVE_ED25519_SUFFIX))


def to_ed25519_pk_no_suffix(text):
    """Decode bare base64 into a 32-byte public key."""
    return _sized(_b64decode(text), PUBLIC_KEY_BYTES, "bad public key")


def to_ed25519_sk(text):
    """Decode ``<base64>.ed25519`` into a 64-byte secret key."""
    return to_ed25519_sk_no_suffix(_without_suffix(text, CURVE_ED25519_SUFFIX))


def to_ed25519_sk_no_suffix(text):
    """Decode bare base64 into a 64-byte secret key."""
    return _sized(_b64decode(text), SECRET_KEY_BYTES, "bad secret key")


def to_ed25519_signature(text):
    """Decode ``<base64>.sig.ed25519`` into a 64-byte signature."""
    raw = _b64decode(_without_suffix(text, ED25519_SIGNATURE_SUFFIX))
    return _sized(raw, SIGNATURE_BYTES, "cannot create signature")


def to_sha256(text):
    """Decode ``<base64>.sha256`` into a 32-byte digest."""
    raw = _b64decode(_without_suffix(text, SHA256_SUFFIX))
    return _sized(raw, DIGEST_BYTES, "invalid digest")