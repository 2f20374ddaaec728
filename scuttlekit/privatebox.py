"""Private-box encryption of message content for up to seven recipients."""

import base64
import binascii

from nacl import bindings
from nacl.exceptions import CryptoError as NaclCryptoError
from nacl.signing import SigningKey
from nacl.utils import random

from .crypto import to_ed25519_pk
from .errors import CryptoError, FeedError

SUFFIX = ".box"
MAX_RECIPIENTS = 7

_KEY_BYTES = bindings.crypto_secretbox_KEYBYTES
_MAC_BYTES = bindings.crypto_secretbox_MACBYTES
_NONCE_BYTES = bindings.crypto_secretbox_NONCEBYTES
_PUBLIC_KEY_BYTES = 32
_RECIPIENT_COUNT_LEN = 1
_ENCRYPTED_HEADER_LEN = _RECIPIENT_COUNT_LEN + _KEY_BYTES + _MAC_BYTES


def is_privatebox(text):
    """Tell whether ``text`` is private-box ciphertext."""
    return text.endswith(SUFFIX)


def _scalarmult(scalar, point, message):
    try:
        return bindings.crypto_scalarmult(scalar, point)
    except (NaclCryptoError, RuntimeError, ValueError, TypeError) as err:
        raise FeedError(message) from err


def cipher(plaintext, recipients):
    """Encrypt ``plaintext`` bytes for the given ed25519 public keys."""
    if not plaintext:
        raise FeedError("empty plaintext")
    if not recipients or len(recipients) > MAX_RECIPIENTS:
        raise FeedError("bad recipent")

    header_key = SigningKey.generate()
    h_pk = bytes(header_key.verify_key)
    h_sk_scalar = bindings.crypto_sign_ed25519_sk_to_curve25519(bytes(header_key) + h_pk)

    body_key = random(_KEY_BYTES)
    nonce = random(_NONCE_BYTES)
    cipher_message = bindings.crypto_secretbox(bytes(plaintext), nonce, body_key)

    plain_header = bytes([len(recipients)]) + body_key
    parts = [nonce, bindings.crypto_sign_ed25519_pk_to_curve25519(h_pk)]
    for recipient in recipients:
        try:
            recipient_curve = bindings.crypto_sign_ed25519_pk_to_curve25519(bytes(recipient))
        except (NaclCryptoError, RuntimeError, ValueError, TypeError) as err:
            raise FeedError("crypto scalar mult failed") from err
        key = _scalarmult(h_sk_scalar, recipient_curve, "crypto scalar mult failed")
        if len(key) != _KEY_BYTES:
            raise FeedError("invalid key from group")
        parts.append(bindings.crypto_secretbox(plain_header, nonce, key))
    parts.append(cipher_message)
    return b"".join(parts)


def _open(box, nonce, key):
    try:
        return bindings.crypto_secretbox_open(box, nonce, key)
    except (NaclCryptoError, ValueError):
        return None


def decipher(ciphertext, sk):
    """Decrypt private-box bytes with a 64-byte ed25519 secret key; None if not a recipient."""
    ciphertext = bytes(ciphertext)
    if len(ciphertext) < _NONCE_BYTES:
        raise FeedError("cannot read nonce")
    nonce, cursor = ciphertext[:_NONCE_BYTES], ciphertext[_NONCE_BYTES:]
    if len(cursor) < _PUBLIC_KEY_BYTES:
        raise FeedError("cannot read nonce")
    h_pk, cursor = cursor[:_PUBLIC_KEY_BYTES], cursor[_PUBLIC_KEY_BYTES:]

    try:
        secret_scalar = bindings.crypto_sign_ed25519_sk_to_curve25519(bytes(sk))
    except (NaclCryptoError, RuntimeError, ValueError, TypeError) as err:
        raise FeedError("cannot create key") from err
    key = _scalarmult(secret_scalar, h_pk, "cannot create key")

    for header_no in range(MAX_RECIPIENTS):
        if len(cursor) <= _ENCRYPTED_HEADER_LEN + _MAC_BYTES:
            break
        header = _open(cursor[:_ENCRYPTED_HEADER_LEN], nonce, key)
        if header is not None:
            remaining = header[0] - header_no
            if remaining < 0:
                raise FeedError("failed to decipher")
            body_key = header[1:]
            if len(body_key) != _KEY_BYTES:
                raise FeedError("cannot create key")
            plaintext = _open(cursor[_ENCRYPTED_HEADER_LEN * remaining :], nonce, body_key)
            if plaintext is None:
                raise FeedError("failed to decipher")
            return plaintext
        cursor = cursor[_ENCRYPTED_HEADER_LEN:]
    return None


def privatebox_cipher(plaintext, recipients):
    """Encrypt text for feed ids like ``@<base64>.ed25519`` and return ``<base64>.box``."""
    try:
        keys = [to_ed25519_pk(recipient[1:]) for recipient in recipients]
    except CryptoError as err:
        raise FeedError("invalid key format") from err
    ciphertext = cipher(plaintext.encode("utf-8"), keys)
    return base64.b64encode(ciphertext).decode("ascii") + SUFFIX


def privatebox_decipher(ciphertext, sk):
    """Decrypt ``<base64>.box`` text; None if ``sk`` is not a recipient."""
    encoded = ciphertext.encode("utf-8")[: -len(SUFFIX)]
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as err:
        raise FeedError("base64 decoding") from err
    plaintext = decipher(raw, sk)
    return None if plaintext is None else plaintext.decode("utf-8", errors="replace")