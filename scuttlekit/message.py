"""Signed feed messages: creation, verification and field access."""

import json
import time
from dataclasses import dataclass

from nacl.exceptions import CryptoError as NaclCryptoError
from nacl.signing import SigningKey, VerifyKey

from .crypto import (
    ED25519_SIGNATURE_SUFFIX,
    SHA256_SUFFIX,
    to_ed25519_pk,
    to_ed25519_signature,
    to_ssb_id,
)
from .encoding import ssb_sha256, stringify_json
from .errors import CryptoError, FeedError

MSG_PREVIOUS = "previous"
MSG_AUTHOR = "author"
MSG_SEQUENCE = "sequence"
MSG_TIMESTAMP = "timestamp"
MSG_HASH = "hash"
MSG_CONTENT = "content"
MSG_SIGNATURE = "signature"


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require(value, check):
    if not check(value):
        raise FeedError("invalid json")
    return value


def _is_str(value):
    return isinstance(value, str)


def _is_optional_str(value):
    return value is None or isinstance(value, str)


def _parse_json(data):
    try:
        return json.loads(data)
    except (ValueError, UnicodeDecodeError) as err:
        raise FeedError("invalid json") from err


@dataclass(frozen=True)
class MessageId:
    """The SHA-256 digest that identifies a message."""

    digest: bytes

    def __str__(self):
        return "%" + to_ssb_id(self.digest, SHA256_SUFFIX)

    def __bytes__(self):
        return bytes(self.digest)


@dataclass
class Message:
    """A verified feed message held as its JSON value."""

    value: dict

    @classmethod
    def sign(cls, prev, identity, content):
        """Create a message after ``prev`` (or the first one), signed by ``identity``."""
        value = {}
        if prev is not None:
            value[MSG_PREVIOUS] = str(prev.id())
            value[MSG_SEQUENCE] = prev.sequence() + 1
        else:
            value[MSG_PREVIOUS] = None
            value[MSG_SEQUENCE] = 1
        value[MSG_AUTHOR] = identity.id
        value[MSG_TIMESTAMP] = time.time_ns() // 1_000_000
        value[MSG_HASH] = "sha256"
        value[MSG_CONTENT] = content

        to_sign = stringify_json(value).encode("utf-8")
        signature = SigningKey(bytes(identity.sk[:32])).sign(to_sign).signature
        value[MSG_SIGNATURE] = to_ssb_id(signature, ED25519_SIGNATURE_SUFFIX)
        return cls(value=value)

    @classmethod
    def from_slice(cls, data):
        """Parse and verify a message from JSON bytes."""
        return cls.from_value(_parse_json(data))

    @classmethod
    def from_str(cls, text):
        """Parse and verify a message from JSON text."""
        return cls.from_value(_parse_json(text))

    @classmethod
    def from_value(cls, value):
        """Check the fields of a JSON value and verify its signature."""
        if not isinstance(value, dict):
            raise FeedError("invalid json")

        _require(value.get(MSG_PREVIOUS), _is_optional_str)
        _require(value.get(MSG_SEQUENCE), _is_number)
        _require(value.get(MSG_TIMESTAMP), _is_number)
        _require(value.get(MSG_HASH), _is_str)
        if MSG_CONTENT not in value:
            raise FeedError("invalid json")

        signature = _require(value.get(MSG_SIGNATURE), _is_str)
        unsigned = {key: item for key, item in value.items() if key != MSG_SIGNATURE}
        author = _require(unsigned.get(MSG_AUTHOR), _is_str)
        try:
            sig = to_ed25519_signature(signature)
            signer = to_ed25519_pk(author[1:])
        except CryptoError as err:
            raise FeedError("invalid key format") from err

        signed_text = stringify_json(unsigned).encode("utf-8")
        try:
            VerifyKey(signer).verify(signed_text, sig)
        except (NaclCryptoError, ValueError) as err:
            raise FeedError("invalid signature") from err

        unsigned[MSG_SIGNATURE] = signature
        return cls(value=unsigned)

    def id(self):
        """Return the identifier of this message."""
        return MessageId(ssb_sha256(self.value))

    def previous(self):
        """Return the id of the previous message, or None for the first one."""
        return self.value.get(MSG_PREVIOUS)

    def author(self):
        """Return the feed id of the author."""
        return self.value[MSG_AUTHOR]

    def sequence(self):
        """Return the sequence number of this message."""
        sequence = self.value[MSG_SEQUENCE]
        if isinstance(sequence, float):
            if not sequence.is_integer() or sequence < 0:
                raise FeedError("invalid json")
            return int(sequence)
        if sequence < 0:
            raise FeedError("invalid json")
        return sequence

    def timestamp(self):
        """Return the claimed creation time in milliseconds."""
        return float(self.value[MSG_TIMESTAMP])

    def hash(self):
        """Return the name of the hash algorithm."""
        return self.value[MSG_HASH]

    def content(self):
        """Return the content of the message."""
        return self.value[MSG_CONTENT]

    def signature(self):
        """Return the signature in its textual form."""
        return self.value[MSG_SIGNATURE]

    def __str__(self):
        return json.dumps(self.value, separators=(",", ":"), ensure_ascii=False)