"""Feed entries: a message value together with its key and receive time."""

import json
import time
from dataclasses import dataclass

from .crypto import SHA256_SUFFIX, to_ssb_id
from .encoding import ssb_sha256
from .errors import FeedError
from .message import Message


def _digest_key(value):
    return "%" + to_ssb_id(ssb_sha256(value), SHA256_SUFFIX)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Feed:
    """A stored message value with its key and timestamps."""

    key: str
    value: object
    timestamp: float
    rts: float | None = None

    def into_message(self):
        """Verify the value and return it as a message."""
        return Message.from_value(self.value)

    @classmethod
    def from_message(cls, message):
        """Wrap a message, keyed by its digest and stamped with the current time."""
        return cls(key=_digest_key(message.value), value=message.value, timestamp=time.time())

    @classmethod
    def from_slice(cls, data):
        """Parse a feed entry from JSON and check that its key matches its value."""
        try:
            parsed = json.loads(data)
        except (ValueError, UnicodeDecodeError) as err:
            raise FeedError("invalid json") from err
        if not isinstance(parsed, dict):
            raise FeedError("invalid json")
        key = parsed.get("key")
        timestamp = parsed.get("timestamp")
        rts = parsed.get("rts")
        if not isinstance(key, str) or "value" not in parsed or not _is_number(timestamp):
            raise FeedError("invalid json")
        if rts is not None and not _is_number(rts):
            raise FeedError("invalid json")

        feed = cls(
            key=key,
            value=parsed["value"],
            timestamp=float(timestamp),
            rts=None if rts is None else float(rts),
        )
        if _digest_key(feed.value) != feed.key:
            raise FeedError("feed digest mismatch")
        return feed

    def __str__(self):
        return json.dumps(
            {"key": self.key, "value": self.value, "timestamp": self.timestamp, "rts": self.rts},
            separators=(",", ":"),
            ensure_ascii=False,
        )