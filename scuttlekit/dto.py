"""Argument and result objects of the SSB API calls."""

from dataclasses import dataclass, replace

from .errors import ApiError

_U64_MAX = 2**64 - 1


def _require_dict(data):
    if not isinstance(data, dict):
        raise ApiError("json decode")
    return data


def _is_str(value):
    return isinstance(value, str)


def _is_u64(value):
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _U64_MAX


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _field(data, name, check):
    if name not in data or not check(data[name]):
        raise ApiError("json decode")
    return data[name]


def _without_none(pairs):
    return {key: value for key, value in pairs if value is not None}


@dataclass(frozen=True)
class BlobsGetIn:
    """Arguments of ``["blobs", "get"]``: the blob id and optional size limits."""

    key: str
    size: int | None = None
    max: int | None = None

    def with_size(self, size):
        """Return a copy that requires the blob to be exactly ``size`` bytes."""
        return replace(self, size=size)

    def with_max(self, max_size):
        """Return a copy that rejects blobs larger than ``max_size`` bytes."""
        return replace(self, max=max_size)

    def to_dict(self):
        return {"key": self.key, "size": self.size, "max": self.max}


@dataclass(frozen=True)
class ErrorOut:
    """An error as reported by a peer."""

    name: str
    message: str
    stack: str

    @classmethod
    def from_dict(cls, data):
        data = _require_dict(data)
        return cls(
            name=_field(data, "name", _is_str),
            message=_field(data, "message", _is_str),
            stack=_field(data, "stack", _is_str),
        )

    def to_dict(self):
        return {"name": self.name, "message": self.message, "stack": self.stack}


@dataclass(frozen=True)
class CreateHistoryStreamIn:
    """Arguments of ``["createHistoryStream"]`` for one feed."""

    id: str
    seq: int | None = None
    live: bool | None = None
    keys: bool | None = None
    values: bool | None = None
    limit: int | None = None

    def after_seq(self, seq):
        """Return a copy that only streams messages after sequence ``seq``."""
        return replace(self, seq=seq)

    def with_live(self, live):
        """Return a copy that keeps the stream open for new messages."""
        return replace(self, live=live)

    def keys_values(self, keys, values):
        """Return a copy choosing whether keys and values are sent."""
        return replace(self, keys=keys, values=values)

    def with_limit(self, limit):
        """Return a copy limiting the number of results."""
        return replace(self, limit=limit)

    def to_dict(self):
        return _without_none(
            [
                ("id", self.id),
                ("seq", self.seq),
                ("live", self.live),
                ("keys", self.keys),
                ("values", self.values),
                ("limit", self.limit),
            ]
        )


@dataclass(frozen=True)
class LatestOut:
    """The latest sequence number known for a feed."""

    id: str
    sequence: int
    ts: float

    @classmethod
    def from_dict(cls, data):
        data = _require_dict(data)
        return cls(
            id=_field(data, "id", _is_str),
            sequence=_field(data, "sequence", _is_u64),
            ts=float(_field(data, "ts", _is_number)),
        )

    def to_dict(self):
        return {"id": self.id, "sequence": self.sequence, "ts": self.ts}


@dataclass(frozen=True)
class CreateStreamIn:
    """Range and shape options of a database stream such as ``createFeedStream``."""

    live: bool | None = None
    gt: object = None
    gte: object = None
    lt: object = None
    lte: object = None
    reverse: bool | None = None
    keys: bool | None = None
    values: bool | None = None
    limit: int | None = None
    fill_cache: bool | None = None
    key_encoding: str | None = None
    value_encoding: str | None = None

    def with_live(self, live):
        """Return a copy that keeps the stream open for new messages."""
        return replace(self, live=live)

    def with_gt(self, value):
        """Return a copy with an exclusive lower bound."""
        return replace(self, gt=value)

    def with_gte(self, value):
        """Return a copy with an inclusive lower bound."""
        return replace(self, gte=value)

    def with_lt(self, value):
        """Return a copy with an exclusive upper bound."""
        return replace(self, lt=value)

    def with_lte(self, value):
        """Return a copy with an inclusive upper bound."""
        return replace(self, lte=value)

    def with_reverse(self, reverse):
        """Return a copy that streams in reverse order."""
        return replace(self, reverse=reverse)

    def keys_values(self, keys, values):
        """Return a copy choosing whether keys and values are sent."""
        return replace(self, keys=keys, values=values)

    def encoding(self, keys, values):
        """Return a copy with the encodings of keys and values."""
        return replace(self, key_encoding=keys, value_encoding=values)

    def with_limit(self, limit):
        """Return a copy limiting the number of results."""
        return replace(self, limit=limit)

    def to_dict(self):
        result = _without_none(
            [
                ("live", self.live),
                ("gt", self.gt),
                ("gte", self.gte),
                ("lt", self.lt),
                ("lte", self.lte),
                ("reverse", self.reverse),
                ("keys", self.keys),
                ("values", self.values),
                ("limit", self.limit),
                ("fillCache", self.fill_cache),
            ]
        )
        result["keyEncoding"] = self.key_encoding
        result["valueEncoding"] = self.value_encoding
        return result


@dataclass(frozen=True)
class WhoAmIOut:
    """The answer to ``["whoami"]``."""

    id: str

    @classmethod
    def from_dict(cls, data):
        data = _require_dict(data)
        return cls(id=_field(data, "id", _is_str))

    def to_dict(self):
        return {"id": self.id}