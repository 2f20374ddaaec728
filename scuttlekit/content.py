"""Content of typed feed messages and the query objects of the API."""

from dataclasses import dataclass, field

from .errors import ApiError

_U16_MAX = 2**16 - 1
_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _fail():
    return ApiError("json decode")


def _require_dict(data):
    if not isinstance(data, dict):
        raise _fail()
    return data


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _ranged(maximum, minimum=0):
    return lambda value: _is_int(value) and minimum <= value <= maximum


def _is_str(value):
    return isinstance(value, str)


def _is_bool(value):
    return isinstance(value, bool)


def _required(data, name, check):
    if name not in data or not check(data[name]):
        raise _fail()
    return data[name]


def _optional(data, name, check):
    value = data.get(name)
    if value is None:
        return None
    if not check(value):
        raise _fail()
    return value


def _without_none(pairs):
    return {key: value for key, value in pairs if value is not None}


@dataclass
class Mention:
    """A link to a feed, message or blob, with an optional display name."""

    link: str
    name: str | None = None

    def to_dict(self):
        return _without_none([("link", self.link), ("name", self.name)])

    @classmethod
    def from_dict(cls, data):
        data = _require_dict(data)
        return cls(
            link=_required(data, "link", _is_str),
            name=_optional(data, "name", _is_str),
        )


def _mention_list(value):
    if not isinstance(value, list):
        raise _fail()
    return [Mention.from_dict(item) for item in value]


@dataclass
class Post:
    """Content of a post message."""

    text: str
    mentions: list | None = None
    xtype: str = "post"

    def to_msg(self):
        """Return the content as a JSON value."""
        result = {"type": self.xtype, "text": self.text}
        if self.mentions is not None:
            result["mentions"] = [mention.to_dict() for mention in self.mentions]
        return result


@dataclass
class PubAddress:
    """Where a pub can be reached."""

    port: int
    key: str
    host: str | None = None

    def to_dict(self):
        return _without_none([("host", self.host), ("port", self.port), ("key", self.key)])

    @classmethod
    def from_dict(cls, data):
        data = _require_dict(data)
        return cls(
            host=_optional(data, "host", _is_str),
            port=_required(data, "port", _ranged(_U16_MAX)),
            key=_required(data, "key", _is_str),
        )


def _is_vote_value(value):
    return _is_bool(value) or _ranged(_I64_MAX, _I64_MIN)(value)


@dataclass
class Vote:
    """A vote on a message: a number or a boolean, with an optional expression."""

    link: str
    value: int | bool
    expression: str | None = None

    def to_dict(self):
        return _without_none(
            [("link", self.link), ("value", self.value), ("expression", self.expression)]
        )

    @classmethod
    def from_dict(cls, data):
        data = _require_dict(data)
        return cls(
            link=_required(data, "link", _is_str),
            value=_required(data, "value", _is_vote_value),
            expression=_optional(data, "expression", _is_str),
        )


@dataclass
class Image:
    """An image: either a bare blob link, or a link with size, type and metadata."""

    link: str
    size: int | None = None
    content_type: str | None = None
    name: str | None = None
    width: int | None = None
    height: int | None = None

    def __post_init__(self):
        if (self.size is None) != (self.content_type is None):
            raise ApiError("an image needs both size and type, or neither")
        if self.size is None and (
            self.name is not None or self.width is not None or self.height is not None
        ):
            raise ApiError("a bare image link carries no metadata")

    @property
    def is_complete(self):
        """Tell whether the image carries its size and type."""
        return self.size is not None

    def to_dict(self):
        """Return the JSON value: the bare link, or an object with the metadata."""
        if not self.is_complete:
            return self.link
        return _without_none(
            [
                ("link", self.link),
                ("name", self.name),
                ("size", self.size),
                ("width", self.width),
                ("height", self.height),
                ("type", self.content_type),
            ]
        )

    @classmethod
    def from_dict(cls, data):
        if isinstance(data, str):
            return cls(link=data)
        data = _require_dict(data)
        return cls(
            link=_required(data, "link", _is_str),
            name=_optional(data, "name", _is_str),
            size=_required(data, "size", _ranged(_U64_MAX)),
            width=_optional(data, "width", _ranged(_U32_MAX)),
            height=_optional(data, "height", _ranged(_U32_MAX)),
            content_type=_required(data, "type", _is_str),
        )


@dataclass
class DateTime:
    """A point in time with its time zone."""

    epoch: int
    tz: str

    def to_dict(self):
        return {"epoch": self.epoch, "tz": self.tz}

    @classmethod
    def from_dict(cls, data):
        data = _require_dict(data)
        return cls(
            epoch=_required(data, "epoch", _ranged(_U64_MAX)),
            tz=_required(data, "tz", _is_str),
        )


def parse_branch(value):
    """Accept a branch as one message id or a list of them, and return it."""
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise _fail()


def parse_mentions(value):
    """Accept mentions as a link, one mention, a list, or a name-to-mention map."""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return _mention_list(value)
    if isinstance(value, dict):
        try:
            return Mention.from_dict(value)
        except ApiError:
            return {key: Mention.from_dict(item) for key, item in value.items()}
    raise _fail()


@dataclass
class PubMessage:
    """Announcement of a pub."""

    address: PubAddress | None = None

    def to_dict(self):
        address = None if self.address is None else self.address.to_dict()
        return {"type": "pub", "address": address}

    @classmethod
    def _from_fields(cls, data):
        address = data.get("address")
        return cls(address=None if address is None else PubAddress.from_dict(address))


@dataclass
class PostMessage:
    """A text post."""

    text: str
    mentions: list | None = None

    def to_dict(self):
        result = {"type": "post", "text": self.text}
        if self.mentions is not None:
            result["mentions"] = [mention.to_dict() for mention in self.mentions]
        return result

    @classmethod
    def _from_fields(cls, data):
        mentions = data.get("mentions")
        return cls(
            text=_required(data, "text", _is_str),
            mentions=None if mentions is None else _mention_list(mentions),
        )


@dataclass
class ContactMessage:
    """Following or blocking another feed."""

    contact: str | None = None
    blocking: bool | None = None
    following: bool | None = None
    autofollow: bool | None = None

    def to_dict(self):
        result = {"type": "contact", "contact": self.contact}
        result.update(
            _without_none(
                [
                    ("blocking", self.blocking),
                    ("following", self.following),
                    ("autofollow", self.autofollow),
                ]
            )
        )
        return result

    @classmethod
    def _from_fields(cls, data):
        return cls(
            contact=_optional(data, "contact", _is_str),
            blocking=_optional(data, "blocking", _is_bool),
            following=_optional(data, "following", _is_bool),
            autofollow=_optional(data, "autofollow", _is_bool),
        )


@dataclass
class AboutMessage:
    """Information about a feed, message or other entity."""

    about: str
    name: str | None = None
    title: str | None = None
    branch: str | None = None
    image: Image | None = None
    description: str | None = None
    location: str | None = None
    start_datetime: DateTime | None = None

    def to_dict(self):
        result = {"type": "about", "about": self.about}
        result.update(
            _without_none(
                [
                    ("name", self.name),
                    ("title", self.title),
                    ("branch", self.branch),
                    ("image", None if self.image is None else self.image.to_dict()),
                    ("description", self.description),
                    ("location", self.location),
                    (
                        "startDateTime",
                        None if self.start_datetime is None else self.start_datetime.to_dict(),
                    ),
                ]
            )
        )
        return result

    @classmethod
    def _from_fields(cls, data):
        image = data.get("image")
        start = data.get("startDateTime")
        return cls(
            about=_required(data, "about", _is_str),
            name=_optional(data, "name", _is_str),
            title=_optional(data, "title", _is_str),
            branch=_optional(data, "branch", _is_str),
            image=None if image is None else Image.from_dict(image),
            description=_optional(data, "description", _is_str),
            location=_optional(data, "location", _is_str),
            start_datetime=None if start is None else DateTime.from_dict(start),
        )


@dataclass
class ChannelMessage:
    """Subscribing to or leaving a channel."""

    channel: str
    subscribed: bool

    def to_dict(self):
        return {"type": "channel", "channel": self.channel, "subscribed": self.subscribed}

    @classmethod
    def _from_fields(cls, data):
        return cls(
            channel=_required(data, "channel", _is_str),
            subscribed=_required(data, "subscribed", _is_bool),
        )


@dataclass
class VoteMessage:
    """A vote on another message."""

    vote: Vote

    def to_dict(self):
        return {"type": "vote", "vote": self.vote.to_dict()}

    @classmethod
    def _from_fields(cls, data):
        if "vote" not in data:
            raise _fail()
        return cls(vote=Vote.from_dict(data["vote"]))


_TYPED_MESSAGES = {
    "pub": PubMessage,
    "post": PostMessage,
    "contact": ContactMessage,
    "about": AboutMessage,
    "channel": ChannelMessage,
    "vote": VoteMessage,
}


def typed_message_from_dict(data):
    """Build the typed message named by the ``type`` field of ``data``."""
    data = _require_dict(data)
    kind = data.get("type")
    message_class = _TYPED_MESSAGES.get(kind) if isinstance(kind, str) else None
    if message_class is None:
        raise _fail()
    return message_class._from_fields(data)


@dataclass(frozen=True)
class SubsetQuery:
    """An ssb-ql-1 query: by message type, by author, or a conjunction or disjunction."""

    op: str
    string: str | None = None
    feed: str | None = None
    args: tuple | None = None

    def __post_init__(self):
        if self.args is not None:
            object.__setattr__(self, "args", tuple(self.args))
        present = [value for value in (self.string, self.feed, self.args) if value is not None]
        if len(present) != 1:
            raise ApiError("a query has exactly one of string, feed or args")

    @classmethod
    def type_query(cls, string):
        """Match messages of the given type."""
        return cls(op="type", string=string)

    @classmethod
    def author_query(cls, feed):
        """Match messages by the given author."""
        return cls(op="author", feed=feed)

    @classmethod
    def and_query(cls, args):
        """Match messages that every sub-query matches."""
        return cls(op="and", args=tuple(args))

    @classmethod
    def or_query(cls, args):
        """Match messages that any sub-query matches."""
        return cls(op="or", args=tuple(args))

    def to_dict(self):
        if self.string is not None:
            return {"op": self.op, "string": self.string}
        if self.feed is not None:
            return {"op": self.op, "feed": self.feed}
        return {"op": self.op, "args": [query.to_dict() for query in self.args]}

    @classmethod
    def from_dict(cls, data):
        data = _require_dict(data)
        op = _required(data, "op", _is_str)
        if isinstance(data.get("string"), str):
            return cls(op=op, string=data["string"])
        if isinstance(data.get("feed"), str):
            return cls(op=op, feed=data["feed"])
        args = data.get("args")
        if isinstance(args, list):
            return cls(op=op, args=tuple(cls.from_dict(item) for item in args))
        raise _fail()


@dataclass
class SubsetQueryOptions:
    """Order, shape and length of the results of a subset query."""

    descending: bool | None = None
    keys: bool | None = None
    page_limit: int | None = None

    def to_dict(self):
        return _without_none(
            [
                ("descending", self.descending),
                ("keys", self.keys),
                ("pageLimit", self.page_limit),
            ]
        )


@dataclass
class RelationshipQuery:
    """Asks for the follow or block state from one peer to another."""

    source: str
    dest: str

    def to_dict(self):
        return {"source": self.source, "dest": self.dest}


@dataclass
class FriendsHops:
    """Options of ``["friends", "hops"]``: maximum distance, direction and start."""

    max: int
    reverse: bool | None = None
    start: str | None = None

    def to_dict(self):
        return _without_none([("max", self.max), ("reverse", self.reverse), ("start", self.start)])


@dataclass
class InviteCreateOptions:
    """How many times a new invite may be used."""

    uses: int = field(default=1)

    def to_dict(self):
        return {"uses": self.uses}