"""Framing of the MUXRPC protocol spoken over an authenticated box stream."""

import asyncio
import json
import logging
import struct
from dataclasses import dataclass
from enum import Enum, IntEnum

from .errors import RpcError

logger = logging.getLogger("ssb-rpc")

HEADER_SIZE = 9

RPC_HEADER_STREAM_FLAG = 1 << 3
RPC_HEADER_END_OR_ERROR_FLAG = 1 << 2
RPC_HEADER_BODY_TYPE_MASK = 0b11

_HEADER = struct.Struct(">BIi")


class ArgType(Enum):
    """How the arguments of a request are packed into its body."""

    ARRAY = "array"
    TUPLE = "tuple"
    OBJECT = "object"


class BodyType(IntEnum):
    """Encoding of a frame body, as carried in the header flags."""

    BINARY = 0
    UTF8 = 1
    JSON = 2


class RpcType(Enum):
    """Kind of call: a single answer, a stream of answers, or both ways."""

    ASYNC = "async"
    SOURCE = "source"
    DUPLEX = "duplex"


@dataclass
class Body:
    """The JSON body of an incoming request."""

    name: list
    rpc_type: RpcType
    args: object


@dataclass(frozen=True)
class Header:
    """The nine-byte header in front of every frame."""

    req_no: int
    is_stream: bool
    is_end_or_error: bool
    body_type: BodyType
    body_len: int

    @classmethod
    def from_slice(cls, data):
        """Decode a header from the first nine bytes of ``data``."""
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise RpcError("header size too small")
        flags, body_len, req_no = _HEADER.unpack(data[:HEADER_SIZE])
        body_type_value = flags & RPC_HEADER_BODY_TYPE_MASK
        try:
            body_type = BodyType(body_type_value)
        except ValueError as err:
            logger.warning("rare message: %r", data)
            raise RpcError(f"invalid body type: {body_type_value}") from err
        return cls(
            req_no=req_no,
            is_stream=bool(flags & RPC_HEADER_STREAM_FLAG),
            is_end_or_error=bool(flags & RPC_HEADER_END_OR_ERROR_FLAG),
            body_type=body_type,
            body_len=body_len,
        )

    def to_bytes(self):
        """Encode the header into its nine wire bytes."""
        flags = int(BodyType(self.body_type))
        if self.is_end_or_error:
            flags |= RPC_HEADER_END_OR_ERROR_FLAG
        if self.is_stream:
            flags |= RPC_HEADER_STREAM_FLAG
        try:
            return _HEADER.pack(flags, self.body_len, self.req_no)
        except struct.error as err:
            raise RpcError(str(err)) from err


@dataclass
class RpcRequest:
    """A request from the peer."""

    body: Body


@dataclass
class RpcResponse:
    """A response to one of our requests."""

    body_type: BodyType
    body: bytes


@dataclass
class OtherRequest:
    """A frame with a positive request number whose body is not a request."""

    body_type: BodyType
    body: bytes


@dataclass
class ErrorResponse:
    """An error answer to one of our requests."""

    message: str


@dataclass
class CancelStreamResponse:
    """The end of a stream of answers."""


def _json_default(obj):
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"cannot encode {type(obj).__name__} as JSON")


def _dumps(value):
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    except (TypeError, ValueError) as err:
        raise RpcError("json decoding") from err


def _parse_body(raw):
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    name = data.get("name")
    if not isinstance(name, list) or not all(isinstance(part, str) for part in name):
        return None
    try:
        rpc_type = RpcType(data.get("type"))
    except (ValueError, TypeError):
        return None
    if "args" not in data:
        return None
    return Body(name=name, rpc_type=rpc_type, args=data["args"])


def _parse_error_message(raw):
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as err:
        raise RpcError("json decoding") from err
    if not isinstance(data, dict) or not all(
        isinstance(data.get(field), str) for field in ("name", "stack", "message")
    ):
        raise RpcError("json decoding")
    return data["message"]


class RpcReader:
    """Reads frames from a stream that offers ``await readexactly(n)``."""

    def __init__(self, reader):
        self._reader = reader

    async def _read(self, size):
        try:
            return bytes(await self._reader.readexactly(size))
        except (asyncio.IncompleteReadError, OSError) as err:
            raise RpcError("i/o") from err

    async def recv(self):
        """Read one frame and return ``(request number, message)``."""
        header = Header.from_slice(await self._read(HEADER_SIZE))
        body = await self._read(header.body_len)
        logger.debug("recv %r %r", header, body)

        if header.req_no > 0:
            parsed = _parse_body(body)
            if parsed is None:
                return header.req_no, OtherRequest(header.body_type, body)
            return header.req_no, RpcRequest(parsed)
        if header.is_end_or_error:
            if header.is_stream:
                return -header.req_no, CancelStreamResponse()
            return -header.req_no, ErrorResponse(_parse_error_message(body))
        return -header.req_no, RpcResponse(header.body_type, body)

    async def __aiter__(self):
        """Yield frames until reading fails."""
        while True:
            try:
                item = await self.recv()
            except RpcError:
                return
            yield item


class RpcWriter:
    """Writes frames to a stream that offers ``write(data)`` and ``await drain()``."""

    def __init__(self, writer):
        self._writer = writer
        self.req_no = 0

    async def _send(self, header, body):
        logger.debug("send %r %r", header, body)
        try:
            self._writer.write(header.to_bytes() + body)
            await self._writer.drain()
        except OSError as err:
            raise RpcError("i/o") from err

    async def send_request(self, name, rpc_type, arg_type, args, opts):
        """Send a request and return the request number given to it."""
        self.req_no += 1
        if arg_type is ArgType.ARRAY:
            packed = [args]
        elif arg_type is ArgType.TUPLE:
            packed = [args, opts]
        else:
            packed = args
        body = _dumps({"name": list(name), "type": rpc_type.value, "args": packed}).encode("utf-8")
        header = Header(
            req_no=self.req_no,
            is_stream=rpc_type is RpcType.SOURCE,
            is_end_or_error=False,
            body_type=BodyType.JSON,
            body_len=len(body),
        )
        await self._send(header, body)
        return self.req_no

    async def send_response(self, req_no, rpc_type, body_type, body):
        """Send one answer to request ``req_no``."""
        body = bytes(body)
        header = Header(
            req_no=-req_no,
            is_stream=rpc_type is RpcType.SOURCE,
            is_end_or_error=False,
            body_type=body_type,
            body_len=len(body),
        )
        await self._send(header, body)

    async def send_error(self, req_no, rpc_type, message):
        """Send an error answer to request ``req_no``."""
        body = _dumps({"name": "Error", "stack": "", "message": message}).encode("utf-8")
        header = Header(
            req_no=-req_no,
            is_stream=rpc_type is not RpcType.ASYNC,
            is_end_or_error=True,
            body_type=BodyType.UTF8,
            body_len=len(body),
        )
        await self._send(header, body)

    async def send_stream_eof(self, req_no):
        """Mark the end of the stream of answers to request ``req_no``."""
        body = b"true"
        header = Header(
            req_no=-req_no,
            is_stream=True,
            is_end_or_error=True,
            body_type=BodyType.JSON,
            body_len=len(body),
        )
        await self._send(header, body)

    async def close(self):
        """Say goodbye on the underlying stream, or close it."""
        try:
            goodbye = getattr(self._writer, "goodbye", None)
            if goodbye is not None:
                await goodbye()
                return
            self._writer.close()
            wait_closed = getattr(self._writer, "wait_closed", None)
            if wait_closed is not None:
                await wait_closed()
        except OSError as err:
            raise RpcError("i/o") from err