"""High-level calls of the SSB API, sent over an RPC writer."""

import json
from enum import Enum

from .content import InviteCreateOptions
from .dto import WhoAmIOut
from .errors import ApiError, RpcError
from .rpc import ArgType, BodyType, RpcType

MAX_RPC_BODY_LEN = 65536


class ApiMethod(Enum):
    """A method of the API, identified by its selector."""

    BLOBS_CREATE_WANTS = ("blobs", "createWants")
    BLOBS_GET = ("blobs", "get")
    CREATE_FEED_STREAM = ("createFeedStream",)
    CREATE_HISTORY_STREAM = ("createHistoryStream",)
    FRIENDS_BLOCKS = ("friends", "blocks")
    FRIENDS_HOPS = ("friends", "hops")
    FRIENDS_IS_FOLLOWING = ("friends", "isFollowing")
    FRIENDS_IS_BLOCKING = ("friends", "isBlocking")
    GET = ("get",)
    GET_SUBSET = ("partialReplication", "getSubset")
    INVITE_CREATE = ("invite", "create")
    INVITE_USE = ("invite", "use")
    LATEST = ("latest",)
    NAMES_GET = ("names", "get")
    NAMES_GET_IMAGE_FOR = ("names", "getImageFor")
    NAMES_GET_SIGNIFIER = ("names", "getSignifier")
    PRIVATE_PUBLISH = ("private", "publish")
    PUBLISH = ("publish",)
    WHO_AM_I = ("whoami",)

    def selector(self):
        """Return the name parts of the method as sent on the wire."""
        return self.value

    @classmethod
    def from_selector(cls, selector):
        """Return the method with the given name parts, or None if there is none."""
        try:
            return cls(tuple(selector))
        except ValueError:
            return None

    @classmethod
    def from_rpc_body(cls, body):
        """Return the method named by an incoming request body, or None."""
        return cls.from_selector(body.name)


class ApiCaller:
    """Sends API requests and responses through an RPC writer."""

    def __init__(self, rpc):
        self._rpc = rpc

    @property
    def rpc(self):
        """The underlying RPC writer."""
        return self._rpc

    async def _request(self, method, rpc_type, arg_type, args, opts=None):
        try:
            return await self._rpc.send_request(
                method.selector(), rpc_type, arg_type, args, opts
            )
        except RpcError as err:
            raise ApiError("rpc") from err

    async def _respond(self, req_no, rpc_type, body_type, body):
        try:
            await self._rpc.send_response(req_no, rpc_type, body_type, body)
        except RpcError as err:
            raise ApiError("rpc") from err

    async def blob_create_wants_req_send(self):
        """Send ``["blobs", "createWants"]``."""
        return await self._request(ApiMethod.BLOBS_CREATE_WANTS, RpcType.SOURCE, ArgType.ARRAY, [])

    async def blobs_get_req_send(self, args):
        """Send ``["blobs", "get"]``."""
        return await self._request(ApiMethod.BLOBS_GET, RpcType.SOURCE, ArgType.ARRAY, args)

    async def blobs_get_res_send(self, req_no, data):
        """Send a blob in chunks, then the end of the stream."""
        data = bytes(data)
        for offset in range(0, len(data), MAX_RPC_BODY_LEN):
            chunk = data[offset : offset + MAX_RPC_BODY_LEN]
            await self._respond(req_no, RpcType.SOURCE, BodyType.BINARY, chunk)
        try:
            await self._rpc.send_stream_eof(req_no)
        except RpcError as err:
            raise ApiError("rpc") from err

    async def create_feed_stream_req_send(self, args):
        """Send ``["createFeedStream"]``."""
        return await self._request(
            ApiMethod.CREATE_FEED_STREAM, RpcType.SOURCE, ArgType.ARRAY, args
        )

    async def create_history_stream_req_send(self, args):
        """Send ``["createHistoryStream"]``."""
        return await self._request(
            ApiMethod.CREATE_HISTORY_STREAM, RpcType.SOURCE, ArgType.ARRAY, args
        )

    async def feed_res_send(self, req_no, feed):
        """Send one feed entry of a stream."""
        await self._respond(req_no, RpcType.SOURCE, BodyType.JSON, feed.encode("utf-8"))

    async def friends_blocks_req_send(self):
        """Send ``["friends", "blocks"]``."""
        return await self._request(ApiMethod.FRIENDS_BLOCKS, RpcType.SOURCE, ArgType.OBJECT, [])

    async def friends_hops_req_send(self, args):
        """Send ``["friends", "hops"]``."""
        return await self._request(ApiMethod.FRIENDS_HOPS, RpcType.SOURCE, ArgType.ARRAY, args)

    async def friends_is_blocking_req_send(self, args):
        """Send ``["friends", "isBlocking"]``."""
        return await self._request(
            ApiMethod.FRIENDS_IS_BLOCKING, RpcType.ASYNC, ArgType.ARRAY, args
        )

    async def friends_is_following_req_send(self, args):
        """Send ``["friends", "isFollowing"]``."""
        return await self._request(
            ApiMethod.FRIENDS_IS_FOLLOWING, RpcType.ASYNC, ArgType.ARRAY, args
        )

    async def get_req_send(self, msg_id):
        """Send ``["get"]`` for one message id."""
        return await self._request(ApiMethod.GET, RpcType.ASYNC, ArgType.ARRAY, msg_id)

    async def get_res_send(self, req_no, msg):
        """Answer ``["get"]`` with a message."""
        await self._respond(req_no, RpcType.ASYNC, BodyType.JSON, str(msg).encode("utf-8"))

    async def getsubset_req_send(self, query, opts):
        """Send ``["partialReplication", "getSubset"]``."""
        return await self._request(
            ApiMethod.GET_SUBSET, RpcType.SOURCE, ArgType.TUPLE, query, opts
        )

    async def invite_create_req_send(self, uses):
        """Send ``["invite", "create"]`` for an invite usable ``uses`` times."""
        return await self._request(
            ApiMethod.INVITE_CREATE,
            RpcType.ASYNC,
            ArgType.OBJECT,
            InviteCreateOptions(uses=uses),
        )

    async def invite_use_req_send(self, invite_code):
        """Send ``["invite", "use"]``."""
        return await self._request(ApiMethod.INVITE_USE, RpcType.ASYNC, ArgType.ARRAY, invite_code)

    async def latest_req_send(self):
        """Send ``["latest"]``."""
        return await self._request(ApiMethod.LATEST, RpcType.ASYNC, ArgType.ARRAY, [])

    async def names_get_req_send(self):
        """Send ``["names", "get"]``."""
        return await self._request(ApiMethod.NAMES_GET, RpcType.ASYNC, ArgType.ARRAY, [])

    async def names_get_image_for_req_send(self, feed_id):
        """Send ``["names", "getImageFor"]``."""
        return await self._request(
            ApiMethod.NAMES_GET_IMAGE_FOR, RpcType.ASYNC, ArgType.ARRAY, feed_id
        )

    async def names_get_signifier_req_send(self, feed_id):
        """Send ``["names", "getSignifier"]``."""
        return await self._request(
            ApiMethod.NAMES_GET_SIGNIFIER, RpcType.ASYNC, ArgType.ARRAY, feed_id
        )

    async def publish_req_send(self, msg):
        """Send ``["publish"]`` with typed message content."""
        return await self._request(ApiMethod.PUBLISH, RpcType.ASYNC, ArgType.ARRAY, msg)

    async def private_publish_req_send(self, msg, recipients):
        """Send ``["private", "publish"]`` to the given recipients."""
        return await self._request(
            ApiMethod.PRIVATE_PUBLISH, RpcType.ASYNC, ArgType.TUPLE, msg, list(recipients)
        )

    async def publish_res_send(self, req_no, msg_ref):
        """Answer ``["publish"]`` with the reference of the new message."""
        await self._respond(req_no, RpcType.ASYNC, BodyType.JSON, msg_ref.encode("utf-8"))

    async def whoami_req_send(self):
        """Send ``["whoami"]``."""
        return await self._request(ApiMethod.WHO_AM_I, RpcType.ASYNC, ArgType.ARRAY, [])

    async def whoami_res_send(self, req_no, identity):
        """Answer ``["whoami"]`` with the given feed id."""
        body = json.dumps(WhoAmIOut(id=identity).to_dict(), separators=(",", ":"))
        await self._respond(req_no, RpcType.ASYNC, BodyType.JSON, body.encode("utf-8"))