# scuttlekit

Building blocks for talking Secure Scuttlebutt (SSB) from Python:

- **Identities** (`scuttlekit.keystore`) – create ed25519 identities and read
  or write the secret files used by Patchwork (`~/.ssb/secret`) and go-sbot
  (`~/.ssb-go/secret`).
- **Feed messages** (`scuttlekit.message`, `scuttlekit.feed`) – sign, verify
  and hash messages, using the canonical JSON form from `scuttlekit.encoding`.
- **Private boxes** (`scuttlekit.privatebox`) – encrypt a message for up to
  seven recipients and decrypt boxes addressed to you.
- **MUXRPC** (`scuttlekit.rpc`) – encode and decode packet headers, read
  incoming requests and responses, and send requests, responses, errors and
  end-of-stream markers.
- **Discovery** (`scuttlekit.discovery`) – parse invite codes and LAN
  broadcast announcements, and broadcast your own presence on the local
  network.
- **API calls** (`scuttlekit.api`, `scuttlekit.dto`, `scuttlekit.content`) –
  request and result objects and an `ApiCaller` for the common methods:
  `whoami`, `get`, `createHistoryStream`, `createFeedStream`, `latest`,
  `publish`, `private.publish`, blobs, friends, names, invites and partial
  replication.

Python 3.10 or later is required. The package depends on PyNaCl for the
cryptography and psutil for finding network interfaces. Install the `test`
extra to run the test suite with pytest.

## Identities

```python
from scuttlekit.keystore import OwnedIdentity

identity = OwnedIdentity.create()
print(identity.id)            # "@<base64 public key>.ed25519"
```

`identity.pk` holds the 32-byte public key and `identity.sk` the 64-byte
secret key.

Load an existing identity from the usual locations:

```python
from scuttlekit.keystore import from_gosbot_local, from_patchwork_local

identity = from_patchwork_local()     # ~/.ssb/secret
other = from_gosbot_local()           # ~/.ssb-go/secret
```

`from_custom_patchwork_keypath(path)` and `from_custom_gosbot_keypath(path)`
read from a path of your choosing. `read_patchwork_config(reader)` and
`read_gosbot_config(reader)` read from any file-like object that returns
text or bytes; the Patchwork reader skips lines starting with `#`.
`write_patchwork_config(identity, writer)` writes indented JSON and
`write_gosbot_config(identity, writer)` writes compact JSON, to a text or
binary writer.

A secret file that cannot be read or parsed, or whose curve is not
`ed25519`, raises `KeystoreError`.

## Signing and verifying messages

```python
from scuttlekit.keystore import OwnedIdentity
from scuttlekit.message import Message

identity = OwnedIdentity.create()

first = Message.sign(None, identity, {"type": "post", "text": "hello"})
second = Message.sign(first, identity, {"type": "post", "text": "again"})

print(second.sequence())                       # 2
print(second.previous() == str(first.id()))    # True

# Parsing checks the structure and the signature.
same = Message.from_str(str(second))
print(str(same.id()))                          # "%<base64 digest>.sha256"
```

`Message.from_slice` parses bytes and `Message.from_value` an already
decoded JSON object. The accessors `previous`, `author`, `sequence`,
`timestamp`, `hash`, `content` and `signature` return the message fields. A
message with missing or mistyped fields or a bad signature raises
`FeedError`.

`Feed` is a stored message value with its `key`, `timestamp` and optional
`rts`, as returned by streams such as `createHistoryStream`.
`Feed.from_slice` checks that the key matches the hash of the value,
`Feed.from_message` wraps a message stamped with the current time, and
`into_message` verifies the value and returns a `Message`.

## Canonical JSON and message hashes

```python
from scuttlekit.encoding import ssb_sha256, stringify_json

print(stringify_json({"a": 0, "h": {"h1": 1}, "k": [1, 2]}))
digest = ssb_sha256({"a": 0})     # 32 bytes
```

`stringify_json` produces the two-space-indented form that SSB signs, and
`ssb_sha256` hashes the low byte of each UTF-16 code unit of that text.

## Private boxes

```python
from scuttlekit.keystore import OwnedIdentity
from scuttlekit.privatebox import is_privatebox, privatebox_cipher, privatebox_decipher

alice = OwnedIdentity.create()
bob = OwnedIdentity.create()

boxed = privatebox_cipher("meet at noon", [alice.id, bob.id])
assert is_privatebox(boxed)

print(privatebox_decipher(boxed, bob.sk))   # "meet at noon"
```

Deciphering a box that is not addressed to you returns `None`. An empty
plaintext, no recipients or more than seven recipients raises `FeedError`.
`cipher` and `decipher` do the same on raw bytes and raw public keys.

## Discovery

```python
from scuttlekit.discovery import Invite, LanBroadcast, ssb_net_id

found = LanBroadcast.parse(announcement_text)   # (ip, port, public key) or None
invite = Invite.from_code(invite_code)          # domain, port, pub_pk, invite_sk
network_key = ssb_net_id()                      # 32-byte key of the main SSB network
```

`await LanBroadcast.create(public_key, rpc_port)` prepares an announcement
for each non-loopback interface that can broadcast, and `await send()`
sends them to `255.255.255.255`. A malformed invite code raises
`DiscoveryError`.

## MUXRPC and the API

`Header` encodes and decodes the nine-byte MUXRPC packet header:

```python
from scuttlekit.rpc import BodyType, Header

header = Header(req_no=5, is_stream=True, is_end_or_error=False,
                body_type=BodyType.JSON, body_len=123)
assert Header.from_slice(header.to_bytes()) == header
```

`RpcReader` wraps any stream that offers `await readexactly(n)`, and
`RpcWriter` any stream that offers `write(data)` and `await drain()` (for
example asyncio's `StreamReader` and `StreamWriter`). `recv()` returns a
request number and one of `RpcRequest`, `RpcResponse`, `OtherRequest`,
`ErrorResponse` or `CancelStreamResponse`; iterating the reader with
`async for` yields frames until reading fails. Hand the writer to
`ApiCaller` to send API calls:

```python
from scuttlekit.api import ApiCaller
from scuttlekit.dto import CreateHistoryStreamIn
from scuttlekit.rpc import CancelStreamResponse, RpcReader, RpcResponse, RpcWriter

reader = RpcReader(stream_reader)
caller = ApiCaller(RpcWriter(stream_writer))

req_no = await caller.create_history_stream_req_send(CreateHistoryStreamIn(identity.id))
async for number, msg in reader:
    if number != req_no:
        continue
    if isinstance(msg, CancelStreamResponse):
        break
    if isinstance(msg, RpcResponse):
        print(msg.body)
```

Request objects in `scuttlekit.dto` and `scuttlekit.content` (for example
`CreateStreamIn`, `BlobsGetIn`, `PostMessage`, `SubsetQuery`, `FriendsHops`)
serialise to the JSON an SSB server expects through their `to_dict`
methods; result objects such as `WhoAmIOut` and `LatestOut` are built with
`from_dict`. `ApiMethod.from_selector` and `ApiMethod.from_rpc_body` tell
which method an incoming request names.

## What the package does not do

It does not perform the secret handshake or the encrypted box stream that
SSB peers use on a connection; `RpcReader` and `RpcWriter` need a stream
that already carries decrypted frames. It does not store feeds, serve
requests on its own, or come with a command-line client.

## Errors

Every error raised by the package derives from `scuttlekit.errors.SsbError`;
the subclasses `CryptoError`, `FeedError`, `KeystoreError`, `RpcError`,
`ApiError` and `DiscoveryError` say which part failed.