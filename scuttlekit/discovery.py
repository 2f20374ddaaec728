"""Finding peers: the network key, LAN broadcasts and pub invite codes."""

import asyncio
import base64
import ipaddress
import logging
import re
import socket
from dataclasses import dataclass, field

import psutil

from .crypto import to_ed25519_pk, to_ed25519_pk_no_suffix, to_ed25519_sk_no_suffix
from .errors import CryptoError, DiscoveryError

logger = logging.getLogger("solar")

SSB_NET_ID = "d4a1cb88a66f02f8db635ce26441cc5dac1b08420ceaac230839b755845a9ffb"

BROADCAST_REGEX = re.compile(
    r"net:([0-9]+\.[0-9]+\.[0-9]+\.[0-9]+):([0-9]+)~shs:([0-9a-zA-Z=/]+)"
)

_U16_MAX = 2**16 - 1
_U32_MAX = 2**32 - 1
_INTEGER = re.compile(r"\+?[0-9]+")


def ssb_net_id():
    """Return the 32-byte key of the main SSB network."""
    return bytes.fromhex(SSB_NET_ID)


def _parse_unsigned(text, maximum):
    if not _INTEGER.fullmatch(text) or int(text) > maximum:
        raise DiscoveryError("invalid integer")
    return int(text)


@dataclass
class Invite:
    """A pub invite: where the pub is, its key, and the key that redeems the invite."""

    domain: str
    port: int
    pub_pk: bytes
    invite_sk: bytes = field(repr=False)

    @classmethod
    def from_code(cls, code):
        """Parse ``domain:port:@<pub key>.ed25519~<invite key>``."""
        domain_port_keys = code.split(":")
        if len(domain_port_keys) != 3:
            raise DiscoveryError("invalid invite code")
        domain, port_text, keys = domain_port_keys
        port = _parse_unsigned(port_text, _U16_MAX)
        pk_sk = keys.split("~")
        if len(pk_sk) != 2:
            raise DiscoveryError("invalid invite code")
        try:
            pub_pk = to_ed25519_pk(pk_sk[0][1:])
            invite_sk = to_ed25519_sk_no_suffix(pk_sk[1])
        except CryptoError as err:
            raise DiscoveryError("invalid crypto format") from err
        return cls(domain=domain, port=port, pub_pk=pub_pk, invite_sk=invite_sk)


def _broadcast_pair(addr):
    family = getattr(addr, "family", None)
    if family not in (socket.AF_INET, socket.AF_INET6) or not addr.broadcast:
        return None
    try:
        ip = ipaddress.ip_address(addr.address.split("%")[0])
        broadcast = ipaddress.ip_address(addr.broadcast.split("%")[0])
    except ValueError:
        return None
    if ip.is_loopback:
        return None
    return ip, broadcast


@dataclass
class LanBroadcast:
    """Announcements of a local server to be broadcast on every capable interface."""

    destination: tuple
    packets: list = field(default_factory=list)

    @classmethod
    async def create(cls, public_key, rpc_port):
        """Prepare one announcement per non-loopback interface that can broadcast."""
        server_pk = base64.b64encode(bytes(public_key)).decode("ascii")
        packets = []
        for addresses in psutil.net_if_addrs().values():
            for addr in addresses:
                pair = _broadcast_pair(addr)
                if pair is None:
                    continue
                local, broadcast = pair
                family = socket.AF_INET if local.version == 4 else socket.AF_INET6
                local_addr = (str(local), rpc_port)
                try:
                    with socket.socket(family, socket.SOCK_DGRAM) as probe:
                        probe.bind(local_addr)
                except OSError as err:
                    logger.warning("cannot broadcast to %r %r", local_addr, err)
                    continue
                msg = f"net:{local}:{rpc_port}~shs:{server_pk}"
                packets.append((local_addr, (str(broadcast), rpc_port), msg))
        return cls(destination=("255.255.255.255", rpc_port), packets=packets)

    async def send(self):
        """Send every announcement from its own interface to the destination."""
        loop = asyncio.get_running_loop()
        for local_addr, _broadcast, msg in self.packets:
            try:
                transport, _ = await loop.create_datagram_endpoint(
                    asyncio.DatagramProtocol,
                    local_addr=local_addr,
                    allow_broadcast=True,
                )
            except OSError:
                continue
            try:
                transport.sendto(msg.encode("utf-8"), self.destination)
            except OSError as err:
                logger.warning("Error broadcasting %s", err)
            finally:
                transport.close()

    @staticmethod
    def parse(msg):
        """Return ``(ip, port, public key)`` from the first valid address in ``msg``, or None."""
        for addr in msg.split(";"):
            captures = BROADCAST_REGEX.search(addr)
            if captures is None:
                continue
            try:
                port = _parse_unsigned(captures.group(2), _U32_MAX)
                server_pk = to_ed25519_pk_no_suffix(captures.group(3))
            except (DiscoveryError, CryptoError):
                continue
            return captures.group(1), port, server_pk
        return None