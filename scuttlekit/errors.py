"""Exception hierarchy shared by every part of the package."""


class SsbError(Exception):
    """Base class for every error raised by the package."""


class CryptoError(SsbError, ValueError):
    """A key, signature or digest in text form could not be decoded."""


class FeedError(SsbError, ValueError):
    """A feed entry or message is malformed, or cannot be signed or deciphered."""


class KeystoreError(SsbError):
    """An identity file could not be found, read, parsed or written."""


class RpcError(SsbError):
    """A frame of the RPC protocol could not be decoded or sent."""


class ApiError(SsbError):
    """An API call could not be encoded or sent."""


class DiscoveryError(SsbError, ValueError):
    """A broadcast message or invite code could not be understood."""