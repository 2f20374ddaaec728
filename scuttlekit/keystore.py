"""Local identities and the secret files that go-sbot and patchwork keep them in."""

import io
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path

from nacl.signing import SigningKey

from .crypto import CURVE_ED25519_SUFFIX, to_ed25519_pk, to_ed25519_sk, to_ssb_id
from .errors import CryptoError, KeystoreError

CURVE_ED25519 = "ed25519"
"""Ed25519 signature scheme identifier."""

GOSBOT_SECRET_PATH = Path(".ssb-go") / "secret"
PATCHWORK_SECRET_PATH = Path(".ssb") / "secret"


@dataclass
class JsonSSBSecret:
    """The JSON document stored in an SSB secret file."""

    curve: str
    id: str
    private: str
    public: str


@dataclass
class OwnedIdentity:
    """An identity whose secret key is held locally."""

    id: str
    pk: bytes
    sk: bytes = field(repr=False)

    @classmethod
    def create(cls):
        """Generate a fresh ed25519 identity."""
        signing_key = SigningKey.generate()
        pk = bytes(signing_key.verify_key)
        sk = bytes(signing_key) + pk
        return cls(id="@" + to_ssb_id(pk, CURVE_ED25519_SUFFIX), pk=pk, sk=sk)


def _read_text(reader):
    try:
        data = reader.read()
        return data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
    except (OSError, UnicodeDecodeError) as err:
        raise KeystoreError(str(err)) from err


def _write_text(writer, text):
    try:
        if isinstance(writer, io.TextIOBase):
            writer.write(text)
        else:
            writer.write(text.encode("utf-8"))
    except OSError as err:
        raise KeystoreError(str(err)) from err


def _parse_secret(text):
    try:
        data = json.loads(text)
    except json.JSONDecodeError as err:
        raise KeystoreError(str(err)) from err
    if not isinstance(data, dict):
        raise KeystoreError("secret file is not a JSON object")
    values = {}
    for name in ("curve", "id", "private", "public"):
        value = data.get(name)
        if not isinstance(value, str):
            raise KeystoreError(f"missing or invalid field `{name}`")
        values[name] = value
    return JsonSSBSecret(**values)


def _identity_from_secret(secret):
    if secret.curve != CURVE_ED25519:
        raise KeystoreError("invalid configuration file")
    try:
        return OwnedIdentity(
            id=secret.id,
            pk=to_ed25519_pk(secret.public),
            sk=to_ed25519_sk(secret.private),
        )
    except CryptoError as err:
        raise KeystoreError("crypto format") from err


def _secret_for(identity):
    return JsonSSBSecret(
        curve=CURVE_ED25519,
        id=identity.id,
        private=to_ssb_id(identity.sk, CURVE_ED25519_SUFFIX),
        public=to_ssb_id(identity.pk, CURVE_ED25519_SUFFIX),
    )


def _load(path, read):
    try:
        with open(path, "rb") as handle:
            return read(handle)
    except OSError as err:
        raise KeystoreError(str(err)) from err


def _home():
    try:
        return Path.home()
    except (RuntimeError, KeyError) as err:
        raise KeystoreError("$HOME not found") from err


def read_gosbot_config(reader):
    """Read a go-sbot secret file from a file-like object."""
    return _identity_from_secret(_parse_secret(_read_text(reader)))


def write_gosbot_config(identity, writer):
    """Write ``identity`` in the compact go-sbot secret format."""
    text = json.dumps(asdict(_secret_for(identity)), separators=(",", ":"), ensure_ascii=False)
    _write_text(writer, text)


def from_custom_gosbot_keypath(path):
    """Load an identity from a go-sbot secret file at ``path``."""
    return _load(path, read_gosbot_config)


def from_gosbot_local():
    """Load an identity from ``~/.ssb-go/secret``."""
    return from_custom_gosbot_keypath(_home() / GOSBOT_SECRET_PATH)


def read_patchwork_config(reader):
    """Read a patchwork secret file, skipping lines that start with ``#``."""
    text = _read_text(reader)
    body = "".join(
        line.removesuffix("\r")
        for line in text.split("\n")
        if not line.startswith("#")
    )
    return _identity_from_secret(_parse_secret(body))


def write_patchwork_config(identity, writer):
    """Write ``identity`` in the indented patchwork secret format."""
    text = json.dumps(asdict(_secret_for(identity)), indent=2, ensure_ascii=False)
    _write_text(writer, text)


def from_custom_patchwork_keypath(path):
    """Load an identity from a patchwork secret file at ``path``."""
    return _load(path, read_patchwork_config)


def from_patchwork_local():
    """Load an identity from ``~/.ssb/secret``."""
    return from_custom_patchwork_keypath(_home() / PATCHWORK_SECRET_PATH)