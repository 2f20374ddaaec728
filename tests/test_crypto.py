import hashlib

import pytest
from nacl.signing import SigningKey

from scuttlekit.crypto import (
    CURVE_ED25519_SUFFIX,
    ED25519_SIGNATURE_SUFFIX,
    SHA256_SUFFIX,
    to_ed25519_pk,
    to_ed25519_pk_no_suffix,
    to_ed25519_signature,
    to_ed25519_sk,
    to_ed25519_sk_no_suffix,
    to_sha256,
    to_ssb_id,
)
from scuttlekit.errors import CryptoError

SAMPLE_PK_TEXT = "1vxS6DMi7z9uJIQG33W7mlsv21GZIbOpmWE1QEcn9oY=.ed25519"
SAMPLE_SK_TEXT = (
    "F9bw6dPLaHR89hg6Q2dRmoNHHjm+COI53L0kdV3Y4w3W/FLoMyLvP24khAbfdbuaWy/"
    "bUZkhs6mZYTVARyf2hg==.ed25519"
)


@pytest.mark.parametrize(
    "suffix, expected_tail",
    [
        (CURVE_ED25519_SUFFIX, "=.ed25519"),
        (ED25519_SIGNATURE_SUFFIX, "=.sig.ed25519"),
        (SHA256_SUFFIX, "=.sha256"),
    ],
)
def test_suffix_constants_in_ids(suffix, expected_tail):
    assert to_ssb_id(bytes(32), suffix) == "A" * 43 + expected_tail


def test_zero_key_text():
    assert to_ssb_id(bytes(32)) == "A" * 43 + "=.ed25519"


def test_public_key_round_trip():
    pk = bytes(SigningKey.generate().verify_key)
    text = to_ssb_id(pk)
    assert text.endswith(CURVE_ED25519_SUFFIX)
    assert to_ed25519_pk(text) == pk


def test_public_key_no_suffix_round_trip():
    pk = bytes(SigningKey.generate().verify_key)
    assert to_ed25519_pk_no_suffix(to_ssb_id(pk, "")) == pk


def test_sample_secret_key_ends_with_public_key():
    pk = to_ed25519_pk(SAMPLE_PK_TEXT)
    sk = to_ed25519_sk(SAMPLE_SK_TEXT)
    assert len(sk) == 64
    assert sk[32:] == pk
    assert bytes(SigningKey(sk[:32]).verify_key) == pk


def test_secret_key_round_trip():
    sk = to_ed25519_sk(SAMPLE_SK_TEXT)
    assert to_ssb_id(sk) == SAMPLE_SK_TEXT
    assert to_ed25519_sk_no_suffix(to_ssb_id(sk, "")) == sk


def test_signature_round_trip():
    signature = SigningKey.generate().sign(b"hello").signature
    text = to_ssb_id(signature, ED25519_SIGNATURE_SUFFIX)
    assert to_ed25519_signature(text) == signature


def test_sha256_round_trip():
    digest = hashlib.sha256(b"data").digest()
    assert to_sha256(to_ssb_id(digest, SHA256_SUFFIX)) == digest


@pytest.mark.parametrize(
    "func, text",
    [
        (to_ed25519_pk, "1vxS6DMi7z9uJIQG33W7mlsv21GZIbOpmWE1QEcn9oY="),
        (to_ed25519_sk, SAMPLE_PK_TEXT[:-8]),
        (to_sha256, SAMPLE_PK_TEXT),
        (to_ed25519_signature, SAMPLE_PK_TEXT),
    ],
)
def test_missing_suffix(func, text):
    with pytest.raises(CryptoError, match="invalid suffix"):
        func(text)


def test_wrong_public_key_length():
    with pytest.raises(CryptoError, match="bad public key"):
        to_ed25519_pk(to_ssb_id(bytes(31)))


def test_public_key_text_is_not_a_secret_key():
    with pytest.raises(CryptoError, match="bad secret key"):
        to_ed25519_sk(SAMPLE_PK_TEXT)


def test_wrong_digest_length():
    with pytest.raises(CryptoError, match="invalid digest"):
        to_sha256(to_ssb_id(bytes(16), SHA256_SUFFIX))


def test_wrong_signature_length():
    with pytest.raises(CryptoError, match="cannot create signature"):
        to_ed25519_signature(to_ssb_id(bytes(10), ED25519_SIGNATURE_SUFFIX))


@pytest.mark.parametrize("text", ["not*base64", "abc", "é"])
def test_bad_base64(text):
    with pytest.raises(CryptoError, match="error decoding base64"):
        to_ed25519_pk_no_suffix(text)