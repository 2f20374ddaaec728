import pytest

from scuttlekit.errors import FeedError
from scuttlekit.keystore import OwnedIdentity
from scuttlekit.privatebox import (
    cipher,
    decipher,
    is_privatebox,
    privatebox_cipher,
    privatebox_decipher,
)


def test_msg_cipher_to_one():
    user = OwnedIdentity.create()
    ciphertext = cipher(b"hola", [user.pk])
    assert decipher(ciphertext, user.sk) == b"hola"


def test_msg_cipher_to_one_helper():
    identity = OwnedIdentity.create()
    ciphertext = privatebox_cipher("holar", [identity.id])
    assert is_privatebox(ciphertext) is True
    assert privatebox_decipher(ciphertext, identity.sk) == "holar"


def test_msg_cipher_to_none():
    sender_target = OwnedIdentity.create()
    outsider = OwnedIdentity.create()
    ciphertext = cipher(b"hola", [sender_target.pk])
    assert decipher(ciphertext, outsider.sk) is None


def test_msg_cipher_to_multiple():
    users = [OwnedIdentity.create() for _ in range(7)]
    ciphertext = cipher(b"hola", [user.pk for user in users])
    for user in users:
        assert decipher(ciphertext, user.sk) == b"hola"


def test_helper_for_outsider_returns_none():
    recipient = OwnedIdentity.create()
    outsider = OwnedIdentity.create()
    ciphertext = privatebox_cipher("hidden", [recipient.id])
    assert privatebox_decipher(ciphertext, outsider.sk) is None


def test_empty_plaintext_is_rejected():
    user = OwnedIdentity.create()
    with pytest.raises(FeedError, match="empty plaintext"):
        cipher(b"", [user.pk])


@pytest.mark.parametrize("count", [0, 8])
def test_bad_recipient_count_is_rejected(count):
    users = [OwnedIdentity.create() for _ in range(count)]
    with pytest.raises(FeedError):
        cipher(b"hola", [user.pk for user in users])


def test_bad_recipient_id_is_rejected():
    with pytest.raises(FeedError):
        privatebox_cipher("hola", ["@notakey"])


def test_is_privatebox_false_for_plain_text():
    assert is_privatebox("just a post") is False


def test_truncated_ciphertext_is_rejected():
    user = OwnedIdentity.create()
    with pytest.raises(FeedError):
        decipher(b"short", user.sk)