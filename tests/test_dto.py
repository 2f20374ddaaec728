import json

import pytest

from scuttlekit.dto import (
    BlobsGetIn,
    CreateHistoryStreamIn,
    CreateStreamIn,
    ErrorOut,
    LatestOut,
    WhoAmIOut,
)
from scuttlekit.errors import ApiError

FEED_ID = "@BIbVppzlrNiRJogxDYz3glUS7G4s4D4NiXiPEAEzxdE=.ed25519"
BLOB_ID = "&Cg0ZpZ8cV85G8UIIropgBOvM8+Srlv9LSGDNGnpdK44=.sha256"


def test_blobs_get_in_serializes_missing_limits_as_null():
    assert BlobsGetIn(BLOB_ID).to_dict() == {"key": BLOB_ID, "size": None, "max": None}


def test_blobs_get_in_builders_return_copies():
    base = BlobsGetIn(BLOB_ID)
    sized = base.with_size(10).with_max(20)
    assert sized.to_dict() == {"key": BLOB_ID, "size": 10, "max": 20}
    assert base.size is None and base.max is None


def test_error_out_round_trip():
    data = {"name": "Error", "message": "boom", "stack": ""}
    error = ErrorOut.from_dict(data)
    assert error.message == "boom"
    assert error.to_dict() == data


def test_error_out_missing_field_raises():
    with pytest.raises(ApiError):
        ErrorOut.from_dict({"name": "Error", "message": "boom"})


def test_history_stream_skips_unset_options():
    assert CreateHistoryStreamIn(FEED_ID).to_dict() == {"id": FEED_ID}


def test_history_stream_builders():
    args = (
        CreateHistoryStreamIn(FEED_ID)
        .after_seq(5)
        .with_live(True)
        .keys_values(False, True)
        .with_limit(3)
    )
    result = args.to_dict()
    assert result == {
        "id": FEED_ID,
        "seq": 5,
        "live": True,
        "keys": False,
        "values": True,
        "limit": 3,
    }
    assert list(result) == ["id", "seq", "live", "keys", "values", "limit"]


def test_history_stream_is_json_encodable():
    args = CreateHistoryStreamIn(FEED_ID).with_limit(2)
    assert json.loads(json.dumps(args.to_dict())) == {"id": FEED_ID, "limit": 2}


def test_latest_out_round_trip():
    latest = LatestOut.from_dict({"id": FEED_ID, "sequence": 37, "ts": 1439392020612})
    assert latest.sequence == 37
    assert isinstance(latest.ts, float) and latest.ts == 1439392020612
    assert LatestOut.from_dict(latest.to_dict()) == latest


@pytest.mark.parametrize(
    "data",
    [
        {"id": FEED_ID, "sequence": -1, "ts": 1.0},
        {"id": FEED_ID, "sequence": True, "ts": 1.0},
        {"id": FEED_ID, "sequence": 1, "ts": "now"},
        {"sequence": 1, "ts": 1.0},
        [FEED_ID, 1, 1.0],
    ],
)
def test_latest_out_rejects_invalid(data):
    with pytest.raises(ApiError):
        LatestOut.from_dict(data)


def test_create_stream_default_keeps_encodings():
    assert CreateStreamIn().to_dict() == {"keyEncoding": None, "valueEncoding": None}


def test_create_stream_builders():
    args = (
        CreateStreamIn()
        .with_live(True)
        .with_gt(1)
        .with_gte(2)
        .with_lt(30)
        .with_lte(40)
        .with_reverse(True)
        .keys_values(True, False)
        .with_limit(7)
        .encoding("utf8", "json")
    )
    result = args.to_dict()
    assert list(result) == [
        "live",
        "gt",
        "gte",
        "lt",
        "lte",
        "reverse",
        "keys",
        "values",
        "limit",
        "keyEncoding",
        "valueEncoding",
    ]
    assert result["gt"] == 1 and result["lte"] == 40
    assert result["keyEncoding"] == "utf8"
    assert result["valueEncoding"] == "json"


def test_create_stream_fill_cache_is_renamed():
    result = CreateStreamIn(fill_cache=True).to_dict()
    assert result["fillCache"] is True
    assert "fill_cache" not in result


def test_create_stream_builders_do_not_mutate():
    base = CreateStreamIn()
    base.with_limit(4)
    assert base.limit is None


def test_whoami_round_trip():
    who = WhoAmIOut.from_dict({"id": FEED_ID})
    assert who.id == FEED_ID
    assert who.to_dict() == {"id": FEED_ID}


@pytest.mark.parametrize("data", [{"id": 5}, {}, "id"])
def test_whoami_rejects_invalid(data):
    with pytest.raises(ApiError):
        WhoAmIOut.from_dict(data)