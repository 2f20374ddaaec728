import json

import pytest

from scuttlekit.content import (
    AboutMessage,
    ChannelMessage,
    ContactMessage,
    DateTime,
    FriendsHops,
    Image,
    InviteCreateOptions,
    Mention,
    Post,
    PostMessage,
    PubAddress,
    PubMessage,
    RelationshipQuery,
    SubsetQuery,
    SubsetQueryOptions,
    Vote,
    VoteMessage,
    parse_branch,
    parse_mentions,
    typed_message_from_dict,
)
from scuttlekit.errors import ApiError

FEED = "@BIbVppzlrNiRJogxDYz3glUS7G4s4D4NiXiPEAEzxdE=.ed25519"
OTHER = "@hxGxqPrplLjRG2vtjQL87abX4QKqeLgCwQpS730nNwE=.ed25519"
MSG = "%xWKunF6nXD7XMC+D4cjwDMZWmBnmRu69w9T25iLNa1Q=.sha256"
MSG2 = "%7UKRfZb2u8al4tYWHqM55R9xpE/KKVh9U0M6BdugGt4=.sha256"
BLOB = "&Cg0ZpZ8cV85G8UIIropgBOvM8+Srlv9LSGDNGnpdK44=.sha256"


def test_mention_skips_missing_name():
    assert Mention(OTHER).to_dict() == {"link": OTHER}
    assert Mention(OTHER, "paul").to_dict() == {"link": OTHER, "name": "paul"}


def test_mention_from_dict_accepts_null_name():
    mention = Mention.from_dict({"link": OTHER, "name": None})
    assert mention == Mention(OTHER)


def test_mention_from_dict_rejects_missing_link():
    with pytest.raises(ApiError):
        Mention.from_dict({"name": "paul"})


def test_post_to_msg():
    post = Post("hello", [Mention(OTHER, "paul")])
    assert post.to_msg() == {
        "type": "post",
        "text": "hello",
        "mentions": [{"link": OTHER, "name": "paul"}],
    }
    assert "mentions" not in Post("hello").to_msg()


def test_pub_address_round_trip():
    address = PubAddress(port=8008, key=FEED, host="pub.example.com")
    data = address.to_dict()
    assert list(data) == ["host", "port", "key"]
    assert PubAddress.from_dict(data) == address
    assert PubAddress(port=8008, key=FEED).to_dict() == {"port": 8008, "key": FEED}


def test_pub_address_rejects_out_of_range_port():
    with pytest.raises(ApiError):
        PubAddress.from_dict({"port": 70000, "key": FEED})


@pytest.mark.parametrize("value", [1, -1, True, False])
def test_vote_round_trip(value):
    vote = Vote(MSG, value, "Like")
    data = vote.to_dict()
    assert data["value"] is value or data["value"] == value
    assert Vote.from_dict(data) == vote


def test_vote_rejects_string_value():
    with pytest.raises(ApiError):
        Vote.from_dict({"link": MSG, "value": "yes"})


def test_image_link_only_serializes_as_string():
    image = Image.from_dict(BLOB)
    assert image.is_complete is False
    assert image.to_dict() == BLOB


def test_image_complete_round_trip():
    image = Image(BLOB, size=100, content_type="image/png", width=10, height=20)
    data = image.to_dict()
    assert data == {"link": BLOB, "size": 100, "width": 10, "height": 20, "type": "image/png"}
    assert Image.from_dict(data) == image


def test_image_object_without_size_is_rejected():
    with pytest.raises(ApiError):
        Image.from_dict({"link": BLOB, "type": "image/png"})


def test_image_requires_size_and_type_together():
    with pytest.raises(ApiError):
        Image(BLOB, size=100)


def test_datetime_round_trip():
    moment = DateTime(epoch=1439392020612, tz="utc")
    assert DateTime.from_dict(moment.to_dict()) == moment


def test_parse_branch():
    assert parse_branch(MSG) == MSG
    assert parse_branch([MSG, MSG2]) == [MSG, MSG2]
    with pytest.raises(ApiError):
        parse_branch([MSG, 3])


def test_parse_mentions_variants():
    assert parse_mentions(MSG) == MSG
    assert parse_mentions({"link": OTHER, "name": "paul"}) == Mention(OTHER, "paul")
    assert parse_mentions([{"link": OTHER}]) == [Mention(OTHER)]
    assert parse_mentions({"paul": {"link": OTHER}}) == {"paul": Mention(OTHER)}
    with pytest.raises(ApiError):
        parse_mentions(5)


@pytest.mark.parametrize(
    "message, kind",
    [
        (PubMessage(PubAddress(port=8008, key=FEED, host="pub.example.com")), "pub"),
        (PubMessage(), "pub"),
        (PostMessage("hi", [Mention(OTHER)]), "post"),
        (ContactMessage(contact=OTHER, following=True), "contact"),
        (
            AboutMessage(
                about=FEED,
                name="paul",
                image=Image(BLOB),
                start_datetime=DateTime(epoch=1, tz="utc"),
            ),
            "about",
        ),
        (ChannelMessage("ssb", True), "channel"),
        (VoteMessage(Vote(MSG, 1, "Like")), "vote"),
    ],
)
def test_typed_messages_round_trip(message, kind):
    data = message.to_dict()
    assert data["type"] == kind
    assert list(data)[0] == "type"
    assert typed_message_from_dict(json.loads(json.dumps(data))) == message


def test_pub_message_keeps_null_address():
    assert PubMessage().to_dict() == {"type": "pub", "address": None}


def test_contact_message_keeps_null_contact_and_skips_flags():
    assert ContactMessage().to_dict() == {"type": "contact", "contact": None}


def test_about_uses_start_date_time_key():
    data = AboutMessage(about=FEED, start_datetime=DateTime(epoch=1, tz="utc")).to_dict()
    assert data["startDateTime"] == {"epoch": 1, "tz": "utc"}


@pytest.mark.parametrize(
    "data",
    [
        {"type": "unknown"},
        {"text": "no type"},
        {"type": "post"},
        {"type": "channel", "channel": "ssb"},
        {"type": "vote"},
    ],
)
def test_typed_message_rejects_invalid(data):
    with pytest.raises(ApiError):
        typed_message_from_dict(data)


def test_subset_query_round_trip():
    query = SubsetQuery.and_query(
        [
            SubsetQuery.type_query("post"),
            SubsetQuery.or_query([SubsetQuery.author_query(FEED), SubsetQuery.author_query(OTHER)]),
        ]
    )
    data = query.to_dict()
    assert data["args"][0]["string"] == "post"
    assert data["args"][1]["args"][0] == {"op": "author", "feed": FEED}
    assert SubsetQuery.from_dict(json.loads(json.dumps(data))) == query


def test_subset_query_needs_exactly_one_operand():
    with pytest.raises(ApiError):
        SubsetQuery(op="type")
    with pytest.raises(ApiError):
        SubsetQuery(op="type", string="post", feed=FEED)


def test_subset_query_from_dict_rejects_invalid():
    with pytest.raises(ApiError):
        SubsetQuery.from_dict({"op": "and", "args": [{"op": "type"}]})


def test_subset_query_options_renames_page_limit():
    options = SubsetQueryOptions(descending=True, page_limit=10)
    assert options.to_dict() == {"descending": True, "pageLimit": 10}
    assert SubsetQueryOptions().to_dict() == {}


def test_relationship_query():
    assert RelationshipQuery(FEED, OTHER).to_dict() == {"source": FEED, "dest": OTHER}


def test_friends_hops_skips_unset():
    assert FriendsHops(max=2).to_dict() == {"max": 2}
    assert FriendsHops(max=1, reverse=True, start=FEED).to_dict() == {
        "max": 1,
        "reverse": True,
        "start": FEED,
    }


def test_invite_create_options():
    assert InviteCreateOptions(uses=5).to_dict() == {"uses": 5}