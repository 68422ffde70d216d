"""Tests for the encode pipeline."""

import pytest

from ndc_codec.codec import NDCCodec
from ndc_codec.models import Context, Meta
from ndc_codec.protocol.framing import FS

SUPPLY_COUNTERS = (
    "2" + "1234" + "0000042"
    + "00100" + "00200" + "00300" + "00400"
    + "00001" * 12
    + "00003"
)


def _encode(codec, method, message, context):
    meta = Meta(method=method)
    return meta, codec.encode(message, meta, context)


def test_go_in_service():
    """Fields are laid out in format order with defaults filled in."""
    meta, buffer = _encode(NDCCodec(), "goInService", {"luno": "000"}, Context())
    assert buffer == b"1\x1c000\x1c\x1c1"
    assert meta.trace == "req:1"


def test_message_values_override_defaults():
    _, buffer = _encode(
        NDCCodec(), "terminalCommand",
        {"luno": "000", "messageSequenceNumber": "007", "commandCode": "2"},
        Context(),
    )
    assert buffer == b"1\x1c000\x1c007\x1c2"


def test_none_values_fall_back_to_defaults():
    _, buffer = _encode(NDCCodec(), "goOutOfService", {"commandCode": None}, Context())
    assert buffer.endswith(b"\x1c2")


def test_numeric_values_as_text():
    _, buffer = _encode(
        NDCCodec(), "goInService", {"luno": 0, "messageSequenceNumber": 12}, Context()
    )
    assert buffer == b"1\x1c0\x1c12\x1c1"


def test_trace_groups_count_independently():
    """Central commands, key management and transaction replies each count."""
    codec = NDCCodec()
    context = Context()
    traces = [
        _encode(codec, method, {}, context)[0].trace
        for method in (
            "goInService", "keyReadKvv", "transactionReply", "sendSupplyCounters",
            "emvCurrency", "keyChangeTpk", "transactionReply", "unsolicitedStatus",
        )
    ]
    assert traces == [
        "req:1", "keys:1", "trn:1", "req:2", "req:3", "keys:2", "trn:2", None,
    ]


def test_encode_and_decode_counters_are_separate():
    """Outgoing commands do not advance the incoming terminal counter."""
    codec = NDCCodec()
    context = Context()
    _encode(codec, "goInService", {}, context)
    meta = Meta()
    codec.decode(FS.join(["22", "000", "", "9"]).encode(), meta, context)
    assert meta.trace == "req:1"


def test_unknown_method_returns_none():
    """Unknown outgoing methods produce no output and no error."""
    context = Context()
    meta, buffer = _encode(NDCCodec(), "noSuchMethod", {"a": 1}, context)
    assert buffer is None
    assert meta.trace is None
    assert context.session == {}


def test_missing_method_returns_none():
    assert NDCCodec().encode({}, Meta(), Context()) is None


def test_validator_called_and_errors_propagate():
    """Validator failures reach the caller unchanged."""
    seen = []

    def validator(message):
        seen.append(message)
        if "luno" not in message:
            raise ValueError("luno is required")

    codec = NDCCodec(validator=validator)
    context = Context()
    _encode(codec, "goInService", {"luno": "000"}, context)
    assert seen == [{"luno": "000"}]
    with pytest.raises(ValueError, match="luno is required"):
        _encode(codec, "goInService", {}, context)
    assert context.counters == {"traceCentral": 2}


def test_key_change_tak_stored_in_session():
    """A TAK key change is echoed in later decoded messages."""
    codec = NDCCodec()
    context = Context()
    meta, buffer = _encode(codec, "keyChangeTak", {"luno": "000", "tak": "0123ABCD"}, context)
    assert meta.trace == "keys:1"
    assert buffer.endswith(b"\x1c0123ABCD")
    assert context.session["tak"] == "0123ABCD"

    decode_meta = Meta()
    result = codec.decode(FS.join(["22", "000", "", "9"]).encode(), decode_meta, context)
    assert result.message["session"]["tak"] == "0123ABCD"


def test_key_change_tpk_stored_in_session():
    context = Context()
    _encode(NDCCodec(), "keyChangeTpk", {"tpk": "FEDC"}, context)
    assert context.session == {"tpk": "FEDC"}


def test_currency_mapping_merges_with_counters():
    """Cassette layout from the host merges with counts from the terminal."""
    codec = NDCCodec()
    context = Context()
    _encode(
        codec, "currencyMappingLoad",
        {"cassettes": [{"denomination": 20}, {"denomination": 50}]},
        context,
    )
    assert context.session["cassettes"] == [{"denomination": 20}, {"denomination": 50}]

    codec.decode(
        FS.join(["22", "000", "", "F", SUPPLY_COUNTERS]).encode(), Meta(), context
    )
    assert context.session["cassettes"] == [
        {"denomination": 20, "count": 100},
        {"denomination": 50, "count": 200},
        {"count": 300},
        {"count": 400},
    ]


def test_encoded_layout_matches_decoded_positions():
    """An encoded status decodes back with fields in catalog positions."""
    codec = NDCCodec()
    context = Context()
    message = {
        "luno": "000",
        "deviceIdentifierAndStatus": "E0",
        "errorSeverity": "3",
        "diagnosticStatus": "",
        "suppliesStatus": "1",
    }
    _, buffer = _encode(codec, "unsolicitedStatus", message, context)
    assert buffer == b"12\x1c000\x1c\x1cE0\x1c3\x1c\x1c1"

    result = codec.decode(buffer, Meta(), context)
    fmt = codec.catalog.by_method("unsolicitedStatus")
    assert len(result.message["tokens"]) == fmt.fields.count("FS") + 1
    assert result.message["device"] == "cashHandler"
    assert result.message["severities"] == ["suspend"]
    assert result.message["supplies"] == ["sufficient"]


def test_transaction_reply_layout():
    _, buffer = _encode(NDCCodec(), "transactionReply", {
        "luno": "000",
        "messageSequenceNumber": "001",
        "nextState": "133",
        "notesToDispense": "0100",
        "transactionSerialNumber": "1234",
        "functionIdentifier": "5",
        "screenNumber": "000",
    }, Context())
    assert buffer.split(FS.encode()) == [
        b"4", b"000", b"001", b"133", b"0100", b"12345000", b"",
    ]
