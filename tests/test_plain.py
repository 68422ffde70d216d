"""Tests for the passthrough codec."""

import pytest

from ndc_codec.plain import PlainCodec


def test_decode_returns_text():
    assert PlainCodec().decode(b"hello\x1cworld") == "hello\x1cworld"


def test_encode_text_payload():
    assert PlainCodec().encode({"payload": "hello"}) == b"hello"


def test_encode_bytes_payload():
    assert PlainCodec().encode({"payload": b"\x00\x01"}) == b"\x00\x01"


def test_encode_missing_payload():
    assert PlainCodec().encode({}) == b""


def test_validator_errors_propagate():
    def validator(message):
        raise ValueError("rejected")

    with pytest.raises(ValueError):
        PlainCodec(validator=validator).encode({"payload": "x"})
