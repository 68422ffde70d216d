"""Tests for field splitting and serialization."""

from ndc_codec.protocol.framing import (
    FS,
    FS_TOKEN,
    GS,
    serialize_fields,
    split_groups,
    split_tokens,
)


def test_separators():
    """FS and GS should be the ASCII file and group separators."""
    assert FS == "\x1c"
    assert GS == "\x1d"


def test_split_tokens():
    """Buffers split on FS; empty fields are kept in place."""
    tokens = split_tokens(b"22\x1c000\x1c\x1c9")
    assert tokens == ["22", "000", "", "9"]


def test_split_tokens_custom_separator():
    """A configured separator replaces FS."""
    assert split_tokens(b"12|000||D1", separator="|") == ["12", "000", "", "D1"]


def test_split_tokens_without_separator():
    """A buffer with no separator is a single token."""
    assert split_tokens(b"A") == ["A"]


def test_split_groups():
    """GS-separated groups split; missing fields give no groups."""
    assert split_groups("D1\x1dE1234") == ["D1", "E1234"]
    assert split_groups("") == []
    assert split_groups(None) == []


def test_serialize_fields_order():
    """Values are emitted in field order with FS between them."""
    fields = ["messageClass", FS_TOKEN, "luno", FS_TOKEN, "commandCode"]
    values = {"commandCode": "1", "luno": "000", "messageClass": "1"}
    assert serialize_fields(fields, values) == "1\x1c000\x1c1"


def test_serialize_missing_field():
    """Missing and None values emit nothing but keep their separators."""
    fields = ["a", FS_TOKEN, "b", FS_TOKEN, "c"]
    assert serialize_fields(fields, {"a": "x", "b": None}) == "x\x1c\x1c"


def test_serialize_coerces_to_text():
    """Non-string values, zero included, are written as text."""
    assert serialize_fields(["a", "b"], {"a": 0, "b": 12}) == "012"


def test_serialize_skips_empty_names():
    """Empty names from a trailing comma in a field list are ignored."""
    assert serialize_fields(["a", ""], {"a": "x", "": "y"}) == "x"
