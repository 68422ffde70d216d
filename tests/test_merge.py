"""Tests for the recursive merge helper."""

from ndc_codec.utils.merge import deep_merge


def test_nested_dicts_merge():
    """Nested keys from both sides survive."""
    target = {"session": {"tak": "AAAA"}}
    deep_merge(target, {"session": {"tpk": "BBBB"}})
    assert target == {"session": {"tak": "AAAA", "tpk": "BBBB"}}


def test_lists_merge_by_index():
    """List items merge position by position."""
    target = {"cassettes": [{"denomination": 20}, {"denomination": 50}]}
    deep_merge(target, {"cassettes": [{"count": 1}, {"count": 2}, {"count": 3}]})
    assert target["cassettes"] == [
        {"denomination": 20, "count": 1},
        {"denomination": 50, "count": 2},
        {"count": 3},
    ]


def test_none_does_not_overwrite():
    """None never replaces an existing value."""
    target = {"a": 1}
    deep_merge(target, {"a": None, "b": None})
    assert target == {"a": 1, "b": None}


def test_sources_are_copied():
    """Mutating the result must not reach back into a source."""
    source = {"values": {"messageClass": "1"}}
    target = deep_merge({}, source)
    target["values"]["messageClass"] = "2"
    assert source["values"]["messageClass"] == "1"


def test_multiple_sources_last_wins():
    """Later sources override earlier ones."""
    assert deep_merge({}, {"a": 1}, None, {"a": 2}) == {"a": 2}
