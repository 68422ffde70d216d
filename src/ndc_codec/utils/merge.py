"""Recursive merge for nested message fragments.

Dicts merge key by key and lists merge index by index, so a fragment
carrying ``{"cassettes": [{"count": 5}]}`` fills in the count of the first
cassette without dropping any denomination already stored there.
"""

from __future__ import annotations

from typing import Any


def deep_merge(target: dict, *sources: dict | None) -> dict:
    """Merge each source into ``target`` in place and return ``target``.

    ``None`` values never overwrite an existing value.
    """
    for source in sources:
        if source:
            _merge_dict(target, source)
    return target


def _merge_dict(target: dict, source: dict) -> None:
    for key, value in source.items():
        if key in target:
            target[key] = _merge_value(target[key], value)
        else:
            target[key] = _copy(value)


def _merge_list(target: list, source: list) -> None:
    for i, value in enumerate(source):
        if i < len(target):
            target[i] = _merge_value(target[i], value)
        else:
            target.append(_copy(value))


def _merge_value(current: Any, value: Any) -> Any:
    if value is None:
        return current
    if isinstance(current, dict) and isinstance(value, dict):
        _merge_dict(current, value)
        return current
    if isinstance(current, list) and isinstance(value, list):
        _merge_list(current, value)
        return current
    return _copy(value)


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _copy(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy(v) for v in value]
    return value
