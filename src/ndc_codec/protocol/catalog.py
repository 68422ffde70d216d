"""Message format catalog: default formats merged with caller overrides."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from ..errors import ConfigError
from ..utils.merge import deep_merge
from .commands import DEFAULT_MESSAGE_FORMAT, Mtid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageFormat:
    """How one message is laid out on the wire."""

    method: str
    classification: str
    mtid: Mtid
    fields: tuple[str, ...]
    values: Mapping[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"MessageFormat(method={self.method!r}, "
            f"classification={self.classification!r}, mtid={self.mtid.value})"
        )


class Catalog:
    """Immutable index of message formats by method and classification key.

    Build one with :meth:`build` at startup and share it between codecs.
    """

    def __init__(self, formats: Mapping[str, MessageFormat]) -> None:
        self._by_method: dict[str, MessageFormat] = dict(formats)
        self._by_classification: dict[str, MessageFormat] = {}
        for fmt in self._by_method.values():
            previous = self._by_classification.get(fmt.classification)
            if previous is not None:
                logger.debug(
                    "Classification %r of %s replaced by %s",
                    fmt.classification, previous.method, fmt.method,
                )
            self._by_classification[fmt.classification] = fmt

    @classmethod
    def build(
        cls,
        defaults: Mapping[str, Mapping] | None = None,
        overrides: Mapping[str, Mapping] | None = None,
    ) -> Catalog:
        """Merge ``overrides`` onto ``defaults`` and index the result.

        Args:
            defaults: Base catalog, method name to raw definition. Uses the
                built-in NDC catalog when omitted.
            overrides: Caller definitions; their keys win per method.

        Raises:
            ConfigError: If a definition is structurally invalid.
        """
        if defaults is None:
            defaults = DEFAULT_MESSAGE_FORMAT
        merged = deep_merge({}, defaults, overrides)
        return cls({name: _build_format(name, raw) for name, raw in merged.items()})

    def by_classification(self, key: str) -> MessageFormat | None:
        return self._by_classification.get(key)

    def by_method(self, name: str) -> MessageFormat | None:
        return self._by_method.get(name)

    def methods(self) -> list[str]:
        return sorted(self._by_method)

    def __contains__(self, name: object) -> bool:
        return name in self._by_method

    def __iter__(self) -> Iterator[MessageFormat]:
        return iter(self._by_method.values())

    def __len__(self) -> int:
        return len(self._by_method)


def _build_format(name: str, raw: Any) -> MessageFormat:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Message format '{name}' must be a mapping")

    fields = raw.get("fields", "")
    if not isinstance(fields, str):
        raise ConfigError(f"Message format '{name}': fields must be a string")

    values = raw.get("values") or {}
    if not isinstance(values, Mapping):
        raise ConfigError(f"Message format '{name}': values must be a mapping")

    message_class = values.get("messageClass") or ""
    message_subclass = values.get("messageSubclass") or ""
    if not isinstance(message_class, str) or not isinstance(message_subclass, str):
        raise ConfigError(
            f"Message format '{name}': messageClass and messageSubclass "
            f"must be strings"
        )

    try:
        mtid = Mtid(raw.get("mtid", Mtid.REQUEST.value))
    except ValueError:
        raise ConfigError(
            f"Message format '{name}': unknown mtid {raw.get('mtid')!r}"
        ) from None
    if mtid is Mtid.ERROR:
        raise ConfigError(f"Message format '{name}': mtid cannot be 'error'")

    return MessageFormat(
        method=name,
        classification=message_class + message_subclass,
        mtid=mtid,
        fields=tuple(fields.split(",")),
        values=MappingProxyType(dict(values)),
    )
