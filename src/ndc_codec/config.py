"""Codec configuration."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError
from .protocol.framing import DEFAULT_ENCODING, FS, GS

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "NDC_CODEC_CONFIG"

# JSON keys accepted alongside the attribute names.
_ALIASES = {
    "fieldSeparator": "field_separator",
    "groupSeparator": "group_separator",
    "messageFormat": "message_format",
}


@dataclass(frozen=True)
class CodecConfig:
    """Settings for an :class:`~ndc_codec.codec.NDCCodec`.

    Attributes:
        field_separator: Character between top-level fields.
        group_separator: Character between repeated groups inside a field.
        encoding: Text encoding of the wire buffers.
        namespace: Prefix for non-response method names.
        message_format: Catalog overrides, method name to definition.
    """

    field_separator: str = FS
    group_separator: str = GS
    encoding: str = DEFAULT_ENCODING
    namespace: str = "aptra"
    message_format: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("field_separator", "group_separator"):
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) != 1:
                raise ConfigError(f"{name} must be a single character, got {value!r}")
        if not isinstance(self.message_format, Mapping):
            raise ConfigError("message_format must be a mapping")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CodecConfig:
        kwargs = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ConfigError(f"Unknown configuration key '{key}'")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str | Path) -> CodecConfig:
        """Load a configuration from a JSON document.

        Raises:
            ConfigError: If the file cannot be read or is not a JSON object.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot load configuration from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration in {path} must be a JSON object")
        logger.info("Loaded codec configuration from %s", path)
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> CodecConfig:
        """Load the file named by ``NDC_CODEC_CONFIG``, or use defaults."""
        path = os.environ.get(CONFIG_ENV_VAR)
        if not path:
            return cls()
        return cls.from_file(path)
