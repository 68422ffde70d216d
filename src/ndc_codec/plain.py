"""Passthrough codec treating the payload as opaque text."""

from __future__ import annotations

from typing import Any, Mapping

from .config import CodecConfig
from .models import Context, Meta


class PlainCodec:
    """Codec without field structure or session handling."""

    def __init__(self, config: CodecConfig | None = None, validator=None) -> None:
        self.config = config or CodecConfig()
        self.validator = validator

    def decode(
        self, buffer: bytes, meta: Meta | None = None, context: Context | None = None
    ) -> str:
        return buffer.decode(self.config.encoding)

    def encode(
        self,
        message: Mapping[str, Any],
        meta: Meta | None = None,
        context: Context | None = None,
    ) -> bytes:
        if self.validator is not None:
            self.validator(message)
        payload = message.get("payload", "")
        if isinstance(payload, (bytes, bytearray)):
            return bytes(payload)
        return str(payload).encode(self.config.encoding)
