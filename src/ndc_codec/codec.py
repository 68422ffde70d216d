"""NDC codec: converts terminal buffers to messages and messages to buffers.

Decoding never raises. Every failure comes back as a
:class:`~ndc_codec.models.DecodeResult` with an error and the call's
``meta.mtid`` set to ``error``. Encoding raises only what the validator
raises, and returns ``None`` for methods missing from the catalog.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Callable, Mapping

from .config import CodecConfig
from .errors import ErrorKind, ProtocolError
from .models import Context, DecodeFailure, DecodeResult, Meta, TraceCounter
from .protocol.catalog import Catalog
from .protocol.commands import (
    CENTRAL_METHODS,
    KEY_METHODS,
    TRANSACTION_REPLY_METHODS,
    Mtid,
)
from .protocol.framing import serialize_fields, split_tokens
from .protocol.parser import parser_for
from .protocol.tables import TRANSACTION_READY_CODE
from .utils.merge import deep_merge

logger = logging.getLogger(__name__)

Validator = Callable[[Mapping[str, Any]], Any]


def _store_tak(message: Mapping[str, Any], context: Context) -> None:
    context.session["tak"] = message.get("tak")


def _store_tpk(message: Mapping[str, Any], context: Context) -> None:
    context.session["tpk"] = message.get("tpk")


def _store_cassettes(message: Mapping[str, Any], context: Context) -> None:
    cassettes = message.get("cassettes")
    if cassettes is not None:
        deep_merge(context.session, {"cassettes": cassettes})


# Outgoing methods whose content is remembered in the session.
SESSION_EFFECTS: dict[str, Callable[[Mapping[str, Any], Context], None]] = {
    "keyChangeTak": _store_tak,
    "keyChangeTpk": _store_tpk,
    "currencyMappingLoad": _store_cassettes,
}


def _encode_counter(method: str | None) -> TraceCounter | None:
    if method in CENTRAL_METHODS:
        return TraceCounter.CENTRAL
    if method in KEY_METHODS:
        return TraceCounter.CENTRAL_KEYS
    if method in TRANSACTION_REPLY_METHODS:
        return TraceCounter.TRANSACTION
    return None


def _decode_counter(method: str, tokens: list[str]) -> TraceCounter | None:
    if method == "solicitedStatus":
        if len(tokens) > 3 and tokens[3] == TRANSACTION_READY_CODE:
            return TraceCounter.TRANSACTION_READY
        return TraceCounter.TERMINAL
    if method == "encryptorIniData":
        return TraceCounter.TERMINAL_KEYS
    return None


class NDCCodec:
    """Encoder/decoder for one NDC host configuration.

    The codec holds no per-connection state; pass each connection's
    :class:`~ndc_codec.models.Context` into every call.

    Usage::

        codec = NDCCodec()
        context = Context()
        meta = Meta()
        result = codec.decode(buffer, meta, context)
        reply = codec.encode({"luno": "001"}, Meta(method="goInService"), context)
    """

    def __init__(
        self,
        config: CodecConfig | None = None,
        validator: Validator | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self.config = config or CodecConfig()
        self.validator = validator
        self.catalog = catalog or Catalog.build(overrides=self.config.message_format)

    # ─── DECODE ──────────────────────────────────────────────────────

    def decode(self, buffer: bytes, meta: Meta, context: Context) -> DecodeResult:
        """Decode one buffer received from the terminal.

        Args:
            buffer: Raw message bytes, without transport framing.
            meta: Envelope to receive ``mtid``, ``method`` and ``trace``.
            context: Session and trace state of the connection.
        """
        if not buffer:
            return DecodeResult()

        try:
            tokens = split_tokens(
                buffer, self.config.field_separator, self.config.encoding
            )
        except UnicodeDecodeError as e:
            logger.warning("Buffer is not valid %s: %s", self.config.encoding, e)
            meta.mtid = Mtid.ERROR
            text = buffer.decode(self.config.encoding, errors="replace")
            return DecodeResult(
                message={"tokens": text.split(self.config.field_separator)},
                error=DecodeFailure(
                    kind=ErrorKind.UNDECODABLE_BUFFER,
                    detail=f"Buffer is not valid {self.config.encoding}: {e}",
                ),
            )
        fmt = self.catalog.by_classification(tokens[0])
        if fmt is None:
            logger.warning("Unknown message class %r", tokens[0])
            meta.mtid = Mtid.ERROR
            return DecodeResult(
                message={"tokens": tokens},
                error=DecodeFailure(
                    kind=ErrorKind.UNKNOWN_MESSAGE_CLASS,
                    detail=f"Received unknown message class: {tokens[0]}",
                    code=tokens[0],
                ),
            )

        meta.mtid = fmt.mtid
        if fmt.mtid is Mtid.RESPONSE:
            meta.method = fmt.method
        else:
            meta.method = f"{self.config.namespace}.{fmt.method}"

        counter = _decode_counter(fmt.method, tokens)
        if counter is not None:
            meta.trace = context.next_trace(counter)
        logger.debug("Decoding %s (trace %s)", meta.method, meta.trace)

        result = DecodeResult(message={"session": context.snapshot()})
        result.error = self._parse(fmt.method, tokens, result.message, context)
        if result.error is not None:
            meta.mtid = Mtid.ERROR
        result.message["tokens"] = tokens
        return result

    def _parse(
        self, method: str, tokens: list[str], message: dict, context: Context
    ) -> DecodeFailure | None:
        parser = parser_for(method)
        if parser is None:
            logger.warning("No parser found for message %s", method)
            return DecodeFailure(
                kind=ErrorKind.NO_PARSER_FOUND,
                detail=f"No parser found for message: {method}",
                code=method,
            )

        try:
            fragment = parser(tokens, self.config.group_separator) or {}
        except ProtocolError as e:
            logger.debug("%s rejected: %s", method, e)
            return DecodeFailure(kind=e.kind, detail=str(e), code=e.code)
        except Exception as e:
            logger.exception("Parser for %s failed", method)
            return DecodeFailure(
                kind=ErrorKind.UNEXPECTED_PARSER_FAILURE,
                detail=str(e),
                expected=False,
                stack=traceback.format_exc(),
            )

        session = fragment.pop("session", None)
        if session:
            deep_merge(context.session, session)
            message["session"] = context.snapshot()
        deep_merge(message, fragment)
        return None

    # ─── ENCODE ──────────────────────────────────────────────────────

    def encode(
        self, message: Mapping[str, Any], meta: Meta, context: Context
    ) -> bytes | None:
        """Encode one message for the terminal.

        Args:
            message: Field values; defaults from the message format fill
                the fields it leaves out.
            meta: Envelope whose ``method`` names the message format;
                receives the assigned ``trace``.
            context: Session and trace state of the connection.

        Returns:
            The wire buffer, or ``None`` when the method has no format.
        """
        if self.validator is not None:
            self.validator(message)

        method = meta.method
        counter = _encode_counter(method)
        if counter is not None:
            meta.trace = context.next_trace(counter)

        effect = SESSION_EFFECTS.get(method)
        if effect is not None:
            effect(message, context)

        fmt = self.catalog.by_method(method) if method else None
        if fmt is None:
            logger.warning("No message format for outgoing method %r", method)
            return None

        values = dict(fmt.values)
        values.update((k, v) for k, v in message.items() if v is not None)
        text = serialize_fields(fmt.fields, values, self.config.field_separator)
        logger.debug("Encoded %s (trace %s)", method, meta.trace)
        return text.encode(self.config.encoding)
