"""Per-call metadata and decode results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import ErrorKind
from ..protocol.commands import Mtid


@dataclass
class Meta:
    """Metadata envelope of one decode or encode call.

    Decode fills in all three fields; encode reads ``method`` and sets
    ``trace`` for methods that are traced.
    """

    mtid: Mtid | None = None
    method: str | None = None
    trace: str | None = None

    def to_dict(self) -> dict:
        return {
            "mtid": self.mtid.value if self.mtid else None,
            "method": self.method,
            "trace": self.trace,
        }


@dataclass
class DecodeFailure:
    """Why a message could not be decoded.

    ``expected`` failures are rejections the protocol defines; only
    unexpected parser failures carry a ``stack``.
    """

    kind: ErrorKind
    detail: str
    code: str | None = None
    expected: bool = True
    stack: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.kind.value, "message": self.detail}
        if self.code is not None:
            d["code"] = self.code
        if self.stack is not None:
            d["stack"] = self.stack
        return d


@dataclass
class DecodeResult:
    """A decoded message, or the failure that replaced it."""

    message: dict[str, Any] = field(default_factory=dict)
    error: DecodeFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """The message with any failure flattened into it."""
        d = dict(self.message)
        if self.error is not None:
            d.update(self.error.to_dict())
        return d
