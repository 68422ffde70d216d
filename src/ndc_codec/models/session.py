"""Connection-scoped session and trace state.

A :class:`Context` lives as long as one terminal connection. The codec
reads and mutates it on every call, and nothing in it is synchronised:
keep one context per connection and guard it with a lock if several
threads touch the same connection.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TraceCounter(str, Enum):
    """Trace counters, one per exchange category, and their id prefixes."""

    TERMINAL = "traceTerminal"
    TRANSACTION_READY = "traceTransactionReady"
    TERMINAL_KEYS = "traceTerminalKeys"
    CENTRAL = "traceCentral"
    CENTRAL_KEYS = "traceCentralKeys"
    TRANSACTION = "traceTransaction"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]


_PREFIXES = {
    TraceCounter.TERMINAL: "req",
    TraceCounter.TRANSACTION_READY: "trn",
    TraceCounter.TERMINAL_KEYS: "keys",
    TraceCounter.CENTRAL: "req",
    TraceCounter.CENTRAL_KEYS: "keys",
    TraceCounter.TRANSACTION: "trn",
}


@dataclass
class Context:
    """Trace counters and negotiated session values of one connection.

    ``session`` holds values set as side effects of encoded messages
    (``tak``, ``tpk``, ``cassettes``) and is echoed back in every decoded
    message. Counters are created on first use, start at 1 and are never
    reset by the codec.
    """

    session: dict[str, Any] = field(default_factory=dict)
    counters: dict[str, int] = field(default_factory=dict)

    def next_trace(self, counter: TraceCounter) -> str:
        """Format the current value of ``counter`` as a trace id, then advance it."""
        value = self.counters.get(counter.value, 1)
        self.counters[counter.value] = value + 1
        return f"{counter.prefix}:{value}"

    def snapshot(self) -> dict[str, Any]:
        """Copy of the session sub-record for embedding in a message."""
        return copy.deepcopy(self.session)

    def to_dict(self) -> dict:
        return {"session": self.snapshot(), "counters": dict(self.counters)}
