"""Field-level framing for NDC messages.

Message layout::

    +-----------+----+-------+----+-------+----+-----+----+-------+
    | Class +   | FS | LUNO  | FS | Field | FS | ... | FS | Field |
    | Subclass  |    |       |    |       |    |     |    |       |
    +-----------+----+-------+----+-------+----+-----+----+-------+

- FS (0x1C) separates top-level fields; the first field is the
  classification key (message class followed by message subclass).
- GS (0x1D) separates repeated groups inside a single field, e.g. the
  per-device groups of an enhanced configuration message.

Framing below the field separator (transport headers, length prefixes)
belongs to the transport and is not handled here.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

FS = "\x1c"
GS = "\x1d"

# Reserved token in a message format field list meaning "emit FS here".
FS_TOKEN = "FS"

DEFAULT_ENCODING = "latin-1"


def split_tokens(
    buffer: bytes, separator: str = FS, encoding: str = DEFAULT_ENCODING
) -> list[str]:
    """Decode a raw buffer and split it into top-level tokens.

    Args:
        buffer: Raw bytes received from the terminal.
        separator: Field separator character.
        encoding: Text encoding of the buffer.

    Returns:
        The ordered token list. Token 0 is the classification key.
    """
    return buffer.decode(encoding).split(separator)


def split_groups(field: str | None, separator: str = GS) -> list[str]:
    """Split a field into its GS-separated groups. Missing fields give []."""
    if not field:
        return []
    return field.split(separator)


def serialize_fields(
    fields: Iterable[str],
    values: Mapping[str, Any],
    separator: str = FS,
) -> str:
    """Lay out message values in format order.

    ``FS`` tokens emit the separator; every other token emits the value
    stored under that name as text, or nothing when it is missing.
    """
    parts: list[str] = []
    for name in fields:
        if not name:
            continue
        if name == FS_TOKEN:
            parts.append(separator)
            continue
        value = values.get(name)
        parts.append("" if value is None else str(value))
    return "".join(parts)
