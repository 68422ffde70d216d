"""Protocol layer: field framing, code tables, message formats and parsers."""

from .framing import FS, GS, split_tokens, serialize_fields
from .catalog import Catalog, MessageFormat
from .commands import Mtid, DEFAULT_MESSAGE_FORMAT
from .parser import parser_for
