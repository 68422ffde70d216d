"""Codec for the NDC terminal/host protocol."""

from .codec import NDCCodec
from .config import CodecConfig
from .errors import ConfigError, ErrorKind, NDCError, ProtocolError
from .models import Context, DecodeFailure, DecodeResult, Meta
from .plain import PlainCodec
from .protocol import Catalog, Mtid

__version__ = "0.1.0"
