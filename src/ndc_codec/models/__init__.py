"""Data models for session state, call metadata and decode results."""

from .session import Context, TraceCounter
from .message import DecodeFailure, DecodeResult, Meta
