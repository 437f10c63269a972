"""
wss-agent-client — WhiteSource agent service client for Python.

Sends project/dependency inventories to the service as a gzip-compressed,
base64-encoded form field and decodes the typed result from the response envelope.
"""

from wss_agent.client import WhitesourceService, AsyncWhitesourceService
from wss_agent.codec.files import FileCodec
from wss_agent.codec.stream import compress_string, decompress_string
from wss_agent.config import Settings
from wss_agent.dispatch import ServiceDispatcher
from wss_agent.errors import (
    WssError,
    TransportError,
    ProtocolError,
    ServiceError,
    CodecError,
    CompressionTaskError,
)
from wss_agent.models.requests import RequestType, UpdateType

__version__ = "0.1.0"
__all__ = [
    "WhitesourceService",
    "AsyncWhitesourceService",
    "FileCodec",
    "compress_string",
    "decompress_string",
    "Settings",
    "ServiceDispatcher",
    "WssError",
    "TransportError",
    "ProtocolError",
    "ServiceError",
    "CodecError",
    "CompressionTaskError",
    "RequestType",
    "UpdateType",
]
