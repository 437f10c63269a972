"""
WhiteSource agent error types — one class per failure kind of the transport pipeline.
"""

from typing import Any, Optional


class WssError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class TransportError(WssError):
    """The service could not be reached, or answered with an HTTP error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("transport_error", message)
        self.status_code = status_code


class ProtocolError(WssError):
    """The response body is not a result envelope the client understands."""

    def __init__(self, message: str, response: str = ""):
        super().__init__("protocol_error", message, {"response": response})
        self.response = response


class ServiceError(WssError):
    """The envelope reports a non-success status."""

    def __init__(self, status: int, message: Optional[str], data: Optional[str]):
        super().__init__("service_error", f"{message}: {data}", {"status": status, "data": data})
        self.status = status
        self.message = message or ""
        self.data = data


class CodecError(WssError):
    def __init__(self, message: str):
        super().__init__("codec_error", message)


class CompressionTaskError(WssError):
    def __init__(self, message: str):
        super().__init__("compression_error", message)
