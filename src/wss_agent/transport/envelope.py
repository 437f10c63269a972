"""
Envelope parsing — unwraps ``{status, message, data}`` from a response body.
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from wss_agent.config import STATUS_SUCCESS
from wss_agent.errors import ProtocolError, ServiceError
from wss_agent.models.envelope import ResultEnvelope


def parse_envelope(raw: str) -> Optional[ResultEnvelope]:
    """Parse a response body into an envelope. Returns None if invalid."""
    try:
        return ResultEnvelope.model_validate_json(raw)
    except (ValidationError, ValueError):
        return None


def extract_result_data(raw: str, success_status: int = STATUS_SUCCESS) -> Any:
    """Return the envelope's ``data`` for a successful response.

    Raises ProtocolError when the body is not an envelope, and ServiceError when
    the envelope status is anything but ``success_status``.
    """
    envelope = parse_envelope(raw) if raw else None
    if envelope is None:
        raise ProtocolError(f"Empty or malformed response, response data is: {raw}", response=raw)

    if envelope.status != success_status:
        data = envelope.data
        if data is not None and not isinstance(data, str):
            data = json.dumps(data)
        raise ServiceError(envelope.status, envelope.message, data)
    return envelope.data
