"""
Result envelope — the outer JSON object of every service response.
"""

from typing import Any, Optional
from pydantic import BaseModel


class ResultEnvelope(BaseModel):
    status: int
    message: Optional[str] = None
    # JSON text of the typed result; some deployments inline the object itself
    data: Optional[Any] = None
