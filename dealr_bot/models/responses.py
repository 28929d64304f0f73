"""Generic Dealr API response envelopes.

Read endpoints wrap their payload as ``{ data: T }``; the finish endpoint
answers with ``{ code, message }``.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class DataEnvelope(BaseModel, Generic[T]):
    """JSON envelope of the read endpoints."""

    data: T


class CodeEnvelope(BaseModel):
    """Application-level status returned by write endpoints.

    Both fields are taken as sent: ``code`` is compared against the
    configured success code, ``message`` is only ever displayed.
    """

    code: Any = None
    message: Any = None

    @property
    def reason(self) -> str:
        """Display text for a rejected request."""
        if self.message is None or self.message == "":
            return f"code {self.code}"
        return str(self.message)
