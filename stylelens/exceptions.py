"""
Custom exceptions for StyleLens.

Error philosophy:
  - InvalidStateError → FAIL FAST: the session refuses the transition before
    touching any state.  Triggers should be disabled upstream, but the session
    defends itself anyway.
  - ServiceError      → DELIVERED AS STATE: raised by the service clients,
    caught by the StyleLens facade and turned into an Error / Failed state.
    It never crosses the session boundary as an exception.

Two further outcomes are deliberately not exceptions:
  - parse fallback  → a note in ParsedDocument.warnings, rendering degrades to
    the verbatim body lines.
  - stale response  → the session handler returns False and logs at DEBUG.
"""

from typing import Optional


class StyleLensError(Exception):
    """Base exception for all StyleLens errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- FAIL FAST: no partial mutation ---

class InvalidStateError(StyleLensError):
    """
    Raised when a session operation is not permitted in the current state,
    e.g. start_analysis() with no image selected.
    """

    def __init__(
        self,
        message: str,
        state: str,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        # Status the session was in when the call was refused
        self.state = state


# --- External call failed: becomes Error / Failed state in the facade ---

class ServiceError(StyleLensError):
    """Raised when an analysis or visualization call fails."""

    def __init__(
        self,
        message: str,
        provider: str,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.provider = provider  # "gemini", "openai" or "anthropic"

    def to_response(self) -> dict:
        """Convert to a JSON-friendly error payload (used by the CLI)."""
        return {
            "error": "ServiceError",
            "message": self.message,
            "provider": self.provider,
            "details": self.details
        }
