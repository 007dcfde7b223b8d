"""Error taxonomy for the analysis pipeline.

Every failure raised between the HTTP boundary and the model call is an
`AnalysisError`. The controller turns each one into a JSON error body, so
nothing here knows about FastAPI.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Tuple


class AnalysisError(Exception):
    """Base class for pipeline failures that map onto an HTTP error response."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, details: str, *, error_type: Optional[str] = None) -> None:
        super().__init__(details)
        self.details = details
        self.error_type = error_type

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body sent to the caller."""
        return {
            "error": self.error,
            "details": self.details,
            "type": self.error_type or type(self).__name__,
        }


class MethodNotAllowed(AnalysisError):
    status_code = 405
    error = "Method Not Allowed"

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error}


class ConfigurationError(AnalysisError):
    """The model provider credential is missing."""

    error = "Configuration Error"


class InvalidRequest(AnalysisError):
    status_code = 400
    error = "Invalid Request"


class ModelError(AnalysisError):
    """The model provider call failed or produced no text."""

    error = "API Error"

    def __init__(
        self,
        details: str,
        *,
        error_type: Optional[str] = None,
        provider_status: Optional[int] = None,
    ) -> None:
        super().__init__(details, error_type=error_type)
        self.provider_status = provider_status

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.provider_status is not None:
            payload["details"] = f"{self.details} (provider status {self.provider_status})"
        return payload


class ExtractionError(AnalysisError):
    """No JSON value could be recovered from the model output."""

    error = "Extraction Error"

    def __init__(self, details: str, *, reasons: Iterable[str] = ()) -> None:
        super().__init__(details)
        self.reasons: Tuple[str, ...] = tuple(reasons)


class ValidationError(AnalysisError):
    """The recovered JSON does not have the AnalysisResult shape."""

    error = "Validation Error"

    def __init__(self, details: str, *, fields: Iterable[str] = ()) -> None:
        super().__init__(details)
        self.fields: Tuple[str, ...] = tuple(fields)
