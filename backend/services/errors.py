"""Error taxonomy for the assist pipeline."""
from typing import Any, Dict, List, Optional

from models.api import FieldViolation


class AssistError(Exception):
    """
    Base class for errors that end a request.

    Attributes:
        code: Machine-readable error string returned to the caller
        message: Generic user-visible message
        status_code: HTTP-style status
    """
    code = "internal_error"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        if code:
            self.code = code
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class RequestValidationError(AssistError):
    """Client-caused error listing every violated field."""
    code = "invalid_input"
    status_code = 400

    def __init__(self, violations: List[FieldViolation]):
        self.violations = violations
        super().__init__("Invalid input")

    @property
    def fields(self) -> List[str]:
        return [v.field for v in self.violations]

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["details"] = [
            {"field": v.field, "message": v.message} for v in self.violations
        ]
        return payload


class StoreUnavailableError(AssistError):
    """
    The conversation store could not be reached or returned an error.

    Fatal on the read path, logged and absorbed on the write path.
    """
    READ = "read"
    WRITE = "write"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        if operation == self.READ:
            super().__init__(
                "Internal Server Error: Failed to fetch conversation history.",
                code="history_unavailable",
            )
        else:
            super().__init__(
                "Internal Server Error: Failed to save conversation.",
                code="history_write_failed",
            )


class UpstreamError(AssistError):
    """The LLM collaborator was unreachable or returned an error."""
    code = "upstream_unavailable"
    status_code = 500

    def __init__(self, error):
        # error is the LLM client's structured LLMError
        self.error = error
        super().__init__("Internal Server Error: AI processing failed.")
