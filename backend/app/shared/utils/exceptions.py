"""
Custom Exceptions for the Flow Builder.

Each orchestrator-level exception carries the HTTP status the API layer
should answer with, so the endpoint can map errors without inspecting them.
"""
from typing import Optional


class FlowBuilderError(Exception):
    """Base class for errors surfaced to the caller of assemble()."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(FlowBuilderError):
    """
    Raised when required request fields are missing or empty.

    Always raised before any remote call is made, so the caller can simply
    correct the input and submit again.
    """
    status_code = 400

    def __init__(self, message: str = "Missing required fields"):
        super().__init__(message)


class FlowCreationError(FlowBuilderError):
    """
    Raised when the initial flow-creation call fails.

    Fatal for the whole request. Nothing else was created yet, so there is
    nothing to clean up. Carries the upstream status and body. Only an
    upstream error status is passed through; a transport fault or a 2xx
    reply with an unreadable body is answered with 502.
    """

    def __init__(self, upstream_status: Optional[int], body: str):
        self.upstream_status = upstream_status
        self.body = body
        if upstream_status is None or 200 <= upstream_status < 300:
            status_code = 502
        else:
            status_code = upstream_status
        super().__init__(f"Failed to create flow: {body}", status_code=status_code)


class UnexpectedError(FlowBuilderError):
    """Any uncaught fault during assembly, surfaced as a generic failure."""
    status_code = 500


class KlaviyoAPIError(Exception):
    """
    Raised by the Klaviyo client when a call does not succeed.

    Covers non-2xx responses, transport faults (status_code is None) and
    2xx responses whose body could not be understood.
    """

    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        label = status_code if status_code is not None else "transport error"
        super().__init__(f"Klaviyo API error ({label}): {body}")
