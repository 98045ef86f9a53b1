"""Error taxonomy for LLM calls.

Every error is terminal for the call that raised it. Nothing here is
retried internally; callers decide whether to retry, report or abort.
"""

from typing import Optional


class SoftgenError(Exception):
    """Base error for softgen operations."""
    pass


class MissingCredentialError(SoftgenError):
    """API key is empty. Raised before any network call is made."""
    pass


class TransportError(SoftgenError):
    """Connection or read failure, including cancellation."""

    def __init__(self, message: str, cause: Optional[BaseException] = None, cancelled: bool = False):
        super().__init__(message)
        self.cause = cause
        self.cancelled = cancelled


class UpstreamError(SoftgenError):
    """Upstream API answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"upstream status={status_code} body={body}")
        self.status_code = status_code
        self.body = body


class EmptyResultError(SoftgenError):
    """Model returned nothing but whitespace."""
    pass
