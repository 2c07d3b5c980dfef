"""
Error taxonomy shared by the form interpreter, the notification reconciler
and the transport adapters.

Every error carries the HTTP status the portal answers with, so routes can
let them propagate to the app-level exception handler.
"""
from typing import Any, Optional


class OnboardingError(Exception):
    status_code = 500
    retryable = False

    def __init__(self, message: str = "", detail: Any = None):
        super().__init__(message)
        self.message = message
        self.detail = detail if detail is not None else message


class NotFound(OnboardingError):
    status_code = 404


class FormValidationError(OnboardingError):
    """Required fields unfilled or an unsupported field blocks submission."""

    status_code = 422

    def __init__(self, result):
        super().__init__("Form has invalid or missing answers", detail=result.model_dump())
        self.result = result


class FormStateError(OnboardingError):
    status_code = 409


class SubmissionRejected(OnboardingError):
    """Backend refused the submission payload (4xx)."""

    status_code = 400


class TransportError(OnboardingError):
    """Network or server failure on a REST call; safe to retry."""

    status_code = 502
    retryable = True

    def __init__(self, message: str = "", detail: Any = None, upstream_status: Optional[int] = None):
        super().__init__(message, detail)
        self.upstream_status = upstream_status


class ParseError(OnboardingError):
    status_code = 400


class ChannelError(OnboardingError):
    status_code = 503
    retryable = True
