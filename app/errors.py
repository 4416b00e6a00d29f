"""
ERRORS MODULE
=============

Exception taxonomy for the generation endpoint, plus the adapter that turns
failures from the completion service into a structured ErrorKind.

HTTP MAPPING:
  InvalidRequest        - 400  missing or empty prompt
  ServiceMisconfigured  - 500  OPENAI_API_KEY not set
  CredentialRejected    - 401  completion service rejected the key
  QuotaExceeded         - 429  completion service quota / rate limit hit
  Unclassified          - 500  anything else

Every GenerationError carries a short, client-safe message. Details of the
underlying failure are logged server-side and never sent to the client.
"""

from enum import Enum
from typing import Optional

import openai


class ErrorKind(str, Enum):
    """Category of a completion-service failure."""
    AUTH = "auth"
    QUOTA = "quota"
    OTHER = "other"


# ==============================================================================
# ENDPOINT ERRORS
# ==============================================================================

class GenerationError(Exception):
    """Base class: every subclass maps to one HTTP status and one message."""

    status_code: int = 500
    default_message: str = "Failed to generate code!"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(GenerationError):
    status_code = 400
    default_message = "Prompt is required"


class ServiceMisconfigured(GenerationError):
    status_code = 500
    default_message = "OpenAI API key not configured"


class CredentialRejected(GenerationError):
    status_code = 401
    default_message = "Invalid OpenAI API key"


class QuotaExceeded(GenerationError):
    status_code = 429
    default_message = "OpenAI API quota exceeded"


class Unclassified(GenerationError):
    status_code = 500
    default_message = "Failed to generate code!"


# ==============================================================================
# COMPLETION SERVICE ERRORS
# ==============================================================================

class CompletionError(Exception):
    """Raised by CompletionClient; kind says how the endpoint should report it."""

    def __init__(self, kind: ErrorKind, message: str = ""):
        self.kind = kind
        super().__init__(message or kind.value)


def classify_error(exc: Exception) -> ErrorKind:
    """
    Map an exception from the completion service to an ErrorKind.

    SDK exception types are checked first. Wording in the error description is
    only a fallback for errors that arrive wrapped or from another transport.
    """
    if isinstance(exc, CompletionError):
        return exc.kind
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ErrorKind.AUTH
    if isinstance(exc, openai.RateLimitError):
        return ErrorKind.QUOTA

    msg = str(exc).lower()
    if "api key" in msg:
        return ErrorKind.AUTH
    if "quota" in msg or "rate limit" in msg or "429" in msg:
        return ErrorKind.QUOTA
    return ErrorKind.OTHER


def is_transient(exc: Exception) -> bool:
    """
    True if another attempt at the same call could succeed.

    For OpenAI SDK errors only dropped connections and 5xx responses qualify;
    timeouts and other 4xx responses fail the same way again. Errors from
    anywhere else are retried unless they classify as AUTH or QUOTA.
    """
    if isinstance(exc, CompletionError) and isinstance(exc.__cause__, Exception):
        exc = exc.__cause__
    if isinstance(exc, openai.APITimeoutError):
        return False
    if isinstance(exc, (openai.APIConnectionError, openai.InternalServerError)):
        return True
    if isinstance(exc, openai.OpenAIError):
        return False
    return classify_error(exc) is ErrorKind.OTHER


def error_for_kind(kind: ErrorKind) -> GenerationError:
    """Return the endpoint error reported to the client for a failure kind."""
    if kind is ErrorKind.AUTH:
        return CredentialRejected()
    if kind is ErrorKind.QUOTA:
        return QuotaExceeded()
    return Unclassified()
