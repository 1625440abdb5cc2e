"""Error hierarchy for the retryafter package.

Every public error class inherits from :class:`RetryAfterError`.  Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and an
optional ``cause`` (chained exception).

Transport failures raised by the underlying HTTP client are never wrapped:
they propagate to the caller unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    INVALID_RETRY_AFTER = "INVALID_RETRY_AFTER"


class RetryAfterError(Exception):
    """Base exception for all retryafter errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class RetryAfterHeaderError(RetryAfterError):
    """A ``Retry-After`` header could not be parsed and the configured
    ``invalid_header_policy`` is ``"raise"``.

    Context keys: ``header_value``, ``status_code``, ``url``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RETRY_AFTER,
            message=message,
            context=context,
            cause=cause,
        )
