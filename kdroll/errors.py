"""Error codes and exceptions for generator diagnostics."""
import logging
from enum import Enum


class ErrorCode(str, Enum):
    """Conditions surfaced through the diagnostic channel."""

    INVALID_SEED = "INVALID_SEED"
    ENTROPY_FALLBACK = "ENTROPY_FALLBACK"
    ENTROPY_UNAVAILABLE = "ENTROPY_UNAVAILABLE"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    INVALID_SIDES = "INVALID_SIDES"


# Logging level each condition is reported at
ERROR_SEVERITY: dict[ErrorCode, int] = {
    ErrorCode.INVALID_SEED: logging.WARNING,
    ErrorCode.ENTROPY_FALLBACK: logging.WARNING,
    ErrorCode.ENTROPY_UNAVAILABLE: logging.WARNING,
    ErrorCode.INVALID_CAPACITY: logging.WARNING,
    ErrorCode.INVALID_SIDES: logging.ERROR,
}

# Every condition is recovered locally; the flag tells callers whether the
# operation still produced its normal kind of result.
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_SEED: True,
    ErrorCode.ENTROPY_FALLBACK: True,
    ErrorCode.ENTROPY_UNAVAILABLE: True,
    ErrorCode.INVALID_CAPACITY: True,
    ErrorCode.INVALID_SIDES: False,
}


class KDRollError(Exception):
    """Base error carrying an ErrorCode."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.severity = ERROR_SEVERITY[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)


class EntropyUnavailableError(KDRollError):
    """Raised by an entropy source that cannot deliver random words."""

    def __init__(self, message: str | None = None):
        super().__init__(ErrorCode.ENTROPY_UNAVAILABLE, message)
