"""Domain error kinds and the single exception type that carries them."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "validation_error"
    INVALID_PARAMETER = "invalid_parameter"
    LIFESTYLE_NOT_FOUND = "lifestyle_not_found"
    RATE_NOT_FOUND = "rate_not_found"
    CALCULATION_ERROR = "calculation_error"
    CACHE_UNAVAILABLE = "cache_unavailable"


class RetirementCalculatorError(Exception):
    """Raised wherever a domain rule fails; ``kind`` decides how callers react."""

    def __init__(self, kind: ErrorKind, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"RetirementCalculatorError(kind={self.kind.value!r}, message={self.message!r})"


def invalid_parameter(message: str) -> RetirementCalculatorError:
    return RetirementCalculatorError(ErrorKind.INVALID_PARAMETER, message)


def lifestyle_not_found(lifestyle_type: str) -> RetirementCalculatorError:
    return RetirementCalculatorError(
        ErrorKind.LIFESTYLE_NOT_FOUND, f"Lifestyle type not found: {lifestyle_type}"
    )


def rate_not_found(lifestyle_type: str) -> RetirementCalculatorError:
    return RetirementCalculatorError(
        ErrorKind.RATE_NOT_FOUND, f"Interest rate not found for lifestyle type: {lifestyle_type}"
    )


def calculation_error(message: str, cause: Optional[BaseException] = None) -> RetirementCalculatorError:
    return RetirementCalculatorError(ErrorKind.CALCULATION_ERROR, message, cause)


def cache_unavailable(message: str, cause: Optional[BaseException] = None) -> RetirementCalculatorError:
    return RetirementCalculatorError(ErrorKind.CACHE_UNAVAILABLE, message, cause)
