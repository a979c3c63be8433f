"""Error taxonomy.

Only the write path raises. Lookups and stats are total functions: a
malformed or unknown location produces an empty result, never an exception.
Every error surfaced to a caller is an ``AdPlatformsError`` carrying a stable
``ErrorCode`` so a transport layer can map it without string matching.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    INVALID_INPUT = "INVALID_INPUT"
    EMPTY_DATASET = "EMPTY_DATASET"
    INVALID_RECORD = "INVALID_RECORD"
    INVALID_FILE = "INVALID_FILE"
    FILE_READ_FAILED = "FILE_READ_FAILED"
    LOAD_CANCELLED = "LOAD_CANCELLED"


class AdPlatformsError(Exception):
    """Raised for every caller-visible failure of a load."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str = "",
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
