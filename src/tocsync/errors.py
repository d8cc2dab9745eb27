from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    SOURCE_READ_FAILED = "SOURCE_READ_FAILED"
    INVALID_INPUT = "INVALID_INPUT"


class TocSyncError(Exception):
    """Raised at the command line boundary for expected input failures.

    The engine itself never raises this: malformed trees, missing elements
    and headless environments degrade to "nothing to track". Only the CLI
    loader raises it, and ``cli.main`` serialises it to stderr.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
