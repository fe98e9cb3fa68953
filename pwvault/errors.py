"""Error types raised while decoding instructions and account state."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Custom error codes reported by the vault program."""

    INVALID_ACCOUNT_DATA = 0
    DATA_UNPACK_ERROR = 1
    INVALID_INSTRUCTION = 2
    TOO_MUCH_DATA = 3


class ProgramError(Exception):
    """Base class for every error the program reports."""


class VaultError(ProgramError):
    """A program error that carries one of the vault's custom codes."""

    def __init__(self, code: ErrorCode | int, message: str = "") -> None:
        self.code = ErrorCode(code)
        self.message = message
        super().__init__(message or self.code.name.lower().replace("_", " "))

    @property
    def custom_code(self) -> int:
        """The numeric code the program reports for this error."""
        return int(self.code)

    def __repr__(self) -> str:
        return f"VaultError({self.code.name}, {self.message!r})"