"""Tron fee engine error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ErrorCategory(IntEnum):
    VALIDATION = 0x01
    ACCOUNT = 0x02
    NETWORK = 0x06


class ErrorCode(IntEnum):
    # Validation
    INVALID_FORMAT = 0x0100
    INVALID_AMOUNT = 0x0105
    INVALID_ADDRESS = 0x0106
    INVALID_PAYLOAD = 0x0107
    UNSUPPORTED_NETWORK = 0x0120
    UNSUPPORTED_ASSET = 0x0121

    # Account
    ACCOUNT_NOT_FOUND = 0x0200

    # Network
    DEPENDENCY_UNAVAILABLE = 0x0610
    HTTP_ERROR = 0x0611

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(self.value >> 8)


class SendErrorCode(str, Enum):
    """Codes reported back to the host's send form."""

    REQUIRED = "Required"
    INVALID = "Invalid"
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    INSUFFICIENT_BALANCE_TO_COVER_FEE = "InsufficientBalanceToCoverFee"


@dataclass(frozen=True)
class FeeError(Exception):
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen (Python 3.13 contextlib compat).
_EXCEPTION_ATTRS = frozenset(("__traceback__", "__context__", "__cause__", "__suppress_context__"))
_frozen_setattr = FeeError.__setattr__


def _fee_error_setattr(self: FeeError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


FeeError.__setattr__ = _fee_error_setattr  # type: ignore[method-assign]
