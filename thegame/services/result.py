from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    not_found = "not_found"
    precondition = "precondition"
    illegal_move = "illegal_move"
    store_error = "store_error"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a game action: a value on success, a message on failure."""

    is_success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    code: Optional[ErrorCode] = None


def success(value: T) -> Result[T]:
    return Result(is_success=True, value=value)


def failure(error: str, code: ErrorCode = ErrorCode.precondition) -> Result:
    return Result(is_success=False, error=error, code=code)


GAME_NOT_FOUND = "Game not found"


def not_found() -> Result:
    return failure(GAME_NOT_FOUND, ErrorCode.not_found)
