"""Result values returned by the validator and the transition engine.

Rejections are data, not exceptions: callers branch on `Ok` / `Err`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PRECONDITION = "precondition"


class ErrorKind(str, Enum):
    # Definition submission
    DUPLICATE_STATE_ID = "duplicate_state_id"
    DUPLICATE_ACTION_ID = "duplicate_action_id"
    INVALID_INITIAL_STATE_COUNT = "invalid_initial_state_count"
    EMPTY_STATE_ID = "empty_state_id"
    EMPTY_ACTION_ID = "empty_action_id"
    UNKNOWN_TO_STATE = "unknown_to_state"
    UNKNOWN_FROM_STATE = "unknown_from_state"

    # Lookups
    DEFINITION_NOT_FOUND = "definition_not_found"
    INSTANCE_NOT_FOUND = "instance_not_found"
    CURRENT_STATE_NOT_FOUND = "current_state_not_found"
    ACTION_NOT_FOUND = "action_not_found"

    # Execution guards
    NO_ENABLED_INITIAL_STATE = "no_enabled_initial_state"
    TERMINAL_STATE = "terminal_state"
    ACTION_DISABLED = "action_disabled"
    ACTION_NOT_VALID_FROM_CURRENT_STATE = "action_not_valid_from_current_state"
    TARGET_STATE_UNKNOWN_OR_DISABLED = "target_state_unknown_or_disabled"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]


_CATEGORIES: dict[ErrorKind, ErrorCategory] = {
    ErrorKind.DUPLICATE_STATE_ID: ErrorCategory.VALIDATION,
    ErrorKind.DUPLICATE_ACTION_ID: ErrorCategory.VALIDATION,
    ErrorKind.INVALID_INITIAL_STATE_COUNT: ErrorCategory.VALIDATION,
    ErrorKind.EMPTY_STATE_ID: ErrorCategory.VALIDATION,
    ErrorKind.EMPTY_ACTION_ID: ErrorCategory.VALIDATION,
    ErrorKind.UNKNOWN_TO_STATE: ErrorCategory.VALIDATION,
    ErrorKind.UNKNOWN_FROM_STATE: ErrorCategory.VALIDATION,
    ErrorKind.DEFINITION_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorKind.INSTANCE_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorKind.CURRENT_STATE_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorKind.ACTION_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorKind.NO_ENABLED_INITIAL_STATE: ErrorCategory.PRECONDITION,
    ErrorKind.TERMINAL_STATE: ErrorCategory.PRECONDITION,
    ErrorKind.ACTION_DISABLED: ErrorCategory.PRECONDITION,
    ErrorKind.ACTION_NOT_VALID_FROM_CURRENT_STATE: ErrorCategory.PRECONDITION,
    ErrorKind.TARGET_STATE_UNKNOWN_OR_DISABLED: ErrorCategory.PRECONDITION,
}


@dataclass(frozen=True, slots=True)
class EngineError:
    kind: ErrorKind
    message: str

    @property
    def category(self) -> ErrorCategory:
        return self.kind.category

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    error: EngineError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def err(kind: ErrorKind, message: str) -> Err:
    return Err(EngineError(kind=kind, message=message))
