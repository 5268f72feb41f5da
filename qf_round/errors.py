"""Error classes raised by the funding round engine."""

from __future__ import annotations


class QFRoundError(Exception):
    """Base exception for caller errors detected by the engine."""

    def __init__(self, message: str, code: str = "QF_ROUND_ERROR") -> None:
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        # KeyError subclasses would otherwise repr() the message.
        return str(self.args[0]) if self.args else ""


class InvalidArgumentError(QFRoundError, ValueError):
    """Raised for a non-positive matching pool or an invalid contribution."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_ARGUMENT")


class DuplicateKeyError(QFRoundError, KeyError):
    """Raised when a project id is already registered in the round."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="DUPLICATE_KEY")


class NotFoundError(QFRoundError, LookupError):
    """Raised when a contribution or lookup targets an unregistered project."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="NOT_FOUND")


class PreconditionFailedError(QFRoundError, RuntimeError):
    """Raised when an allocation is requested before the pool is configured."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PRECONDITION_FAILED")
