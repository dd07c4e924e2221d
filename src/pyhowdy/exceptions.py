"""Custom exception hierarchy for pyhowdy."""

from __future__ import annotations


class HowdyError(Exception):
    """Base exception for all pyhowdy errors."""


class HowdyConfigError(HowdyError):
    """Invalid or malformed configuration."""


class NamespaceLockedError(HowdyError):
    """The namespace write lock could not be acquired in time.

    Transient: the write was not applied and the store is unchanged.
    Callers may retry or surface a "try again" message.
    """

    def __init__(
        self,
        message: str,
        *,
        namespace: str = "",
        timeout: float | None = None,
    ) -> None:
        self.namespace = namespace
        self.timeout = timeout
        super().__init__(message)


class ExhaustedPoolError(HowdyError):
    """No unused nickname was found within the retry budget.

    Recoverable: let the participant enter a nickname manually.
    """

    def __init__(self, message: str, *, attempts: int = 0) -> None:
        self.attempts = attempts
        super().__init__(message)


class BoardValidationError(HowdyError):
    """A participant's input was rejected by the board."""


class InvalidNicknameError(BoardValidationError):
    """Nickname is blank."""


class DuplicateKeyError(BoardValidationError):
    """Nickname is already taken on the board.

    Raised by :class:`pyhowdy.board.MoodBoard` after a ``contains`` check.
    The store itself never raises this; ``put`` always overwrites.
    """

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)
