"""Helpers for walking chains of wrapped exceptions."""

from __future__ import annotations


class MyError(Exception):
    """An error reported by a MySQL server."""

    def __init__(self, code: int, message: str, state: str = "HY000") -> None:
        super().__init__(code, message, state)
        self.code = code
        self.message = message
        self.state = state

    def __str__(self) -> str:
        return f"ERROR {self.code} ({self.state}): {self.message}"


def cause(err: BaseException | None) -> BaseException | None:
    """Return the exception ``err`` was raised from, if any."""
    if err is None:
        return None
    return err.__cause__


def is_error(err: BaseException | None, target: BaseException | None) -> bool:
    """Report whether ``target`` is ``err`` or anything in its cause chain.

    An exception in the chain may also claim a match through a
    ``matches(target)`` method.
    """
    if target is None:
        return err is None
    while err is not None:
        if err == target:
            return True
        matches = getattr(err, "matches", None)
        if callable(matches) and matches(target):
            return True
        err = cause(err)
    return False


def check_and_get_my_error(err: BaseException | None) -> MyError | None:
    """Return the first :class:`MyError` in the cause chain of ``err``."""
    while err is not None:
        if isinstance(err, MyError):
            return err
        err = cause(err)
    return None