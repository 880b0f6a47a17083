"""Drive a never-suspending coroutine to completion on the calling thread."""

from __future__ import annotations

import contextlib
import typing

_T = typing.TypeVar("_T")


def iter_coroutine(coro: typing.Coroutine[None, None, _T]) -> _T:
    """Return the result of a coroutine that finishes without suspending.

    The synchronous clients share their request logic with the async ones by
    writing it as coroutines over a blocking transport. Such coroutines never
    suspend, so sending None once drives them to completion.
    """
    with contextlib.closing(coro):
        try:
            coro.send(None)
        except StopIteration as done:
            return typing.cast(_T, done.value)
    raise RuntimeError(f"{coro!r} suspended; it needs an event loop to finish")


__all__ = ["iter_coroutine"]
