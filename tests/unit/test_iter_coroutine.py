import pytest

from azure_oss_storage._http import iter_coroutine


class _SuspendingAwaitable:
    def __await__(self):
        yield None
        return None


def test_iter_coroutine_returns_result_and_closes_coroutine() -> None:
    closed = False

    async def coro() -> str:
        nonlocal closed
        try:
            return "ok"
        finally:
            closed = True

    assert iter_coroutine(coro()) == "ok"
    assert closed


def test_iter_coroutine_raises_on_suspending_coroutine_and_closes_coroutine() -> None:
    closed = False

    async def coro() -> None:
        nonlocal closed
        try:
            await _SuspendingAwaitable()
        finally:
            closed = True

    with pytest.raises(RuntimeError, match="suspended; it needs an event loop"):
        iter_coroutine(coro())

    assert closed


def test_iter_coroutine_drives_nested_non_suspending_awaits() -> None:
    async def fetch_page(marker: str) -> list[str]:
        return [f"{marker}-1", f"{marker}-2"]

    async def list_all() -> list[str]:
        first = await fetch_page("a")
        second = await fetch_page("b")
        return first + second

    assert iter_coroutine(list_all()) == ["a-1", "a-2", "b-1", "b-2"]


def test_iter_coroutine_propagates_exceptions() -> None:
    async def coro() -> None:
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        iter_coroutine(coro())
