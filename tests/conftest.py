"""
Shared test fixtures and stages for the rop test suite.

Provides the canonical parse/double stages in both completion modes plus a
call recorder, so short-circuit tests can assert that a stage never ran.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
import structlog

from rop import Response
from rop.config import get_settings


class CallRecorder:
    """Records every argument tuple a stage was called with."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    @property
    def count(self) -> int:
        return len(self.calls)

    def record(self, *args: Any) -> None:
        self.calls.append(args)


def parse_int(text: str) -> Response[int]:
    """Parse an integer; the canonical first stage."""
    try:
        return Response.success(int(text))
    except ValueError:
        return Response.failure("not a number")


async def parse_int_async(text: str) -> Response[int]:
    await asyncio.sleep(0)
    return parse_int(text)


@pytest.fixture()
def recorder() -> CallRecorder:
    return CallRecorder()


@pytest.fixture()
def double(recorder: CallRecorder):
    """Synchronous doubling stage that records its calls."""

    def _double(n: int) -> Response[int]:
        recorder.record(n)
        return Response.success(n * 2)

    return _double


@pytest.fixture()
def slow_double(recorder: CallRecorder):
    """Suspending doubling stage: sleeps before answering."""

    async def _slow_double(n: int) -> Response[int]:
        recorder.record(n)
        await asyncio.sleep(0.01)
        return Response.success(n * 2)

    return _slow_double


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    """Fresh settings and default structlog config for every test."""
    for name in ("ROP_LOG_LEVEL", "ROP_LOG_FORMAT", "ROP_EXECUTION_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()
