"""
Execution contexts — run a chain at a boundary without touching its stages.

The combinators stay pure: they never log and never catch. When an
application wants observability around a chain, it runs the chain inside an
execution context instead:

    ctx = LoggingExecutionContext(operation="ImportOrder")
    response = ctx.execute(lambda: import_order(payload))
    response = await ctx.execute_async(lambda: import_order_async(payload))

    @with_context(ctx)
    def handle(payload: str) -> Response[Order]:
        return import_order(payload)

Contexts satisfy the ExecutionContext protocol structurally, so any class
with ``execute`` and ``execute_async`` can be composed with the ones here.
"""

from __future__ import annotations

import functools
import time
from typing import Any, Awaitable, Callable, Protocol, TypeVar, runtime_checkable

import structlog

from rop.combinators import is_async
from rop.config import get_settings
from rop.response import Failure, Response

T = TypeVar("T")
log = structlog.get_logger("rop.execution")


# ──────────────────────── Protocol (Interface) ────────────────────────


@runtime_checkable
class ExecutionContext(Protocol):
    """Anything that can run a Response-returning computation."""

    def execute(self, computation: Callable[[], Response[T]]) -> Response[T]: ...

    async def execute_async(
        self, computation: Callable[[], Awaitable[Response[T]]]
    ) -> Response[T]: ...


# ──────────────────────── NoOp ────────────────────────


class NoOpExecutionContext:
    """Passthrough context, handy in unit tests."""

    def execute(self, computation: Callable[[], Response[T]]) -> Response[T]:
        return computation()

    async def execute_async(
        self, computation: Callable[[], Awaitable[Response[T]]]
    ) -> Response[T]:
        return await computation()


# ──────────────────────── Logging ────────────────────────


class LoggingExecutionContext:
    """
    Logs start, duration and outcome of a chain through structlog.

    Wraps another context (decorator pattern). An exception escaping the
    computation is logged and returned as ``Failure("Execution failed: ...")``;
    this is the one place outside ``Response.from_computation`` where an
    exception turns into railway data.
    """

    def __init__(
        self,
        inner: ExecutionContext | None = None,
        operation: str = "unknown",
        log_level: int | None = None,
    ) -> None:
        self._inner = inner or NoOpExecutionContext()
        self._operation = operation
        self._log_level = (
            log_level if log_level is not None else get_settings().execution_level_number()
        )

    def execute(self, computation: Callable[[], Response[T]]) -> Response[T]:
        log.log(self._log_level, "execution.started", operation=self._operation)
        start = time.monotonic()
        try:
            response = self._inner.execute(computation)
        except Exception as e:
            return self._crashed(e, time.monotonic() - start)
        return self._completed(response, time.monotonic() - start)

    async def execute_async(
        self, computation: Callable[[], Awaitable[Response[T]]]
    ) -> Response[T]:
        log.log(self._log_level, "execution.started", operation=self._operation)
        start = time.monotonic()
        try:
            response = await self._inner.execute_async(computation)
        except Exception as e:
            return self._crashed(e, time.monotonic() - start)
        return self._completed(response, time.monotonic() - start)

    def _completed(self, response: Response[T], elapsed: float) -> Response[T]:
        if response.is_success():
            log.log(
                self._log_level,
                "execution.completed",
                operation=self._operation,
                outcome=response.outcome.value,
                elapsed_seconds=round(elapsed, 3),
            )
        else:
            log.warning(
                "execution.completed",
                operation=self._operation,
                outcome=response.outcome.value,
                failure_reason=response.failure_reason,
                elapsed_seconds=round(elapsed, 3),
            )
        return response

    def _crashed(self, error: Exception, elapsed: float) -> Response[Any]:
        log.error(
            "execution.crashed",
            operation=self._operation,
            error=str(error),
            error_type=type(error).__name__,
            elapsed_seconds=round(elapsed, 3),
        )
        return Failure(f"Execution failed: {error}")


# ──────────────────────── Composable ────────────────────────


class ComposableExecutionContext:
    """
    Nest several contexts; the first one given is the outermost.

        ComposableExecutionContext(
            LoggingExecutionContext(operation="ImportOrder"),
            TimingBudgetContext(...),
        )
    """

    def __init__(self, *contexts: ExecutionContext) -> None:
        if not contexts:
            raise ValueError("At least one execution context is required")
        self._contexts = list(contexts)

    def execute(self, computation: Callable[[], Response[T]]) -> Response[T]:
        wrapped = computation
        for ctx in reversed(self._contexts):
            wrapped = functools.partial(ctx.execute, wrapped)
        return wrapped()

    async def execute_async(
        self, computation: Callable[[], Awaitable[Response[T]]]
    ) -> Response[T]:
        wrapped = computation
        for ctx in reversed(self._contexts):
            wrapped = functools.partial(ctx.execute_async, wrapped)
        return await wrapped()


# ──────────────────────── Decorator Helper ────────────────────────


def with_context(ctx: ExecutionContext) -> Callable:
    """
    Run every call of the decorated handler inside ``ctx``.

    Works for ``def`` and ``async def`` handlers, async callable objects
    and async pipelines.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        if is_async(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Response[Any]:
                return await ctx.execute_async(lambda: fn(*args, **kwargs))

            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Response[Any]:
            return ctx.execute(lambda: fn(*args, **kwargs))

        return wrapper

    return decorator
