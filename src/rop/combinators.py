"""
Combinators — compose Response-returning stages into a single stage.

Every stage handed to these functions is classified on two axes:

  - arity: takes one input value, or none (a producer)
  - completion: synchronous, or ``async def`` (suspending)

Instead of one hand-written function per combination, the algebra rests on
two rules:

  bind(fn)      lifts ``fn: T -> Response[U]`` to ``Response[T] -> Response[U]``,
                forwarding a Failure without calling ``fn``
  to_async(fn)  lifts a synchronous stage into the coroutine form

``then`` and ``then_async`` are both written in terms of these, so the
short-circuit semantics are identical across every shape:

    parse_and_double = then(parse_int, double)
    parse_and_double("42")   # Success(84)
    parse_and_double("abc")  # Failure('not a number'), double never runs

    fetch_and_double = then_async(parse_int, slow_double)
    await fetch_and_double("42")  # Success(84)

The second stage always receives the unwrapped success value (or nothing, if
it takes no input). Exceptions raised by stages are not caught here.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Awaitable, Callable, Coroutine, TypeVar

from rop.response import Response

T = TypeVar("T")
U = TypeVar("U")

Stage = Callable[..., Response[T]]
AsyncStage = Callable[..., Awaitable[Response[T]]]

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


# ──────────────────────── Stage classification ────────────────────────


def _unwrap(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Replace a Pipeline by the stage it composed."""
    from rop.pipeline import Pipeline  # rop.pipeline imports this module

    return fn.stage if isinstance(fn, Pipeline) else fn


def is_async(fn: Callable[..., Any]) -> bool:
    """
    True when calling ``fn`` produces an awaitable by declaration.

    Recognises ``async def`` functions, partials of them, callables with an
    ``async def __call__``, stages lifted by ``to_async`` and async
    pipelines.
    """
    fn = _unwrap(fn)
    if inspect.iscoroutinefunction(fn):
        return True
    call = getattr(fn, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


def accepts_input(fn: Callable[..., Any]) -> bool:
    """
    True when ``fn`` can be called with one positional argument.

    Stages whose signature cannot be inspected (some builtins) count as
    taking input.
    """
    try:
        signature = inspect.signature(_unwrap(fn))
    except (TypeError, ValueError):
        return True
    return any(p.kind in _POSITIONAL for p in signature.parameters.values())


def _feed(stage: Callable[..., Any]) -> Callable[[Any], Any]:
    if accepts_input(stage):
        return stage
    return lambda _value: stage()


def _mirror_arity(composed: Callable[..., Any], stage: Callable[..., Any]) -> Callable[..., Any]:
    """Give a composed stage the signature of the stage that receives its input."""
    try:
        composed.__signature__ = inspect.signature(stage)  # type: ignore[attr-defined]
    except (TypeError, ValueError):
        # uninspectable stage: keep the (*args, **kwargs) signature
        return composed
    composed.__name__ = f"then_{getattr(stage, '__name__', 'stage')}"
    return composed


# ──────────────────────── Resolved coroutines ────────────────────────


async def _resolved(result: T) -> T:
    return result


async def _awaited(pending: Awaitable[T]) -> T:
    return await pending


# ──────────────────────── Lifting rules ────────────────────────


def to_async(fn: Stage[T] | AsyncStage[T]) -> AsyncStage[T]:
    """
    Lift a synchronous stage into the awaitable form.

    ``fn`` still runs synchronously, at call time; the call returns a
    coroutine that already holds its Response, so it can be awaited, passed
    to ``asyncio.run`` or scheduled with ``asyncio.create_task``.
    Already-async stages are returned unchanged.
    """
    fn = _unwrap(fn)
    if is_async(fn):
        return fn  # type: ignore[return-value]

    @functools.wraps(fn)
    def lifted(*args: Any, **kwargs: Any) -> Coroutine[Any, Any, Response[T]]:
        result = fn(*args, **kwargs)
        if inspect.iscoroutine(result):
            return result
        if inspect.isawaitable(result):
            return _awaited(result)
        return _resolved(result)

    return inspect.markcoroutinefunction(lifted)


def bind(fn: Stage[U] | AsyncStage[U]) -> Callable[[Response[T]], Any]:
    """
    Lift ``fn: T -> Response[U]`` to ``Response[T] -> Response[U]``.

    The bound stage keeps ``fn``'s completion mode. On a Failure it returns
    a Failure with the same reason and ``fn`` is never invoked; on a Success
    it returns exactly what ``fn`` returns for the unwrapped value.
    """
    fn = _unwrap(fn)
    feed = _feed(fn)

    if is_async(fn):

        async def bound_async(response: Response[T]) -> Response[U]:
            if response.is_failure():
                return response.propagate()
            return await feed(response.value)

        return bound_async

    def bound(response: Response[T]) -> Response[U]:
        if response.is_failure():
            return response.propagate()
        return feed(response.value)

    return bound


# ──────────────────────── Chaining ────────────────────────


def then(stage1: Stage[T], stage2: Stage[U]) -> Stage[U]:
    """
    Chain two synchronous stages.

    The result takes the same input as ``stage1``. ``stage2`` runs only if
    ``stage1`` succeeded, and its Response is returned as is.

    Raises TypeError at composition time if either stage is async; use
    ``then_async`` for those.
    """
    stage1, stage2 = _unwrap(stage1), _unwrap(stage2)
    for stage in (stage1, stage2):
        if is_async(stage):
            raise TypeError(
                f"then() composes synchronous stages only, got async "
                f"{getattr(stage, '__name__', stage)!r}; use then_async()"
            )
    bound = bind(stage2)

    def chained(*args: Any, **kwargs: Any) -> Response[U]:
        return bound(stage1(*args, **kwargs))

    return _mirror_arity(chained, stage1)


def then_async(
    stage1: Stage[T] | AsyncStage[T],
    stage2: Stage[U] | AsyncStage[U],
) -> AsyncStage[U]:
    """
    Chain two stages of any completion mode into an async stage.

    ``stage1`` is awaited to completion before ``stage2`` is considered, and
    ``stage2`` is awaited before returning. The stages never overlap.
    """
    stage1 = _unwrap(stage1)
    first = to_async(stage1)
    bound = bind(to_async(stage2))

    async def chained(*args: Any, **kwargs: Any) -> Response[U]:
        return await bound(await first(*args, **kwargs))

    return _mirror_arity(chained, stage1)


def compose(*stages: Stage[Any]) -> Stage[Any]:
    """Left fold of ``then`` over the given synchronous stages."""
    if not stages:
        raise ValueError("compose() needs at least one stage")
    return functools.reduce(then, stages)


def compose_async(*stages: Stage[Any] | AsyncStage[Any]) -> AsyncStage[Any]:
    """Left fold of ``then_async`` over stages of any completion mode."""
    if not stages:
        raise ValueError("compose_async() needs at least one stage")
    if len(stages) == 1:
        return to_async(stages[0])
    return functools.reduce(then_async, stages)
