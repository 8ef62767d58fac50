"""
Pipeline — a fluent builder over the combinators.

Builds the same chains as ``then``/``then_async`` without nesting calls:

    handle = (
        Pipeline(parse_int)
        .then(validate_range)
        .then_async(store)
        .then(format_reply)
    )
    response = await handle("42")

Each method returns a new Pipeline; a built pipeline is stateless and can be
run any number of times, concurrently too. Once an async stage is added the
pipeline stays async and ``__call__`` returns an awaitable.

A Pipeline can itself be used as a stage, in another Pipeline or with the
free combinators; it is classified by the stage it wraps.
"""

from __future__ import annotations

from typing import Any, Callable

from rop.combinators import bind, is_async, then, then_async, to_async
from rop.response import Response


class Pipeline:
    """Immutable chain of Response-returning stages."""

    __slots__ = ("_stage",)

    def __init__(self, stage: Callable[..., Any]) -> None:
        if not callable(stage):
            raise TypeError(f"Pipeline stage must be callable, got {type(stage).__name__}")
        if isinstance(stage, Pipeline):
            stage = stage.stage
        self._stage = stage

    @property
    def is_async(self) -> bool:
        return is_async(self._stage)

    @property
    def stage(self) -> Callable[..., Any]:
        """The composed stage, usable with the free combinators."""
        return self._stage

    def then(self, stage: Callable[..., Any]) -> Pipeline:
        """
        Append a stage.

        Sync pipelines with a sync stage stay sync; anything else switches to
        ``then_async``.
        """
        if self.is_async or is_async(stage):
            return Pipeline(then_async(self._stage, stage))
        return Pipeline(then(self._stage, stage))

    def then_async(self, stage: Callable[..., Any]) -> Pipeline:
        """Append a stage and make the pipeline async regardless of modes."""
        return Pipeline(then_async(self._stage, stage))

    def to_async(self) -> Pipeline:
        return Pipeline(to_async(self._stage))

    def bind(self) -> Callable[[Response[Any]], Any]:
        """Return the pipeline as a ``Response -> Response`` stage."""
        return bind(self._stage)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._stage(*args, **kwargs)

    def __repr__(self) -> str:
        mode = "async" if self.is_async else "sync"
        return f"Pipeline({getattr(self._stage, '__name__', self._stage)!r}, {mode})"
