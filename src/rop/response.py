"""
Response — the value that travels along the railway.

A Response[T] is either Success(value: T) or Failure(failure_reason: str).
Stages return a Response instead of raising, and the combinators in
``rop.combinators`` only let a Success continue down the chain:

    ┌───────────┐    then     ┌───────────┐    then     ┌──────────┐
    │  parse    │──Success────│  double   │──Success────│  format  │──→ Response[T]
    │           │             │           │             │          │
    └─────┬─────┘             └─────┬─────┘             └─────┬────┘
          │ Failure                 │ Failure                 │ Failure
          └─────────────────────────┴─────────────────────────┴──→ Response[T]

The failure payload is a plain reason string. Reading ``value`` on a Failure
(or ``failure_reason`` on a Success) yields None; it is not checked. Use
``unwrap()`` when a checked read is wanted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


@unique
class ResponseType(Enum):
    """Outcome tag of a Response."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class Response(Generic[T]):
    """
    Railway-oriented result: Success(value) or Failure(reason).

    Constructed only through ``Response.success`` and ``Response.failure``
    (or the Success/Failure variants directly). Immutable once built.

        >>> Response.success(21).map(lambda x: x * 2)
        Success(42)

        >>> Response.failure("not a number").map(lambda x: x * 2)
        Failure('not a number')
    """

    __slots__ = ()

    # ──────────────────────── Accessors ────────────────────────

    @property
    def outcome(self) -> ResponseType:
        match self:
            case Success():
                return ResponseType.SUCCESS
            case _:
                return ResponseType.FAILURE

    @property
    def value(self) -> Optional[T]:
        """The success payload, or None on a Failure (unchecked)."""
        match self:
            case Success(v):
                return v
            case _:
                return None

    @property
    def failure_reason(self) -> Optional[str]:
        """The failure reason, or None on a Success."""
        match self:
            case Failure(reason):
                return reason
            case _:
                return None

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def unwrap(self) -> T:
        """
        Checked read of the success value.

        Raises ValueError when called on a Failure.
        """
        match self:
            case Success(v):
                return v
            case Failure(reason):
                raise ValueError(f"Cannot unwrap a Failure: {reason}")
        raise TypeError("unreachable")  # pragma: no cover

    def propagate(self) -> Response[Any]:
        """
        Carry a Failure over to the next stage's type.

        Produces a fresh Failure with the same reason. Calling it on a
        Success is a programming error.
        """
        match self:
            case Failure(reason):
                return Failure(reason)
        raise ValueError("Only a Failure can be propagated")

    # ──────────────────────── Transformations ────────────────────────

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[str], R],
    ) -> R:
        """
        Fold both tracks into a single value.

            response.either(
                on_success=lambda n: f"got {n}",
                on_failure=lambda reason: f"error: {reason}",
            )
        """
        match self:
            case Success(v):
                return on_success(v)
            case Failure(reason):
                return on_failure(reason)
        raise TypeError("unreachable")  # pragma: no cover

    def map(self, mapper: Callable[[T], U]) -> Response[U]:
        """Transform the success value. Failures pass through."""
        match self:
            case Success(v):
                return Success(mapper(v))
            case Failure(reason):
                return Failure(reason)
        raise TypeError("unreachable")  # pragma: no cover

    def map_failure(self, mapper: Callable[[str], str]) -> Response[T]:
        """Rewrite the failure reason. Successes pass through."""
        match self:
            case Failure(reason):
                return Failure(mapper(reason))
        return self

    def flat_map(self, mapper: Callable[[T], Response[U]]) -> Response[U]:
        """
        Chain a Response-returning function. Short-circuits on failure.

        The value-level counterpart of ``rop.combinators.then``.
        """
        match self:
            case Success(v):
                return mapper(v)
            case Failure(reason):
                return Failure(reason)
        raise TypeError("unreachable")  # pragma: no cover

    def ensure(self, predicate: Callable[[T], bool], reason: str) -> Response[T]:
        """Turn a Success into Failure(reason) when predicate rejects its value."""
        return self.flat_map(
            lambda v: Success(v) if predicate(v) else Failure(reason)
        )

    # ──────────────────────── Side Effects ────────────────────────

    def peek(self, action: Callable[[T], Any]) -> Response[T]:
        match self:
            case Success(v):
                action(v)
        return self

    def peek_failure(self, action: Callable[[str], Any]) -> Response[T]:
        match self:
            case Failure(reason):
                action(reason)
        return self

    # ──────────────────────── Recovery ────────────────────────

    def recover(self, recovery_fn: Callable[[str], T]) -> Response[T]:
        """Switch back to the success track using the failure reason."""
        match self:
            case Failure(reason):
                return Success(recovery_fn(reason))
        return self

    def get_or_else(self, default: T) -> T:
        match self:
            case Success(v):
                return v
            case _:
                return default

    # ──────────────────────── Async Support ────────────────────────

    async def map_async(self, mapper: Callable[[T], Awaitable[U]]) -> Response[U]:
        """
        Await an async transformation of the success value.

        Exceptions raised by ``mapper`` propagate to the caller.
        """
        match self:
            case Success(v):
                return Success(await mapper(v))
            case Failure(reason):
                return Failure(reason)
        raise TypeError("unreachable")  # pragma: no cover

    async def flat_map_async(
        self, mapper: Callable[[T], Awaitable[Response[U]]]
    ) -> Response[U]:
        """Await an async Response-returning function on the success value."""
        match self:
            case Success(v):
                return await mapper(v)
            case Failure(reason):
                return Failure(reason)
        raise TypeError("unreachable")  # pragma: no cover

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def success(value: T) -> Response[T]:
        """Create a successful Response. Any value is accepted, None included."""
        return Success(value)

    @staticmethod
    def failure(reason: str) -> Response[T]:
        """Create a failed Response. The reason is not validated."""
        return Failure(reason)

    @staticmethod
    def from_optional(value: Optional[T], reason: str) -> Response[T]:
        """Success(value) unless value is None, then Failure(reason)."""
        if value is not None:
            return Success(value)
        return Failure(reason)

    @staticmethod
    def from_computation(computation: Callable[[], T], reason: str) -> Response[T]:
        """
        Run a computation that may raise and keep the outcome as data.

        This is the boundary for wrapping code that signals errors by raising
        (parsers, third-party clients). The reason becomes
        ``"<reason>: <exception>"``.

            Response.from_computation(lambda: int(text), "not a number")
        """
        try:
            return Success(computation())
        except Exception as e:
            return Failure(f"{reason}: {e}")

    @staticmethod
    def all_of(responses: Iterable[Response[T]]) -> Response[list[T]]:
        """Collect successes into a list. The first failure wins."""
        values: list[T] = []
        for r in responses:
            match r:
                case Success(v):
                    values.append(v)
                case Failure(reason):
                    return Failure(reason)
        return Success(values)

    # ──────────────────────── Dunder methods ────────────────────────

    def __bool__(self) -> bool:
        return self.is_success()


@dataclass(frozen=True, slots=True)
class Success(Response[T]):
    """The success track."""

    _value: T

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


@dataclass(frozen=True, slots=True)
class Failure(Response[T]):
    """The failure track. Carries the reason of the first failing stage."""

    _reason: str

    def __repr__(self) -> str:
        return f"Failure({self._reason!r})"
