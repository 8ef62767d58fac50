"""
rop — Railway-Oriented Programming for Python callables.

Chain fallible stages, sync or async, so that the first failure
short-circuits the rest of the chain.

    from rop import Response, then, then_async

    def parse_int(text: str) -> Response[int]:
        if not text.strip().lstrip("-").isdigit():
            return Response.failure("not a number")
        return Response.success(int(text))

    def double(n: int) -> Response[int]:
        return Response.success(n * 2)

    then(parse_int, double)("42")   # Success(84)
    then(parse_int, double)("abc")  # Failure('not a number')
"""

from rop.response import Failure, Response, ResponseType, Success
from rop.combinators import (
    accepts_input,
    bind,
    compose,
    compose_async,
    is_async,
    then,
    then_async,
    to_async,
)
from rop.pipeline import Pipeline
from rop.execution import (
    ComposableExecutionContext,
    ExecutionContext,
    LoggingExecutionContext,
    NoOpExecutionContext,
    with_context,
)
from rop.assertions import ResponseAssertions

__all__ = [
    "Response",
    "ResponseType",
    "Success",
    "Failure",
    "bind",
    "then",
    "then_async",
    "to_async",
    "compose",
    "compose_async",
    "is_async",
    "accepts_input",
    "Pipeline",
    "ExecutionContext",
    "NoOpExecutionContext",
    "LoggingExecutionContext",
    "ComposableExecutionContext",
    "with_context",
    "ResponseAssertions",
]

__version__ = "1.0.0"
