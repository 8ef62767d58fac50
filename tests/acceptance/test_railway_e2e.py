"""
Acceptance tests — realistic chains built only from the public API.

Scenario: import an order line "<sku>:<quantity>" through
  parse → validate → reserve stock (async, simulated I/O) → confirm
and run it inside a LoggingExecutionContext, the way an embedding
application would.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import pytest
from structlog.testing import capture_logs

from rop import (
    LoggingExecutionContext,
    Pipeline,
    Response,
    ResponseAssertions,
    then,
    then_async,
)
from tests.conftest import parse_int

pytestmark = pytest.mark.acceptance


@dataclass(frozen=True)
class OrderLine:
    sku: str
    quantity: int


class InMemoryStock:
    """Fake inventory adapter with simulated latency."""

    def __init__(self, levels: dict[str, int]) -> None:
        self.levels = dict(levels)
        self.reservations: list[OrderLine] = []

    async def reserve(self, line: OrderLine) -> Response[OrderLine]:
        await asyncio.sleep(0.01)
        available = self.levels.get(line.sku, 0)
        if available < line.quantity:
            return Response.failure(f"insufficient stock for {line.sku}")
        self.levels[line.sku] = available - line.quantity
        self.reservations.append(line)
        return Response.success(line)


def parse_line(raw: str) -> Response[OrderLine]:
    sku, sep, quantity = raw.partition(":")
    if not sep or not sku:
        return Response.failure(f"malformed order line: {raw!r}")
    return parse_int(quantity).map(lambda q: OrderLine(sku=sku, quantity=q))


def validate_line(line: OrderLine) -> Response[OrderLine]:
    return Response.success(line).ensure(lambda item: item.quantity > 0, "quantity must be positive")


def confirm(line: OrderLine) -> Response[str]:
    return Response.success(f"reserved {line.quantity} x {line.sku}")


@pytest.fixture()
def stock() -> InMemoryStock:
    return InMemoryStock({"apple": 10, "pear": 1})


class TestParseDoubleScenario:
    def test_sync(self, double, recorder):
        chain = then(parse_int, double)
        ResponseAssertions.assert_success_value(chain("42"), 84)
        ResponseAssertions.assert_failure(chain("abc"), "not a number")
        assert recorder.calls == [(42,)]

    @pytest.mark.asyncio
    async def test_async_with_delay(self, slow_double, recorder):
        chain = then_async(parse_int, slow_double)
        ResponseAssertions.assert_success_value(await chain("42"), 84)
        ResponseAssertions.assert_failure(await chain("abc"), "not a number")
        assert recorder.calls == [(42,)]


class TestOrderImport:
    @pytest.mark.asyncio
    async def test_happy_path(self, stock: InMemoryStock):
        handle = Pipeline(parse_line).then(validate_line).then(stock.reserve).then(confirm)
        response = await handle("apple:3")
        ResponseAssertions.assert_success_value(response, "reserved 3 x apple")
        assert stock.levels["apple"] == 7

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("raw", "reason"),
        [
            ("apple", "malformed order line: 'apple'"),
            ("apple:lots", "not a number"),
            ("apple:0", "quantity must be positive"),
            ("pear:5", "insufficient stock for pear"),
        ],
    )
    async def test_first_failure_wins_and_later_stages_do_not_run(
        self, stock: InMemoryStock, raw: str, reason: str
    ):
        confirmations: list[OrderLine] = []

        def recording_confirm(line: OrderLine) -> Response[str]:
            confirmations.append(line)
            return confirm(line)

        handle = Pipeline(parse_line).then(validate_line).then(stock.reserve).then(recording_confirm)
        ResponseAssertions.assert_failure(await handle(raw), reason)
        assert confirmations == []
        assert stock.levels == {"apple": 10, "pear": 1}

    @pytest.mark.asyncio
    async def test_inside_logging_context(self, stock: InMemoryStock):
        handle = then_async(then(parse_line, validate_line), then_async(stock.reserve, confirm))
        ctx = LoggingExecutionContext(operation="ImportOrder")
        with capture_logs() as logs:
            ok = await ctx.execute_async(lambda: handle("apple:2"))
            failed = await ctx.execute_async(lambda: handle("kiwi:1"))
        ResponseAssertions.assert_success(ok)
        ResponseAssertions.assert_failure_reason_contains(failed, "kiwi")
        outcomes = [e["outcome"] for e in logs if e["event"] == "execution.completed"]
        assert outcomes == ["SUCCESS", "FAILURE"]

    @pytest.mark.asyncio
    async def test_concurrent_imports_share_one_chain(self, stock: InMemoryStock):
        handle = Pipeline(parse_line).then(validate_line).then(stock.reserve).then(confirm)
        responses = await asyncio.gather(*(handle(raw) for raw in ["apple:1"] * 4))
        assert all(r.is_success() for r in responses)
        assert stock.levels["apple"] == 6
