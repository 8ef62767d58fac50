"""
Test assertions for Response values.

Usage in tests:
    from rop import ResponseAssertions

    def test_parse():
        value = ResponseAssertions.assert_success(parse_int("42"))
        assert value == 42

    def test_parse_rejects_text():
        ResponseAssertions.assert_failure(parse_int("abc"), "not a number")
"""

from __future__ import annotations

from typing import Any, TypeVar

from rop.response import Response

T = TypeVar("T")


class ResponseAssertions:
    """Expressive test assertions for Response values."""

    @staticmethod
    def assert_success(response: Response[T], message: str = "") -> T:
        """Assert the Response is a Success and return its value."""
        context = f" — {message}" if message else ""
        assert response.is_success(), (
            f"Expected Success but got Failure({response.failure_reason!r}){context}"
        )
        return response.unwrap()

    @staticmethod
    def assert_failure(
        response: Response[T],
        expected_reason: str | None = None,
        message: str = "",
    ) -> str:
        """
        Assert the Response is a Failure, optionally with an exact reason.

        Returns the failure reason.
        """
        context = f" — {message}" if message else ""
        assert response.is_failure(), (
            f"Expected Failure but got Success({response.value!r}){context}"
        )
        reason = response.failure_reason
        if expected_reason is not None:
            assert reason == expected_reason, (
                f"Expected failure reason {expected_reason!r} but got {reason!r}{context}"
            )
        return reason  # type: ignore[return-value]

    @staticmethod
    def assert_failure_reason_contains(response: Response[T], substring: str) -> None:
        """Case-insensitive check on the failure reason."""
        assert response.is_failure(), (
            f"Expected Failure but got Success({response.value!r})"
        )
        reason = response.failure_reason or ""
        assert substring.lower() in reason.lower(), (
            f"Expected failure reason to contain {substring!r} but reason was: {reason!r}"
        )

    @staticmethod
    def assert_success_value(response: Response[T], expected_value: Any) -> None:
        value = ResponseAssertions.assert_success(response)
        assert value == expected_value, (
            f"Expected success value {expected_value!r} but got {value!r}"
        )
