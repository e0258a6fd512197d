"""
Custom Assertion Helpers

Checks for structured API error bodies and for the call histories recorded
by the in-memory stores.
"""

from typing import Any, Dict, List, Optional

from qrshare.domain.errors import ERROR_MESSAGES, ErrorCategory


def assert_error_response(body: Dict[str, Any], expected_error: str) -> None:
    """
    Assert an error body matches the copy registered for its category.

    The body must carry exactly the user-facing fields (plus optional
    'details') and nothing from the technical message.
    """
    assert body is not None, "Expected a JSON error body"
    assert set(body) - {"details"} == {"error", "title", "message", "action"}, body

    category = ErrorCategory(expected_error)
    assert body["error"] == category.value
    for field, text in ERROR_MESSAGES[category].items():
        assert body[field] == text, f"{field}: {body[field]!r} != {text!r}"


def calls_to(repository: Any, method_name: str) -> List[Dict[str, Any]]:
    """Recorded calls to one method of an in-memory store."""
    return [c for c in repository.get_call_history() if c["method"] == method_name]


def assert_repository_called(
    repository: Any,
    method_name: str,
    times: Optional[int] = None,
    with_args: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Assert an in-memory store method was called.

    Args:
        repository: Store exposing get_call_history()
        method_name: Method to look for
        times: Exact call count (None means at least once)
        with_args: Argument values at least one call must have
    """
    calls = calls_to(repository, method_name)

    if times is None:
        assert calls, f"{method_name} was never called"
    else:
        assert len(calls) == times, f"{method_name} called {len(calls)} times, expected {times}"

    if with_args:
        seen = [c["args"] for c in calls]
        assert any(
            all(args.get(key) == value for key, value in with_args.items()) for args in seen
        ), f"no {method_name} call with {with_args}; saw {seen}"
