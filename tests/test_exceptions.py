"""
tests/test_exceptions.py

Unit tests for the BlockArm exception hierarchy and user-facing messages.
"""

import pytest

from blockarm_exceptions import (
    BlockArmException,
    InvalidConfigError,
    InvalidStateError,
    NoPlanFoundError,
    PlanEncodingError,
    PlanningException,
    PlanningFailedError,
    UnknownObjectError,
    WorldDefinitionError,
    WorldException,
    get_user_friendly_message,
    wrap_exception,
)


class TestExceptionHierarchy:
    def test_subclasses(self):
        assert issubclass(WorldDefinitionError, WorldException)
        assert issubclass(NoPlanFoundError, PlanningException)
        assert issubclass(PlanEncodingError, InvalidStateError)
        assert issubclass(InvalidConfigError, BlockArmException)

    def test_str_includes_context_and_cause(self):
        cause = ValueError("bad")
        exc = BlockArmException("Failed", context={"step": 2}, original_exception=cause)

        text = str(exc)

        assert text.startswith("Failed")
        assert "step=2" in text
        assert "ValueError: bad" in text

    def test_no_plan_found_records_reason(self):
        exc = NoPlanFoundError("No plan", formula="holding(a)", reason="timeout")

        assert exc.reason == "timeout"
        assert exc.context == {"formula": "holding(a)", "reason": "timeout"}

    def test_planning_failed_keeps_errors(self):
        errors = [NoPlanFoundError("x", reason="exhausted")]
        exc = PlanningFailedError("All failed", errors=errors)

        assert exc.errors == errors
        assert exc.context["failed_candidates"] == 1

    def test_wrap_exception(self):
        cause = KeyError("x")

        wrapped = wrap_exception(cause, InvalidConfigError, "Bad config", path="p.yaml")

        assert isinstance(wrapped, InvalidConfigError)
        assert wrapped.original_exception is cause
        assert wrapped.context == {"path": "p.yaml"}


class TestUserFriendlyMessages:
    @pytest.mark.parametrize(
        "exc, expected",
        [
            (NoPlanFoundError("x", reason="exhausted"), "could not find a way"),
            (NoPlanFoundError("x", reason="timeout"), "took too long"),
            (UnknownObjectError("x", object_id="z"), "object 'z'"),
            (PlanningFailedError("x"), "None of the interpretations"),
            (ValueError("x"), "unexpected error"),
        ],
    )
    def test_messages(self, exc, expected):
        assert expected in get_user_friendly_message(exc)

    def test_details(self):
        exc = InvalidConfigError("timeout_seconds must be >= 0")

        message = get_user_friendly_message(exc, include_details=True)

        assert "Technical details: timeout_seconds must be >= 0" in message
