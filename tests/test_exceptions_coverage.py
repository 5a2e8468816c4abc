"""
Domain Exceptions Tests

Tests messages, codes and extra attributes of the domain error hierarchy.
"""

import pytest

from guild_music_engine.domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    InvalidOperationError,
    ResolutionFailedError,
    StreamOpenFailedError,
    ValidationError,
)


class TestDomainError:
    def test_default_code_is_class_name(self):
        error = DomainError("boom")

        assert str(error) == "boom"
        assert error.message == "boom"
        assert error.code == "DomainError"

    def test_explicit_code(self):
        assert DomainError("boom", code="X").code == "X"


class TestSubclasses:
    def test_validation_error_field(self):
        error = ValidationError("bad volume", field="volume")

        assert error.code == "VALIDATION_ERROR"
        assert error.field == "volume"

    def test_business_rule_violation(self):
        error = BusinessRuleViolationError("unique_name")

        assert "unique_name" in str(error)
        assert error.rule == "unique_name"

    def test_invalid_operation(self):
        error = InvalidOperationError("seek", "idle")

        assert str(error) == "Cannot perform 'seek' in state 'idle'"
        assert error.current_state == "idle"

    def test_resolution_failed(self):
        error = ResolutionFailedError("never gonna")

        assert error.query == "never gonna"
        assert error.code == "RESOLUTION_FAILED"
        assert "never gonna" in str(error)

    def test_stream_open_failed_custom_message(self):
        error = StreamOpenFailedError("Song", "ffmpeg exited")

        assert str(error) == "ffmpeg exited"
        assert error.track_title == "Song"

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("x"),
            BusinessRuleViolationError("r"),
            InvalidOperationError("op", "s"),
            ResolutionFailedError("q"),
            StreamOpenFailedError("t"),
        ],
    )
    def test_all_are_domain_errors(self, error):
        assert isinstance(error, DomainError)
