"""Tests for the OperationResult envelope."""

from ideagen.core.errors import ErrorCategory, InvalidScheduleConfigError
from ideagen.ops.result import OperationResult, start_timer


class TestOperationResult:
    def test_ok(self):
        result = OperationResult.ok({"a": 1}, warnings=["w"])
        assert result.success
        assert result.to_dict() == {"success": True, "data": {"a": 1}, "warnings": ["w"]}

    def test_fail(self):
        result = OperationResult.fail("NOT_FOUND", "missing", details={"id": "x"})
        payload = result.to_dict()
        assert payload["error"] == {
            "code": "NOT_FOUND",
            "message": "missing",
            "retryable": False,
            "details": {"id": "x"},
        }

    def test_from_error(self):
        error = InvalidScheduleConfigError("time", "25:00")
        result = OperationResult.from_error(error)
        assert result.error.code == "INVALID_SCHEDULE"
        assert result.error.category is ErrorCategory.VALIDATION
        assert result.error.details == {"field": "time", "value": "25:00"}

    def test_timer(self):
        assert start_timer().elapsed_ms >= 0

    def test_error_without_details(self):
        result = OperationResult.fail("LOCKED", "Another generation is already running", retryable=True)
        assert result.to_dict()["error"] == {
            "code": "LOCKED",
            "message": "Another generation is already running",
            "retryable": True,
        }

    def test_failed_run_keeps_outcome_metadata(self):
        result = OperationResult.fail(
            "GENERATION_FAILED", "down", metadata={"outcome": {"retry_count": 1}}, elapsed_ms=3.14159
        )
        payload = result.to_dict()
        assert payload["metadata"] == {"outcome": {"retry_count": 1}}
        assert payload["elapsed_ms"] == 3.14
        assert "data" not in payload
