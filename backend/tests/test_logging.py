"""
Tests for computation tracking.
"""
import pytest
import structlog
from structlog.testing import capture_logs

from fitmetrics.core.logging import track_computation


class TestTrackComputation:

    def test_success_is_logged_with_batch_size(self):
        with capture_logs() as logs:
            logger = structlog.get_logger("test")
            with track_computation(logger, "streak", username="alice") as tracker:
                tracker.add_batch([1, 2, 3])
                tracker.add_batch([4])

        completed = [entry for entry in logs if entry["event"] == "Computation completed"]
        assert len(completed) == 1
        assert completed[0]["operation"] == "streak"
        assert completed[0]["batch_size"] == 4
        assert completed[0]["username"] == "alice"
        assert completed[0]["not_found"] is False

    def test_not_found_flag(self):
        with capture_logs() as logs:
            logger = structlog.get_logger("test")
            with track_computation(logger, "profile") as tracker:
                tracker.set_not_found()

        assert logs[-1]["not_found"] is True

    def test_errors_are_logged_and_reraised(self):
        with capture_logs() as logs:
            logger = structlog.get_logger("test")
            with pytest.raises(ValueError):
                with track_computation(logger, "consistency"):
                    raise ValueError("days must be positive")

        failed = logs[-1]
        assert failed["event"] == "Computation failed"
        assert failed["log_level"] == "warning"
        assert failed["error_type"] == "ValueError"
        assert failed["error_message"] == "days must be positive"
