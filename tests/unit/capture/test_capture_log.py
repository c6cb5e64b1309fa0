"""Tests for capture log, observer notifier and tokens."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from chart_capture.capture import (
    CancellationToken,
    LoggingCaptureObserver,
    NullCaptureObserver,
    ObserverNotificationError,
    ObserverNotifier,
    PauseToken,
)
from chart_capture.capture.capture_log import CaptureLogger
from chart_capture.capture.result_aggregator import ResultAggregator
from chart_capture.data_models import CaptureStatus, MeterCaptureResult


def _result(meter_number: str, successful: int, failed: int) -> MeterCaptureResult:
    return MeterCaptureResult(
        meter_number=meter_number,
        meter_id=meter_number.lower(),
        charts_attempted=successful + failed,
        charts_successful=successful,
        charts_failed=failed,
        failed_metrics=tuple(f"metric-{index}" for index in range(failed)),
        duration_ms=5,
    )


class TestCaptureLogger:
    """Tests for CaptureLogger."""

    @pytest.mark.asyncio
    async def test_each_append_publishes_full_snapshot(self, observer) -> None:
        capture_log = CaptureLogger(ObserverNotifier(observer))

        await capture_log.record("M-1", "total", "Total Amount", CaptureStatus.RENDERING)
        await capture_log.record("M-1", "total", "Total Amount", CaptureStatus.SUCCESS, duration_ms=12)

        assert observer.log_sizes == [1, 2]
        snapshot = capture_log.snapshot()
        assert [entry.status for entry in snapshot] == [CaptureStatus.RENDERING, CaptureStatus.SUCCESS]
        assert snapshot[1].duration_ms == 12

    @pytest.mark.asyncio
    async def test_concurrent_appends_are_all_kept(self, observer) -> None:
        capture_log = CaptureLogger(ObserverNotifier(observer))

        await asyncio.gather(
            *(capture_log.record(f"M-{index}", "total", "Total Amount", CaptureStatus.PENDING) for index in range(20))
        )

        assert len(capture_log.snapshot()) == 20
        assert observer.log_sizes == list(range(1, 21))

    @pytest.mark.asyncio
    async def test_entries_are_mirrored_to_logging(self, observer, caplog) -> None:
        capture_log = CaptureLogger(ObserverNotifier(observer))

        with caplog.at_level(logging.DEBUG, logger="chart_capture.capture.capture_log"):
            await capture_log.record("M-1", "basic", "Basic Charge", CaptureStatus.FAILED, error="Chart renderer returned no image")

        assert "M-1 Basic Charge failed (attempt 1): Chart renderer returned no image" in caplog.text
        assert caplog.records[-1].levelno == logging.WARNING

    def test_entry_serializes_with_camel_case_keys(self) -> None:
        capture_log = CaptureLogger(ObserverNotifier(NullCaptureObserver()))
        entry = asyncio.run(capture_log.record("M-1", "total", "Total Amount", CaptureStatus.SUCCESS, duration_ms=3))

        payload = entry.to_dict()

        assert payload["meterNumber"] == "M-1"
        assert payload["status"] == "success"
        assert payload["durationMs"] == 3
        assert "error" not in payload


class TestResultAggregator:
    @pytest.mark.asyncio
    async def test_running_totals(self) -> None:
        aggregator = ResultAggregator()

        await aggregator.add(_result("M-1", 5, 1))
        await aggregator.add(_result("M-2", 6, 0))

        assert aggregator.total_success == 11
        assert aggregator.total_failed == 1
        assert [result.meter_number for result in aggregator.results] == ["M-1", "M-2"]

    def test_result_rejects_inconsistent_counts(self) -> None:
        with pytest.raises(ValueError):
            MeterCaptureResult("M-1", "m-1", 3, 1, 1, ("Basic Charge",), 0)


class TestObserverNotifier:
    def test_forwards_callbacks(self) -> None:
        observer = MagicMock()
        notifier = ObserverNotifier(observer)

        notifier.progress(1, 6, "M-1", "Total Amount", "Meter 1/1 - Chart 1/6")
        notifier.pause_state_change(True)

        observer.on_progress.assert_called_once_with(1, 6, "M-1", "Total Amount", "Meter 1/1 - Chart 1/6")
        observer.on_pause_state_change.assert_called_once_with(True)

    def test_wraps_callback_failures(self) -> None:
        observer = MagicMock()
        observer.on_meter_complete.side_effect = RuntimeError("widget destroyed")
        notifier = ObserverNotifier(observer)

        with pytest.raises(ObserverNotificationError) as exc_info:
            notifier.meter_complete(_result("M-1", 1, 0))

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_logging_observer_reports_completion(self, caplog) -> None:
        observer = LoggingCaptureObserver()

        with caplog.at_level(logging.INFO, logger="chart_capture.capture.observer"):
            observer.on_meter_complete(_result("M-7", 4, 2))
            observer.on_complete(4, 2, True, (), (_result("M-7", 4, 2),))

        assert "Meter M-7 finished: 4/6 charts captured" in caplog.text
        assert "Capture cancelled: 4 succeeded, 2 failed across 1 meters" in caplog.text


class TestTokens:
    def test_cancellation_token_set_and_clear(self) -> None:
        token = CancellationToken()
        assert token.is_set() is False

        token.set()
        assert token.is_set() is True

        token.clear()
        assert token.is_set() is False

    def test_pause_token_is_independent(self) -> None:
        pause, cancel = PauseToken(), CancellationToken()

        pause.set()

        assert pause.is_set() is True
        assert cancel.is_set() is False
        assert repr(pause) == "PauseToken(is_set=True)"
