"""Tests for the meter-chart-capture command line."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import orjson
import pytest

from chart_capture import cli
from chart_capture.config import ConfigurationError
from chart_capture.data_models import CaptureLogEntry, CaptureRunSummary, CaptureStatus, MeterCaptureResult


def _summary(*, failed: int = 0, fatal_error=None) -> CaptureRunSummary:
    result = MeterCaptureResult("M-001", "m1", 6, 6 - failed, failed, ("Basic Charge",) * failed, 120)
    entry = CaptureLogEntry("M-001", "total", "Total Amount", CaptureStatus.SUCCESS, 1, duration_ms=20)
    return CaptureRunSummary(6 - failed, failed, False, (entry,), (result,), fatal_error=fatal_error)


class TestArguments:
    def test_site_is_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_overrides_apply_to_environment_settings(self, monkeypatch) -> None:
        monkeypatch.delenv("CHART_CAPTURE_BATCH_SIZE", raising=False)
        args = cli.build_parser().parse_args(["--site", "s1", "--batch-size", "5", "--item-timeout", "30"])

        settings = cli.resolve_capture_settings(args)

        assert settings.batch_size == 5
        assert settings.item_timeout_seconds == 30.0
        assert settings.charts_per_meter == 6

    def test_invalid_override_is_configuration_error(self) -> None:
        args = cli.build_parser().parse_args(["--site", "s1", "--max-attempts", "0"])

        with pytest.raises(ConfigurationError):
            cli.resolve_capture_settings(args)


class TestExitStatus:
    @pytest.mark.parametrize(
        "summary, expected",
        [
            (_summary(), cli.EXIT_OK),
            (_summary(failed=2), cli.EXIT_CHART_FAILURES),
            (_summary(fatal_error="boom"), cli.EXIT_FATAL),
        ],
    )
    def test_exit_status(self, summary, expected) -> None:
        assert cli.exit_status(summary) == expected


class TestMain:
    """Tests for cli.main."""

    def test_writes_report_and_returns_status(self, tmp_path: Path) -> None:
        report = tmp_path / "reports" / "run.json"

        with patch.object(cli, "setup_logging"), patch.object(cli, "run_capture", AsyncMock(return_value=_summary(failed=1))):
            status = cli.main(["--site", "s1", "--report", str(report)])

        assert status == cli.EXIT_CHART_FAILURES
        payload = orjson.loads(report.read_bytes())
        assert payload["totalFailed"] == 1
        assert payload["meterResults"][0]["failedMetrics"] == ["Basic Charge"]
        assert payload["log"][0]["status"] == "success"

    def test_configuration_error_is_fatal(self) -> None:
        with patch.object(cli, "setup_logging"), patch.object(
            cli, "run_capture", AsyncMock(side_effect=ConfigurationError("SUPABASE_URL is missing or empty"))
        ):
            assert cli.main(["--site", "s1"]) == cli.EXIT_FATAL

    def test_output_dir_is_passed_through(self, tmp_path: Path) -> None:
        run_capture = AsyncMock(return_value=_summary())

        with patch.object(cli, "setup_logging"), patch.object(cli, "run_capture", run_capture):
            assert cli.main(["--site", "s1", "--output-dir", str(tmp_path)]) == cli.EXIT_OK

        args, settings = run_capture.await_args.args
        assert args.output_dir == tmp_path
        assert args.site == "s1"
