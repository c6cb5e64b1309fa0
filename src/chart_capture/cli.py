"""Command line entry point: capture every reconciliation chart of a site."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import signal
import sys
from pathlib import Path
from typing import Optional, Sequence

import orjson

from .backend import BackendClient
from .capture import CancellationToken, LoggingCaptureObserver, create_site_runner
from .config import ConfigurationError
from .config.settings import CaptureSettings, get_backend_settings, get_capture_settings
from .data_models import CaptureRunSummary
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "chart_capture"
EXIT_OK = 0
EXIT_CHART_FAILURES = 1
EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meter-chart-capture",
        description="Render and store reconciliation charts for every meter of a site",
    )
    parser.add_argument("--site", required=True, help="Site id whose schematic meters are charted")
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Write charts below this directory instead of uploading them to the storage bucket",
    )
    parser.add_argument("--report", type=Path, help="Write a JSON run report to this path")
    parser.add_argument("--batch-size", type=int, help="Meters captured concurrently (default: 3)")
    parser.add_argument("--max-attempts", type=int, help="Attempts per chart for render/storage failures (default: 1)")
    parser.add_argument("--item-timeout", type=float, help="Seconds allowed per chart attempt (default: unlimited)")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to the console")
    return parser


def resolve_capture_settings(args: argparse.Namespace) -> CaptureSettings:
    """Environment settings with command line overrides applied."""
    settings = get_capture_settings()
    overrides = {}
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if args.max_attempts is not None:
        overrides["max_attempts"] = args.max_attempts
    if args.item_timeout is not None:
        overrides["item_timeout_seconds"] = args.item_timeout
    if not overrides:
        return settings
    return dataclasses.replace(settings, **overrides)


def exit_status(summary: CaptureRunSummary) -> int:
    if summary.fatal_error is not None:
        return EXIT_FATAL
    if summary.total_failed:
        return EXIT_CHART_FAILURES
    return EXIT_OK


def write_report(path: Path, summary: CaptureRunSummary) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(summary.to_dict(), option=orjson.OPT_INDENT_2))
    logger.info("Wrote run report to %s", path)


def _install_cancel_handlers(cancellation: CancellationToken) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, _request_cancel, cancellation, signum)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handler for %s unavailable on this platform", signum)


def _request_cancel(cancellation: CancellationToken, signum: int) -> None:
    logger.warning("Received %s; finishing in-flight charts before stopping", signal.Signals(signum).name)
    cancellation.set()


async def run_capture(args: argparse.Namespace, settings: CaptureSettings) -> CaptureRunSummary:
    backend_settings = get_backend_settings()
    cancellation = CancellationToken()
    _install_cancel_handlers(cancellation)

    async with BackendClient(backend_settings) as client:
        runner = create_site_runner(
            client,
            args.site,
            storage_bucket=backend_settings.storage_bucket,
            observer=LoggingCaptureObserver(),
            settings=settings,
            cancellation=cancellation,
            output_dir=args.output_dir,
        )
        return await runner.start(args.site)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(SERVICE_NAME, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = resolve_capture_settings(args)
        summary = asyncio.run(run_capture(args, settings))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_FATAL

    if args.report is not None:
        write_report(args.report, summary)
    if summary.fatal_error is not None:
        logger.error("Capture for site %s aborted: %s", args.site, summary.fatal_error)
    return exit_status(summary)


if __name__ == "__main__":
    sys.exit(main())
