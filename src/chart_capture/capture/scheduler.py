"""Batch scheduler: meters in fixed-size concurrent batches, items in order."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from ..backend import ArtifactStore
from ..chart_data import ChartDataAssembler
from ..config.settings import CaptureSettings, get_capture_settings
from ..data_models import CaptureQueueItem, CaptureRunSummary, CaptureStatus, MeterCaptureResult, MeterGroup
from .capture_log import CaptureLogger
from .grouping import group_by_meter, partition_batches
from .item_processor import ChartItemProcessor, ChartRenderFn
from .observer import CaptureObserver, NullCaptureObserver, ObserverNotifier
from .result_aggregator import ResultAggregator
from .tokens import CancellationToken, PauseToken

logger = logging.getLogger(__name__)

METER_COMPLETE_KEY = "meter_complete"


def batch_label(meter_index: int, total_meters: int, item_index: int, items_in_meter: int) -> str:
    return f"Meter {meter_index + 1}/{total_meters} - Chart {item_index + 1}/{items_in_meter}"


def fatal_summary(error: BaseException, notifier: ObserverNotifier, log: Optional[CaptureLogger] = None) -> CaptureRunSummary:
    """Report an aborted run once with zero totals."""
    entries = log.snapshot() if log is not None else ()
    notifier.complete(0, 0, False, entries, ())
    return CaptureRunSummary(
        total_success=0,
        total_failed=0,
        was_cancelled=False,
        log=entries,
        meter_results=(),
        fatal_error=str(error) or type(error).__name__,
    )


class _RunState:
    def __init__(self, notifier: ObserverNotifier, total_meters: int, charts_per_meter: int):
        self.log = CaptureLogger(notifier)
        self.results = ResultAggregator()
        self.total_meters = total_meters
        self.overall_total = total_meters * charts_per_meter


class BatchScheduler:
    """
    Drives one capture run over a prepared queue.

    Meter groups are processed ``batch_size`` at a time with ``asyncio.gather``;
    the next batch starts only after every meter of the current one has
    finished. The cancellation and pause tokens are owned by the caller and
    may be flipped at any time while ``run`` is awaiting.
    """

    def __init__(
        self,
        *,
        assembler: ChartDataAssembler,
        renderer: ChartRenderFn,
        artifact_store: ArtifactStore,
        observer: Optional[CaptureObserver] = None,
        settings: Optional[CaptureSettings] = None,
        cancellation: Optional[CancellationToken] = None,
        pause: Optional[PauseToken] = None,
    ):
        self.settings = settings or get_capture_settings()
        self.cancellation = cancellation or CancellationToken()
        self.pause = pause or PauseToken()
        self.notifier = ObserverNotifier(observer or NullCaptureObserver())
        self._assembler = assembler
        self._renderer = renderer
        self._artifact_store = artifact_store

    async def run(self, site_id: str, queue: Sequence[CaptureQueueItem]) -> CaptureRunSummary:
        """
        Capture every chart in ``queue`` and report the totals.

        Args:
            site_id: Site whose charts are being captured
            queue: Items in meter order, as built by CaptureQueueBuilder

        Returns:
            CaptureRunSummary; ``fatal_error`` is set with zero totals when an
            observer callback failed and aborted the run
        """
        groups = group_by_meter(queue)
        batches = partition_batches(groups, self.settings.batch_size)
        state = _RunState(self.notifier, len(groups), self.settings.charts_per_meter)
        processor = ChartItemProcessor(
            site_id=site_id,
            assembler=self._assembler,
            renderer=self._renderer,
            artifact_store=self._artifact_store,
            capture_logger=state.log,
            settings=self.settings,
            stop_requested=self._stop_requested,
        )
        logger.info(
            "Capturing %d charts for site %s: %d meters in %d batches of up to %d",
            len(queue),
            site_id,
            len(groups),
            len(batches),
            self.settings.batch_size,
        )

        try:
            await self._run_batches(batches, processor, state)
        except Exception as exc:  # observer failures escape the meter routines and abort the run
            logger.exception("Capture run for site %s aborted", site_id)
            return fatal_summary(exc, self.notifier, state.log)

        was_cancelled = self.cancellation.is_set()
        summary = CaptureRunSummary(
            total_success=state.results.total_success,
            total_failed=state.results.total_failed,
            was_cancelled=was_cancelled,
            log=state.log.snapshot(),
            meter_results=state.results.results,
        )
        self.notifier.complete(
            summary.total_success,
            summary.total_failed,
            summary.was_cancelled,
            summary.log,
            summary.meter_results,
        )
        return summary

    async def _run_batches(
        self,
        batches: List[List[MeterGroup]],
        processor: ChartItemProcessor,
        state: _RunState,
    ) -> None:
        batch_size = self.settings.batch_size
        for batch_index, batch in enumerate(batches):
            if self.cancellation.is_set():
                logger.info("Cancellation observed; skipping %d remaining batches", len(batches) - batch_index)
                return
            logger.debug("Starting batch %d/%d with %d meters", batch_index + 1, len(batches), len(batch))
            outcomes = await asyncio.gather(
                *(
                    self._process_meter(group, batch_index * batch_size + offset, processor, state)
                    for offset, group in enumerate(batch)
                ),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome

    async def _process_meter(
        self,
        group: MeterGroup,
        meter_index: int,
        processor: ChartItemProcessor,
        state: _RunState,
    ) -> MeterCaptureResult:
        meter = group.meter
        started = time.monotonic()
        successful = 0
        failed_metrics: List[str] = []

        for item_index, item in enumerate(group.items):
            if self.cancellation.is_set():
                break
            await self._wait_while_paused()
            if self.cancellation.is_set():
                break

            current = min(meter_index * self.settings.charts_per_meter + item_index + 1, state.overall_total)
            self.notifier.progress(
                current,
                state.overall_total,
                meter.meter_number,
                item.metric_info.title,
                batch_label(meter_index, state.total_meters, item_index, len(group.items)),
            )
            await state.log.record(
                meter.meter_number,
                item.metric_key,
                item.metric_info.title,
                CaptureStatus.PENDING,
                meter_index=meter_index,
                total_meters=state.total_meters,
            )

            outcome = await processor.process(item, meter_index, state.total_meters)
            if outcome.success:
                successful += 1
            else:
                failed_metrics.append(item.metric_info.title)

        attempted = successful + len(failed_metrics)
        result = MeterCaptureResult(
            meter_number=meter.meter_number,
            meter_id=meter.id,
            charts_attempted=attempted,
            charts_successful=successful,
            charts_failed=len(failed_metrics),
            failed_metrics=tuple(failed_metrics),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        await state.log.record(
            meter.meter_number,
            METER_COMPLETE_KEY,
            f"{successful}/{attempted} charts captured",
            CaptureStatus.METER_COMPLETE,
            error=", ".join(failed_metrics) or None,
            duration_ms=result.duration_ms,
            meter_index=meter_index,
            total_meters=state.total_meters,
        )
        self.notifier.meter_complete(result)
        await state.results.add(result)
        return result

    async def _stop_requested(self) -> bool:
        await self._wait_while_paused()
        return self.cancellation.is_set()

    async def _wait_while_paused(self) -> None:
        if not self.pause.is_set() or self.cancellation.is_set():
            return
        self.notifier.pause_state_change(True)
        while self.pause.is_set() and not self.cancellation.is_set():
            await asyncio.sleep(self.settings.pause_poll_seconds)
        self.notifier.pause_state_change(False)


__all__ = ["BatchScheduler", "METER_COMPLETE_KEY", "batch_label", "fatal_summary"]
