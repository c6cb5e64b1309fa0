"""Run a single queue item through assemble, render and persist."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence, Type, TypeVar

from ..backend import ArtifactStore, BackendError
from ..chart_data import ChartDataAssembler
from ..config.settings import CaptureSettings
from ..data_models import CaptureQueueItem, CaptureStatus, ChartDataPoint
from .capture_log import CaptureLogger
from .exceptions import (
    CaptureItemError,
    DataUnavailableError,
    ObserverNotificationError,
    RenderFailureError,
    StorageFailureError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
ChartRenderFn = Callable[[str, str, Sequence[ChartDataPoint]], bytes]
StopCheck = Callable[[], Awaitable[bool]]

CANCELLED_MESSAGE = "Capture cancelled before retry"


@dataclass(frozen=True)
class ItemOutcome:
    success: bool
    attempts: int
    error: Optional[str] = None


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class ChartItemProcessor:
    """
    Per-item state machine.

    Every attempt logs ``rendering`` then ``capturing``; the item ends with a
    single ``success`` or ``failed`` entry. Render and storage failures are
    retried up to ``settings.max_attempts`` with a ``retrying`` entry between
    attempts. Missing data and unexpected errors are never retried.
    Before each retry ``stop_requested`` is awaited; it blocks while the run
    is paused and returns True once the run is cancelled.
    """

    def __init__(
        self,
        *,
        site_id: str,
        assembler: ChartDataAssembler,
        renderer: ChartRenderFn,
        artifact_store: ArtifactStore,
        capture_logger: CaptureLogger,
        settings: CaptureSettings,
        stop_requested: Optional[StopCheck] = None,
    ):
        self._site_id = site_id
        self._assembler = assembler
        self._renderer = renderer
        self._artifact_store = artifact_store
        self._log = capture_logger
        self._settings = settings
        self._stop_requested = stop_requested

    async def process(self, item: CaptureQueueItem, meter_index: int, total_meters: int) -> ItemOutcome:
        """
        Capture one chart, retrying render and storage failures.

        Args:
            item: Queue item naming the meter, metric and source documents
            meter_index: Zero-based position of the item's meter in the run
            total_meters: Number of meters in the run

        Returns:
            ItemOutcome with the final attempt count and error message

        Raises:
            ObserverNotificationError: If an observer callback fails while logging
        """
        attempt = 1
        started = time.monotonic()
        while True:
            if attempt > 1:
                await asyncio.sleep(self._settings.retry_delay_seconds * (attempt - 1))
                if await self._checkpoint():
                    return await self._fail(item, attempt, meter_index, total_meters, CANCELLED_MESSAGE, started)
            try:
                await self._attempt(item, attempt, meter_index, total_meters)
            except ObserverNotificationError:
                raise
            except CaptureItemError as exc:
                error = str(exc)
                retryable = exc.retryable
            except Exception as exc:  # any other item error stays confined to this item
                logger.exception("Unexpected error capturing %s for meter %s", item.metric_key, item.meter.meter_number)
                error = str(exc) or type(exc).__name__
                retryable = False
            else:
                await self._record(
                    item,
                    CaptureStatus.SUCCESS,
                    attempt,
                    meter_index,
                    total_meters,
                    duration_ms=_elapsed_ms(started),
                )
                return ItemOutcome(success=True, attempts=attempt)

            if retryable and attempt < self._settings.max_attempts:
                attempt += 1
                await self._record(item, CaptureStatus.RETRYING, attempt, meter_index, total_meters, error=error)
                continue
            return await self._fail(item, attempt, meter_index, total_meters, error, started)

    async def _fail(
        self,
        item: CaptureQueueItem,
        attempt: int,
        meter_index: int,
        total_meters: int,
        error: str,
        started: float,
    ) -> ItemOutcome:
        await self._record(
            item,
            CaptureStatus.FAILED,
            attempt,
            meter_index,
            total_meters,
            error=error,
            duration_ms=_elapsed_ms(started),
        )
        return ItemOutcome(success=False, attempts=attempt, error=error)

    async def _checkpoint(self) -> bool:
        if self._stop_requested is None:
            return False
        return await self._stop_requested()

    async def _attempt(self, item: CaptureQueueItem, attempt: int, meter_index: int, total_meters: int) -> None:
        meter = item.meter
        metric = item.metric_info
        deadline = self._deadline()

        await self._record(item, CaptureStatus.RENDERING, attempt, meter_index, total_meters)
        series = await self._bounded(
            self._assembler.assemble(meter, item.documents, item.metric_key),
            deadline,
            DataUnavailableError,
            "Chart data assembly",
        )
        if not series:
            raise DataUnavailableError()

        await self._record(item, CaptureStatus.CAPTURING, attempt, meter_index, total_meters)
        title = f"{meter.meter_number} - {metric.title}"
        image = await self._bounded(
            asyncio.to_thread(self._renderer, title, metric.unit, series),
            deadline,
            RenderFailureError,
            "Chart render",
        )
        if not image:
            raise RenderFailureError()

        try:
            saved = await self._bounded(
                self._artifact_store.save(self._site_id, meter.meter_number, metric.filename, image),
                deadline,
                StorageFailureError,
                "Chart upload",
            )
        except (BackendError, OSError) as exc:
            raise StorageFailureError(f"Failed to save chart to storage: {exc}") from exc
        if not saved:
            raise StorageFailureError()

    def _deadline(self) -> Optional[float]:
        timeout = self._settings.item_timeout_seconds
        if timeout is None:
            return None
        return asyncio.get_running_loop().time() + timeout

    async def _bounded(
        self,
        awaitable: Awaitable[T],
        deadline: Optional[float],
        error_type: Type[CaptureItemError],
        stage: str,
    ) -> T:
        if deadline is None:
            return await awaitable
        remaining = max(deadline - asyncio.get_running_loop().time(), 0.0)
        try:
            return await asyncio.wait_for(awaitable, timeout=remaining)
        except asyncio.TimeoutError as exc:
            raise error_type(f"{stage} timed out after {self._settings.item_timeout_seconds}s") from exc

    async def _record(
        self,
        item: CaptureQueueItem,
        status: CaptureStatus,
        attempt: int,
        meter_index: int,
        total_meters: int,
        *,
        error: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> None:
        await self._log.record(
            item.meter.meter_number,
            item.metric_key,
            item.metric_info.title,
            status,
            attempt=attempt,
            error=error,
            duration_ms=duration_ms,
            meter_index=meter_index,
            total_meters=total_meters,
        )


__all__ = ["ChartItemProcessor", "ChartRenderFn", "ItemOutcome"]
