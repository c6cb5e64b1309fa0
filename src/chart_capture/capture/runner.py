"""Site-level entry point: build the queue, then run the scheduler."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from ..backend import (
    BackendClient,
    BackendError,
    LocalArtifactStore,
    SupabaseArtifactStore,
    SupabaseDocumentSource,
    SupabaseMeterDirectory,
    SupabaseReconciliationSource,
)
from ..chart_data import ChartDataAssembler
from ..chart_generator import ChartRenderer
from ..config.settings import CaptureSettings
from ..data_models import CaptureRunSummary
from .observer import CaptureObserver
from .queue_builder import CaptureQueueBuilder
from .scheduler import BatchScheduler, fatal_summary
from .tokens import CancellationToken, PauseToken

logger = logging.getLogger(__name__)


class CaptureRunner:
    def __init__(self, queue_builder: CaptureQueueBuilder, scheduler: BatchScheduler):
        self.queue_builder = queue_builder
        self.scheduler = scheduler

    async def run_site(self, site_id: str) -> CaptureRunSummary:
        """
        Capture every chart for a site.

        A failure while building the queue aborts the run: the observer's
        completion callback fires once with zero totals and the returned
        summary carries ``fatal_error``.

        Args:
            site_id: Site whose schematic meters are captured

        Returns:
            CaptureRunSummary for the run
        """
        try:
            queue = await self.queue_builder.build(site_id)
        except (BackendError, KeyError, ValueError) as exc:
            logger.error("Could not build capture queue for site %s: %s", site_id, exc)
            return fatal_summary(exc, self.scheduler.notifier)
        return await self.scheduler.run(site_id, queue)

    def start(self, site_id: str) -> asyncio.Task[Any]:
        """Schedule ``run_site`` on the running loop so the caller can keep driving the tokens."""
        return asyncio.get_running_loop().create_task(self.run_site(site_id), name=f"chart-capture-{site_id}")


def create_site_runner(
    client: BackendClient,
    site_id: str,
    *,
    storage_bucket: str,
    observer: Optional[CaptureObserver] = None,
    settings: Optional[CaptureSettings] = None,
    cancellation: Optional[CancellationToken] = None,
    pause: Optional[PauseToken] = None,
    output_dir: Optional[Path] = None,
) -> CaptureRunner:
    """Wire the backend adapters for one site into a runner."""
    if output_dir is not None:
        artifact_store = LocalArtifactStore(output_dir)
    else:
        artifact_store = SupabaseArtifactStore(client, storage_bucket)

    scheduler = BatchScheduler(
        assembler=ChartDataAssembler(SupabaseReconciliationSource(client, site_id)),
        renderer=ChartRenderer().render,
        artifact_store=artifact_store,
        observer=observer,
        settings=settings,
        cancellation=cancellation,
        pause=pause,
    )
    queue_builder = CaptureQueueBuilder(SupabaseMeterDirectory(client), SupabaseDocumentSource(client, site_id))
    return CaptureRunner(queue_builder, scheduler)


__all__ = ["CaptureRunner", "create_site_runner"]
