"""Content sync scheduler.

Keeps a registry of named content sources and one repeating timer per
armed source. Supports two construction modes:

- multi-source: ``ContentScheduler()`` then ``add_source(...)`` per site
- legacy single-source: ``ContentScheduler(source, "default")`` which lets
  ``start()`` / ``stop()`` be called without an id
"""

import asyncio
from collections.abc import Mapping
from functools import partial
from typing import Any

from loguru import logger

from seotrove_sync.core.config import settings
from seotrove_sync.core.infrastructure.logging import BusinessEvents
from seotrove_sync.modules.content.application.content_source import ContentSource
from seotrove_sync.modules.content.domain.entities import SourceConfig, SyncOutcome
from seotrove_sync.modules.content.domain.exceptions import (
    SchedulerConfigurationError,
    SourceNotFoundError,
)
from seotrove_sync.modules.content.domain.ports import ContentApi, FileStore
from seotrove_sync.modules.content.infrastructure import PeriodicTimer


async def _run_guarded_sync(source_id: str, source: ContentSource, trigger: str) -> None:
    """Run one sync for a scheduled trigger; never raises."""
    logger.info(f"[ContentScheduler] {trigger} sync triggered: {source_id}")
    try:
        outcome = await source.sync()
    except Exception as exc:
        logger.exception(f"[ContentScheduler] {trigger} sync failed for {source_id}: {exc}")
        BusinessEvents.scheduled_sync_failed(
            source_id=source_id, trigger=trigger, error=str(exc)
        )
        return

    if not outcome.success:
        logger.warning(
            f"[ContentScheduler] {trigger} sync for {source_id} reported errors: "
            f"{outcome.message}"
        )


class ContentScheduler:
    """Registry of content sources with per-source 24 hour schedules."""

    def __init__(
        self,
        source: ContentSource | None = None,
        source_id: str | None = None,
        *,
        api: ContentApi | None = None,
        file_store: FileStore | None = None,
        interval_sec: float | None = None,
    ) -> None:
        self._sources: dict[str, ContentSource] = {}
        self._schedules: dict[str, PeriodicTimer] = {}
        self.api = api
        self.file_store = file_store
        self.interval_sec = interval_sec or settings.SYNC_INTERVAL_SEC

        self._legacy_id: str | None = None
        if source is not None and source_id:
            self._legacy_id = source_id
            self._sources[source_id] = source
        elif source is not None or source_id:
            logger.warning(
                "[ContentScheduler] Legacy mode needs both a source and an id; "
                "starting in multi-source mode"
            )

    @property
    def is_legacy_mode(self) -> bool:
        return self._legacy_id is not None

    @property
    def default_source_id(self) -> str | None:
        return self._legacy_id

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add_source(
        self, source_id: str, config: SourceConfig | Mapping[str, Any]
    ) -> ContentSource:
        """Register a source, or update the config of an existing one.

        Updating keeps the source's first-sync state and its schedule.
        """
        existing = self._sources.get(source_id)
        if existing is not None:
            logger.info(
                f"[ContentScheduler] Source {source_id} already exists, updating config"
            )
            existing.update_config(config)
            return existing

        if not isinstance(config, SourceConfig):
            config = SourceConfig.model_validate(config)
        source = ContentSource(config, api=self.api, file_store=self.file_store)
        self._sources[source_id] = source
        logger.info(f"[ContentScheduler] Added source: {source_id}")
        return source

    def remove_source(self, source_id: str) -> None:
        if source_id not in self._sources:
            return
        self.stop(source_id)
        del self._sources[source_id]
        logger.info(f"[ContentScheduler] Removed source: {source_id}")

    def get_source(self, source_id: str) -> ContentSource | None:
        return self._sources.get(source_id)

    def list_sources(self) -> list[str]:
        return list(self._sources)

    def list_schedules(self) -> list[str]:
        return list(self._schedules)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start(self, source_id: str | None = None) -> None:
        """Arm the repeating schedule for a source and run one sync right away.

        Must be called while an event loop is running. Starting an armed
        source is a no-op.

        Raises:
            SchedulerConfigurationError: no id given outside legacy mode, or
                the id is not registered.
        """
        target_id = self._resolve_id(source_id)
        source = self._sources.get(target_id)
        if source is None:
            raise SchedulerConfigurationError(
                f"[ContentScheduler] Source {target_id} not found"
            )

        if target_id in self._schedules:
            logger.info(f"[ContentScheduler] Scheduler {target_id} already running")
            return

        logger.info(
            f"[ContentScheduler] Starting scheduler: {target_id} "
            f"(every {self.interval_sec}s)"
        )
        timer = PeriodicTimer(
            self.interval_sec,
            partial(_run_guarded_sync, target_id, source, "Scheduled"),
            name=target_id,
        )
        timer.start()
        self._schedules[target_id] = timer
        BusinessEvents.schedule_armed(source_id=target_id, interval_sec=self.interval_sec)

        timer.fire_now(partial(_run_guarded_sync, target_id, source, "Initial"))

    def stop(self, source_id: str | None = None) -> None:
        """Disarm a source's schedule. Syncs already running are not interrupted.

        Raises:
            SchedulerConfigurationError: no id given outside legacy mode.
        """
        target_id = self._resolve_id(source_id)
        timer = self._schedules.pop(target_id, None)
        if timer is None:
            return
        timer.cancel()
        logger.info(f"[ContentScheduler] Scheduler {target_id} stopped")
        BusinessEvents.schedule_disarmed(source_id=target_id)

    def start_all(self) -> None:
        for source_id in list(self._sources):
            self.start(source_id)

    def stop_all(self) -> None:
        for source_id in list(self._schedules):
            self.stop(source_id)

    def _resolve_id(self, source_id: str | None) -> str:
        target_id = source_id or self._legacy_id
        if not target_id:
            raise SchedulerConfigurationError(
                "[ContentScheduler] No source id provided and not in legacy mode"
            )
        return target_id

    # ------------------------------------------------------------------
    # Manual sync
    # ------------------------------------------------------------------

    async def sync_one(self, source_id: str) -> SyncOutcome:
        source = self._sources.get(source_id)
        if source is None:
            raise SourceNotFoundError(source_id)
        return await source.sync()

    async def sync_all(self) -> None:
        """Sync every registered source concurrently.

        Failures are logged per source; use ``sync_one`` for outcomes.
        """
        await asyncio.gather(
            *(
                _run_guarded_sync(source_id, source, "Manual")
                for source_id, source in list(self._sources.items())
            )
        )
