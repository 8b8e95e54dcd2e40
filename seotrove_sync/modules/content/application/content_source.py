"""内容源同步服务。

ContentSource 负责单个站点的抓取、合并、写入流程，以及首次同步状态：

- 首次同步：并发抓取新内容和历史已发布内容并合并；合并失败时退回只抓新内容
- 之后的同步：只抓新内容
- 写入阶段逐项隔离，单个文件失败不影响其余文件
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path, PurePosixPath
from typing import Any

from loguru import logger

from seotrove_sync.core.config import settings
from seotrove_sync.core.infrastructure.logging import BusinessEvents
from seotrove_sync.modules.content.domain.entities import (
    ContentBundle,
    ContentPage,
    SourceConfig,
    SourceConfigUpdate,
    SyncOutcome,
)
from seotrove_sync.modules.content.domain.exceptions import ContentFetchError
from seotrove_sync.modules.content.domain.page_path import (
    ROBOTS_FILE_NAME,
    SITEMAP_FILE_NAME,
    page_file_path,
)
from seotrove_sync.modules.content.domain.ports import ContentApi, FileStore
from seotrove_sync.modules.content.infrastructure import (
    HttpContentApiClient,
    LocalFileStore,
)


class ContentSource:
    """One remote content origin and its sync state.

    职责：
    - 调用内容 API 获取新内容 / 历史已发布内容
    - 合并部分失败的抓取结果
    - 把 sitemap、robots.txt 和页面写入目标目录
    - 维护首次同步标记

    ``first_sync_fallback`` only matters when ``fetch_all`` itself raises.
    ``fetch_all`` already turns a failed branch into an empty bundle, so with
    the built-in fetch path both modes behave the same; the flag decides what
    happens when a subclass or replaced ``fetch_all`` lets an error through.
    """

    def __init__(
        self,
        config: SourceConfig,
        *,
        api: ContentApi | None = None,
        file_store: FileStore | None = None,
        first_sync_fallback: bool | None = None,
        skip_if_in_flight: bool | None = None,
    ) -> None:
        self._config = config
        self.api: ContentApi = api or HttpContentApiClient()
        self.file_store: FileStore = file_store or LocalFileStore()
        self.first_sync_fallback = (
            settings.FIRST_SYNC_FALLBACK_ENABLED
            if first_sync_fallback is None
            else first_sync_fallback
        )
        self.skip_if_in_flight = (
            settings.SYNC_SKIP_IF_IN_FLIGHT
            if skip_if_in_flight is None
            else skip_if_in_flight
        )
        self._first_sync_pending = True
        self._active_syncs = 0

    @property
    def config(self) -> SourceConfig:
        return self._config

    @property
    def domain(self) -> str:
        return self._config.domain

    @property
    def is_syncing(self) -> bool:
        return self._active_syncs > 0

    def update_config(
        self, changes: SourceConfig | SourceConfigUpdate | Mapping[str, Any]
    ) -> SourceConfig:
        """Overlay the provided fields onto the current config."""
        self._config = self._config.merge(changes)
        return self._config

    def is_first_sync_pending(self) -> bool:
        return self._first_sync_pending

    def reset_first_sync(self) -> None:
        """Make the next sync pull previously-published content again."""
        self._first_sync_pending = True
        logger.info(f"[{self.domain}] First sync reset")

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def fetch_new(self) -> ContentBundle:
        return await self._fetch("new", self.api.fetch_new)

    async def fetch_previously_published(self) -> ContentBundle:
        return await self._fetch(
            "previously_published", self.api.fetch_previously_published
        )

    async def fetch_all(self) -> ContentBundle:
        """Fetch new and previously-published content concurrently and merge.

        A branch that fails contributes an empty bundle.
        """
        new_result, previous_result = await asyncio.gather(
            self.fetch_new(),
            self.fetch_previously_published(),
            return_exceptions=True,
        )
        new = self._bundle_or_empty("new", new_result)
        previous = self._bundle_or_empty("previously_published", previous_result)

        merged = ContentBundle.merge(previous, new)
        logger.info(
            f"[{self.domain}] Merged content: {len(previous.pages)} previously "
            f"published + {len(new.pages)} new pages"
        )
        return merged

    async def _fetch(
        self,
        variant: str,
        fetch: Callable[[SourceConfig], Awaitable[ContentBundle]],
    ) -> ContentBundle:
        config = self._config
        try:
            bundle = await fetch(config)
        except ContentFetchError as exc:
            BusinessEvents.content_fetch_failed(
                domain=config.domain,
                variant=variant,
                error=exc.message,
                status_code=exc.status_code,
            )
            raise
        BusinessEvents.content_fetched(
            domain=config.domain,
            variant=variant,
            pages=len(bundle.pages),
        )
        return bundle

    def _bundle_or_empty(self, variant: str, result: object) -> ContentBundle:
        if isinstance(result, ContentBundle):
            return result
        if isinstance(result, Exception):
            logger.warning(
                f"[{self.domain}] Fetching {variant} content failed, "
                f"treating as empty: {result}"
            )
            return ContentBundle.empty()
        if isinstance(result, BaseException):
            raise result
        raise TypeError(f"Unexpected fetch result: {result!r}")

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def write_bundle(
        self,
        bundle: ContentBundle,
        *,
        started_at: float | None = None,
    ) -> SyncOutcome:
        """Write sitemap, robots.txt and pages, one isolated attempt each.

        Args:
            bundle: content to write
            started_at: ``time.monotonic()`` value the reported duration is
                measured from; defaults to the start of this call
        """
        if started_at is None:
            started_at = time.monotonic()

        files_created: list[str] = []
        errors: list[str] = []

        try:
            await self._write_items(bundle, files_created, errors)
        except Exception as exc:
            message = f"Failed to create files: {exc}"
            logger.exception(f"[{self.domain}] {message}")
            BusinessEvents.content_write_failed(
                domain=self.domain, item="files", error=message
            )
            errors.append(message)
            return SyncOutcome.write_aborted(
                message, files_created, errors, self._elapsed_ms(started_at)
            )

        duration_ms = self._elapsed_ms(started_at)
        logger.info(
            f"[{self.domain}] File creation completed: {len(files_created)} files "
            f"created, {len(errors)} errors, {duration_ms}ms"
        )
        return SyncOutcome.from_writes(files_created, errors, duration_ms)

    async def _write_items(
        self,
        bundle: ContentBundle,
        files_created: list[str],
        errors: list[str],
    ) -> None:
        base_dir = Path(self._config.target_directory).resolve()

        if bundle.sitemap_xml:
            await self._attempt_write(
                base_dir,
                PurePosixPath(SITEMAP_FILE_NAME),
                bundle.sitemap_xml,
                SITEMAP_FILE_NAME,
                files_created,
                errors,
            )

        if bundle.robot_txt:
            await self._attempt_write(
                base_dir,
                PurePosixPath(ROBOTS_FILE_NAME),
                bundle.robot_txt,
                ROBOTS_FILE_NAME,
                files_created,
                errors,
            )

        for page in bundle.pages:
            await self._attempt_page_write(base_dir, page, files_created, errors)

    async def _attempt_write(
        self,
        base_dir: Path,
        relative: PurePosixPath,
        content: str,
        label: str,
        files_created: list[str],
        errors: list[str],
    ) -> None:
        try:
            await self.file_store.write_file(base_dir.joinpath(*relative.parts), content)
        except Exception as exc:
            self._record_write_error(f"Failed to create {label}: {exc}", label, errors)
            return
        files_created.append(relative.as_posix())
        logger.info(f"[{self.domain}] Created {relative.as_posix()}")

    async def _attempt_page_write(
        self,
        base_dir: Path,
        page: ContentPage,
        files_created: list[str],
        errors: list[str],
    ) -> None:
        label = f"page {page.url_path}"
        if page.title:
            label = f"page {page.title} ({page.url_path})"
        try:
            relative = page_file_path(page.url_path)
            target = base_dir.joinpath(*relative.parts)
            await self.file_store.ensure_directory(target.parent)
            await self.file_store.write_file(target, page.html)
        except Exception as exc:
            self._record_write_error(f"Failed to create {label}: {exc}", label, errors)
            return
        files_created.append(relative.as_posix())
        logger.info(f"[{self.domain}] Created page: {relative.as_posix()}")

    def _record_write_error(self, message: str, item: str, errors: list[str]) -> None:
        errors.append(message)
        logger.error(f"[{self.domain}] {message}")
        BusinessEvents.content_write_failed(domain=self.domain, item=item, error=message)

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    async def sync(self) -> SyncOutcome:
        """Fetch according to the first-sync state and write the result.

        Never raises for fetch failures; they come back as a failed outcome.
        """
        return await self._run_pipeline("sync", self._fetch_for_sync)

    async def sync_new(self) -> SyncOutcome:
        """Fetch only new content and write it. First-sync state is untouched."""
        return await self._run_pipeline("new", self.fetch_new)

    async def sync_previously_published(self) -> SyncOutcome:
        return await self._run_pipeline(
            "previously_published", self.fetch_previously_published
        )

    async def sync_all(self) -> SyncOutcome:
        """Fetch merged content and write it. First-sync state is untouched."""
        return await self._run_pipeline("all", self.fetch_all)

    async def _fetch_for_sync(self) -> ContentBundle:
        if not self._first_sync_pending:
            return await self.fetch_new()

        try:
            try:
                return await self.fetch_all()
            except Exception as exc:
                if not self.first_sync_fallback:
                    if isinstance(exc, ContentFetchError):
                        raise
                    raise ContentFetchError(f"Merged fetch failed: {exc}") from exc
                logger.warning(
                    f"[{self.domain}] Merged fetch failed, falling back to new "
                    f"content only: {exc}"
                )
                return await self.fetch_new()
        finally:
            self._first_sync_pending = False

    async def _run_pipeline(
        self,
        trigger: str,
        fetch: Callable[[], Awaitable[ContentBundle]],
    ) -> SyncOutcome:
        started_at = time.monotonic()

        if self._active_syncs and self.skip_if_in_flight:
            logger.warning(f"[{self.domain}] Sync already in progress, skipping")
            BusinessEvents.content_sync_skipped(
                domain=self.domain, reason="in_flight", trigger=trigger
            )
            return SyncOutcome.skipped_in_flight(self._elapsed_ms(started_at))

        self._active_syncs += 1
        try:
            logger.info(f"[{self.domain}] Starting content sync ({trigger})...")
            try:
                bundle = await fetch()
            except ContentFetchError as exc:
                outcome = self._fetch_failed(exc.message, started_at)
            except Exception as exc:
                logger.exception(f"[{self.domain}] Unexpected fetch error: {exc}")
                outcome = self._fetch_failed(str(exc), started_at)
            else:
                outcome = await self.write_bundle(bundle, started_at=started_at)
        finally:
            self._active_syncs -= 1

        logger.info(f"[{self.domain}] Sync completed: {outcome.message}")
        BusinessEvents.content_sync_completed(
            domain=self.domain,
            success=outcome.success,
            files_created=len(outcome.files_created),
            error_count=outcome.error_count,
            duration_ms=outcome.duration_ms,
            trigger=trigger,
        )
        return outcome

    def _fetch_failed(self, reason: str, started_at: float) -> SyncOutcome:
        duration_ms = self._elapsed_ms(started_at)
        message = f"Content sync failed: {reason}"
        logger.error(f"[{self.domain}] {message} ({duration_ms}ms)")
        return SyncOutcome.failed(message, duration_ms)

    @staticmethod
    def _elapsed_ms(started_at: float) -> int:
        return int((time.monotonic() - started_at) * 1000)
