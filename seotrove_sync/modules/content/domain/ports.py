"""Ports used by content sources.

Application services depend on these protocols only; the httpx client and
the local filesystem adapter live in the infrastructure package.
"""

from pathlib import Path
from typing import Protocol

from seotrove_sync.modules.content.domain.entities import ContentBundle, SourceConfig


class FileStore(Protocol):
    """Filesystem capability used to materialize content."""

    async def ensure_directory(self, path: Path) -> None:
        """Create the directory and its parents if absent."""
        ...

    async def write_file(self, path: Path, content: str) -> None:
        """Write text content, creating parent directories first."""
        ...

    async def exists(self, path: Path) -> bool: ...


class ContentApi(Protocol):
    """Remote content endpoints.

    Both methods return an empty bundle for the "nothing to publish"
    response and raise ContentFetchError for anything else that fails.
    """

    async def fetch_new(self, config: SourceConfig) -> ContentBundle: ...

    async def fetch_previously_published(
        self, config: SourceConfig
    ) -> ContentBundle: ...
