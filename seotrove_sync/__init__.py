"""Periodically publish SEOTrove generated content into a local directory."""

from seotrove_sync.core.domain.exceptions import (
    ConfigurationError,
    DomainException,
    EntityNotFoundError,
)
from seotrove_sync.modules.content.application.content_source import ContentSource
from seotrove_sync.modules.content.application.scheduler import ContentScheduler
from seotrove_sync.modules.content.domain.entities import (
    ContentBundle,
    ContentPage,
    SourceConfig,
    SourceConfigUpdate,
    SyncOutcome,
)
from seotrove_sync.modules.content.domain.exceptions import (
    ContentFetchError,
    ContentWriteError,
    SchedulerConfigurationError,
    SourceNotFoundError,
)
from seotrove_sync.modules.content.domain.ports import ContentApi, FileStore
from seotrove_sync.modules.content.infrastructure import (
    HttpContentApiClient,
    LocalFileStore,
    PeriodicTimer,
)

__all__ = [
    "ConfigurationError",
    "ContentApi",
    "ContentBundle",
    "ContentFetchError",
    "ContentPage",
    "ContentScheduler",
    "ContentSource",
    "ContentWriteError",
    "DomainException",
    "EntityNotFoundError",
    "FileStore",
    "HttpContentApiClient",
    "LocalFileStore",
    "PeriodicTimer",
    "SchedulerConfigurationError",
    "SourceConfig",
    "SourceConfigUpdate",
    "SourceNotFoundError",
    "SyncOutcome",
]
