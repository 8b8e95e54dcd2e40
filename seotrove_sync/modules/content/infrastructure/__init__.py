"""内容同步基础设施模块。"""

from seotrove_sync.modules.content.infrastructure.api_client import (
    EMPTY_CONTENT_MESSAGE,
    HttpContentApiClient,
)
from seotrove_sync.modules.content.infrastructure.file_store import LocalFileStore
from seotrove_sync.modules.content.infrastructure.timer import PeriodicTimer

__all__ = [
    "EMPTY_CONTENT_MESSAGE",
    "HttpContentApiClient",
    "LocalFileStore",
    "PeriodicTimer",
]
