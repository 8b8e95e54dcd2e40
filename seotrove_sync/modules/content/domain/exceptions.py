"""Content domain exceptions."""

from seotrove_sync.core.domain.exceptions import (
    ConfigurationError,
    DomainException,
    EntityNotFoundError,
)


class ContentFetchError(DomainException):
    """Raised when the content API cannot be reached or answers with an error."""

    error_code = "FETCH_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ContentWriteError(DomainException):
    """Raised when a single content file cannot be written."""

    error_code = "WRITE_ERROR"

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cannot write {path}: {reason}")


class SchedulerConfigurationError(ConfigurationError):
    """Raised when a scheduler call cannot be resolved to a registered source."""


class SourceNotFoundError(EntityNotFoundError):
    """Raised when a content source id is not registered."""

    def __init__(self, source_id: str | None = None):
        super().__init__("Content source", source_id)
