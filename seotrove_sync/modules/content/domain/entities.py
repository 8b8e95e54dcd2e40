"""Content domain entities."""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceConfig(BaseModel):
    """One remote content origin and where its files are written."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    domain: str = Field(..., description="站点域名，用于 API 路由和日志")
    install_id: str = Field(..., alias="installId", description="安装标识")
    target_directory: Path = Field(
        ..., alias="targetDirectory", description="写入文件的根目录"
    )

    def merge(
        self, changes: "SourceConfig | SourceConfigUpdate | Mapping[str, Any]"
    ) -> Self:
        """Overlay provided fields onto this config, keeping the rest."""
        if isinstance(changes, SourceConfig):
            overrides = changes.model_dump()
        elif isinstance(changes, SourceConfigUpdate):
            overrides = changes.model_dump(exclude_unset=True, exclude_none=True)
        else:
            overrides = _normalize_keys(changes)
        return self.model_copy(update=overrides)


class SourceConfigUpdate(BaseModel):
    """Partial config update; unset fields are left untouched."""

    model_config = ConfigDict(populate_by_name=True)

    domain: str | None = None
    install_id: str | None = Field(default=None, alias="installId")
    target_directory: Path | None = Field(default=None, alias="targetDirectory")


_FIELD_ALIASES = {
    "installId": "install_id",
    "targetDirectory": "target_directory",
}


def _normalize_keys(changes: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in changes.items():
        name = _FIELD_ALIASES.get(key, key)
        if name not in SourceConfig.model_fields:
            continue
        if name == "target_directory" and value is not None:
            value = Path(value)
        normalized[name] = value
    return normalized


class ContentPage(BaseModel):
    """A generated page returned by the content API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url_path: str = Field(..., alias="urlPath", description="页面路径")
    title: str = Field(default="", description="页面标题，仅用于错误信息")
    html: str = Field(default="", description="页面 HTML")


class ContentBundle(BaseModel):
    """Sitemap, robots.txt and pages returned by one fetch."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sitemap_xml: str = Field(default="", alias="sitemapXml")
    robot_txt: str = Field(default="", alias="robotTxt")
    pages: tuple[ContentPage, ...] = Field(default=())

    @field_validator("sitemap_xml", "robot_txt", mode="before")
    @classmethod
    def _none_as_empty_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("pages", mode="before")
    @classmethod
    def _none_as_no_pages(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def is_empty(self) -> bool:
        return not (self.sitemap_xml or self.robot_txt or self.pages)

    @classmethod
    def empty(cls) -> "ContentBundle":
        return cls()

    @classmethod
    def merge(cls, previous: "ContentBundle", new: "ContentBundle") -> "ContentBundle":
        """Combine previously-published and new content.

        Sitemap and robots prefer the new value when it is non-empty.
        Pages keep previously-published ones first, new ones after.
        """
        return cls(
            sitemap_xml=new.sitemap_xml or previous.sitemap_xml,
            robot_txt=new.robot_txt or previous.robot_txt,
            pages=previous.pages + new.pages,
        )


@dataclass
class SyncOutcome:
    """同步结果封装。"""

    success: bool
    message: str
    files_created: list[str]
    errors: list[str] | None = None
    duration_ms: int = 0
    skipped: bool = False

    @property
    def error_count(self) -> int:
        return len(self.errors) if self.errors else 0

    @classmethod
    def from_writes(
        cls,
        files_created: list[str],
        errors: list[str],
        duration_ms: int,
    ) -> "SyncOutcome":
        """创建写入阶段结果。"""
        if errors:
            message = (
                f"Created {len(files_created)} files with {len(errors)} errors "
                f"in {duration_ms}ms"
            )
        else:
            message = (
                f"Successfully created {len(files_created)} files "
                f"with 0 errors in {duration_ms}ms"
            )
        return cls(
            success=not errors,
            message=message,
            files_created=files_created,
            errors=list(errors) if errors else None,
            duration_ms=duration_ms,
        )

    @classmethod
    def failed(cls, error_message: str, duration_ms: int = 0) -> "SyncOutcome":
        """创建失败结果（抓取阶段失败，未写入任何文件）。"""
        return cls(
            success=False,
            message=(
                f"{error_message} (0 files created, 1 errors in {duration_ms}ms)"
            ),
            files_created=[],
            errors=[error_message],
            duration_ms=duration_ms,
        )

    @classmethod
    def write_aborted(
        cls,
        error_message: str,
        files_created: list[str],
        errors: list[str],
        duration_ms: int = 0,
    ) -> "SyncOutcome":
        """创建写入阶段整体中断的结果，保留已写入的文件。"""
        return cls(
            success=False,
            message=(
                f"{error_message} ({len(files_created)} files created, "
                f"{len(errors)} errors in {duration_ms}ms)"
            ),
            files_created=list(files_created),
            errors=list(errors),
            duration_ms=duration_ms,
        )

    @classmethod
    def skipped_in_flight(cls, duration_ms: int = 0) -> "SyncOutcome":
        """创建跳过结果（已有同步在进行）。"""
        return cls(
            success=True,
            message=(
                "Sync skipped: another sync is already in progress "
                f"(0 files created, 0 errors in {duration_ms}ms)"
            ),
            files_created=[],
            duration_ms=duration_ms,
            skipped=True,
        )
