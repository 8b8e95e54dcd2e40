"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖网络，文件写入使用 tmp_path）

使用方法：
    # 运行所有测试
    uv run pytest

    # 运行带覆盖率
    uv run pytest --cov=seotrove_sync --cov-report=html
"""

import asyncio
from pathlib import Path

import pytest

from seotrove_sync.modules.content.domain.entities import (
    ContentBundle,
    ContentPage,
    SourceConfig,
)
from seotrove_sync.modules.content.infrastructure.file_store import LocalFileStore


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ============================================
# 测试替身
# ============================================


class StubContentApi:
    """In-memory content API.

    ``new`` / ``previous`` may be a bundle or an exception to raise.
    """

    def __init__(
        self,
        new: ContentBundle | BaseException | None = None,
        previous: ContentBundle | BaseException | None = None,
    ) -> None:
        self.new = new if new is not None else ContentBundle.empty()
        self.previous = previous if previous is not None else ContentBundle.empty()
        self.calls: list[str] = []
        self.configs: list[SourceConfig] = []

    async def fetch_new(self, config: SourceConfig) -> ContentBundle:
        self.calls.append("new")
        self.configs.append(config)
        return self._resolve(self.new)

    async def fetch_previously_published(self, config: SourceConfig) -> ContentBundle:
        self.calls.append("previous")
        self.configs.append(config)
        return self._resolve(self.previous)

    @staticmethod
    def _resolve(result: ContentBundle | BaseException) -> ContentBundle:
        if isinstance(result, BaseException):
            raise result
        return result


class BlockingContentApi(StubContentApi):
    """Stub API whose ``fetch_new`` waits until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()
        self.entered = asyncio.Event()

    async def fetch_new(self, config: SourceConfig) -> ContentBundle:
        self.entered.set()
        await self.release.wait()
        return await super().fetch_new(config)


class FailingFileStore(LocalFileStore):
    """Local store that refuses to write the given file names."""

    def __init__(self, fail_on: set[str]) -> None:
        super().__init__()
        self.fail_on = fail_on

    async def write_file(self, path: Path, content: str) -> None:
        if Path(path).name in self.fail_on:
            raise PermissionError(f"Permission denied: '{path}'")
        await super().write_file(path, content)


# ============================================
# 领域对象 Fixtures
# ============================================


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def source_config(target_dir: Path) -> SourceConfig:
    return SourceConfig(
        domain="example.com",
        install_id="install-123",
        target_directory=target_dir,
    )


@pytest.fixture
def about_page() -> ContentPage:
    return ContentPage(url_path="/about", title="About", html="<p>hi</p>")


@pytest.fixture
def sample_bundle(about_page: ContentPage) -> ContentBundle:
    return ContentBundle(
        sitemap_xml="<xml/>",
        robot_txt="",
        pages=(about_page,),
    )


@pytest.fixture
def stub_api() -> StubContentApi:
    return StubContentApi()


@pytest.fixture
def make_api():
    """构造可配置返回值的内容 API 替身：``make_api(new=..., previous=...)``。"""
    return StubContentApi


@pytest.fixture
def blocking_api() -> BlockingContentApi:
    return BlockingContentApi()


@pytest.fixture
def make_failing_store():
    """构造拒绝写入指定文件名的文件存储：``make_failing_store({"a.html"})``。"""
    return FailingFileStore
