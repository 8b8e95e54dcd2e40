"""内容领域对象单元测试。

测试覆盖：
- SourceConfig 合并更新
- ContentBundle 解析与合并规则
- SyncOutcome 消息
- 页面路径推导
"""

from pathlib import Path, PurePosixPath

import pytest

from seotrove_sync.modules.content.domain.entities import (
    ContentBundle,
    ContentPage,
    SourceConfig,
    SourceConfigUpdate,
    SyncOutcome,
)
from seotrove_sync.modules.content.domain.exceptions import ContentWriteError
from seotrove_sync.modules.content.domain.page_path import page_file_path


class TestSourceConfigMerge:
    """SourceConfig 合并测试。"""

    @pytest.fixture
    def config(self) -> SourceConfig:
        return SourceConfig(
            domain="example.com",
            install_id="install-1",
            target_directory=Path("public"),
        )

    def test_partial_update_keeps_other_fields(self, config: SourceConfig):
        merged = config.merge(SourceConfigUpdate(target_directory=Path("static")))

        assert merged.target_directory == Path("static")
        assert merged.domain == "example.com"
        assert merged.install_id == "install-1"

    def test_mapping_update_accepts_wire_names(self, config: SourceConfig):
        merged = config.merge({"installId": "install-2", "targetDirectory": "dist"})

        assert merged.install_id == "install-2"
        assert merged.target_directory == Path("dist")
        assert merged.domain == "example.com"

    def test_mapping_update_ignores_unknown_keys(self, config: SourceConfig):
        merged = config.merge({"colour": "blue", "domain": "example.org"})

        assert merged.domain == "example.org"
        assert not hasattr(merged, "colour")

    def test_full_config_replaces_every_field(self, config: SourceConfig):
        other = SourceConfig(
            domain="example.org",
            install_id="install-9",
            target_directory=Path("www"),
        )

        assert config.merge(other) == other

    def test_merge_returns_new_config(self, config: SourceConfig):
        config.merge(SourceConfigUpdate(domain="example.org"))

        assert config.domain == "example.com"

    def test_wire_aliases_on_construction(self):
        config = SourceConfig.model_validate(
            {
                "domain": "example.com",
                "installId": "abc",
                "targetDirectory": "public",
            }
        )

        assert config.install_id == "abc"
        assert config.target_directory == Path("public")


class TestContentBundle:
    """ContentBundle 测试。"""

    def test_parse_api_payload(self):
        bundle = ContentBundle.model_validate(
            {
                "sitemapXml": "<urlset/>",
                "robotTxt": "User-agent: *",
                "pages": [
                    {"urlPath": "/a", "title": "A", "html": "<p>a</p>"},
                    {"urlPath": "/b", "title": "B", "html": "<p>b</p>"},
                ],
            }
        )

        assert bundle.sitemap_xml == "<urlset/>"
        assert bundle.robot_txt == "User-agent: *"
        assert [page.url_path for page in bundle.pages] == ["/a", "/b"]

    def test_missing_and_null_fields_are_empty(self):
        bundle = ContentBundle.model_validate({"sitemapXml": None, "pages": None})

        assert bundle.sitemap_xml == ""
        assert bundle.robot_txt == ""
        assert bundle.pages == ()
        assert bundle.is_empty is True

    def test_merge_prefers_new_text_and_orders_previous_pages_first(self):
        previous = ContentBundle(
            sitemap_xml="<old/>",
            robot_txt="old robots",
            pages=(ContentPage(url_path="/old", title="Old", html=""),),
        )
        new = ContentBundle(
            sitemap_xml="<new/>",
            robot_txt="",
            pages=(ContentPage(url_path="/new", title="New", html=""),),
        )

        merged = ContentBundle.merge(previous, new)

        assert merged.sitemap_xml == "<new/>"
        assert merged.robot_txt == "old robots"
        assert [page.url_path for page in merged.pages] == ["/old", "/new"]

    def test_merge_of_empty_bundles_is_empty(self):
        merged = ContentBundle.merge(ContentBundle.empty(), ContentBundle.empty())

        assert merged.is_empty is True


class TestSyncOutcome:
    """SyncOutcome 测试。"""

    def test_success_message_has_counts_and_duration(self):
        outcome = SyncOutcome.from_writes(["sitemap.xml", "a.html"], [], 12)

        assert outcome.success is True
        assert outcome.errors is None
        assert "2 files" in outcome.message
        assert "0 errors" in outcome.message
        assert "12ms" in outcome.message

    def test_partial_failure(self):
        outcome = SyncOutcome.from_writes(["sitemap.xml"], ["Failed to create page X"], 5)

        assert outcome.success is False
        assert outcome.errors == ["Failed to create page X"]
        assert outcome.error_count == 1
        assert "1 files with 1 errors in 5ms" in outcome.message

    def test_failed_outcome(self):
        outcome = SyncOutcome.failed("Content sync failed: boom", 3)

        assert outcome.success is False
        assert outcome.files_created == []
        assert outcome.errors == ["Content sync failed: boom"]

    def test_skipped_outcome_has_no_writes(self):
        outcome = SyncOutcome.skipped_in_flight()

        assert outcome.skipped is True
        assert outcome.success is True
        assert outcome.files_created == []
        assert outcome.errors is None


class TestPageFilePath:
    """页面路径推导测试。"""

    @pytest.mark.parametrize(
        ("url_path", "expected"),
        [
            ("/about", "about.html"),
            ("about", "about.html"),
            ("/about.html", "about.html"),
            ("/legacy.HTM", "legacy.HTM"),
            ("/blog/post-1", "blog/post-1.html"),
            ("/blog/", "blog/index.html"),
            ("/", "index.html"),
            ("", "index.html"),
            ("/v1.2/notes", "v1.2/notes.html"),
        ],
    )
    def test_policy(self, url_path: str, expected: str):
        assert page_file_path(url_path) == PurePosixPath(expected)

    def test_parent_segments_are_rejected(self):
        with pytest.raises(ContentWriteError, match="escapes the target directory"):
            page_file_path("/../etc/passwd")
