"""Tests for the local file store."""

from pathlib import Path

import pytest

from seotrove_sync.modules.content.infrastructure.file_store import LocalFileStore

pytestmark = pytest.mark.anyio


async def test_write_file_creates_parent_directories(tmp_path: Path) -> None:
    store = LocalFileStore()
    target = tmp_path / "a" / "b" / "page.html"

    await store.write_file(target, "<p>héllo</p>")

    assert target.read_text(encoding="utf-8") == "<p>héllo</p>"


async def test_write_file_overwrites(tmp_path: Path) -> None:
    store = LocalFileStore()
    target = tmp_path / "robots.txt"

    await store.write_file(target, "first")
    await store.write_file(target, "second")

    assert target.read_text(encoding="utf-8") == "second"


async def test_ensure_directory_is_idempotent(tmp_path: Path) -> None:
    store = LocalFileStore()
    directory = tmp_path / "nested" / "dir"

    await store.ensure_directory(directory)
    await store.ensure_directory(directory)

    assert directory.is_dir()


async def test_exists(tmp_path: Path) -> None:
    store = LocalFileStore()

    assert await store.exists(tmp_path / "missing.txt") is False

    (tmp_path / "present.txt").write_text("x", encoding="utf-8")
    assert await store.exists(tmp_path / "present.txt") is True


async def test_write_into_file_path_fails(tmp_path: Path) -> None:
    store = LocalFileStore()
    (tmp_path / "blocker").write_text("x", encoding="utf-8")

    with pytest.raises(OSError):
        await store.write_file(tmp_path / "blocker" / "page.html", "<p/>")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("About Us", "about-us"),
        ('a<b>c:d"e', "a-b-c-d-e"),
        ("path/to\\file?*", "path-to-file--"),
        ("Tabs\tand  spaces", "tabs-and-spaces"),
    ],
)
def test_sanitize_file_name(name: str, expected: str) -> None:
    assert LocalFileStore.sanitize_file_name(name) == expected


def test_sanitize_file_name_caps_length() -> None:
    assert len(LocalFileStore.sanitize_file_name("x" * 300)) == 100
