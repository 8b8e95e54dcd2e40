"""Page file path derivation.

Every page is written as an HTML file: the leading slash is dropped, a
directory-style path gets ``index.html`` and any other path without a
page extension gets ``.html`` appended.
"""

from pathlib import PurePosixPath

from seotrove_sync.modules.content.domain.exceptions import ContentWriteError

SITEMAP_FILE_NAME = "sitemap.xml"
ROBOTS_FILE_NAME = "robots.txt"
INDEX_FILE_NAME = "index.html"
PAGE_EXTENSIONS = frozenset({".html", ".htm"})


def page_file_path(url_path: str) -> PurePosixPath:
    """Map a page ``url_path`` to a file path relative to the target directory.

    >>> page_file_path("/about")
    PurePosixPath('about.html')
    >>> page_file_path("/blog/")
    PurePosixPath('blog/index.html')

    Raises:
        ContentWriteError: the path would leave the target directory.
    """
    raw = url_path.strip().replace("\\", "/")
    path = PurePosixPath(raw.lstrip("/"))

    if ".." in path.parts:
        raise ContentWriteError(url_path, "path escapes the target directory")

    if not path.parts or raw.endswith("/"):
        return path / INDEX_FILE_NAME

    if path.suffix.lower() not in PAGE_EXTENSIONS:
        path = path.with_name(f"{path.name}.html")
    return path
