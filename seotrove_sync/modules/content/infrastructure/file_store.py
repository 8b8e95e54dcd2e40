"""Local filesystem store for generated content."""

import asyncio
import re
from pathlib import Path

_UNSAFE_CHARS_RE = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RE = re.compile(r"\s+")


class LocalFileStore:
    """Write content files under the local filesystem.

    Blocking calls run in the default executor so a sync yields to other
    sources while it writes.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def ensure_directory(self, path: Path) -> None:
        await self._run(self._mkdir, Path(path))

    async def write_file(self, path: Path, content: str) -> None:
        path = Path(path)
        await self.ensure_directory(path.parent)
        await self._run(self._write_text, path, content)

    async def exists(self, path: Path) -> bool:
        return await self._run(Path(path).exists)

    @staticmethod
    def sanitize_file_name(file_name: str) -> str:
        """Replace characters that are invalid in file names, lowercase, cap at 100."""
        cleaned = _UNSAFE_CHARS_RE.sub("-", file_name)
        cleaned = _WHITESPACE_RE.sub("-", cleaned)
        return cleaned.lower()[:100]

    @staticmethod
    def _mkdir(path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def _write_text(self, path: Path, content: str) -> None:
        path.write_text(content, encoding=self.encoding)

    @staticmethod
    async def _run(func, *args):
        return await asyncio.get_running_loop().run_in_executor(None, func, *args)
