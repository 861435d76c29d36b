"""File sink for generated pages: one flat, served directory."""
from pathlib import Path
from typing import List

from sitesmith.core.errors import NotFoundError, ValidationError


class PublicDirectory:
    """
    Reads and writes generated files under a single directory.

    File names are flat: anything with a path separator or a parent
    reference is rejected.
    """

    def __init__(self, root: Path, url_prefix: str = "/public"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def ensure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, file_name: str) -> Path:
        if not file_name or "/" in file_name or "\\" in file_name or file_name in (".", "..") or ".." in file_name:
            raise ValidationError(f"Invalid file name: {file_name!r}")
        return self.root / file_name

    def write_file(self, file_name: str, content: str) -> str:
        """Write content and return the file's public path."""
        path = self._path(file_name)
        self.ensure()
        path.write_text(content, encoding="utf-8")
        return self.file_path_for(file_name)

    def read_file(self, file_name: str) -> str:
        path = self._path(file_name)
        if not path.is_file():
            raise NotFoundError(f"File not found: {file_name}")
        return path.read_text(encoding="utf-8")

    def list_files(self) -> List[str]:
        self.ensure()
        return sorted(
            str(p.relative_to(self.root)).replace("\\", "/")
            for p in self.root.rglob("*")
            if p.is_file()
        )

    def file_path_for(self, file_name: str) -> str:
        self._path(file_name)
        return f"{self.url_prefix}/{file_name}"

    def url_for(self, file_name: str) -> str:
        return self.file_path_for(file_name)
