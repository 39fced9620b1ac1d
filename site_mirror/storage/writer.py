# site_mirror/storage/writer.py
"""
Mirror writer: persists fetched content under the mirror root.
"""
from __future__ import annotations

import shutil
from pathlib import Path
from typing import BinaryIO, Union

from site_mirror.errors import PersistError
from site_mirror.storage.paths import local_path

Content = Union[bytes, bytearray, BinaryIO]


class MirrorWriter:
    """Writes one file per URL below *root*, creating directories as needed."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def destination(self, rel_path: str) -> Path:
        return self.root.joinpath(*rel_path.split("/"))

    def save(self, url: str, content: Content, is_markup: bool) -> str:
        """
        Write *content* for *url* and return its path relative to the root.

        The returned path is exactly ``local_path(url, is_markup)``.
        Raises PersistError on any filesystem failure.
        """
        rel_path = local_path(url, is_markup)
        target = self.destination(rel_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as fh:
                if isinstance(content, (bytes, bytearray)):
                    fh.write(content)
                else:
                    shutil.copyfileobj(content, fh)
        except OSError as exc:
            raise PersistError(url, str(target), exc.strerror or str(exc)) from exc
        return rel_path
