"""
Case-Insensitive Resource Resolver

The bundled client references its assets with inconsistent casing
(`/Images/Logo.PNG` vs `images/logo.png`). Lookups are resolved against an
index of lowercased paths built once when the resolver is created, so a
request costs one dict lookup instead of a directory walk.
"""

import logging
import posixpath
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


class CaseInsensitiveResources:
    """
    Maps request paths to files under a resource root, ignoring case.

    Usage:
        resources = CaseInsensitiveResources("./resources")
        path = resources.resolve("/Scripts/App.JS")  # -> .../scripts/app.js
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()
        self._index: Dict[str, Path] = {}
        self._build_index()

    def _build_index(self) -> None:
        """Record every file and directory under root by lowercase path."""
        if not self.root.is_dir():
            logger.warning(f"[StaticFiles] Resource directory missing: {self.root}")
            return

        self._index[""] = self.root
        # Sorted so the first spelling wins when two paths differ only by case
        for path in sorted(self.root.rglob("*")):
            key = path.relative_to(self.root).as_posix().lower()
            self._index.setdefault(key, path)

        logger.info(f"[StaticFiles] Indexed {len(self._index)} paths under {self.root}")

    @staticmethod
    def normalize(request_path: str) -> str:
        """Clean a URL path into an index key ("" is the root)."""
        cleaned = posixpath.normpath("/" + request_path.lstrip("/"))
        # normpath keeps a leading "//"
        return cleaned.lstrip("/").lower()

    def resolve(self, request_path: str) -> Optional[Path]:
        """
        Find the file a request path refers to.

        Directories resolve to their index.html. Returns None when nothing
        matches.
        """
        key = self.normalize(request_path)
        path = self._index.get(key)
        if path is None:
            return None
        if path.is_dir():
            index_key = f"{key}/{INDEX_FILE}" if key else INDEX_FILE
            return self._index.get(index_key)
        return path

    def __len__(self) -> int:
        return len(self._index)
