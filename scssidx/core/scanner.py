"""
ImportScanner — Crawls stylesheets along their imports into a SymbolStore.

Starting from seed paths, every reachable file is parsed once and its
table stored under the path it actually resolved to. A file may live
under its partial name (`dir/_name.scss` for `dir/name.scss`); when
neither form exists both cache entries are evicted, which is how deleted
files leave the store.

Usage:
    from scssidx.core.store import SymbolStore
    from scssidx.core.scanner import ImportScanner

    store = SymbolStore()
    scanner = ImportScanner(store, settings)
    scanner.scan(["styles/main.scss"])
"""

import logging
import os
from collections import deque
from typing import Iterable, Optional, Set

from . import fs
from .parsing import TreeSitterExtractor
from .parsing.links import partial_name
from .store import SymbolStore
from ..config import Settings

logger = logging.getLogger(__name__)


def is_partial(path: str) -> bool:
    """True if the base name already carries the partial underscore."""
    return os.path.basename(path).startswith('_')


class ImportScanner:
    """
    Import-graph crawler and the only writer of a SymbolStore.

    Filesystem access goes through `_file_exists` and `_read_file` so a
    subclass can serve files from memory.
    """

    def __init__(
        self,
        store: SymbolStore,
        settings: Optional[Settings] = None,
        extractor: Optional[TreeSitterExtractor] = None,
    ):
        self.store = store
        self.settings = settings or Settings()
        self.extractor = extractor or TreeSitterExtractor()

    def scan(self, paths: Iterable[str], recursive: bool = True) -> None:
        """
        Parse every file reachable from `paths` into the store.

        Each distinct path is queued at most once and each resolved file is
        parsed at most once, so import cycles terminate.

        Args:
            paths: Seed file paths
            recursive: Follow import edges (also gated by scan_imported_files)
        """
        queued: Set[str] = set()
        visited: Set[str] = set()
        pending = deque()

        for path in paths:
            path = fs.canonical_path(path)
            if path not in queued:
                queued.add(path)
                pending.append(path)

        follow = recursive and self.settings.scan_imported_files

        while pending:
            original = pending.popleft()
            filepath = self._resolve(original)

            if filepath is None:
                self._evict(original)
                continue

            if filepath in visited:
                continue
            visited.add(filepath)

            try:
                content = self._read_file(filepath)
            except OSError as e:
                # Vanished between the existence check and the read
                logger.debug("Could not read %s: %s", filepath, e)
                self._evict(original)
                continue

            table = self.extractor.extract(filepath, content, document=original)
            self.store.set(filepath, table)
            self._drop_stale_alias(original, filepath)
            logger.debug("Indexed %s: %s", filepath, table.counts())

            if not follow:
                continue

            for edge in table.imports:
                if edge.dynamic or edge.css:
                    continue
                target = fs.canonical_path(edge.filepath)
                if target not in queued:
                    queued.add(target)
                    pending.append(target)

    def _resolve(self, path: str) -> Optional[str]:
        """Existing form of `path`: literal first, then partial."""
        if self._file_exists(path):
            return path

        if not is_partial(path):
            partial = partial_name(path)
            if self._file_exists(partial):
                return partial

        return None

    def _drop_stale_alias(self, original: str, filepath: str) -> None:
        """Remove the entry for the form of `original` that no longer exists."""
        if filepath != original:
            self.store.drop(original)
        elif not is_partial(original):
            partial = partial_name(original)
            if partial in self.store and not self._file_exists(partial):
                self.store.drop(partial)

    def _evict(self, path: str) -> None:
        """Drop both the literal and the partial entry for a missing file."""
        logger.debug("Evicting missing file %s", path)
        self.store.drop(path)
        if not is_partial(path):
            self.store.drop(partial_name(path))

    def _read_file(self, filepath: str) -> str:
        return fs.read_file(filepath)

    def _file_exists(self, filepath: str) -> bool:
        return fs.file_exists(filepath)
