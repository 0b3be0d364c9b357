"""
SymbolStore — Process-lifetime cache of symbol tables, keyed by file path.

The host owns one instance and hands it to the scanner (the only writer)
and to the completion service (a reader). No locking: the last `set` or
`drop` for a path wins.

Paths are canonicalised on the way in, so `styles/a.scss` and
`/project/styles/a.scss` name the same entry.
"""

from typing import Dict, Iterator, List, Optional

from .fs import canonical_path
from .symbols import DocumentSymbols


class SymbolStore:
    """Mapping of canonical file path to DocumentSymbols, in insertion order."""

    def __init__(self):
        self._tables: Dict[str, DocumentSymbols] = {}

    def set(self, path: str, table: DocumentSymbols) -> None:
        """Insert or overwrite the table for a path."""
        self._tables[canonical_path(path)] = table

    def get(self, path: str) -> Optional[DocumentSymbols]:
        return self._tables.get(canonical_path(path))

    def drop(self, path: str) -> None:
        """Remove the table for a path. No-op when absent."""
        self._tables.pop(canonical_path(path), None)

    def entries(self) -> Dict[str, DocumentSymbols]:
        """Snapshot of the full mapping."""
        return dict(self._tables)

    def tables(self) -> List[DocumentSymbols]:
        return list(self._tables.values())

    def clear(self) -> None:
        self._tables.clear()

    def __contains__(self, path: str) -> bool:
        return canonical_path(path) in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tables))
