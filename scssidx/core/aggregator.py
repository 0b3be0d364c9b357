"""
Cross-file aggregation — Every table the store knows, seen from one document.

A table is *implicit* for the querying document when it is neither the
document itself nor one of its recorded imports. Same-named symbols from
different files are all kept; telling them apart is left to whoever
shows them, using the provenance path.
"""

import os
from dataclasses import dataclass
from typing import List

from .fs import canonical_path
from .store import SymbolStore
from .symbols import DocumentSymbols


@dataclass
class VisibleDocument:
    """A table as seen from the querying document."""
    symbols: DocumentSymbols
    implicit: bool

    @property
    def source_path(self) -> str:
        """On-disk path for implicit tables, identity path otherwise."""
        return self.symbols.filepath if self.implicit else self.symbols.document


def is_implicit(table_document: str, current_path: str, import_paths: List[str]) -> bool:
    """True if the table is neither the current document nor imported by it."""
    table_document = canonical_path(table_document)
    if table_document == canonical_path(current_path):
        return False
    return table_document not in {canonical_path(path) for path in import_paths}


def current_import_paths(store: SymbolStore, current_path: str) -> List[str]:
    """Import targets recorded for the current document, [] if unknown."""
    current_path = canonical_path(current_path)
    for table in store.tables():
        if canonical_path(table.document) == current_path:
            return table.import_paths()
    return []


def aggregate(store: SymbolStore, current_path: str, import_paths: List[str]) -> List[VisibleDocument]:
    """
    Flatten the store into provenance-annotated tables, in store order.

    Args:
        store: Symbol store to read
        current_path: Identity path of the querying document
        import_paths: Paths the querying document imports

    Returns:
        One VisibleDocument per stored table
    """
    return [
        VisibleDocument(symbols=table, implicit=is_implicit(table.document, current_path, import_paths))
        for table in store.tables()
    ]


def display_path(current_path: str, symbols_path: str) -> str:
    """
    Path of a symbol file as shown next to a completion.

    Relative to the current document's directory with `/` separators;
    the current file itself reads `current`.
    """
    root = os.path.dirname(current_path) or '.'
    try:
        relative = os.path.relpath(symbols_path, root)
    except ValueError:
        # Different drives on Windows
        return symbols_path.replace('\\', '/')
    if relative == os.path.basename(current_path):
        return 'current'
    return relative.replace('\\', '/')
