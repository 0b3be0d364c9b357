"""
Core layer — Symbol tables, their store, and the scanner that fills it.
"""

from .symbols import DocumentSymbols, Variable, Mixin, Function, Parameter, ImportEdge
from .store import SymbolStore
from .document import Document, UnresolvableDocumentError
from .scanner import ImportScanner
from .aggregator import VisibleDocument, aggregate, current_import_paths, is_implicit
from .workspace import discover_files

__all__ = [
    'DocumentSymbols',
    'Variable',
    'Mixin',
    'Function',
    'Parameter',
    'ImportEdge',
    'SymbolStore',
    'Document',
    'UnresolvableDocumentError',
    'ImportScanner',
    'VisibleDocument',
    'aggregate',
    'current_import_paths',
    'is_implicit',
    'discover_files',
]
