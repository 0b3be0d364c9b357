"""
scssidx — Multi-file SCSS symbol index for editor autocompletion.

Follows @import/@use/@forward edges across a project, keeps one symbol
table per file, and decides from the text around the cursor which kinds
of symbols to suggest.

Usage:
    scssidx scan styles/
    scssidx symbols styles/_variables.scss
    scssidx complete styles/main.scss 120
    scssidx config
"""

__version__ = "0.1.0"

from .config import Settings, ConfigManager, get_settings
from .core import (
    Document,
    DocumentSymbols,
    ImportScanner,
    SymbolStore,
    UnresolvableDocumentError,
    aggregate,
    discover_files,
)
from .services import CompletionItemKind, CompletionList, classify, complete

__all__ = [
    '__version__',
    'Settings',
    'ConfigManager',
    'get_settings',
    'Document',
    'DocumentSymbols',
    'ImportScanner',
    'SymbolStore',
    'UnresolvableDocumentError',
    'aggregate',
    'discover_files',
    'CompletionItemKind',
    'CompletionList',
    'classify',
    'complete',
]
