"""
Parsing module — Stylesheet symbol extraction via tree-sitter.

- LanguageConfig: Per-dialect parsing rules
- SymbolQuery: AST node to symbol kind mapping
- TreeSitterExtractor: Text -> DocumentSymbols
- resolve_import: Raw import target -> ImportEdge

Usage:
    from scssidx.core.parsing import TreeSitterExtractor

    extractor = TreeSitterExtractor()
    table = extractor.extract("main.scss", "$one: 1;")
"""

from .config import LanguageConfig, SymbolQuery
from .extractor import TreeSitterExtractor
from .links import partial_name, resolve_import

__all__ = [
    'LanguageConfig',
    'SymbolQuery',
    'TreeSitterExtractor',
    'partial_name',
    'resolve_import',
]
