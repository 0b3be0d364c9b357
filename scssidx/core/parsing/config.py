"""
Parsing configuration data structures.

Defines LanguageConfig and SymbolQuery — the mapping from tree-sitter
node types to the symbol kinds a DocumentSymbols table holds.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, Tuple


# Symbol kinds a query may produce
SYMBOL_TYPES = ('variable', 'mixin', 'function', 'import')


@dataclass
class SymbolQuery:
    """
    Defines what AST nodes to extract as symbols.

    Attributes:
        node_type: Tree-sitter AST node type (e.g., "mixin_statement")
        symbol_type: One of SYMBOL_TYPES
    """
    node_type: str
    symbol_type: str

    def __post_init__(self):
        if self.symbol_type not in SYMBOL_TYPES:
            valid = ", ".join(SYMBOL_TYPES)
            raise ValueError(f"Unknown symbol type '{self.symbol_type}'. Valid: {valid}")


@dataclass
class LanguageConfig:
    """
    Configuration for parsing one stylesheet dialect.

    The hooks receive the source text of the matched node and return
    plain values, so they work without a parse tree.

    Attributes:
        name: Human-readable name (e.g., "SCSS")
        tree_sitter_name: Grammar name for tree-sitter (e.g., "scss")
        extensions: File extensions this config handles (e.g., {'.scss'})
        symbol_queries: List of SymbolQuery defining what to extract
        max_file_size: Files larger than this (characters) yield no symbols
        opaque_node_types: Node types whose children are not walked
        recovery_node_types: Node types read statement by statement from
            their text (tree-sitter error nodes)
        name_extractor: node text, symbol type -> symbol name or None
        value_extractor: variable declaration text -> value text or None
        parameter_extractor: mixin/function text -> [(name, default), ...]
        import_extractor: import statement text -> raw target strings
        statement_splitter: text -> [(start, statement text), ...]
    """
    # Identity
    name: str
    tree_sitter_name: str
    extensions: Set[str]

    # Extraction rules
    symbol_queries: List[SymbolQuery] = field(default_factory=list)
    max_file_size: int = 500_000

    # Nodes whose subtrees are never searched (e.g. parameter lists)
    opaque_node_types: Set[str] = field(default_factory=set)

    # Nodes whose text is re-read when the grammar gave up on it
    recovery_node_types: Set[str] = field(default_factory=set)

    # Customization hooks
    name_extractor: Optional[Callable[[str, str], Optional[str]]] = None
    value_extractor: Optional[Callable[[str], Optional[str]]] = None
    parameter_extractor: Optional[Callable[[str], List[Tuple[str, Optional[str]]]]] = None
    import_extractor: Optional[Callable[[str], List[str]]] = None
    statement_splitter: Optional[Callable[[str], List[Tuple[int, str]]]] = None

    def matches_extension(self, ext: str) -> bool:
        """Check if this config handles the given extension."""
        return ext.lower() in self.extensions

    @property
    def query_node_types(self) -> Set[str]:
        return {query.node_type for query in self.symbol_queries}

    def query_for(self, node_type: str) -> Optional[SymbolQuery]:
        for query in self.symbol_queries:
            if query.node_type == node_type:
                return query
        return None
