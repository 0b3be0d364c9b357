"""
TreeSitterExtractor — Builds DocumentSymbols from stylesheet text.

Parses with tree-sitter (grammar from tree-sitter-language-pack), walks
the tree, and hands the text of every node matching a SymbolQuery to the
language hooks. Variable declarations and error nodes are read statement
by statement from their text, so a Sass map the grammar cannot parse
does not hide the declarations after it.

A file that cannot be parsed still produces a table, just an empty one,
so a broken file never keeps stale symbols in the store.

Usage:
    from scssidx.core.parsing import TreeSitterExtractor

    extractor = TreeSitterExtractor()
    table = extractor.extract("styles/main.scss", content)
"""

import logging
from bisect import bisect_right
from typing import Dict, List, Optional, TYPE_CHECKING

from ..fs import stat_file
from ..symbols import DocumentSymbols, Mixin, Parameter, Variable
from .config import LanguageConfig
from .languages import SCSS_CONFIG
from .links import StatCallback, resolve_import

if TYPE_CHECKING:
    from tree_sitter import Node, Parser

logger = logging.getLogger(__name__)

# Lazy import for tree-sitter to allow graceful degradation
_language_pack_available = None


def _check_language_pack() -> bool:
    """Check if tree-sitter-language-pack is available."""
    global _language_pack_available
    if _language_pack_available is None:
        try:
            import tree_sitter_language_pack  # noqa: F401
            _language_pack_available = True
        except ImportError:
            _language_pack_available = False
    return _language_pack_available


class _Source:
    """Byte/character bookkeeping for one parse."""

    def __init__(self, text: str):
        self.text = text
        self.data = text.encode('utf-8')
        self.ascii = len(self.data) == len(text)
        self._line_starts: Optional[List[int]] = None

    def char_offset(self, byte_offset: int) -> int:
        if self.ascii:
            return byte_offset
        return len(self.data[:byte_offset].decode('utf-8', errors='ignore'))

    def byte_offset(self, char_offset: int) -> int:
        if self.ascii:
            return char_offset
        return len(self.text[:char_offset].encode('utf-8'))

    def node_text(self, node: 'Node') -> str:
        return self.data[node.start_byte:node.end_byte].decode('utf-8', errors='replace')

    def position(self, node: 'Node'):
        row, column = node.start_point
        if self.ascii:
            return row, column
        line_start = self.data.rfind(b'\n', 0, node.start_byte) + 1
        return row, len(self.data[line_start:node.start_byte].decode('utf-8', errors='ignore'))

    def position_of(self, char_offset: int):
        """(line, character) of a character offset."""
        if self._line_starts is None:
            self._line_starts = [0] + [i + 1 for i, ch in enumerate(self.text) if ch == '\n']
        line = bisect_right(self._line_starts, char_offset) - 1
        return line, char_offset - self._line_starts[line]


class TreeSitterExtractor:
    """
    Extracts a DocumentSymbols table from stylesheet source.

    The host keeps one instance so the grammar is loaded once.

    Args:
        config: Language configuration (SCSS by default)
        stat: Filesystem stat callback used to resolve import targets
    """

    def __init__(self, config: LanguageConfig = SCSS_CONFIG, stat: StatCallback = stat_file):
        self.config = config
        self.stat = stat
        self._parsers: Dict[str, 'Parser'] = {}  # Lazy-loaded parsers
        self._query_types = config.query_node_types

    def _get_parser(self, tree_sitter_name: str) -> Optional['Parser']:
        """Get tree-sitter parser for a grammar (lazy-loaded)."""
        if tree_sitter_name in self._parsers:
            return self._parsers[tree_sitter_name]

        if not _check_language_pack():
            return None

        try:
            from tree_sitter_language_pack import get_parser
            parser = get_parser(tree_sitter_name)
        except Exception as e:
            logger.debug("No tree-sitter grammar for %s: %s", tree_sitter_name, e)
            return None

        self._parsers[tree_sitter_name] = parser
        return parser

    def is_available(self) -> bool:
        """Check if tree-sitter extraction is available."""
        return self._get_parser(self.config.tree_sitter_name) is not None

    def extract(
        self,
        filepath: str,
        content: str,
        offset: Optional[int] = None,
        document: Optional[str] = None,
    ) -> DocumentSymbols:
        """
        Extract symbols from file content.

        Args:
            filepath: On-disk path of the content (imports resolve from here)
            content: Stylesheet text, possibly half-typed
            offset: Cursor offset; parameters of an enclosing mixin or
                function become variable bindings in the result
            document: Identity path for the table (defaults to filepath)

        Returns:
            DocumentSymbols, empty when the text cannot be parsed
        """
        filepath = str(filepath)
        table = DocumentSymbols.empty(document=str(document or filepath), filepath=filepath)

        if len(content) > self.config.max_file_size:
            logger.debug("Skipping %s: %d characters exceeds limit", filepath, len(content))
            return table

        parser = self._get_parser(self.config.tree_sitter_name)
        if parser is None:
            return table

        source = _Source(content)
        try:
            tree = parser.parse(source.data)
        except Exception as e:
            logger.debug("Parse failed for %s: %s", filepath, e)
            return table

        cursor = source.byte_offset(offset) if offset is not None else None
        self._walk_tree(tree.root_node, source, table, cursor)

        # Text recovery appends after the nodes it walked
        for symbols in (table.variables, table.mixins, table.functions):
            symbols.sort(key=lambda symbol: symbol.offset)
        return table

    def _walk_tree(
        self,
        node: 'Node',
        source: _Source,
        table: DocumentSymbols,
        cursor: Optional[int],
    ) -> None:
        """Recursively walk the AST, filling `table`."""
        query = self.config.query_for(node.type)

        # A variable's value may swallow the statements after it (Sass maps),
        # so declarations are read statement by statement like error nodes
        if node.type in self.config.recovery_node_types or (
            query is not None and query.symbol_type == 'variable'
        ):
            self._extract_statements(node, source, table, cursor)
            return

        if query is not None:
            self._extract_symbol(node, query.symbol_type, source, table, cursor)

        if node.type in self.config.opaque_node_types:
            return

        for child in node.children:
            self._walk_tree(child, source, table, cursor)

    def _yields_symbols(self, node: 'Node') -> bool:
        """True if walking `node` can produce symbols."""
        if node.type in self._query_types:
            return True
        if node.type in self.config.opaque_node_types:
            return False
        return any(self._yields_symbols(child) for child in node.children)

    def _extract_symbol(
        self,
        node: 'Node',
        symbol_type: str,
        source: _Source,
        table: DocumentSymbols,
        cursor: Optional[int],
    ) -> None:
        config = self.config
        text = source.node_text(node)

        if symbol_type == 'import':
            self._add_imports(text, table)
            return

        name = config.name_extractor(text, symbol_type) if config.name_extractor else None
        if not name:
            return

        in_body = cursor is not None and self._in_body(node, text, cursor)
        self._add_callable(
            table, symbol_type, name, text,
            source.char_offset(node.start_byte), source.position(node), in_body,
        )

    def _extract_statements(
        self,
        node: 'Node',
        source: _Source,
        table: DocumentSymbols,
        cursor: Optional[int],
    ) -> None:
        """
        Read a node's text statement by statement.

        Intact statements nested inside are walked as usual and blanked
        out first (braces kept, so block bounds survive), so each
        statement is read exactly once.
        """
        config = self.config
        node_start = source.char_offset(node.start_byte)
        chars = list(source.node_text(node))

        for child in node.children:
            if not self._yields_symbols(child):
                continue
            self._walk_tree(child, source, table, cursor)
            for i in range(source.char_offset(child.start_byte) - node_start,
                           source.char_offset(child.end_byte) - node_start):
                if chars[i] not in '\n{}':
                    chars[i] = ' '

        text = ''.join(chars)
        statements = config.statement_splitter(text) if config.statement_splitter else [(0, text)]

        for start, statement in statements:
            stripped = statement.lstrip()
            if not stripped:
                continue
            offset = node_start + start + len(statement) - len(stripped)
            position = source.position_of(offset)

            name = config.name_extractor(stripped, 'variable') if config.name_extractor else None
            if name:
                value = config.value_extractor(stripped) if config.value_extractor else None
                table.variables.append(Variable(name=name, offset=offset, position=position, value=value))
                continue

            if self._add_imports(stripped, table):
                continue

            for symbol_type in ('mixin', 'function'):
                name = config.name_extractor(stripped, symbol_type) if config.name_extractor else None
                if not name:
                    continue
                end = start + len(statement)
                in_body = False
                if cursor is not None and end < len(text) and text[end] == '{':
                    body_start = source.byte_offset(node_start + end + 1)
                    body_end = source.byte_offset(node_start + self._block_end(text, end + 1))
                    in_body = body_start <= cursor <= body_end
                self._add_callable(table, symbol_type, name, stripped, offset, position, in_body)
                break

    def _add_imports(self, text: str, table: DocumentSymbols) -> bool:
        if not self.config.import_extractor:
            return False
        targets = self.config.import_extractor(text)
        for target in targets:
            table.imports.append(resolve_import(target, table.filepath, self.stat))
        return bool(targets)

    def _add_callable(
        self,
        table: DocumentSymbols,
        symbol_type: str,
        name: str,
        text: str,
        offset: int,
        position,
        in_body: bool,
    ) -> None:
        parameters = self._extract_parameters(text, offset)
        symbol = Mixin(name=name, offset=offset, position=position, parameters=parameters)
        if symbol_type == 'mixin':
            table.mixins.append(symbol)
        else:
            table.functions.append(symbol)

        if in_body:
            for param in parameters:
                table.variables.append(Variable(
                    name=param.name,
                    offset=param.offset,
                    value=param.value,
                    mixin=name,
                ))

    def _extract_parameters(self, text: str, node_offset: int) -> List[Parameter]:
        if not self.config.parameter_extractor:
            return []
        parameters = []
        search_from = 0
        for name, default in self.config.parameter_extractor(text):
            found = text.find(name, search_from)
            if found != -1:
                search_from = found + len(name)
            parameters.append(Parameter(
                name=name,
                offset=node_offset + max(found, 0),
                value=default,
            ))
        return parameters

    @staticmethod
    def _in_body(node: 'Node', text: str, cursor: int) -> bool:
        """True if byte offset `cursor` is after the opening brace of `node`."""
        brace = text.find('{')
        if brace == -1:
            return False
        body_start = node.start_byte + len(text[:brace + 1].encode('utf-8'))
        return body_start <= cursor <= node.end_byte

    @staticmethod
    def _block_end(text: str, body_start: int) -> int:
        """Index of the `}` closing a block opened before `body_start`, or len(text)."""
        depth = 1
        for i in range(body_start, len(text)):
            if text[i] == '{':
                depth += 1
            elif text[i] == '}':
                depth -= 1
                if depth == 0:
                    return i
        return len(text)
