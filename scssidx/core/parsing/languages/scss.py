"""
SCSS language configuration for symbol extraction.

Defines SCSS_CONFIG with tree-sitter queries for SCSS files (.scss).

Symbol types extracted:
- variable: `$name: value` declarations, at any nesting level
- mixin: `@mixin name(...)` declarations
- function: `@function name(...)` declarations
- import: `@import`, `@use` and `@forward` targets

The hooks below work on the source text of a matched node, so they
tolerate partial trees produced from half-typed code.
"""

import re
from typing import List, Optional, Tuple

from ..config import LanguageConfig, SymbolQuery


# =============================================================================
# Patterns
# =============================================================================

_VARIABLE_NAME = re.compile(r'\s*(\$[\w-]+)\s*:')
_MIXIN_NAME = re.compile(r'\s*@mixin\s+([\w-]+)')
_FUNCTION_NAME = re.compile(r'\s*@function\s+([\w-]+)')
_CALLABLE_HEAD = re.compile(r'\s*@(?:mixin|function)\s+[\w-]+\s*\(')
_VALUE_FLAGS = re.compile(r'(?:\s*!(?:default|global))+\s*$')
_IMPORT_KEYWORD = re.compile(r'\s*@(import|use|forward)\b')
_IMPORT_TARGET = re.compile(
    r'url\(\s*([\'"]?)([^\'")]*)\1\s*\)'      # url(...)
    r'|([\'"])((?:[^\'"\\]|\\.)*)\3'           # "..." or '...'
)

# Built-in modules loaded with @use, never files
BUILTIN_MODULE_PREFIX = 'sass:'


# =============================================================================
# Symbol Queries
# =============================================================================

SCSS_QUERIES = [
    SymbolQuery(node_type="declaration", symbol_type="variable"),
    SymbolQuery(node_type="mixin_statement", symbol_type="mixin"),
    SymbolQuery(node_type="function_statement", symbol_type="function"),
    SymbolQuery(node_type="import_statement", symbol_type="import"),
    SymbolQuery(node_type="use_statement", symbol_type="import"),
    SymbolQuery(node_type="forward_statement", symbol_type="import"),
]


# =============================================================================
# Custom Hooks
# =============================================================================

def scss_name_extractor(text: str, symbol_type: str) -> Optional[str]:
    """
    Extract the declared name from a node's text.

    Plain property declarations (`color: red`) yield None, which is how
    they are filtered out of the variable list.
    """
    if symbol_type == 'variable':
        match = _VARIABLE_NAME.match(text)
    elif symbol_type == 'mixin':
        match = _MIXIN_NAME.match(text)
    elif symbol_type == 'function':
        match = _FUNCTION_NAME.match(text)
    else:
        return None
    return match.group(1) if match else None


def scss_value_extractor(text: str) -> Optional[str]:
    """Value text of `$name: value !default;`, without flags and semicolon."""
    if ':' not in text:
        return None
    value = text.split(':', 1)[1].strip()
    if value.endswith(';'):
        value = value[:-1]
    value = _VALUE_FLAGS.sub('', value).strip()
    return value or None


def split_top_level(text: str, separator: str = ',') -> List[str]:
    """Split on `separator` where it is not nested in (), [] or {}."""
    parts = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch in '([{':
            depth += 1
        elif ch in ')]}':
            depth = max(0, depth - 1)
        elif ch == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def split_statements(text: str) -> List[Tuple[int, str]]:
    """
    Cut text into statements at top-level `;`, `{` and `}`.

    Separators inside parentheses, brackets, quotes or `#{...}`
    interpolation do not cut, so Sass maps and interpolated values stay
    whole. Comments end a statement and are dropped. Used on text the
    grammar could not parse.

    Returns:
        List of (start index, statement text), separators excluded
    """
    statements = []
    nesting = []
    quote = None
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == '\\':
                i += 1
            elif ch == quote:
                quote = None
        elif ch in '"\'':
            quote = ch
        elif ch in '([' or (ch == '{' and i > 0 and text[i - 1] == '#'):
            nesting.append(ch)
        elif nesting and ch in ')]}':
            nesting.pop()
        elif not nesting and ch in ';{}':
            statements.append((start, text[start:i]))
            start = i + 1
        elif not nesting and text.startswith(('//', '/*'), i):
            statements.append((start, text[start:i]))
            closer = '\n' if text.startswith('//', i) else '*/'
            end = text.find(closer, i + 2)
            i = len(text) if end == -1 else end + len(closer)
            start = i
            continue
        i += 1
    statements.append((start, text[start:]))
    return statements


def scss_parameter_extractor(text: str) -> List[Tuple[str, Optional[str]]]:
    """
    Parameters of a `@mixin` / `@function` header.

    Returns:
        List of (name, default) with default None when absent
    """
    head = _CALLABLE_HEAD.match(text)
    if not head:
        return []

    # Find the matching close paren; an unclosed list runs to end of text
    start = head.end()
    depth = 1
    end = len(text)
    for i in range(start, len(text)):
        ch = text[i]
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                end = i
                break

    parameters = []
    for part in split_top_level(text[start:end]):
        part = part.strip()
        if not part:
            continue
        if ':' in part:
            name, default = part.split(':', 1)
            parameters.append((name.strip(), default.strip() or None))
        else:
            parameters.append((part, None))
    return parameters


def scss_import_extractor(text: str) -> List[str]:
    """
    Raw targets of an import-like statement.

    `url(x)` targets come back as `url(x)` so the resolver can mark them
    as plain CSS. `@use`/`@forward` take only their first target, and
    built-in `sass:` modules are dropped.
    """
    keyword = _IMPORT_KEYWORD.match(text)
    if not keyword:
        return []

    body = text[keyword.end():]
    targets = []
    for match in _IMPORT_TARGET.finditer(body):
        if match.group(2) is not None and match.group(0).startswith('url('):
            targets.append(f"url({match.group(2)})")
        else:
            targets.append(match.group(4))

    if keyword.group(1) in ('use', 'forward'):
        targets = targets[:1]

    return [t for t in targets if t and not t.startswith(BUILTIN_MODULE_PREFIX)]


# =============================================================================
# Configuration
# =============================================================================

SCSS_CONFIG = LanguageConfig(
    name="SCSS",
    tree_sitter_name="scss",
    extensions={'.scss'},
    symbol_queries=SCSS_QUERIES,
    max_file_size=500_000,
    opaque_node_types={'parameters', 'arguments'},
    recovery_node_types={'ERROR'},
    name_extractor=scss_name_extractor,
    value_extractor=scss_value_extractor,
    parameter_extractor=scss_parameter_extractor,
    import_extractor=scss_import_extractor,
    statement_splitter=split_statements,
)
