"""
Completion — Merges cross-file symbols with the cursor context.

Every request re-parses the live document text and stores the result
before aggregating, so suggestions follow unsaved edits. Nothing is
ranked, sorted or deduplicated: variables, then mixins, then functions,
each in store order and then declaration order.

Usage:
    from scssidx.core.document import Document
    from scssidx.services.completion import complete

    completions = complete(Document("main.scss", text), offset, settings, store)
"""

import logging
from dataclasses import dataclass, field, asdict
from enum import IntEnum
from typing import List, Optional

from ..config import Settings
from ..core.aggregator import (
    VisibleDocument,
    aggregate,
    current_import_paths,
    display_path,
)
from ..core.document import Document
from ..core.parsing import TreeSitterExtractor
from ..core.store import SymbolStore
from ..core.symbols import Mixin
from .colors import parse_color
from .context import classify

logger = logging.getLogger(__name__)

MAX_DOCUMENTATION_LENGTH = 140


class CompletionItemKind(IntEnum):
    """LSP completion item kinds in use."""
    FUNCTION = 3
    VARIABLE = 6
    INTERFACE = 8
    COLOR = 16


@dataclass
class CompletionItem:
    label: str
    kind: CompletionItemKind
    detail: str = ""
    documentation: Optional[str] = None
    insert_text: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data['kind'] = int(self.kind)
        return data


@dataclass
class CompletionList:
    items: List[CompletionItem] = field(default_factory=list)
    is_incomplete: bool = False

    def to_dict(self) -> dict:
        return {
            'is_incomplete': self.is_incomplete,
            'items': [item.to_dict() for item in self.items],
        }


def limit_string(text: Optional[str], limit: int = MAX_DOCUMENTATION_LENGTH) -> Optional[str]:
    """Truncate to `limit` characters, marking the cut with an ellipsis."""
    if not text:
        return None
    if len(text) < limit:
        return text
    return text[:limit] + '…'


def mixin_documentation(symbol: Mixin) -> str:
    """`name($a, $b: 1px) {…}`"""
    args = ', '.join(
        param.name if param.value is None else f"{param.name}: {param.value}"
        for param in symbol.parameters
    )
    return f"{symbol.name}({args}) {{…}}"


def _detail_path(visible: VisibleDocument, document_path: str, settings: Settings) -> str:
    path = display_path(document_path, visible.source_path)
    if visible.implicit and settings.implicitly_label:
        return f"{settings.implicitly_label} {path}"
    return path


def complete(
    document: Document,
    offset: int,
    settings: Settings,
    store: SymbolStore,
    extractor: Optional[TreeSitterExtractor] = None,
) -> CompletionList:
    """
    Completions at `offset` in `document`.

    Args:
        document: Editor document (uri + live text)
        offset: Cursor offset in characters
        settings: Suggestion settings
        store: Symbol store; the document's fresh table is written to it
        extractor: Parser for the live text; pass the host's instance so
                the grammar is loaded once (a fresh SCSS extractor if None)

    Returns:
        CompletionList, empty when no context matches

    Raises:
        UnresolvableDocumentError: If the document has no file path
    """
    completions = CompletionList()
    document_path = document.path

    extractor = extractor or TreeSitterExtractor()
    store.set(document_path, extractor.extract(document_path, document.text, offset=offset))

    context = classify(document.text, offset)
    if context.is_comment:
        return completions

    visible = aggregate(store, document_path, current_import_paths(store, document_path))

    if settings.suggest_variables and context.variable_context():
        for entry in visible:
            detail_path = _detail_path(entry, document_path, settings)
            for variable in entry.symbols.variables:
                color = parse_color(variable.value)

                detail = detail_path
                if variable.mixin:
                    detail = f"argument from {variable.mixin}, {detail}"

                completions.items.append(CompletionItem(
                    label=variable.name,
                    kind=CompletionItemKind.COLOR if color else CompletionItemKind.VARIABLE,
                    detail=detail,
                    documentation=limit_string(str(color) if color else variable.value),
                ))

    if settings.suggest_mixins and context.mixin_context():
        for entry in visible:
            detail_path = _detail_path(entry, document_path, settings)
            for mixin in entry.symbols.mixins:
                completions.items.append(CompletionItem(
                    label=mixin.name,
                    kind=CompletionItemKind.FUNCTION,
                    detail=detail_path,
                    documentation=limit_string(mixin_documentation(mixin)),
                    insert_text=mixin.name,
                ))

    triggers = settings.suggest_functions_in_string_context_after_symbols
    if settings.suggest_functions and context.function_context(triggers):
        for entry in visible:
            detail_path = _detail_path(entry, document_path, settings)
            for func in entry.symbols.functions:
                completions.items.append(CompletionItem(
                    label=func.name,
                    kind=CompletionItemKind.INTERFACE,
                    detail=detail_path,
                    documentation=limit_string(mixin_documentation(func)),
                    insert_text=func.name,
                ))

    logger.debug("%d completions at %s:%d", len(completions.items), document_path, offset)
    return completions
