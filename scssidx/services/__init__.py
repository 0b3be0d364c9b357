"""
Services layer — Cursor classification and completion synthesis.
"""

from .completion import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    complete,
)
from .context import CursorContext, classify

__all__ = [
    'CompletionItem',
    'CompletionItemKind',
    'CompletionList',
    'complete',
    'CursorContext',
    'classify',
]
