"""
Document — An editor buffer: identity (uri) plus live text.

The completion service works on documents rather than files because the
buffer may hold unsaved edits.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple
from urllib.parse import unquote, urlparse

from .fs import canonical_path


class UnresolvableDocumentError(ValueError):
    """The document has no derivable file-system identity."""


def position_at(text: str, offset: int) -> Tuple[int, int]:
    """(line, character) for a character offset, both 0-indexed."""
    offset = max(0, min(offset, len(text)))
    line = text.count('\n', 0, offset)
    line_start = text.rfind('\n', 0, offset) + 1
    return line, offset - line_start


def uri_to_path(uri: str) -> str:
    """
    Convert a document uri to a file path.

    `file:` uris are decoded; anything without a scheme is taken as a
    path already. Other schemes (untitled:, http:) have no file identity
    and yield an empty string.
    """
    if not uri:
        return ""

    if uri.startswith('file:'):
        parsed = urlparse(uri)
        path = unquote(parsed.path)
        # file:///C:/x -> C:/x
        if len(path) > 2 and path[0] == '/' and path[2] == ':':
            path = path[1:]
        return path

    parsed = urlparse(uri)
    if parsed.scheme and len(parsed.scheme) > 1:
        return ""
    return uri


@dataclass
class Document:
    """Editor document: uri and current text."""
    uri: str
    text: str = ""
    language_id: str = "scss"
    version: int = 1

    @classmethod
    def from_file(cls, path, text: str = None) -> 'Document':
        path = Path(path)
        if text is None:
            text = path.read_text(encoding='utf-8', errors='replace')
        return cls(uri=str(path), text=text)

    @property
    def path(self) -> str:
        """
        Canonical file path of this document.

        Raises:
            UnresolvableDocumentError: If the uri has no file identity
        """
        path = uri_to_path(self.uri)
        if not path:
            raise UnresolvableDocumentError(f"Cannot derive a file path from {self.uri!r}")
        return canonical_path(path)

    def position_at(self, offset: int) -> Tuple[int, int]:
        """(line, character) for a character offset, both 0-indexed."""
        return position_at(self.text, offset)

    def offset_at(self, line: int, character: int) -> int:
        """Character offset for a (line, character) position."""
        start = 0
        for _ in range(line):
            nl = self.text.find('\n', start)
            if nl == -1:
                return len(self.text)
            start = nl + 1
        line_end = self.text.find('\n', start)
        if line_end == -1:
            line_end = len(self.text)
        return min(start + character, line_end)
