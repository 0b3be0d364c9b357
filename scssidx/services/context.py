"""
Cursor context — Which symbol kinds make sense at an offset.

Purely lexical: only the text of the cursor's line up to the cursor is
looked at, so half-typed or invalid code is fine and every call costs
O(line length).

Usage:
    from scssidx.services.context import classify

    ctx = classify(".a { color: $", 13)
    ctx.variable_context()    # True
"""

import re
from dataclasses import dataclass


# Precompiled matchers over the text before the cursor
_PROPERTY_VALUE = re.compile(r'.*:\s*')
_EMPTY_PROPERTY_VALUE = re.compile(r'.*:\s*$')
_QUOTED_STRING = re.compile(r'[\'"](?:[^\'"\\]|\\.)*[\'"]')
_QUOTE = re.compile(r'[\'"]')
_MIXIN_REFERENCE = re.compile(r'.*@include\s+(.*)')
_COMMENT = re.compile(r'^(/(/|\*)|\*)')

# Characters a completion word is made of
_WORD_CHARS = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-$#{}')


def current_word(text: str, offset: int) -> str:
    """Longest run of word characters ending at `offset`."""
    start = offset
    while start > 0 and text[start - 1] in _WORD_CHARS:
        start -= 1
    return text[start:offset]


def text_before_position(text: str, offset: int) -> str:
    """Text from the start of the cursor's line up to `offset`."""
    line_start = text.rfind('\n', 0, offset) + 1
    return text[line_start:offset]


@dataclass(frozen=True)
class CursorContext:
    """Lexical facts about the cursor position."""
    word: str
    text_before_word: str
    is_comment: bool = False
    is_interpolation: bool = False
    is_property_value: bool = False
    is_empty_value: bool = False
    is_quoted: bool = False

    def variable_context(self) -> bool:
        if self.is_comment:
            return False
        if self.is_property_value and not self.is_empty_value and not self.is_quoted:
            return '$' in self.word
        if self.is_quoted:
            return self.is_interpolation
        return self.word.startswith('$') or self.is_interpolation or self.is_empty_value

    def mixin_context(self) -> bool:
        if self.is_comment:
            return False
        return not self.is_property_value and bool(_MIXIN_REFERENCE.search(self.text_before_word))

    def function_context(self, trigger_symbols: str) -> bool:
        """
        Args:
            trigger_symbols: Characters that, two positions before the
                cursor in a property value, open function suggestions
        """
        if self.is_comment:
            return False
        if self.is_property_value and not self.is_empty_value and not self.is_quoted:
            text = self.text_before_word
            last_char = text[-2] if len(text) >= 2 else ''
            return bool(last_char) and last_char in trigger_symbols
        if self.is_quoted:
            return self.is_interpolation
        return False


def classify(text: str, offset: int) -> CursorContext:
    """Classify the cursor at `offset` in `text`."""
    offset = max(0, min(offset, len(text)))
    word = current_word(text, offset)
    before = text_before_position(text, offset)

    # Nothing is offered inside `//` and `/* */` comments
    if _COMMENT.match(before.strip()):
        return CursorContext(word=word, text_before_word=before, is_comment=True)

    return CursorContext(
        word=word,
        text_before_word=before,
        is_interpolation='#{' in word,
        is_property_value=bool(_PROPERTY_VALUE.search(before)),
        is_empty_value=bool(_EMPTY_PROPERTY_VALUE.search(before)),
        is_quoted=bool(_QUOTE.search(_QUOTED_STRING.sub('', before))),
    )
