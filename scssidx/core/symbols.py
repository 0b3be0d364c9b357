"""
Symbol tables — What one parse of one stylesheet yields.

A DocumentSymbols table is produced once per parse and replaced wholesale
on the next one. Nothing patches a table in place.

Usage:
    from scssidx.core.symbols import DocumentSymbols, Variable

    table = DocumentSymbols(document="a.scss", filepath="a.scss")
    table.variables.append(Variable(name="$one", offset=0, value="1"))
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Tuple


# (line, character), both 0-indexed
Position = Tuple[int, int]


@dataclass
class Parameter:
    """A mixin or function parameter."""
    name: str                       # "$size"
    offset: int = 0
    value: Optional[str] = None     # Default value text, if any


@dataclass
class Variable:
    """A `$name: value` declaration or a parameter binding."""
    name: str
    offset: int = 0
    position: Optional[Position] = None
    value: Optional[str] = None
    mixin: Optional[str] = None     # Owning mixin when this is a parameter binding


@dataclass
class Mixin:
    """A `@mixin` or `@function` declaration."""
    name: str
    offset: int = 0
    position: Optional[Position] = None
    parameters: List[Parameter] = field(default_factory=list)


# Functions carry exactly the same shape as mixins
Function = Mixin


@dataclass
class ImportEdge:
    """An `@import`/`@use`/`@forward` target."""
    filepath: str
    dynamic: bool = False   # Interpolation or glob in the path
    css: bool = False       # Plain CSS import, outside the symbol graph


@dataclass
class DocumentSymbols:
    """
    Symbol table for one stylesheet.

    Attributes:
        document: Identity path the table was parsed under
        filepath: On-disk path the content was read from
        variables: Variable symbols in declaration order
        mixins: Mixin symbols in declaration order
        functions: Function symbols in declaration order
        imports: Import edges in source order
    """
    document: str
    filepath: str
    variables: List[Variable] = field(default_factory=list)
    mixins: List[Mixin] = field(default_factory=list)
    functions: List[Mixin] = field(default_factory=list)
    imports: List[ImportEdge] = field(default_factory=list)

    @classmethod
    def empty(cls, document: str, filepath: Optional[str] = None) -> 'DocumentSymbols':
        return cls(document=document, filepath=filepath or document)

    def import_paths(self) -> List[str]:
        return [edge.filepath for edge in self.imports]

    def counts(self) -> dict:
        return {
            'variables': len(self.variables),
            'mixins': len(self.mixins),
            'functions': len(self.functions),
            'imports': len(self.imports),
        }

    def to_dict(self) -> dict:
        return asdict(self)
