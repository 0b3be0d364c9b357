"""
Import target resolution.

Turns the raw target of an `@import`/`@use`/`@forward` into an ImportEdge
pointing at a file path, probing the filesystem through a `stat`
callback for the partial (`_name`) and index-file conventions.

Usage:
    from scssidx.core.fs import stat_file
    from scssidx.core.parsing.links import resolve_import

    edge = resolve_import("variables", "styles/main.scss", stat_file)
    edge.filepath   # "styles/_variables.scss" when only the partial exists
"""

import os
import re
from typing import Callable, List

from ..fs import FileStat, FileType
from ..symbols import ImportEdge


StatCallback = Callable[[str], FileStat]

_DYNAMIC_PATH = re.compile(r'[#{}*]')
_URL_TARGET = re.compile(r'^url\((.*)\)$')
_REMOTE_TARGET = re.compile(r'^(?:[a-z][a-z0-9+.-]*:)?//', re.IGNORECASE)

STYLE_EXTENSIONS = ('.scss', '.sass')


def partial_name(path: str) -> str:
    """`dir/name.ext` -> `dir/_name.ext`."""
    head, tail = os.path.split(path)
    return os.path.join(head, '_' + tail) if head else '_' + tail


def path_variations(base: str) -> List[str]:
    """Candidate files for an import target, in probing order."""
    if base.endswith(STYLE_EXTENSIONS):
        return [base, partial_name(base)]

    return [
        base + '.scss',
        partial_name(base + '.scss'),
        os.path.join(base, '_index.scss'),
        os.path.join(base, 'index.scss'),
        base + '.css',
    ]


def resolve_import(target: str, importer_path: str, stat: StatCallback) -> ImportEdge:
    """
    Resolve one raw import target relative to the importing file.

    Args:
        target: Raw target text as written in the import
        importer_path: Path of the file holding the import
        stat: Filesystem stat callback (returns MISSING for absent paths)

    Returns:
        ImportEdge; unresolvable static targets keep their `.scss` form
    """
    url = _URL_TARGET.match(target)
    if url:
        return ImportEdge(filepath=url.group(1).strip(), dynamic=False, css=True)

    if _REMOTE_TARGET.match(target):
        return ImportEdge(filepath=target, dynamic=False, css=True)

    base = os.path.normpath(os.path.join(os.path.dirname(importer_path), target))

    if _DYNAMIC_PATH.search(target):
        return ImportEdge(filepath=base, dynamic=True, css=base.endswith('.css'))

    if base.endswith('.css'):
        return ImportEdge(filepath=base, dynamic=False, css=True)

    for candidate in path_variations(base):
        if stat(candidate).type == FileType.FILE:
            return ImportEdge(filepath=candidate, dynamic=False, css=candidate.endswith('.css'))

    fallback = base if base.endswith(STYLE_EXTENSIONS) else base + '.scss'
    return ImportEdge(filepath=fallback, dynamic=False, css=False)
