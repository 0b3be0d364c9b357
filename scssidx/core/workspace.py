"""
Workspace discovery — Seed paths for a full scan.

Finds every `.scss` file under a root, honouring the scanner settings:
depth limit, exclude globs and a file count cap.
"""

import fnmatch
import logging
import os
from pathlib import Path
from typing import List, Union

from ..config import Settings

logger = logging.getLogger(__name__)

STYLESHEET_SUFFIX = '.scss'


def is_excluded(rel_path: str, patterns: List[str]) -> bool:
    """
    Check a root-relative path against exclude globs.

    A pattern such as `**/node_modules` also excludes everything below
    the matched directory.
    """
    rel_path = rel_path.replace(os.sep, '/')
    candidates = [rel_path, '/' + rel_path]
    for pattern in patterns:
        for candidate in candidates:
            if fnmatch.fnmatch(candidate, pattern) or fnmatch.fnmatch(candidate, pattern + '/*'):
                return True
    return False


def discover_files(root: Union[str, Path], settings: Settings = None) -> List[str]:
    """
    List stylesheet files under `root`.

    Args:
        root: Directory to search
        settings: Scanner depth/exclude/limit (defaults if None)

    Returns:
        Sorted file paths, at most `scanner_limit` of them
    """
    settings = settings or Settings()
    root = Path(root)
    found: List[str] = []

    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)
        depth = 0 if rel_dir == '.' else rel_dir.count(os.sep) + 1

        # Prune excluded and too-deep directories in place
        kept = []
        for name in sorted(dirnames):
            rel = name if rel_dir == '.' else os.path.join(rel_dir, name)
            if depth + 1 > settings.scanner_depth or is_excluded(rel, settings.scanner_exclude):
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in sorted(filenames):
            if not name.endswith(STYLESHEET_SUFFIX):
                continue
            rel = name if rel_dir == '.' else os.path.join(rel_dir, name)
            if is_excluded(rel, settings.scanner_exclude):
                continue
            found.append(str(Path(dirpath) / name))
            if len(found) >= settings.scanner_limit:
                logger.warning("Scanner limit of %d files reached under %s", settings.scanner_limit, root)
                return found

    return found
