"""
Language configurations for symbol extraction.

- scss.py: SCSS (.scss)
"""

from .scss import SCSS_CONFIG

__all__ = [
    'SCSS_CONFIG',
]
