"""
Shared pytest fixtures for the scssidx test suite.

Usage in tests:
    def test_something(store, settings):
        completions = complete(Document("test.scss", "$"), 1, settings, store)

    def test_scan(project, line_extractor):
        paths = project.write({"main.scss": "@import 'vars';"})
"""

import pytest

from scssidx.config import Settings
from scssidx.core.store import SymbolStore
from tests.factories import LineExtractor, StylesheetProject, make_table


@pytest.fixture
def settings():
    """Default settings."""
    return Settings()


@pytest.fixture
def store():
    """
    Store holding `one.scss`: five variables (three of them colors),
    one mixin and one function.
    """
    store = SymbolStore()
    store.set('one.scss', make_table(
        'one.scss',
        variables=[
            ('$one', '1'),
            ('$two', None),
            ('$hex', '#fff'),
            ('$rgb', 'rgb(0,0,0)'),
            ('$word', 'red'),
        ],
        mixins=['test'],
        functions=['make'],
    ))
    return store


@pytest.fixture
def project(tmp_path):
    """Writes stylesheet trees into a temp directory."""
    return StylesheetProject(tmp_path)


@pytest.fixture
def line_extractor():
    """Grammar-free extractor that records each file it parses."""
    return LineExtractor()
