"""
Tests for workspace discovery and filesystem helpers.
"""

import os

from scssidx.config import Settings
from scssidx.core.fs import MISSING, FileType, file_exists, stat_file
from scssidx.core.workspace import discover_files, is_excluded


class TestDiscoverFiles:
    """Seed discovery."""

    def test_finds_scss_only(self, project):
        """Only .scss files are seeds."""
        project.write({'a.scss': '', 'b.css': '', 'sub/_c.scss': ''})
        found = discover_files(project.root)
        assert sorted(found) == sorted([project.path('a.scss'), project.path('sub/_c.scss')])

    def test_excludes(self, project):
        """Default excludes skip node_modules."""
        project.write({'a.scss': '', 'node_modules/pkg/x.scss': ''})
        assert discover_files(project.root) == [project.path('a.scss')]

    def test_custom_exclude(self, project):
        """Custom globs apply to files too."""
        project.write({'a.scss': '', 'vendor/v.scss': '', 'b.generated.scss': ''})
        settings = Settings(scanner_exclude=['**/vendor', '*.generated.scss'])
        assert discover_files(project.root, settings) == [project.path('a.scss')]

    def test_depth(self, project):
        """Directories deeper than the limit are skipped."""
        project.write({'a.scss': '', 'one/b.scss': '', 'one/two/c.scss': ''})
        found = discover_files(project.root, Settings(scanner_depth=1))
        assert sorted(found) == sorted([project.path('a.scss'), project.path('one/b.scss')])

    def test_limit(self, project):
        """At most scanner_limit files."""
        project.write({f'f{i}.scss': '' for i in range(5)})
        assert len(discover_files(project.root, Settings(scanner_limit=3))) == 3

    def test_is_excluded(self):
        """Directory patterns cover their contents."""
        assert is_excluded('node_modules', ['**/node_modules']) is True
        assert is_excluded(os.path.join('a', 'node_modules', 'x.scss'), ['**/node_modules']) is True
        assert is_excluded('src/a.scss', ['**/node_modules']) is False


class TestFilesystem:
    """fs helpers."""

    def test_stat_missing(self, tmp_path):
        """Missing paths return the sentinel instead of raising."""
        stat = stat_file(tmp_path / 'nope.scss')
        assert stat is MISSING
        assert stat.exists is False

    def test_stat_file_and_directory(self, tmp_path):
        """Files and directories are told apart."""
        (tmp_path / 'a.scss').write_text('$a: 1;')
        assert stat_file(tmp_path / 'a.scss').type == FileType.FILE
        assert stat_file(tmp_path / 'a.scss').size == 6
        assert stat_file(tmp_path).type == FileType.DIRECTORY

    def test_file_exists(self, tmp_path):
        """Directories are not files."""
        (tmp_path / 'a.scss').write_text('')
        assert file_exists(tmp_path / 'a.scss') is True
        assert file_exists(tmp_path) is False
        assert file_exists(tmp_path / 'b.scss') is False
