"""
Tests for the parsing module — SCSS hooks, import resolution, and
tree-sitter extraction.

Hook and resolver tests work WITHOUT tree-sitter-language-pack installed.
Tree-sitter dependent tests are marked and skipped when unavailable.
"""

import os

import pytest

from scssidx.core.fs import MISSING, FileStat, FileType, stat_file
from scssidx.core.parsing import LanguageConfig, SymbolQuery, TreeSitterExtractor
from scssidx.core.parsing.languages.scss import (
    SCSS_CONFIG,
    scss_import_extractor,
    scss_name_extractor,
    scss_parameter_extractor,
    scss_value_extractor,
    split_statements,
    split_top_level,
)
from scssidx.core.parsing.links import partial_name, path_variations, resolve_import
from tests.factories import requires_tree_sitter


def stat_for(existing):
    """Stat callback that knows only `existing` files."""
    def stat(path):
        if path in existing:
            return FileStat(type=FileType.FILE, ctime=0, mtime=0, size=1)
        return MISSING
    return stat


# =============================================================================
# Configuration
# =============================================================================

class TestLanguageConfig:
    """LanguageConfig and SymbolQuery."""

    def test_scss_config(self):
        """SCSS config handles .scss files."""
        assert SCSS_CONFIG.tree_sitter_name == 'scss'
        assert SCSS_CONFIG.matches_extension('.SCSS') is True
        assert SCSS_CONFIG.matches_extension('.css') is False

    def test_query_lookup(self):
        """Queries are found by node type."""
        assert SCSS_CONFIG.query_for('mixin_statement').symbol_type == 'mixin'
        assert SCSS_CONFIG.query_for('use_statement').symbol_type == 'import'
        assert SCSS_CONFIG.query_for('rule_set') is None

    def test_unknown_symbol_type(self):
        """Queries reject unknown symbol types."""
        with pytest.raises(ValueError):
            SymbolQuery(node_type='x', symbol_type='class')

    def test_default_config(self):
        """Hooks default to None."""
        config = LanguageConfig(name='Test', tree_sitter_name='test', extensions={'.t'})
        assert config.name_extractor is None
        assert config.opaque_node_types == set()


# =============================================================================
# SCSS hooks
# =============================================================================

class TestScssHooks:
    """Text hooks used by the extractor."""

    def test_variable_name(self):
        """Variable names keep their `$`."""
        assert scss_name_extractor('$primary-color: red;', 'variable') == '$primary-color'

    def test_property_is_not_variable(self):
        """Property declarations are not variables."""
        assert scss_name_extractor('color: red;', 'variable') is None

    def test_mixin_and_function_names(self):
        """Names come from the at-rule header."""
        assert scss_name_extractor('@mixin box($a) {}', 'mixin') == 'box'
        assert scss_name_extractor('@function double($n) {}', 'function') == 'double'
        assert scss_name_extractor('@mixin box {}', 'function') is None

    def test_variable_value(self):
        """Values drop the semicolon and flags."""
        assert scss_value_extractor('$a: 1px;') == '1px'
        assert scss_value_extractor('$a: #fff !default;') == '#fff'
        assert scss_value_extractor('$a: 1 !default !global;') == '1'
        assert scss_value_extractor('$a: map-get($m, k);') == 'map-get($m, k)'
        assert scss_value_extractor('$a:;') is None

    def test_parameters(self):
        """Parameters with and without defaults."""
        params = scss_parameter_extractor('@mixin box($size, $color: rgba(0, 0, 0, .5)) {}')
        assert params == [('$size', None), ('$color', 'rgba(0, 0, 0, .5)')]

    def test_no_parameters(self):
        """Mixins without a list have no parameters."""
        assert scss_parameter_extractor('@mixin clearfix { }') == []
        assert scss_parameter_extractor('@mixin clearfix() { }') == []

    def test_unclosed_parameters(self):
        """Half-typed lists still yield what is there."""
        assert scss_parameter_extractor('@mixin box($a, $b: 1') == [('$a', None), ('$b', '1')]

    def test_split_top_level(self):
        """Nested commas do not split."""
        assert split_top_level('a, f(b, c), [d, e]') == ['a', ' f(b, c)', ' [d, e]']

    def test_split_statements(self):
        """Statements end at top-level `;`, `{` and `}`."""
        text = "$a: 1;\n$m: (k: v; w);\n.x { $b: #{$a}px; }"
        statements = [(start, s.strip()) for start, s in split_statements(text) if s.strip()]
        assert [s for _, s in statements] == ['$a: 1', '$m: (k: v; w)', '.x', '$b: #{$a}px']
        assert text[statements[1][0]:].lstrip().startswith('$m')

    def test_split_statements_quotes_and_comments(self):
        """Quoted separators stay; comments end a statement and are dropped."""
        text = "$q: 'a;b'; // don't\n$c: 2; /* x; y */ $d: 3"
        statements = [s.strip() for _, s in split_statements(text) if s.strip()]
        assert statements == ["$q: 'a;b'", '$c: 2', '$d: 3']

    def test_import_targets(self):
        """All quoted targets of an @import."""
        assert scss_import_extractor("@import 'a', \"b/c\";") == ['a', 'b/c']

    def test_import_url(self):
        """url() imports are tagged."""
        assert scss_import_extractor("@import url(theme.css);") == ['url(theme.css)']

    def test_use_and_forward(self):
        """@use/@forward take their first target; sass: modules are skipped."""
        assert scss_import_extractor("@use 'src/corners' as c;") == ['src/corners']
        assert scss_import_extractor("@forward 'src/list' hide list-reset;") == ['src/list']
        assert scss_import_extractor("@use 'sass:math';") == []

    def test_not_an_import(self):
        """Other statements yield nothing."""
        assert scss_import_extractor("@include box('a');") == []


# =============================================================================
# Import resolution
# =============================================================================

class TestResolveImport:
    """Raw target -> ImportEdge."""

    def test_partial_name(self):
        """Underscore goes on the base name."""
        assert partial_name(os.path.join('dir', 'name.scss')) == os.path.join('dir', '_name.scss')
        assert partial_name('name.scss') == '_name.scss'

    def test_variations_without_extension(self):
        """Extension-less targets probe five candidates."""
        assert path_variations('a') == [
            'a.scss', '_a.scss',
            os.path.join('a', '_index.scss'), os.path.join('a', 'index.scss'),
            'a.css',
        ]

    def test_resolves_partial(self):
        """The partial is picked when only it exists."""
        edge = resolve_import('vars', 'main.scss', stat_for({'_vars.scss'}))
        assert edge.filepath == '_vars.scss'
        assert not edge.dynamic and not edge.css

    def test_relative_to_importer(self):
        """Targets resolve from the importing file's directory."""
        importer = os.path.join('styles', 'main.scss')
        expected = os.path.join('styles', 'base', 'reset.scss')
        edge = resolve_import('base/reset', importer, stat_for({expected}))
        assert edge.filepath == expected

    def test_index_file(self):
        """Directories resolve to their index partial."""
        expected = os.path.join('theme', '_index.scss')
        edge = resolve_import('theme', 'main.scss', stat_for({expected}))
        assert edge.filepath == expected

    def test_unresolved_keeps_scss_form(self):
        """Missing targets keep a `.scss` path for the scanner to evict."""
        edge = resolve_import('missing', 'main.scss', stat_for(set()))
        assert edge.filepath == 'missing.scss'

    def test_css_target(self):
        """`.css` targets are plain CSS."""
        assert resolve_import('reset.css', 'main.scss', stat_for(set())).css is True

    def test_css_variation(self):
        """An extension-less target found only as .css is plain CSS."""
        edge = resolve_import('reset', 'main.scss', stat_for({'reset.css'}))
        assert edge.css is True

    def test_url_and_remote(self):
        """url() and remote targets are plain CSS."""
        assert resolve_import('url(x.css)', 'main.scss', stat_for(set())).css is True
        assert resolve_import('https://fonts.example/x', 'main.scss', stat_for(set())).css is True
        assert resolve_import('//cdn.example/x', 'main.scss', stat_for(set())).css is True

    def test_dynamic(self):
        """Interpolation and globs make a target dynamic."""
        assert resolve_import('theme-#{$name}', 'main.scss', stat_for(set())).dynamic is True
        assert resolve_import('parts/*', 'main.scss', stat_for(set())).dynamic is True

    def test_real_filesystem(self, tmp_path):
        """Works with the real stat callback."""
        (tmp_path / '_vars.scss').write_text('$v: 1;')
        edge = resolve_import('vars', str(tmp_path / 'main.scss'), stat_file)
        assert edge.filepath == str(tmp_path / '_vars.scss')


# =============================================================================
# Extraction
# =============================================================================

SAMPLE = """$one: 1px;
$two: #fff !default;

@mixin box($size, $color: red) {
  width: $size;
  $inner: 2;
}

@function double($n) {
  @return $n * 2;
}

.a { color: $two; }
"""


class TestExtractorWithoutGrammar:
    """Degradation when no parser is available."""

    def test_no_parser_gives_empty_table(self, monkeypatch):
        """No grammar means an empty, not missing, table."""
        extractor = TreeSitterExtractor()
        monkeypatch.setattr(extractor, '_get_parser', lambda name: None)
        table = extractor.extract('a.scss', SAMPLE)
        assert table.document == 'a.scss'
        assert table.variables == [] and table.mixins == []

    def test_oversized_file_gives_empty_table(self):
        """Files over the size limit are not parsed."""
        config = LanguageConfig(name='Tiny', tree_sitter_name='scss', extensions={'.scss'},
                                symbol_queries=list(SCSS_CONFIG.symbol_queries), max_file_size=5)
        table = TreeSitterExtractor(config).extract('a.scss', SAMPLE)
        assert table.variables == []

    def test_document_identity(self, monkeypatch):
        """Identity and on-disk path are kept apart."""
        extractor = TreeSitterExtractor()
        monkeypatch.setattr(extractor, '_get_parser', lambda name: None)
        table = extractor.extract('_a.scss', '', document='a.scss')
        assert (table.document, table.filepath) == ('a.scss', '_a.scss')


@requires_tree_sitter
class TestTreeSitterExtractor:
    """Extraction with the scss grammar."""

    def test_variables(self):
        """Top-level and nested variables, in order."""
        table = TreeSitterExtractor().extract('a.scss', SAMPLE)
        names = [v.name for v in table.variables]
        assert names[:2] == ['$one', '$two']
        assert '$inner' in names
        assert table.variables[0].value == '1px'
        assert table.variables[1].value == '#fff'

    def test_variable_position(self):
        """Positions are (line, character)."""
        table = TreeSitterExtractor().extract('a.scss', "\n  $x: 1;")
        assert table.variables[0].position == (1, 2)
        assert table.variables[0].offset == 3

    def test_mixins_and_functions(self):
        """Mixins and functions with parameters."""
        table = TreeSitterExtractor().extract('a.scss', SAMPLE)
        assert [m.name for m in table.mixins] == ['box']
        assert [(p.name, p.value) for p in table.mixins[0].parameters] == [
            ('$size', None), ('$color', 'red'),
        ]
        assert [f.name for f in table.functions] == ['double']

    def test_parameters_are_not_variables(self):
        """Parameters are not listed as variables outside the body."""
        table = TreeSitterExtractor().extract('a.scss', SAMPLE)
        assert all(v.mixin is None for v in table.variables)
        assert '$color' not in [v.name for v in table.variables]

    def test_parameter_bindings_inside_body(self):
        """Inside a mixin body its parameters become variables."""
        offset = SAMPLE.index('width')
        table = TreeSitterExtractor().extract('a.scss', SAMPLE, offset=offset)
        bound = [(v.name, v.mixin) for v in table.variables if v.mixin]
        assert bound == [('$size', 'box'), ('$color', 'box')]

    def test_imports_resolved(self, tmp_path):
        """Imports resolve against the filesystem."""
        (tmp_path / '_vars.scss').write_text('$v: 1;')
        content = "@import 'vars';\n@use 'sass:math';\n@import 'print.css';\n"
        table = TreeSitterExtractor().extract(str(tmp_path / 'main.scss'), content)
        assert [e.filepath for e in table.imports] == [
            str(tmp_path / '_vars.scss'), str(tmp_path / 'print.css'),
        ]
        assert [e.css for e in table.imports] == [False, True]

    def test_invalid_text(self):
        """Broken text still parses into whatever is recognizable."""
        table = TreeSitterExtractor().extract('a.scss', "$ok: 1;\n.a { color: ")
        assert [v.name for v in table.variables] == ['$ok']

    def test_map_does_not_hide_next_declaration(self):
        """Declarations after a Sass map are still found."""
        content = "$primary: blue;\n$bp: (sm: 576px, md: 768px);\n$spacer: 1rem;\n"
        table = TreeSitterExtractor().extract('v.scss', content)
        assert [(v.name, v.value) for v in table.variables] == [
            ('$primary', 'blue'),
            ('$bp', '(sm: 576px, md: 768px)'),
            ('$spacer', '1rem'),
        ]

    def test_nested_map_before_mixin(self):
        """A nested map keeps the statements after it."""
        content = "$theme: (primary: (base: #00f), muted: #999);\n$gap: 4px;\n@mixin pad($n) { padding: $n; }\n"
        table = TreeSitterExtractor().extract('v.scss', content)
        assert [v.name for v in table.variables] == ['$theme', '$gap']
        assert [m.name for m in table.mixins] == ['pad']

    def test_each_variable_once(self):
        """Statement recovery does not duplicate parsed declarations."""
        table = TreeSitterExtractor().extract('a.scss', SAMPLE)
        names = [v.name for v in table.variables]
        assert names == ['$one', '$two', '$inner']

    def test_bindings_in_unclosed_body(self):
        """Parameters are bound while the body is still being typed."""
        content = "@mixin box($size, $c: red) {\n  width: $"
        table = TreeSitterExtractor().extract('a.scss', content, offset=len(content))
        bound = [(v.name, v.value, v.mixin) for v in table.variables if v.mixin]
        assert bound == [('$size', None, 'box'), ('$c', 'red', 'box')]

    def test_no_bindings_after_closed_body(self):
        """A cursor after the closing brace binds nothing."""
        content = "@mixin box($size) {\n  width: $size;\n}\n.a { width: $"
        table = TreeSitterExtractor().extract('a.scss', content, offset=len(content))
        assert [v for v in table.variables if v.mixin] == []
