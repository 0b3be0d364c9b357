"""
CLI -- Command interface for the SCSS symbol index

Each invocation builds a fresh store, scans what it needs, and prints.

    scssidx scan styles/                 # index a tree, print symbol counts
    scssidx symbols styles/_vars.scss    # one file's symbol table
    scssidx complete main.scss 120       # completions at an offset
    scssidx config                       # effective settings
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .core.document import Document, UnresolvableDocumentError
from .core.fs import canonical_path
from .core.parsing import TreeSitterExtractor
from .core.scanner import ImportScanner
from .core.store import SymbolStore
from .core.workspace import discover_files
from .services.completion import complete
from . import __version__


class IndexCLI:
    """Holds the per-run store, scanner and settings."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.settings = self.config_manager.load()
        self.store = SymbolStore()
        self.extractor = TreeSitterExtractor()
        self.scanner = ImportScanner(self.store, self.settings, self.extractor)

    def _seeds(self, paths: List[str]) -> List[str]:
        """Expand directories into the stylesheet files they hold."""
        seeds = []
        for path in paths:
            if os.path.isdir(path):
                seeds.extend(discover_files(path, self.settings))
            else:
                seeds.append(path)
        return seeds

    def scan(self, paths: List[str], recursive: bool = True) -> int:
        seeds = self._seeds(paths)
        self.scanner.scan(seeds, recursive=recursive)

        if not len(self.store):
            print("No stylesheets indexed.")
            return 0

        for path, table in self.store.entries().items():
            counts = table.counts()
            print(
                f"{path}  variables={counts['variables']} mixins={counts['mixins']} "
                f"functions={counts['functions']} imports={counts['imports']}"
            )
        return 0

    def symbols(self, path: str, as_json: bool = False) -> int:
        self.scanner.scan([path], recursive=False)
        wanted = canonical_path(path)
        table = next(
            (t for t in self.store.tables() if wanted in (t.document, t.filepath)),
            None,
        )
        if table is None:
            print(f"Error: {path} not found", file=sys.stderr)
            return 1

        if as_json:
            print(json.dumps(table.to_dict(), indent=2))
            return 0

        print(f"{table.filepath}")
        for variable in table.variables:
            owner = f"  (argument from {variable.mixin})" if variable.mixin else ""
            print(f"  var      {variable.name}: {variable.value}{owner}")
        for mixin in table.mixins:
            print(f"  mixin    {mixin.name}({', '.join(p.name for p in mixin.parameters)})")
        for func in table.functions:
            print(f"  function {func.name}({', '.join(p.name for p in func.parameters)})")
        for edge in table.imports:
            flags = [name for name, on in (("dynamic", edge.dynamic), ("css", edge.css)) if on]
            suffix = f"  [{', '.join(flags)}]" if flags else ""
            print(f"  import   {edge.filepath}{suffix}")
        return 0

    def complete(self, path: str, offset: int, as_json: bool = False) -> int:
        try:
            document = Document.from_file(path)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        # Workspace of the file: everything under the project directory
        self.scanner.scan(discover_files(self.project_dir, self.settings))

        try:
            completions = complete(document, offset, self.settings, self.store, self.extractor)
        except UnresolvableDocumentError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if as_json:
            print(json.dumps(completions.to_dict(), indent=2, ensure_ascii=False))
            return 0

        if not completions.items:
            print("No completions.")
            return 0

        for item in completions.items:
            doc = f"  {item.documentation}" if item.documentation else ""
            print(f"{item.label}  [{item.kind.name.lower()}]  {item.detail}{doc}")
        return 0

    def config(self, key: Optional[str] = None, value: Optional[str] = None) -> int:
        if key is None:
            print(self.config_manager.display())
            return 0
        if value is None:
            settings = self.config_manager.load().to_dict()
            if key not in settings:
                print(f"Error: unknown setting {key}", file=sys.stderr)
                return 1
            print(settings[key])
            return 0
        error = self.config_manager.set(key, value)
        if error:
            print(f"Error: {error}", file=sys.stderr)
            return 1
        print(f"Set {key} = {value}")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scssidx",
        description="scssidx -- SCSS symbol index and completion",
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("SCSSIDX_PROJECT_PATH", "."),
        help='Project directory (default: SCSSIDX_PROJECT_PATH or current)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log scanner activity to stderr'
    )
    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'scssidx {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    scan_parser = subparsers.add_parser('scan', help='Index stylesheets and their imports')
    scan_parser.add_argument('paths', nargs='+', help='Files or directories')
    scan_parser.add_argument('--no-recursive', action='store_true', help='Do not follow imports')

    symbols_parser = subparsers.add_parser('symbols', help="Show one file's symbols")
    symbols_parser.add_argument('path')
    symbols_parser.add_argument('--json', action='store_true', help='JSON output')

    complete_parser = subparsers.add_parser('complete', help='Completions at an offset')
    complete_parser.add_argument('path')
    complete_parser.add_argument('offset', type=int, help='Character offset of the cursor')
    complete_parser.add_argument('--json', action='store_true', help='JSON output')

    config_parser = subparsers.add_parser('config', help='Show or set settings')
    config_parser.add_argument('key', nargs='?')
    config_parser.add_argument('value', nargs='?')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the scssidx CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    cli = IndexCLI(Path(args.project))

    error = cli.settings.validate()
    if error:
        print(f"Error: {error}", file=sys.stderr)
        return 2

    if args.command == 'scan':
        return cli.scan(args.paths, recursive=not args.no_recursive)
    if args.command == 'symbols':
        return cli.symbols(args.path, as_json=args.json)
    if args.command == 'complete':
        return cli.complete(args.path, args.offset, as_json=args.json)
    if args.command == 'config':
        return cli.config(args.key, args.value)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
