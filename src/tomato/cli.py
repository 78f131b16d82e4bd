"""Command-line front end.

Usage:
    tomato app.tom                      # writes app.css
    tomato app.tom -o dist/styles.css
    tomato app.tom --scoped --scope-id card
    tomato app.tom --tokens brand.yaml
    tomato --watch app.tom -o styles.css
    tomato --lint app.tom
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from .api import compile_file
from .errors import TomatoError
from .imports import imported_files, resolve_imports
from .lint import ERROR, lint
from .tokens import load_token_overrides

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tomato", description="Compile Tomato (.tom) stylesheets to CSS"
    )
    parser.add_argument("input", type=Path, help="Input .tom file")
    parser.add_argument("-o", "--output", type=Path, help="Output .css file (default: <input>.css)")
    parser.add_argument("--scoped", action="store_true", help="Write scoped CSS")
    parser.add_argument("--scope-id", help="Scope id for --scoped (default: derived from source)")
    parser.add_argument("--tokens", type=Path, help="YAML file of token overrides")
    parser.add_argument("-w", "--watch", action="store_true", help="Recompile when files change")
    parser.add_argument(
        "--interval", type=float, default=0.5, help="Watch polling interval in seconds"
    )
    parser.add_argument("--lint", action="store_true", help="Report diagnostics instead of compiling")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def compile_to_file(args: argparse.Namespace, output: Path, overrides: dict | None) -> bool:
    """Compile ``args.input`` into ``output``. Returns False on failure."""
    try:
        result = compile_file(
            args.input, scoped=args.scoped, scope_id=args.scope_id, token_overrides=overrides
        )
    except TomatoError as e:
        print(f"Error in {args.input.name}: {e}", file=sys.stderr)
        return False

    for error in result.errors:
        print(f"Error: {error}", file=sys.stderr)

    css = result.scoped_css if args.scoped else result.css
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(css, encoding="utf-8")
    print(f"Compiled: {args.input.name} -> {output.name}")
    return True


def snapshot(files: list[Path]) -> dict[Path, float]:
    """Modification times of ``files``; missing files are left out."""
    mtimes = {}
    for file in files:
        try:
            mtimes[file] = file.stat().st_mtime
        except OSError:
            continue
    return mtimes


def watch(args: argparse.Namespace, output: Path, overrides: dict | None) -> None:
    """Poll the input and its imports, recompiling on change."""
    files = imported_files(args.input)
    seen = snapshot(files)
    print(f"Watching {len(files)} file(s)")
    try:
        while True:
            time.sleep(args.interval)
            current = snapshot(files)
            if current == seen:
                continue
            changed = sorted(f.name for f in current if seen.get(f) != current[f])
            print(f"Changed: {', '.join(changed)}")
            compile_to_file(args, output, overrides)
            # imports may have been added or removed
            try:
                files = imported_files(args.input)
            except TomatoError as e:
                logger.warning("keeping previous watch list: %s", e)
            seen = snapshot(files)
    except KeyboardInterrupt:
        print("Stopped watching")


def run_lint(path: Path) -> int:
    source = resolve_imports(path)
    diagnostics = lint(source)
    for diagnostic in diagnostics:
        print(f"{path}:{diagnostic}")
    if any(d.severity == ERROR for d in diagnostics):
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``tomato``."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)

    overrides = None
    if args.tokens:
        try:
            overrides = load_token_overrides(args.tokens)
        except (OSError, TomatoError) as e:
            print(f"Error: cannot load tokens: {e}", file=sys.stderr)
            return 1

    if args.lint:
        try:
            return run_lint(args.input)
        except TomatoError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    output = args.output or args.input.with_suffix(".css")
    ok = compile_to_file(args, output, overrides)

    if args.watch:
        if not ok and not args.input.exists():
            return 1
        watch(args, output, overrides)
        return 0
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
