"""Command-line interface for docmerge.

``docmerge merge`` ensures the README contains every documentation comment
(``//**`` or ``##**`` lines) found in the sources, preserving images, HTML
and insert-blocks added by hand. ``docmerge serve`` runs the HTTP service.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence, Tuple

from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .config import STRATEGIES, Settings, get_settings
from .services.documents import read_document, write_document
from .services.extract import extract_docblocks
from .services.preview import print_preview
from .services.reconcile import fresh_document, make_tracer, reconcile, summarize
from .utils.errors import ConfigurationError, DocmergeError
from .utils.logging import configure_logging

LOGGER = logging.getLogger(__name__)

GLOB_CHARS = set("*?[")
COMMANDS = {"merge", "serve"}


def _split_sources(values: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Separate plain source roots from include globs."""

    roots: List[str] = []
    patterns: List[str] = []
    for value in values:
        if GLOB_CHARS.intersection(value):
            patterns.append(value)
        else:
            roots.append(value)
    if patterns and not roots:
        roots.append(".")
    return roots, patterns


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docmerge", description=__doc__)
    parser.add_argument("-v", "--version", action="version", version=__version__)
    commands = parser.add_subparsers(dest="command")

    merge = commands.add_parser("merge", help="Merge documentation comments into the README.")
    merge.add_argument(
        "--src",
        action="append",
        default=None,
        help="Source root or glob to search (repeatable; default: current directory).",
    )
    merge.add_argument(
        "--skip",
        action="append",
        default=None,
        help="Glob of paths to exclude when searching sources (repeatable).",
    )
    merge.add_argument(
        "-e",
        "--ext",
        action="append",
        default=None,
        help="Comma-separated source file extensions (js,py,java,sql,ts,sh,go,c,cpp by default).",
    )
    merge.add_argument("--readme", type=Path, default=None, help="Path of the document to merge.")
    merge.add_argument(
        "--quick",
        action="store_true",
        help="Use the faster (but less accurate) greedy ordering.",
    )
    merge.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=None,
        help="Ordering strategy (overrides --quick).",
    )
    merge.add_argument(
        "--node-budget",
        type=int,
        default=None,
        help="Stop the exhaustive search after this many alignment steps (0 = unlimited).",
    )
    merge.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview the merge without writing the document.",
    )
    merge.add_argument(
        "--no-preview",
        dest="preview",
        action="store_false",
        help="Do not print the change preview.",
    )

    serve = commands.add_parser("serve", help="Run the HTTP reconciliation service.")
    serve.add_argument("--host", default=None, help="Host interface to bind.")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on.")
    serve.add_argument("--log-level", default=None, help="Log level passed to Uvicorn.")
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Restart on changes to the docmerge sources (development only).",
    )
    return parser


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        errors = "; ".join(error["msg"] for error in exc.errors())
        raise ConfigurationError(errors) from exc


def _merge_settings(args: argparse.Namespace, settings: Settings) -> Settings:
    update: dict[str, object] = {}
    if args.readme is not None:
        update["readme_path"] = args.readme
    if args.node_budget is not None:
        update["node_budget"] = max(0, args.node_budget)
    if args.strategy is not None:
        update["strategy"] = args.strategy
    elif args.quick:
        update["strategy"] = "quick"
    return settings.model_copy(update=update) if update else settings


def run_merge(args: argparse.Namespace, console: Console) -> int:
    settings = _merge_settings(args, _load_settings())
    roots, patterns = _split_sources(args.src or list(settings.src_roots))
    extensions = args.ext or list(settings.extensions)
    skip = list(settings.skip_globs) + list(args.skip or [])

    blocks = extract_docblocks(
        roots, include=patterns, skip=skip, extensions=extensions
    )
    readme = settings.readme_path
    document = read_document(readme)

    if document is None:
        LOGGER.info("%s not found; generating it from %d docblocks", readme, len(blocks))
        operations = fresh_document(blocks)
        distance = 0
    else:
        tracer = make_tracer(settings)
        result = reconcile(blocks, document, settings=settings, tracer=tracer)
        if tracer:
            tracer.flush_jsonl()
        operations = result.operations
        distance = result.distance
        if not result.complete:
            console.print("[yellow]Search budget exhausted; the ordering may not be optimal.[/yellow]")

    if args.preview:
        print_preview(operations, console=console)

    counts = summarize(operations)
    if args.dry_run:
        console.print(f"[bold]Dry run[/bold]: {readme} left untouched")
    else:
        write_document(readme, operations)
    console.print(
        f"distance={distance} unchanged={counts['unchanged']} added={counts['added']} "
        f"removed={counts['removed']} fresh={counts['fresh']}"
    )
    return 0


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "docmerge.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=args.log_level or settings.log_level,
        reload=args.reload,
        reload_dirs=[str(Path(__file__).resolve().parent)] if args.reload else None,
    )
    return 0


def main(argv: Sequence[str] | None = None, console: Console | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or (argv[0] not in COMMANDS and argv[0] not in {"-h", "--help", "-v", "--version"}):
        argv = ["merge", *argv]

    args = build_parser().parse_args(argv)
    configure_logging()
    console = console or Console()

    if args.command == "serve":
        return run_serve(args)
    try:
        return run_merge(args, console)
    except DocmergeError as exc:
        LOGGER.debug("merge failed: %s", exc.extra)
        console.print(exc.message, style="red", markup=False)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
