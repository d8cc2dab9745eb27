"""Command line entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Load a heading tree from a Markdown/MDX post or a JSON tree export
- Print the flattened refs, or the rendered navigation for a chosen state
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from tocsync import __version__
from tocsync.config import Settings
from tocsync.environment import InMemoryEnvironment
from tocsync.errors import ErrorCode, TocSyncError
from tocsync.flatten import coerce_heading_tree, flatten_headings
from tocsync.parser import parse_heading_tree
from tocsync.renderer import TocNavigation
from tocsync.tracker import ActiveSectionTracker

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tocsync.models.headings import HeadingNode

log = structlog.get_logger()

_MARKDOWN_SUFFIXES = frozenset({".md", ".mdx", ".markdown"})


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout carries the rendered output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


# ---------------------------------------------------------------------------
# Source loading
# ---------------------------------------------------------------------------


def load_heading_tree(path: Path, settings: Settings) -> list[HeadingNode]:
    """Read a heading tree from a post or from a JSON tree file.

    JSON files may hold the tree itself or an object with an MDX-style
    ``tableOfContents.items`` / ``items`` key.
    """
    if not path.is_file():
        raise TocSyncError(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=f"Source file not found: {path}",
            suggestion="Pass the path of a .md/.mdx post or a .json heading tree.",
        )
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TocSyncError(
            code=ErrorCode.SOURCE_READ_FAILED,
            message=f"Could not read {path}: {exc}",
            suggestion="Check file permissions and that the file is UTF-8 encoded.",
            recoverable=True,
        ) from exc

    if path.suffix.lower() in _MARKDOWN_SUFFIXES:
        return parse_heading_tree(
            text,
            min_depth=settings.render.min_depth,
            max_depth=settings.render.max_depth,
        )

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TocSyncError(
            code=ErrorCode.INVALID_INPUT,
            message=f"{path} is neither Markdown nor valid JSON: {exc.msg}",
            suggestion="Use a .md/.mdx extension for posts, or fix the JSON syntax.",
        ) from exc

    if isinstance(data, dict):
        toc = data.get("tableOfContents", data)
        data = toc.get("items") if isinstance(toc, dict) else None
    return coerce_heading_tree(data)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_flatten(args: argparse.Namespace, settings: Settings) -> str:
    tree = load_heading_tree(args.source, settings)
    refs = flatten_headings(tree)
    log.info("flatten_complete", source=str(args.source), ref_count=len(refs))
    return json.dumps([ref.model_dump() for ref in refs], indent=2)


def _cmd_render(args: argparse.Namespace, settings: Settings) -> str:
    tree = load_heading_tree(args.source, settings)
    refs = flatten_headings(tree)

    # Preview page: every heading has an element, nothing is in view yet
    environment = InMemoryEnvironment.with_elements(ref.id for ref in refs)
    tracker = ActiveSectionTracker(environment, settings.tracker)
    navigation = TocNavigation(tree, tracker, settings.render)
    try:
        if args.active:
            environment.enter(args.active.lstrip("#"))
            if navigation.active_id is None:
                log.warning("render_active_id_unknown", active=args.active)
        if args.expanded:
            navigation.toggle()
        html = navigation.render()
    finally:
        navigation.close()

    log.info("render_complete", source=str(args.source), ref_count=len(refs))
    return html


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tocsync",
        description="Render and inspect table-of-contents navigation for a post.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    flatten_parser = subparsers.add_parser("flatten", help="Print the flattened heading refs as JSON.")
    flatten_parser.add_argument("source", type=Path, help="Markdown/MDX post or JSON heading tree")
    flatten_parser.set_defaults(handler=_cmd_flatten)

    render_parser = subparsers.add_parser("render", help="Print the navigation HTML.")
    render_parser.add_argument("source", type=Path, help="Markdown/MDX post or JSON heading tree")
    render_parser.add_argument("--active", help="Heading id (or #anchor) to show as active")
    render_parser.add_argument("--expanded", action="store_true", help="Render the panel open")
    render_parser.set_defaults(handler=_cmd_render)

    return parser


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings()
    _setup_logging(settings)

    try:
        output = args.handler(args, settings)
    except TocSyncError as exc:
        log.warning(
            "command_error",
            command=args.command,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        print(json.dumps(exc.to_dict()), file=sys.stderr)
        return 1

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
