"""CLI/bootstrap helpers for the paper network explorer."""

from __future__ import annotations

import argparse
import asyncio
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from paper_network.action_messages import build_actionable_error, build_load_failure_message
from paper_network.config import UserConfig, load_config
from paper_network.datastore import DataLoadError, DataSources, DataStore
from paper_network.export import (
    format_graph_as_force_json,
    format_graph_as_text,
    format_results_as_json,
    format_results_as_text,
)
from paper_network.graph import build_ego_graph
from paper_network.models import CONFIG_APP_NAME, DataSnapshot, GraphPolicy
from paper_network.search import filter_entries

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


def _resolve_sources(args: argparse.Namespace, config: UserConfig) -> DataSources:
    """Combine --data and the per-document flags with the configured source."""
    base = args.data if args.data is not None else config.data_source
    sources = DataSources.from_base(base or ".")
    overrides = {
        field: value
        for field, value in (
            ("title_index", args.titles),
            ("adjacency", args.edges),
            ("search_index", args.search_index),
        )
        if value
    }
    if overrides:
        sources = replace(sources, **overrides)
    return sources


def _resolve_policy(args: argparse.Namespace, config: UserConfig) -> GraphPolicy:
    """Build the graph policy from config plus one-run CLI overrides."""
    policy = config.graph_policy()
    if args.fallback_title:
        policy = replace(policy, fallback_title=args.fallback_title)
    if args.no_recenter:
        policy = replace(policy, allow_recenter_on_node_click=False)
    return policy


def _load_snapshot(sources: DataSources, config: UserConfig) -> DataSnapshot:
    """Load the three documents synchronously for the non-interactive modes."""
    store = DataStore(sources, timeout_seconds=config.request_timeout_seconds)
    return asyncio.run(store.load())


def _run_search(snapshot: DataSnapshot, term: str, output_format: str) -> int:
    results = filter_entries(term, snapshot.search_entries)
    if not results:
        print(
            build_actionable_error(
                f"find papers matching {term!r}",
                next_step="try a shorter or different title fragment",
            ),
            file=sys.stderr,
        )
        return 1
    if output_format == "json":
        print(format_results_as_json(results))
    else:
        print(format_results_as_text(results))
    return 0


def _run_show(
    snapshot: DataSnapshot, paper_id: int, policy: GraphPolicy, output_format: str
) -> int:
    graph = build_ego_graph(
        paper_id,
        snapshot.title_index,
        snapshot.adjacency,
        fallback_title=policy.fallback_title,
    )
    if output_format == "json":
        print(format_graph_as_force_json(graph))
    else:
        print(format_graph_as_text(graph))
    return 0


def _configure_logging(debug: bool) -> None:
    """Configure logging. When debug=True, logs to file at DEBUG level."""
    if not debug:
        # Default: suppress all logging (TUI captures stderr)
        logging.disable(logging.CRITICAL)
        return

    log_dir = Path(user_config_dir(CONFIG_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "debug.log"

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)


def _configure_color_mode(color_mode: str) -> None:
    """Configure environment hints for terminal color behavior."""
    if color_mode == "never":
        os.environ["NO_COLOR"] = "1"
        os.environ.pop("FORCE_COLOR", None)
        return
    if color_mode == "always":
        os.environ["FORCE_COLOR"] = "1"
        os.environ.pop("NO_COLOR", None)
        return
    # auto
    os.environ.pop("FORCE_COLOR", None)


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paper-network",
        description="Search papers by title and explore their direct citation neighbors",
    )
    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="Base URL or directory holding papers.json, citation_edges.json, search_index.json",
    )
    parser.add_argument("--titles", type=str, default=None, help="Location of the title index")
    parser.add_argument("--edges", type=str, default=None, help="Location of the citation edges")
    parser.add_argument(
        "--search-index", type=str, default=None, help="Location of the search index"
    )
    parser.add_argument(
        "--fallback-title",
        type=str,
        default=None,
        help="Label for papers missing from the title index (default: config value)",
    )
    parser.add_argument(
        "--no-recenter",
        action="store_true",
        help="Do not re-center the graph when a node is activated",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--search",
        type=str,
        default=None,
        metavar="TERM",
        help="Print up to 10 papers whose title contains TERM and exit",
    )
    mode.add_argument(
        "--show",
        type=int,
        default=None,
        metavar="ID",
        help="Print the citation neighborhood of paper ID and exit",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format for --search/--show (default: text)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/paper-network/debug.log)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    return parser


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    load_snapshot_fn: Callable[[DataSources, UserConfig], DataSnapshot] = _load_snapshot,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.search is not None and not args.search.strip():
        print("Error: --search needs a non-empty TERM", file=sys.stderr)
        return 1

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("paper-network starting, cwd=%s", Path.cwd())

    config = load_config_fn()
    sources = _resolve_sources(args, config)
    policy = _resolve_policy(args, config)

    if args.search is not None or args.show is not None:
        try:
            snapshot = load_snapshot_fn(sources, config)
        except DataLoadError as exc:
            print(build_load_failure_message(exc, interactive=False), file=sys.stderr)
            return 1
        if args.search is not None:
            return _run_search(snapshot, args.search, args.format)
        return _run_show(snapshot, args.show, policy, args.format)

    if not validate_interactive_tty_fn():
        print(
            "Error: paper-network requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run paper-network directly in a terminal session", file=sys.stderr)
        print("  - Use --search TERM or --show ID for non-interactive output", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    if app_factory is None:
        from paper_network.app import PaperNetworkApp as _PaperNetworkApp

        app_factory = _PaperNetworkApp

    app = app_factory(sources, config=config, policy=policy)
    app.run()
    return 0


__all__ = [
    "_configure_color_mode",
    "_configure_logging",
    "_load_snapshot",
    "_resolve_policy",
    "_resolve_sources",
    "_validate_interactive_tty",
    "main",
]
