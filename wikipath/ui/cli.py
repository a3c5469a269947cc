from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

from ..config import ConfigError, RunConfig
from ..utils.logging import setup_logging
from ..utils.loader import load_symbol
from ..engines.base import CrawlOutcome, CrawlReport
from ..engines.bfs_engine import BFSCrawlEngine

logger = logging.getLogger(__name__)

EXIT_FOUND = 0
EXIT_EXHAUSTED = 1
EXIT_CONFIG_ERROR = 2
EXIT_CANCELLED = 3

_EXIT_CODES = {
    CrawlOutcome.FOUND: EXIT_FOUND,
    CrawlOutcome.EXHAUSTED: EXIT_EXHAUSTED,
    CrawlOutcome.CANCELLED: EXIT_CANCELLED,
}


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Find a path between two wiki pages by concurrent BFS")
    p.add_argument("--source", type=str, default=None, help="Starting link (default from config)")
    p.add_argument("--sink", type=str, default=None, help="Ending link (default from config)")
    p.add_argument("--concurrency", type=int, default=None,
                   help="Number of active workers. Max 10, min 1 (default from config)")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--timeout", type=float, default=None, help="Give up after this many seconds")
    p.add_argument("--request-timeout", type=float, default=None, help="Per-page fetch timeout in seconds")
    p.add_argument("--extractor", type=str, default=None, help="Link extractor dotted path (module:ClassName)")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    return p


def _load_config(args: argparse.Namespace) -> RunConfig:
    if args.config:
        cfg = RunConfig.from_file(args.config)
    else:
        cfg = RunConfig.from_env()

    if args.source:
        cfg.source = args.source
    if args.sink:
        cfg.sink = args.sink
    if args.concurrency is not None:
        cfg.thread_count = args.concurrency
    if args.timeout is not None:
        cfg.timeout = args.timeout
    if args.request_timeout is not None:
        cfg.request_timeout = args.request_timeout
    if args.extractor:
        cfg.extractor = args.extractor

    cfg.validate()
    return cfg


def report_outcome(report: CrawlReport) -> int:
    if report.outcome is CrawlOutcome.FOUND:
        logger.info("Found %s after %s visits | Path: %s",
                    report.sink, report.visit_count, " -> ".join(report.path))
    elif report.outcome is CrawlOutcome.EXHAUSTED:
        logger.warning("No path from %s to %s within the explored graph (%s visits)",
                       report.source, report.sink, report.visit_count)
    else:
        logger.warning("Gave up looking for %s after %s visits", report.sink, report.visit_count)
    return _EXIT_CODES[report.outcome]


def run_cli(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = _load_config(args)
        # Resolve the extractor early so a bad dotted path fails before any crawl starts.
        load_symbol(cfg.extractor)
        engine = BFSCrawlEngine(cfg)
    except (ConfigError, ImportError, OSError, ValueError) as exc:
        logger.error("An error occurred: %s", exc)
        return EXIT_CONFIG_ERROR

    report: CrawlReport = asyncio.run(engine.crawl())
    return report_outcome(report)
