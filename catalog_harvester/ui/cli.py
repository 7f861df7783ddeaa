from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

from ..config import HarvestConfig
from ..errors import StoreUnavailable
from ..pipeline import HarvestSummary, open_store, run_harvest
from ..utils.logging import setup_logging
from ..utils.loader import load_symbol
from ..export.base import Exporter

logger = logging.getLogger(__name__)

STORE_ALIASES = {
    "mongo": "catalog_harvester.store.mongo:MongoItemStore",
    "memory": "catalog_harvester.store.memory:InMemoryItemStore",
}


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Harvest the book catalog and sync it into the store")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--start-page", type=int, default=None, help="First page to scrape (default from config)")
    p.add_argument("--end-page", type=int, default=None, help="Last page to scrape, inclusive (default from config)")
    p.add_argument("--store", type=str, default=None,
                   help="Store backend: 'mongo', 'memory' or a dotted path (module:ClassName)")
    p.add_argument("--mongo-uri", type=str, default=None, help="MongoDB connection URI")
    p.add_argument("--exporter", type=str, default=None, help="Exporter dotted path (module:ClassName)")
    p.add_argument("--output", type=str, default=None, help="Also export scraped items to this file")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    p.add_argument("--serve", action="store_true", help="Run REST API server instead of a one-off harvest")
    p.add_argument("--host", type=str, default="127.0.0.1", help="API host (when --serve)")
    p.add_argument("--port", type=int, default=8000, help="API port (when --serve)")
    return p


def _load_config(args: argparse.Namespace) -> HarvestConfig:
    if args.config:
        cfg = HarvestConfig.from_file(args.config)
    else:
        cfg = HarvestConfig.from_env()

    if args.start_page is not None:
        cfg.start_page = args.start_page
    if args.end_page is not None:
        cfg.end_page = args.end_page
    if args.store:
        cfg.store = STORE_ALIASES.get(args.store, args.store)
    if args.mongo_uri:
        cfg.mongo_uri = args.mongo_uri
    if args.exporter:
        cfg.exporter = args.exporter
    if args.output:
        cfg.output_path = args.output

    cfg.validate()
    return cfg


def run_server(host: str, port: int) -> None:
    try:
        import uvicorn  # type: ignore
    except Exception as exc:  # pragma: no cover - optional dep
        raise SystemExit("To run the API, install dependencies: pip install fastapi uvicorn pydantic") from exc
    uvicorn.run("catalog_harvester.apis.app:app", host=host, port=port)


def run_cli(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.serve:
        run_server(args.host, args.port)
        return 0

    try:
        cfg = _load_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        store = open_store(cfg)
    except StoreUnavailable as exc:
        logger.error("Error connecting to the store: %s", exc)
        return 1

    try:
        report, result = asyncio.run(run_harvest(cfg, store))
    finally:
        store.close()

    if cfg.output_path:
        exporter: Exporter = load_symbol(cfg.exporter)()
        exporter.export(report.items, cfg.output_path)

    summary = HarvestSummary.from_results(report, result)
    logger.info(
        "Pages: %s attempted, %s skipped | Items: %s scraped, %s inserted, %s updated, %s unchanged"
        " | Duplicates: %s | Write failures: %s%s",
        summary.pages_attempted, summary.pages_skipped, summary.items_scraped,
        summary.inserted, summary.updated, summary.unchanged,
        summary.duplicates, summary.write_failures,
        " | aborted" if summary.aborted else "",
    )
    logger.info("Scraping completed.")
    return 0
