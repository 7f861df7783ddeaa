from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any
from pathlib import Path
import os
import json

from .version import CONFIG_SCHEMA_VERSION

DEFAULT_BASE_URL = "http://books.toscrape.com/catalogue/page-"
DEFAULT_STORE = "catalog_harvester.store.mongo:MongoItemStore"
DEFAULT_EXPORTER = "catalog_harvester.export.json_exporter:JSONExporter"


@dataclass
class HarvestConfig:
    """
    Canonical configuration object passed throughout the system.
    Keep it dataclass-only (no heavy deps) to stay upgrade-friendly.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    base_url: str = DEFAULT_BASE_URL
    page_suffix: str = ".html"
    start_page: int = 1
    end_page: int = 3
    # Conservative guess for the catalog size until the pager has been read.
    default_page_limit: int = 100
    rate_limit_points: int = 1
    rate_limit_interval: float = 2.0
    rate_limit_max_delay: float = 6.0
    request_timeout: float = 15.0
    user_agent: Optional[str] = None
    mongo_uri: str = "mongodb://localhost:27017/books-scrape"
    mongo_database: str = "books-scrape"
    mongo_collection: str = "books"
    mongo_timeout_ms: int = 2000
    # Dotted paths for store/exporter to allow runtime swapping without code changes.
    store: str = DEFAULT_STORE
    exporter: str = DEFAULT_EXPORTER
    # Scraped items are only exported when this is set
    output_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "HarvestConfig":
        """
        Build config from environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        return cls(
            base_url=_get("HARVESTER_BASE_URL", DEFAULT_BASE_URL),
            page_suffix=_get("HARVESTER_PAGE_SUFFIX", ".html"),
            start_page=int(_get("HARVESTER_START_PAGE", "1")),
            end_page=int(_get("HARVESTER_END_PAGE", "3")),
            default_page_limit=int(_get("HARVESTER_DEFAULT_PAGE_LIMIT", "100")),
            rate_limit_points=int(_get("HARVESTER_RATE_LIMIT_POINTS", "1")),
            rate_limit_interval=float(_get("HARVESTER_RATE_LIMIT_INTERVAL", "2.0")),
            rate_limit_max_delay=float(_get("HARVESTER_RATE_LIMIT_MAX_DELAY", "6.0")),
            request_timeout=float(_get("HARVESTER_REQUEST_TIMEOUT", "15.0")),
            user_agent=os.getenv("HARVESTER_USER_AGENT") or None,
            mongo_uri=_get("HARVESTER_MONGO_URI", "mongodb://localhost:27017/books-scrape"),
            mongo_database=_get("HARVESTER_MONGO_DATABASE", "books-scrape"),
            mongo_collection=_get("HARVESTER_MONGO_COLLECTION", "books"),
            mongo_timeout_ms=int(_get("HARVESTER_MONGO_TIMEOUT_MS", "2000")),
            store=_get("HARVESTER_STORE", DEFAULT_STORE),
            exporter=_get("HARVESTER_EXPORTER", DEFAULT_EXPORTER),
            output_path=os.getenv("HARVESTER_OUTPUT_PATH") or None,
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "HarvestConfig":
        """
        Load configuration from a JSON file. Supports schema migration for future versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        if self.start_page < 1:
            raise ValueError("start_page must be >= 1")
        if self.end_page < 1:
            raise ValueError("end_page must be >= 1")
        if self.default_page_limit < 1:
            raise ValueError("default_page_limit must be >= 1")
        if self.rate_limit_points < 1:
            raise ValueError("rate_limit_points must be >= 1")
        if self.rate_limit_interval <= 0:
            raise ValueError("rate_limit_interval must be > 0")
        if self.rate_limit_max_delay < self.rate_limit_interval:
            raise ValueError("rate_limit_max_delay must be >= rate_limit_interval")
        if self.output_path:
            # Validate output path parent exists or is creatable
            parent = Path(self.output_path).parent
            parent.mkdir(parents=True, exist_ok=True)


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    raw = dict(raw)
    # Ensure a schema_version is present
    raw.setdefault("schema_version", CONFIG_SCHEMA_VERSION)
    return raw
