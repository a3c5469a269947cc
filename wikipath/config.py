from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
from urllib.parse import urlparse
import os
import json

from .version import __version__, CONFIG_SCHEMA_VERSION
from .utils.parsing import normalize_url

DEFAULT_SOURCE = "https://en.wikipedia.org/wiki/Knowledge"
DEFAULT_SINK = "https://en.wikipedia.org/wiki/Philosophy"
DEFAULT_THREAD_COUNT = 3
WIKIPEDIA_HOST = "en.wikipedia.org"
MIN_THREADS = 1
MAX_THREADS = 10


class ConfigError(ValueError):
    """Raised when a run configuration cannot be used to start a crawl."""


@dataclass
class RunConfig:
    """
    Parameters of a single path search.
    Validated once, before the engine is built; never mutated by a running crawl.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    source: str = DEFAULT_SOURCE
    sink: str = DEFAULT_SINK
    thread_count: int = DEFAULT_THREAD_COUNT
    scoping_host: str = WIKIPEDIA_HOST
    # Per-page fetch bound; the coordinator assumes extraction never hangs.
    request_timeout: float = 2.0
    # Optional deadline for the whole run, in seconds.
    timeout: Optional[float] = None
    user_agent: str = f"wikipath/{__version__}"
    # Dotted path of the link extractor so it can be swapped without code changes.
    extractor: str = "wikipath.extractors.wiki:WikiLinkExtractor"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "RunConfig":
        """
        Build config from environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        timeout = _get("WIKIPATH_TIMEOUT", "").strip()
        try:
            return cls(
                source=_get("WIKIPATH_SOURCE", DEFAULT_SOURCE),
                sink=_get("WIKIPATH_SINK", DEFAULT_SINK),
                thread_count=int(_get("WIKIPATH_CONCURRENCY", str(DEFAULT_THREAD_COUNT))),
                scoping_host=_get("WIKIPATH_SCOPING_HOST", WIKIPEDIA_HOST),
                request_timeout=float(_get("WIKIPATH_REQUEST_TIMEOUT", "2.0")),
                timeout=float(timeout) if timeout else None,
                user_agent=_get("WIKIPATH_USER_AGENT", f"wikipath/{__version__}"),
                extractor=_get("WIKIPATH_EXTRACTOR", "wikipath.extractors.wiki:WikiLinkExtractor"),
            )
        except ValueError as exc:
            raise ConfigError(f"invalid numeric setting in environment: {exc}") from exc

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "RunConfig":
        """
        Load configuration from a JSON file. Supports schema migration for future versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ConfigError(f"config file {path} must hold a JSON object, got {type(data).__name__}")
        data = migrate_config(data)
        try:
            return cls(**data)
        except TypeError as exc:
            raise ConfigError(f"unknown key in config file {path}: {exc}") from exc

    # ---------- Validation ----------

    def validate(self) -> None:
        self.source = self._check_link("source", self.source)
        self.sink = self._check_link("sink", self.sink)
        # Values loaded from JSON arrive untyped.
        if not isinstance(self.thread_count, int) or isinstance(self.thread_count, bool):
            raise ConfigError(f"thread count must be an integer, got {self.thread_count!r}")
        if not _is_number(self.request_timeout):
            raise ConfigError(f"request_timeout must be a number, got {self.request_timeout!r}")
        if self.timeout is not None and not _is_number(self.timeout):
            raise ConfigError(f"timeout must be a number, got {self.timeout!r}")
        if not MIN_THREADS <= self.thread_count <= MAX_THREADS:
            raise ConfigError(f"thread count must be between {MIN_THREADS} and {MAX_THREADS}")
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be > 0")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError("timeout must be > 0 when set")

    def _check_link(self, name: str, link: str) -> str:
        if not isinstance(link, str):
            raise ConfigError(f"{name} link must be a string, got {link!r}")
        try:
            parsed = urlparse(link)
        except ValueError as exc:
            raise ConfigError(f"{name} link {link!r} does not parse: {exc}") from exc
        if parsed.scheme not in ("http", "https"):
            raise ConfigError(f"{name} link {link!r} must be an http(s) URL")
        if parsed.netloc != self.scoping_host:
            raise ConfigError(f"{name} link {link!r} must be a {self.scoping_host} link")
        return normalize_url(link)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    # Schema 1 is current; older files only lacked the version key.
    raw.setdefault("schema_version", CONFIG_SCHEMA_VERSION)
    # Accept the CLI spelling in files as well.
    if "concurrency" in raw and "thread_count" not in raw:
        raw["thread_count"] = raw.pop("concurrency")
    return raw
