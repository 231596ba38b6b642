"""Configuration loader for the ranking pipeline."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Generic, TypeVar

import yaml
from dotenv import load_dotenv

from common.errors import ConfigurationError

load_dotenv()

T = TypeVar("T")

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"


@dataclass
class SourceConfig:
    base_url: str = "https://zenn.dev/api"
    page_size: int = 100
    order: str = "latest"
    call_budget: int = 10
    request_delay_seconds: float = 1.0
    request_timeout: int = 30


@dataclass
class IngestConfig:
    lookback_days: int = 7
    top_n: int = 30
    summary_ttl_days: int = 30


@dataclass
class StorageConfig:
    backend: str = "s3"  # "s3" or "local"
    local_path: str = "output"
    bucket: str | None = None
    endpoint: str | None = None


@dataclass
class TablesConfig:
    daily: str = "zenn-ranking-analysis-daily-table"
    weekly: str = "zenn-ranking-analysis-weekly-table"
    monthly: str = "zenn-ranking-analysis-monthly-table"
    endpoint: str | None = None


@dataclass
class ApiConfig:
    per_period_limit: int = 10
    max_range: int = 31
    lookup_timeout_seconds: float | None = None


@dataclass
class CacheConfig:
    enabled: bool = True
    ttl_seconds: int = 3600
    max_stale_seconds: int = 86400


@dataclass
class Config:
    timezone: str = "Asia/Tokyo"
    region: str = "ap-northeast-1"
    source: SourceConfig = field(default_factory=SourceConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    tables: TablesConfig = field(default_factory=TablesConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    def require_bucket(self) -> str:
        """Return the archive bucket name or fail if it is not configured."""
        if not self.storage.bucket:
            raise ConfigurationError("DATA_BUCKET_NAME environment variable is not set")
        return self.storage.bucket


def find_config_path(
    config_name: str | None,
    config_dir: Path = CONFIG_DIR,
    default_name: str = "prod",
    env_var: str | None = "RANKING_CONFIG",
) -> Path:
    """Find config file path, checking env var and defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> Config:
    """Load configuration from YAML file, then apply environment overrides.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses RANKING_CONFIG env var or "prod".
        config_dir: Directory containing config files.
    """
    data = load_yaml(find_config_path(config_name, config_dir))
    return _parse_config(data)


def _parse_config(data: dict) -> Config:
    """Parse config dictionary into Config object."""
    source_raw = data.get("source", {})
    source = SourceConfig(
        base_url=source_raw.get("base_url", "https://zenn.dev/api"),
        page_size=source_raw.get("page_size", 100),
        order=source_raw.get("order", "latest"),
        call_budget=source_raw.get("call_budget", 10),
        request_delay_seconds=source_raw.get("request_delay_seconds", 1.0),
        request_timeout=source_raw.get("request_timeout", 30),
    )

    ingest_raw = data.get("ingest", {})
    ingest = IngestConfig(
        lookback_days=ingest_raw.get("lookback_days", 7),
        top_n=ingest_raw.get("top_n", 30),
        summary_ttl_days=ingest_raw.get("summary_ttl_days", 30),
    )

    storage_raw = data.get("storage", {})
    storage = StorageConfig(
        backend=storage_raw.get("backend", "s3"),
        local_path=storage_raw.get("local_path", "output"),
        bucket=os.getenv("DATA_BUCKET_NAME", storage_raw.get("bucket")),
        endpoint=os.getenv("S3_ENDPOINT", storage_raw.get("endpoint")),
    )

    tables_raw = data.get("tables", {})
    defaults = TablesConfig()
    tables = TablesConfig(
        daily=os.getenv("DAILY_TABLE_NAME", tables_raw.get("daily", defaults.daily)),
        weekly=os.getenv("WEEKLY_TABLE_NAME", tables_raw.get("weekly", defaults.weekly)),
        monthly=os.getenv("MONTHLY_TABLE_NAME", tables_raw.get("monthly", defaults.monthly)),
        endpoint=os.getenv("DYNAMODB_ENDPOINT", tables_raw.get("endpoint")),
    )

    api_raw = data.get("api", {})
    api = ApiConfig(
        per_period_limit=api_raw.get("per_period_limit", 10),
        max_range=api_raw.get("max_range", 31),
        lookup_timeout_seconds=api_raw.get("lookup_timeout_seconds"),
    )

    cache_raw = data.get("cache", {})
    cache = CacheConfig(
        enabled=cache_raw.get("enabled", True),
        ttl_seconds=cache_raw.get("ttl_seconds", 3600),
        max_stale_seconds=cache_raw.get("max_stale_seconds", 86400),
    )

    return Config(
        timezone=data.get("timezone", "Asia/Tokyo"),
        region=os.getenv("AWS_REGION", data.get("region", "ap-northeast-1")),
        source=source,
        ingest=ingest,
        storage=storage,
        tables=tables,
        api=api,
        cache=cache,
    )


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        """Get the config, loading it lazily if needed."""
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        """Set the config directly."""
        self._config = config

    def reset(self) -> None:
        """Reset the config, forcing reload on next get()."""
        self._config = None


_manager: ConfigSingleton[Config] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
