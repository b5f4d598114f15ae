"""Shared configuration utilities."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar, Callable, Generic

import yaml

T = TypeVar('T')

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"


@dataclass
class FetchConfig:
    timeout_seconds: int = 30
    user_agent: str = "pulsereader-ingest/1.0 (RSS reader)"


@dataclass
class ClassifierConfig:
    enabled: bool = True
    model: str = "openai/gpt-4o-mini"
    base_url: str = "https://openrouter.ai/api/v1"
    api_key_env: str = "OPENROUTER_API_KEY"
    timeout_seconds: int = 30
    temperature: float = 0.3
    max_input_chars: int = 1500


@dataclass
class IngestConfig:
    max_workers: int = 4


@dataclass
class QueryConfig:
    default_limit: int = 20
    max_limit: int = 100
    overfetch_multiplier: int = 2
    overfetch_max_rounds: int = 3


@dataclass
class RetentionConfig:
    retention_days: int = 30


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class Config:
    log_level: str = "INFO"
    fetch: FetchConfig = field(default_factory=FetchConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    retention: RetentionConfig = field(default_factory=RetentionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

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
    """Load configuration from a YAML file in `config_dir`.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses CONFIG_ENV env var or "prod".

    Returns:
        Loaded Config object
    """
    path = find_config_path(config_name, config_dir, env_var="CONFIG_ENV")
    return parse_config(load_yaml(path))


def parse_config(data: dict) -> Config:
    """Parse config dictionary into Config object."""
    fetch = data.get("fetch", {})
    classifier = data.get("classifier", {})
    ingest = data.get("ingest", {})
    query = data.get("query", {})
    retention = data.get("retention", {})
    server = data.get("server", {})

    defaults = Config()

    return Config(
        log_level=data.get("log_level", defaults.log_level),
        fetch=FetchConfig(
            timeout_seconds=fetch.get("timeout_seconds", defaults.fetch.timeout_seconds),
            user_agent=fetch.get("user_agent", defaults.fetch.user_agent),
        ),
        classifier=ClassifierConfig(
            enabled=classifier.get("enabled", defaults.classifier.enabled),
            model=classifier.get("model", defaults.classifier.model),
            base_url=classifier.get("base_url", defaults.classifier.base_url),
            api_key_env=classifier.get("api_key_env", defaults.classifier.api_key_env),
            timeout_seconds=classifier.get("timeout_seconds", defaults.classifier.timeout_seconds),
            temperature=classifier.get("temperature", defaults.classifier.temperature),
            max_input_chars=classifier.get("max_input_chars", defaults.classifier.max_input_chars),
        ),
        ingest=IngestConfig(
            max_workers=ingest.get("max_workers", defaults.ingest.max_workers),
        ),
        query=QueryConfig(
            default_limit=query.get("default_limit", defaults.query.default_limit),
            max_limit=query.get("max_limit", defaults.query.max_limit),
            overfetch_multiplier=query.get("overfetch_multiplier", defaults.query.overfetch_multiplier),
            overfetch_max_rounds=query.get("overfetch_max_rounds", defaults.query.overfetch_max_rounds),
        ),
        retention=RetentionConfig(
            retention_days=retention.get("retention_days", defaults.retention.retention_days),
        ),
        server=ServerConfig(
            host=server.get("host", defaults.server.host),
            port=server.get("port", defaults.server.port),
        ),
    )


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.

    Example:
        >>> _manager = ConfigSingleton(load_config)
        >>> get_config = _manager.get
        >>> set_config = _manager.set
        >>> reset_config = _manager.reset
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
