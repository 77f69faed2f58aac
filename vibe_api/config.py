"""
Server Configuration

Loads configuration from environment variables and provides defaults.
A project-root .env file is loaded with python-dotenv when present.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from vibesearch import SearchConfig

_base_dir = Path(__file__).resolve().parent.parent
_root_env = _base_dir / ".env"
if _root_env.exists():
    load_dotenv(_root_env)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _bool_env(key: str, default: bool) -> bool:
    v = os.getenv(key)
    if v is None or not v.strip():
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """Server configuration."""

    # API Keys
    openai_api_key: Optional[str] = None

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    # Catalog JSON file (media, users, seen lists, embeddings)
    data_path: Path = _base_dir / "data" / "catalog.json"

    # Models
    judge_model: str = "gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    enable_judge: bool = True

    # Optional JSON file merged over SearchConfig defaults
    search_config_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""

        def _path_env(key: str, default: Optional[Path] = None) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return default
            p = Path(v)
            return p if p.is_absolute() else (_base_dir / p).resolve()

        return cls(
            openai_api_key=(os.getenv("OPENAI_API_KEY") or "").strip() or None,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8080")),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            data_path=_path_env("DATA_PATH", _base_dir / "data" / "catalog.json"),
            judge_model=os.getenv("JUDGE_MODEL", "gpt-4o-mini"),
            embedding_model=os.getenv("EMBEDDING_MODEL", "text-embedding-3-small"),
            embedding_dimensions=int(os.getenv("EMBEDDING_DIMENSIONS", "1536")),
            enable_judge=_bool_env("ENABLE_JUDGE", True),
            search_config_path=_path_env("SEARCH_CONFIG_PATH"),
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        if not 0 < self.port < 65536:
            errors.append(f"PORT out of range: {self.port}")

        if self.log_level not in _LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level}")

        if self.embedding_dimensions <= 0:
            errors.append(f"EMBEDDING_DIMENSIONS must be positive, got {self.embedding_dimensions}")

        if self.search_config_path and not self.search_config_path.is_file():
            errors.append(f"Search config file not found: {self.search_config_path}")

        return len(errors) == 0, errors

    def load_search_config(self) -> SearchConfig:
        """SearchConfig defaults, overridden by SEARCH_CONFIG_PATH when set."""
        if not self.search_config_path:
            return SearchConfig()
        with open(self.search_config_path) as f:
            return SearchConfig.from_dict(json.load(f))

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, self.log_level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )

    def ensure_directories(self):
        """Create the data directory if it doesn't exist."""
        self.data_path.parent.mkdir(parents=True, exist_ok=True)


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
        _config.ensure_directories()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
