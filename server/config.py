"""
Server Configuration

Loads configuration from environment variables and provides defaults.
Supports loading from .env file using python-dotenv.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from feed.models.config import DEFAULT_CONFIG, FeedConfig

# Single .env at the project root
root_env = Path(__file__).resolve().parent.parent / ".env"
if root_env.exists():
    load_dotenv(root_env)


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # Item catalog: JSON file with a list of item records
    items_json_path: Optional[Path] = Path(__file__).parent.parent / "data" / "sample_items.json"
    # Optional feed tuning file (nested layout, see FeedConfig.from_dict)
    feed_config_path: Optional[Path] = None
    # Seed for the feed's random source; None = fresh entropy per process
    feed_seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        base_dir = Path(__file__).parent.parent

        def _path_env(key: str, default: Optional[Path] = None) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return default
            p = Path(v)
            return p if p.is_absolute() else (base_dir / p).resolve()

        seed = os.getenv("FEED_SEED", "").strip()
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            items_json_path=_path_env("ITEMS_JSON_PATH", base_dir / "data" / "sample_items.json"),
            feed_config_path=_path_env("FEED_CONFIG_PATH"),
            feed_seed=int(seed) if seed else None,
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        if self.items_json_path is not None and not self.items_json_path.exists():
            errors.append(f"Items JSON not found: {self.items_json_path}")

        if self.feed_config_path is not None and not self.feed_config_path.exists():
            errors.append(f"Feed config not found: {self.feed_config_path}")

        return len(errors) == 0, errors

    def load_feed_config(self) -> FeedConfig:
        """FeedConfig from feed_config_path, or the defaults when unset."""
        if self.feed_config_path is None:
            return DEFAULT_CONFIG
        with open(self.feed_config_path) as f:
            return FeedConfig.from_dict(json.load(f))


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
