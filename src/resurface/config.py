"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class PathsConfig:
    """Path settings."""
    store_dir: Path = Path("data/highlights")
    digests_dir: Path = Path("digests")


@dataclass
class LookupConfig:
    """Open Library / Wikipedia lookup settings."""
    timeout: float = 10.0
    cover_batch_size: int = 5
    user_agent: str = "resurface/0.1 (personal highlights journal)"


@dataclass
class ReviewConfig:
    """Resurfacing settings."""
    focus_limit: int = 20
    digest_focus_limit: int = 10
    digest_picks: int = 3
    seed: Optional[int] = None


@dataclass
class Settings:
    """Application settings."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)

    @property
    def store_dir(self) -> Path:
        return self.paths.store_dir

    @property
    def digests_dir(self) -> Path:
        return self.paths.digests_dir

    @property
    def lookup_timeout(self) -> float:
        return self.lookup.timeout

    @property
    def focus_limit(self) -> int:
        return self.review.focus_limit

    @property
    def seed(self) -> Optional[int]:
        return self.review.seed


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings()

    if "paths" in config:
        for key, value in config["paths"].items():
            setattr(settings.paths, key, Path(value))

    if "lookup" in config:
        for key, value in config["lookup"].items():
            setattr(settings.lookup, key, value)

    if "review" in config:
        for key, value in config["review"].items():
            setattr(settings.review, key, value)

    # Environment overrides
    store_dir = os.getenv("RESURFACE_STORE_DIR")
    if store_dir:
        settings.paths.store_dir = Path(store_dir)

    seed = os.getenv("RESURFACE_SEED")
    if seed:
        settings.review.seed = int(seed)

    return settings
