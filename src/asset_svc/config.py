"""Configuration for the asset service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import ConfigurationError


DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class RepositoryConfig:
    """Backing repository configuration."""
    # SQLite database file, or ":memory:" for a throwaway repository
    db_path: str = ":memory:"

    # Optional YAML/JSON document loaded into the repository at startup
    fixtures_file: str | None = None


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT

    def level_number(self) -> int:
        """Numeric logging level for the configured level name."""
        level = logging.getLevelName(self.level.upper())
        if not isinstance(level, int):
            raise ConfigurationError(f"Unknown logging level: {self.level}")
        return level


@dataclass
class Config:
    """Main configuration container."""
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            repository=RepositoryConfig(**data.get("repository", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)


def configure_logging(config: LoggingConfig) -> None:
    """Install a root handler with the configured level and format."""
    logging.basicConfig(
        level=config.level_number(),
        format=config.format,
    )
