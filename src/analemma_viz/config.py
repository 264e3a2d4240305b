"""Configuration management module for Analemma Visualizer."""

import math
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from analemma_viz.clock import parse_time_of_day


@dataclass
class ObserverConfig:
    """Observer location settings."""

    latitude: float = 40.7128  # New York City
    longitude: float = -74.006
    timezone: Optional[str] = None  # IANA name; None uses the host clock

    def __post_init__(self) -> None:
        """Validate configuration values."""
        try:
            self.latitude = float(self.latitude)
            self.longitude = float(self.longitude)
        except (TypeError, ValueError):
            raise ValueError("latitude and longitude must be numbers")
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError("latitude and longitude must be finite")
        if not -90 <= self.latitude <= 90:
            raise ValueError("latitude must be between -90 and 90")
        if not -180 <= self.longitude <= 180:
            raise ValueError("longitude must be between -180 and 180")
        if self.timezone is not None:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"timezone is not a known IANA name: '{self.timezone}'")


@dataclass
class ObservationConfig:
    """Observation time settings."""

    observation_time: str = "12:00"  # HH:MM format
    year: int = field(default_factory=lambda: date.today().year)
    mark_interval: int = 7  # Days between path markers
    day_of_year: int = 182  # 0-based day shown as the daily sun path

    def __post_init__(self) -> None:
        """Validate configuration values."""
        parse_time_of_day(self.observation_time)
        if not 1 <= self.year <= 9999:
            raise ValueError("year must be between 1 and 9999")
        if self.mark_interval < 1:
            raise ValueError("mark_interval must be positive")
        if not 0 <= self.day_of_year <= 365:
            raise ValueError("day_of_year must be between 0 and 365")


@dataclass
class ExportConfig:
    """Path export settings."""

    base_path: Path = field(default_factory=lambda: Path("exports"))
    format: str = "json"  # json, npy

    def __post_init__(self) -> None:
        """Convert string path to Path object if necessary."""
        if isinstance(self.base_path, str):
            self.base_path = Path(self.base_path)
        if self.format not in ("json", "npy"):
            raise ValueError("format must be 'json' or 'npy'")


@dataclass
class LoggingConfig:
    """Logging configuration settings."""

    level: str = "WARNING"
    file: Optional[Path] = None
    max_size_mb: int = 10
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate and convert configuration values."""
        if isinstance(self.file, str):
            self.file = Path(self.file)
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        self.level = self.level.upper()


@dataclass
class Config:
    """Main configuration container."""

    observer: ObserverConfig = field(default_factory=ObserverConfig)
    observation: ObservationConfig = field(default_factory=ObservationConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        observer_data = data.get("observer", {})
        observation_data = data.get("observation", {})
        export_data = data.get("export", {})
        logging_data = data.get("logging", {})

        return cls(
            observer=ObserverConfig(**observer_data),
            observation=ObservationConfig(**observation_data),
            export=ExportConfig(**export_data),
            logging=LoggingConfig(**logging_data),
        )

    def to_dict(self) -> dict:
        """Convert Config to dictionary."""
        return {
            "observer": {
                "latitude": self.observer.latitude,
                "longitude": self.observer.longitude,
                "timezone": self.observer.timezone,
            },
            "observation": {
                "observation_time": self.observation.observation_time,
                "year": self.observation.year,
                "mark_interval": self.observation.mark_interval,
                "day_of_year": self.observation.day_of_year,
            },
            "export": {
                "base_path": str(self.export.base_path),
                "format": self.export.format,
            },
            "logging": {
                "level": self.logging.level,
                "file": str(self.logging.file) if self.logging.file else None,
                "max_size_mb": self.logging.max_size_mb,
                "backup_count": self.logging.backup_count,
            },
        }


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        Config object with loaded or default values.
    """
    # Default config paths to try
    if config_path is None:
        default_paths = [
            Path("config/config.yaml"),
            Path("/etc/analemma-viz/config.yaml"),
            Path.home() / ".config" / "analemma-viz" / "config.yaml",
        ]
        for path in default_paths:
            if path.exists():
                config_path = path
                break

    if config_path is None or not config_path.exists():
        return Config()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()

    return Config.from_dict(data)


def save_config(config: Config, config_path: Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Config object to save.
        config_path: Path to save configuration file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, allow_unicode=True)
