"""Path export module for Analemma Visualizer."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import numpy as np

from analemma_viz import __version__
from analemma_viz.config import ExportConfig
from analemma_viz.logger import get_logger
from analemma_viz.sampler import AnalemmaPath, marker_indices

logger = get_logger(__name__)


class StorageError(Exception):
    """Exception raised for export-related errors."""

    pass


@dataclass
class ExportMetadata:
    """Metadata written alongside an exported analemma."""

    latitude: float
    longitude: float
    year: int
    observation_time: str
    timezone: Optional[str]
    point_count: int
    created_at: str  # ISO format
    software_name: str = "analemma-viz"
    software_version: str = __version__

    @classmethod
    def from_path(cls, path: AnalemmaPath, tz: Optional[str]) -> "ExportMetadata":
        """Build metadata for a sampled path."""
        hour, minute = path.time_of_day
        return cls(
            latitude=path.latitude,
            longitude=path.longitude,
            year=path.year,
            observation_time=f"{hour:02d}:{minute:02d}",
            timezone=tz,
            point_count=len(path),
            created_at=datetime.now(timezone.utc).isoformat(),
        )

    def to_dict(self) -> dict:
        """Convert metadata to dictionary for JSON export."""
        return {
            "observer": {
                "latitude": self.latitude,
                "longitude": self.longitude,
                "timezone": self.timezone,
            },
            "observation": {
                "year": self.year,
                "observation_time": self.observation_time,
            },
            "point_count": self.point_count,
            "created_at": self.created_at,
            "software": {
                "name": self.software_name,
                "version": self.software_version,
            },
        }


class PathStorage:
    """Writes sampled analemmas to disk."""

    def __init__(self, config: ExportConfig):
        """Initialize export storage.

        Args:
            config: Export configuration.
        """
        self.config = config
        self._ensure_base_path()

    def _ensure_base_path(self) -> None:
        """Ensure base export path exists."""
        try:
            self.config.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            raise StorageError(
                f"Permission denied creating export directory: {self.config.base_path}"
            )
        except OSError as e:
            raise StorageError(f"Error creating export directory: {e}")

    def get_save_path(self, path: AnalemmaPath, extension: str) -> Path:
        """Full path for an exported analemma."""
        filename = f"analemma_{path.latitude}_{path.longitude}_{path.year}.{extension}"
        return self.config.base_path / filename

    def save(
        self,
        path: AnalemmaPath,
        tz: Optional[str] = None,
        export_format: Optional[str] = None,
        mark_interval: int = 7,
    ) -> Path:
        """Export an analemma.

        Args:
            path: Sampled analemma.
            tz: Timezone name the path was sampled in, for the metadata.
            export_format: json or npy; defaults to the configured format.
            mark_interval: Days between markers listed in JSON exports.

        Returns:
            Path to the written file.

        Raises:
            StorageError: If the export fails.
        """
        export_format = export_format or self.config.format
        metadata = ExportMetadata.from_path(path, tz)

        if export_format == "json":
            return self._save_json(path, metadata, mark_interval)
        elif export_format == "npy":
            return self._save_npy(path, metadata)
        else:
            raise StorageError(f"Unsupported export format: {export_format}")

    def _save_json(
        self,
        path: AnalemmaPath,
        metadata: ExportMetadata,
        mark_interval: int,
    ) -> Path:
        """Save points, positions and markers as JSON."""
        save_path = self.get_save_path(path, "json")

        document = metadata.to_dict()
        document["samples"] = [
            {
                "day_index": index,
                "local_time": sample.instant.isoformat(),
                "point": sample.point._asdict(),
                "position": sample.position.to_dict(),
            }
            for index, sample in enumerate(path.samples)
        ]
        document["markers"] = [
            {"day_index": m.day_index, "label": m.label, "is_special": m.is_special}
            for m in marker_indices(len(path), mark_interval)
        ]

        try:
            with open(save_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StorageError(f"Failed to save JSON export: {e}")

        logger.info(f"JSON export saved: {save_path}")
        return save_path

    def _save_npy(self, path: AnalemmaPath, metadata: ExportMetadata) -> Path:
        """Save points as an (N, 3) array with JSON metadata beside it."""
        save_path = self.get_save_path(path, "npy")
        json_path = save_path.with_suffix(".json")

        try:
            np.save(save_path, path.as_array())
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(metadata.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StorageError(f"Failed to save NumPy export: {e}")

        logger.info(f"NumPy export saved: {save_path}")
        logger.info(f"Metadata saved: {json_path}")
        return save_path

    def list_exports(self) -> list[Path]:
        """List exported analemmas sorted by name."""
        exports = []
        for ext in ("*.json", "*.npy"):
            exports.extend(self.config.base_path.glob(ext))
        return sorted(exports)
