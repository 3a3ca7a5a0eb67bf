"""
Configuration management for Location Extract.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional

from .filters import next_day
from .segmenter import DEFAULT_SEGMENT_DIGITS, DEFAULT_TRACK_DIGITS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "location-extract" / "config.json"


class ConfigError(ValueError):
    """Invalid settings, detected before any input is read."""


@dataclass
class ExtractConfig:
    """What to extract and how to split it."""
    # Inclusive date window, YYYY-MM-DD; end_date defaults to start_date
    start_date: str = ""
    end_date: str = ""
    # Keep locations with accuracy <= max_accuracy meters (integer digits)
    max_accuracy: str = "40"
    # New track if coordinates share fewer than track_digits fractional digits
    track_digits: int = DEFAULT_TRACK_DIGITS
    # New segment if they share fewer than segment_digits
    segment_digits: int = DEFAULT_SEGMENT_DIGITS
    output_format: str = "gpx"

    def __post_init__(self):
        # JSON configs may carry the accuracy as a number
        self.max_accuracy = str(self.max_accuracy).strip()
        if self.max_accuracy.isdigit():
            self.max_accuracy = self.max_accuracy.lstrip("0") or "0"
        self.output_format = self.output_format.lower()
        if not self.end_date:
            self.end_date = self.start_date

    def validate(self, known_formats: Optional[list[str]] = None):
        """Raise ConfigError for anything that would fail mid-stream."""
        for label, value in (("start", self.start_date), ("end", self.end_date)):
            try:
                next_day(value)
            except (TypeError, ValueError):
                raise ConfigError(f"invalid {label} date {value!r}, expected YYYY-MM-DD") from None
        if self.end_date < self.start_date:
            raise ConfigError(f"end date {self.end_date} is before start date {self.start_date}")

        if not (self.max_accuracy.isascii() and self.max_accuracy.isdigit()):
            raise ConfigError(f"invalid accuracy {self.max_accuracy!r}, expected whole meters")

        for label, value in (("track", self.track_digits), ("segment", self.segment_digits)):
            if not isinstance(value, int) or not 0 <= value <= 7:
                raise ConfigError(f"{label} digits must be between 0 and 7, got {value!r}")

        if known_formats is None:
            from .writers import available_formats
            known_formats = [f["name"] for f in available_formats()]
        if self.output_format not in known_formats:
            raise ConfigError(
                f"unknown format {self.output_format!r} "
                f"(expected one of {', '.join(sorted(known_formats))})"
            )

    def default_output_name(self, extension: Optional[str] = None) -> str:
        """history_<start>.<fmt> or history_<start>_<end>.<fmt>."""
        extension = extension or f".{self.output_format}"
        if self.start_date == self.end_date:
            return f"history_{self.start_date}{extension}"
        return f"history_{self.start_date}_{self.end_date}{extension}"


@dataclass
class PipelineConfig:
    """Streaming settings."""
    # Decoded locations buffered between the reader thread and the writer
    queue_size: int = 100
    # Records between progress reports
    progress_every: int = 0x8000


@dataclass
class PluginConfig:
    """Plugin settings."""
    disabled_plugins: list = field(default_factory=list)


@dataclass
class Config:
    """Top-level configuration."""
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    plugins: PluginConfig = field(default_factory=PluginConfig)
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def save(self, path: Optional[Path] = None):
        """Save configuration to JSON file."""
        path = Path(path or DEFAULT_CONFIG_PATH)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)
        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load configuration from JSON file, or return defaults."""
        path = Path(path or DEFAULT_CONFIG_PATH)
        if not path.exists():
            logger.info(f"No config at {path}, using defaults")
            return cls()

        with open(path) as f:
            data = json.load(f)

        config = cls()
        if "extract" in data:
            config.extract = ExtractConfig(**data["extract"])
        if "pipeline" in data:
            config.pipeline = PipelineConfig(**data["pipeline"])
        if "plugins" in data:
            config.plugins = PluginConfig(**data["plugins"])
        if "log_level" in data:
            config.log_level = data["log_level"]
        if "log_file" in data:
            config.log_file = data["log_file"]

        return config
