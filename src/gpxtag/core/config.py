"""
Configuration management for gpxtag.
Handles loading, validation, and storage of all configuration parameters.
"""

import yaml
from dataclasses import dataclass, field, asdict
from typing import List, Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TrackConfig:
    """Track loading configuration."""
    max_workers: int = 1  # GPX files parsed in parallel; 1 = sequential


@dataclass
class MediaConfig:
    """Photo discovery and tagging configuration."""
    extensions: List[str] = field(default_factory=lambda: [".jpg", ".jpeg"])
    fallback_to_mtime: bool = True  # Use file modification time when EXIF has no capture time
    dry_run: bool = False  # Match only, never write EXIF
    show_progress: bool = True


@dataclass
class Config:
    """Main configuration class for gpxtag."""

    # Sub-configurations
    track: TrackConfig = field(default_factory=TrackConfig)
    media: MediaConfig = field(default_factory=MediaConfig)

    # Logging
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    log_file: Optional[str] = None

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'Config':
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If the document or a section is not a mapping
            yaml.YAMLError: If the file is not valid YAML
        """
        with open(yaml_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        track_data = data.pop('track', None) or {}
        media_data = data.pop('media', None) or {}
        if not isinstance(track_data, dict) or not isinstance(media_data, dict):
            raise ValueError("track and media sections must be mappings")

        return cls(
            track=TrackConfig(**track_data),
            media=MediaConfig(**media_data),
            **data
        )

    def to_yaml(self, yaml_path: str):
        """
        Save configuration to YAML file.

        Args:
            yaml_path: Path to output YAML file
        """
        data = {
            'log_level': self.log_level,
            'log_file': self.log_file,
            'track': asdict(self.track),
            'media': asdict(self.media),
        }

        with open(yaml_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> bool:
        """
        Validate configuration parameters.

        Returns:
            True if configuration is valid

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        if self.track.max_workers < 1:
            raise ValueError("track max_workers must be at least 1")

        if not self.media.extensions:
            raise ValueError("media extensions must not be empty")

        for ext in self.media.extensions:
            if not isinstance(ext, str) or not ext.startswith('.'):
                raise ValueError(f"media extension must start with '.': {ext}")

        return True


def create_default_config(output_path: str = "gpxtag.yaml") -> Config:
    """
    Create and save a default configuration file.

    Args:
        output_path: Path to save configuration

    Returns:
        Default Config instance
    """
    config = Config()
    config.to_yaml(output_path)
    return config
