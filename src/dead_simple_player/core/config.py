"""
Configuration management for Dead Simple Player
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dead_simple_player.domain.playlist.content_types import (
    ContentType,
    parse_content_types,
)

LOG_LEVEL_ENV_VAR = "DEAD_SIMPLE_PLAYER_LOG_LEVEL"


@dataclass
class PlaylistConfig:
    """Configuration for building the playback queue."""

    allowed_content_types: List[str] = field(
        default_factory=lambda: ["audiovisual_content", "directory", "folder"]
    )
    allow_recursion: bool = False
    allow_cursor_move: bool = True

    def validate(self) -> None:
        """Validate playlist configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        valid_names = {content_type.name.lower() for content_type in ContentType}
        invalid_names = {name.lower() for name in self.allowed_content_types} - valid_names
        if invalid_names:
            raise ValueError(
                f"Invalid content types: {invalid_names}. "
                f"Valid content types are: {sorted(valid_names)}"
            )

    def content_types(self) -> frozenset[ContentType]:
        """Allowed content types as enum members."""
        return parse_content_types(self.allowed_content_types)


@dataclass
class MetadataConfig:
    """Configuration for metadata lookups."""

    max_workers: int = 4

    def validate(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/dead-simple-player/dead-simple-player.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of rotated files to keep
    console_output: bool = False  # Also output to stderr (for debugging)


@dataclass
class Config:
    """Main configuration object."""

    playlist: PlaylistConfig = field(default_factory=PlaylistConfig)
    metadata: MetadataConfig = field(default_factory=MetadataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "dead-simple-player"
    return Path.home() / ".config" / "dead-simple-player"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Lets a development checkout use its own config.toml regardless of the
    working directory.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/dead-simple-player (or ~/.config/dead-simple-player)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "dead-simple-player"
    return Path.home() / ".local" / "share" / "dead-simple-player"


def get_log_file_path(config: Config) -> Path:
    """Get the log file path, honouring a custom [logging] log_file."""
    if config.logging.log_file:
        return Path(config.logging.log_file)
    return get_data_dir() / "dead-simple-player.log"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Dead Simple Player Configuration

[playlist]
# What may be added to the queue: audiovisual_content, audio, movie,
# directory, folder, data
allowed_content_types = ["audiovisual_content", "directory", "folder"]

# Look inside sub-folders of an opened folder (no protection against looping links)
allow_recursion = false

# Point the queue at newly added media when nothing valid is current
allow_cursor_move = true

[metadata]
# Background threads used to look up title/artist/artwork
max_workers = 4

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/dead-simple-player/dead-simple-player.log)
# log_file = "/path/to/custom/dead-simple-player.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of rotated log files to keep
backup_count = 5

# Also output logs to stderr (useful for debugging)
console_output = false
""".strip()


def _parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML, falling back to defaults per section."""
    config = Config()

    if "playlist" in toml_data:
        playlist_data = toml_data["playlist"]
        config.playlist = PlaylistConfig(
            allowed_content_types=playlist_data.get(
                "allowed_content_types", config.playlist.allowed_content_types
            ),
            allow_recursion=playlist_data.get(
                "allow_recursion", config.playlist.allow_recursion
            ),
            allow_cursor_move=playlist_data.get(
                "allow_cursor_move", config.playlist.allow_cursor_move
            ),
        )
        try:
            config.playlist.validate()
        except ValueError as e:
            print(f"Warning: Invalid playlist configuration: {e}")
            print("Using default playlist configuration.")
            config.playlist = PlaylistConfig()

    if "metadata" in toml_data:
        metadata_data = toml_data["metadata"]
        config.metadata = MetadataConfig(
            max_workers=metadata_data.get("max_workers", config.metadata.max_workers),
        )
        try:
            config.metadata.validate()
        except ValueError as e:
            print(f"Warning: Invalid metadata configuration: {e}")
            print("Using default metadata configuration.")
            config.metadata = MetadataConfig()

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get("backup_count", config.logging.backup_count),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - DEAD_SIMPLE_PLAYER_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        config = Config()
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
            config = _parse_config(toml_data)
        except Exception as e:
            print(f"Error loading configuration from {config_path}: {e}")
            print("Using default configuration.")
            config = Config()

    level_override = os.environ.get(LOG_LEVEL_ENV_VAR)
    if level_override:
        config.logging.level = level_override.upper()

    return config


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
