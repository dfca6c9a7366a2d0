"""Core infrastructure layer.

This module provides foundation-level services:
- Configuration management (TOML); the playlist section is checked against
  the content types defined in domain.playlist
- Logging (Loguru)
- Terminal output (Rich)
"""

# Configuration
from .config import (
    Config,
    LoggingConfig,
    MetadataConfig,
    PlaylistConfig,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_log_file_path,
    create_default_config,
    ensure_directories,
)

# Output
from .output import get_console, log, setup_loguru, show

__all__ = [
    # Config
    "Config",
    "LoggingConfig",
    "MetadataConfig",
    "PlaylistConfig",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_log_file_path",
    "create_default_config",
    "ensure_directories",
    # Output
    "get_console",
    "log",
    "setup_loguru",
    "show",
]
