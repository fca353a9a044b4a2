"""
Configuration management for bm.

Provides a small hierarchical configuration system with sensible defaults.
Supports both global (~/.config/bm/config.toml) and local (bm.toml) files.
Only the command-line layer reads it; the repository takes a plain path.
"""
import os
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict

from bm.constants import DEFAULT_DATABASE, DEFAULT_SEPARATOR, MEMORY_DATABASE


@dataclass
class BmConfig:
    """
    bm configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Command-line arguments
    2. Environment variables (BM_*)
    3. Local config file (./bm.toml or ./.bmrc)
    4. User config file (~/.config/bm/config.toml)
    5. System defaults
    """

    # Database settings
    database: str = field(default=DEFAULT_DATABASE)
    database_echo: bool = field(default=False)  # SQLAlchemy echo for debugging

    # Display settings
    separator: str = field(default=DEFAULT_SEPARATOR)
    output_format: str = field(default="plain")  # plain, table
    color_output: bool = field(default=True)

    log_level: str = field(default="WARNING")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "BmConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (overrides search)

        Returns:
            Merged configuration object
        """
        config = cls()

        user_config_path = cls.user_config_path()
        if user_config_path.exists():
            config._merge(cls._load_toml(user_config_path))

        local_paths = [
            Path.cwd() / "bm.toml",
            Path.cwd() / ".bmrc",
        ]
        for path in local_paths:
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        config._apply_env_vars()
        config._expand_paths()

        return config

    @staticmethod
    def user_config_path() -> Path:
        return Path.home() / ".config" / "bm" / "config.toml"

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance, ignoring unknown keys."""
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def _apply_env_vars(self):
        """Apply environment variables with BM_ prefix."""
        prefix = "BM_"
        for key, value in os.environ.items():
            if key.startswith(prefix):
                config_key = key[len(prefix):].lower()
                if hasattr(self, config_key):
                    current_value = getattr(self, config_key)
                    if isinstance(current_value, bool):
                        setattr(self, config_key, value.lower() in ("true", "1", "yes"))
                    else:
                        setattr(self, config_key, value)

    def _expand_paths(self):
        """Expand ~ and environment variables in the database path."""
        if self.database != MEMORY_DATABASE:
            self.database = os.path.expanduser(os.path.expandvars(self.database))

    def save(self, path: Optional[Path] = None) -> Path:
        """
        Save current configuration to TOML file.

        Args:
            path: Path to save to (defaults to user config)

        Returns:
            The path written
        """
        if path is None:
            path = self.user_config_path()

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(asdict(self), f)
        return path


# Global configuration instance
_config: Optional[BmConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> BmConfig:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from files
        config_file: Specific config file to load

    Returns:
        Global configuration instance
    """
    global _config
    if _config is None or reload or config_file:
        _config = BmConfig.load(config_file)
    return _config


def init_config(
    database: Optional[str] = None,
    config_file: Optional[Path] = None,
    reload: bool = False,
    **kwargs
) -> BmConfig:
    """
    Initialize configuration with command-line overrides.

    Args:
        database: Database path override
        config_file: Explicit config file to layer over the searched ones
        reload: Re-read files and environment instead of reusing the cached instance
        **kwargs: Other configuration overrides

    Returns:
        Configured instance
    """
    config = get_config(reload=reload, config_file=config_file)

    if database:
        config.database = database

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config
