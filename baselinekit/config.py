"""Configuration for the baseline cache location and user settings.

Only the outermost entry points (the CLI, or an application embedding the
library) read these values. Everything below them receives the cache root
explicitly.
"""

import configparser
import logging
import os
import platform
from pathlib import Path
from typing import Any, Optional

from baselinekit.constants import APP_NAME

logger = logging.getLogger(__name__)

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")
xdg_cache_home = os.environ.get("XDG_CACHE_HOME") or os.path.join(_home, ".cache")


default_cfg = {"dirs": {"cache_root": os.path.join(xdg_cache_home, APP_NAME)}}

if platform.system() == "Darwin":
    # macOS
    config_dir = Path("~/Library/Application Support/baselinekit").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    A dict-like accessor for the configuration file.

    Missing sections or keys fall back to a default instead of raising.

    Usage:
        config = ConfigAccessor()
        value = config.get('dirs', 'cache_root', default='~/.cache/baselinekit')
    """

    def __init__(self, config_path: Optional[Path] = None):
        if config_path is None:
            self.config_path = get_config_file()
        else:
            self.config_path = config_path

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Args:
            section: The configuration section
            key: The configuration key
            default: Value to return if the section or key doesn't exist

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default

    def set(self, section: str, key: str, value: str) -> None:
        if not self.config.has_section(section):
            self.config.add_section(section)

        self.config[section][key] = value

    def save(self) -> None:
        """
        Save the current configuration to the config file.

        Fails gracefully if the file cannot be written (e.g., read-only filesystem).
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w") as configfile:
                self.config.write(configfile)
        except OSError as e:
            logger.warning(
                f"Could not save configuration to {self.config_path}: {e}. "
                "Configuration changes will not persist."
            )

    def sections(self) -> list:
        return self.config.sections()


def get_cache_root(config: Optional[ConfigAccessor] = None) -> Path:
    """
    Get the configured root directory for baseline cache entries.

    Lookup order: ``[dirs] cache_root`` in the config file, then
    ``$XDG_CACHE_HOME/baselinekit``, then ``~/.cache/baselinekit``.
    The directory is not created here.

    Args:
        config: Config accessor to read from (defaults to the user config file)

    Returns:
        Absolute path of the cache root
    """
    if config is None:
        config = ConfigAccessor()

    cache_root_str = config.get("dirs", "cache_root", default_cfg["dirs"]["cache_root"])
    return Path(cache_root_str).expanduser().absolute()
