"""
Configuration for notebook_sync.  Each setting comes from a
``NOTEBOOK_SYNC_*`` environment variable if set, else from
.notebook_sync.yaml, else from the built-in default.
"""

import os

import yaml

from .notebooks.line_index import DEFAULT_CELL_DELIMITER, validate_delimiter
from .notebooks.model import DEFAULT_LANGUAGE


_DEFAULTS = {
    "cell_delimiter": DEFAULT_CELL_DELIMITER,
    "language": DEFAULT_LANGUAGE,
    "log_level": "INFO",
    "log_file": None,
}

_CONFIG_FILENAMES = (".notebook_sync.yaml", ".notebook_sync.yml")


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Return the settings file to read, or ``None``.

    An explicit path wins and is never replaced by a discovered file, even
    when it does not exist.  Otherwise the working directory is searched
    before the home directory.
    """
    if explicit_path:
        return explicit_path if os.path.isfile(explicit_path) else None

    for directory in (os.getcwd(), os.path.expanduser("~")):
        for name in _CONFIG_FILENAMES:
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate):
                return candidate
    return None


def _load_yaml(path: str) -> dict:
    """Read the mapping stored in *path*; unreadable or non-mapping files give ``{}``."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


class Config:
    """Notebook sync configuration.

    Settings are resolved in priority order:
    1. Environment variables (``NOTEBOOK_SYNC_*``)
    2. .notebook_sync.yaml config file
    3. Built-in defaults

    The cell delimiter is a contract with the analyzer and is validated
    here, so a bad value fails at startup rather than on the first notebook.
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # First non-None source wins
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        self.CELL_DELIMITER = validate_delimiter(
            _get("NOTEBOOK_SYNC_CELL_DELIMITER", "cell_delimiter",
                 _DEFAULTS["cell_delimiter"], cast=_unescape)
        )
        self.LANGUAGE = _get("NOTEBOOK_SYNC_LANGUAGE", "language",
                             _DEFAULTS["language"])
        self.LOG_LEVEL = _get("NOTEBOOK_SYNC_LOG_LEVEL", "log_level",
                              _DEFAULTS["log_level"]).upper()
        self.LOG_FILE = _get("NOTEBOOK_SYNC_LOG_FILE", "log_file",
                             _DEFAULTS["log_file"])

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)


def _unescape(value) -> str:
    # Environment variables cannot easily carry a raw newline
    return str(value).replace("\\n", "\n")
