import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "ditree"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_CONFIG = {
    "log_level": "WARNING",  # Keep stderr quiet, stdout carries the tree
    "log_file": "",  # Empty disables the file handler
    "docker_timeout_seconds": 60,
}

ENV_OVERRIDES = {
    "DITREE_LOG_LEVEL": "log_level",
    "DITREE_LOG_FILE": "log_file",
}

def config_file() -> Path:
    """Returns the config file path, honouring DITREE_CONFIG."""
    override = os.environ.get("DITREE_CONFIG")
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE

def load_config() -> dict:
    """Loads the configuration, falling back to defaults for anything missing.

    The file is optional and never written: ditree only reports.
    """
    config = dict(DEFAULT_CONFIG)
    path = config_file()
    if path.exists():
        try:
            with open(path, "r") as f:
                stored = json.load(f)
            if isinstance(stored, dict):
                for key in DEFAULT_CONFIG:
                    if key in stored:
                        config[key] = stored[key]
        except (json.JSONDecodeError, IOError):
            # Corrupted or unreadable file, keep the defaults
            pass

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is not None:
            config[key] = value
    return config

def get_config_value(key: str):
    """Gets a specific value from the config."""
    return load_config().get(key)
