import codecs
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from converter.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "data" / "converter.json"

DEFAULTS = {
    "separator": "comma",
    "pretty": False,
    "indent": 3,
    "encoding": "utf-8-sig",
    "progress_interval": 10000,
    "log_level": "INFO",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _is_int(value) -> bool:
    # JSON true/false load as bool, which is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


# Load converter configuration from data/converter.json
def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load converter defaults from a JSON file.

    Args:
        config_path: Explicit config file. When None, the bundled
            data/converter.json is used if it exists, otherwise the built-in
            defaults.

    Returns:
        Dictionary with every key of DEFAULTS.

    Raises:
        ConfigurationError: If an explicit file is missing, or any file is not
            a valid JSON object with valid values.
    """
    config = dict(DEFAULTS)

    if config_path is None:
        path = DEFAULT_CONFIG_PATH
        if not path.exists():
            logger.debug(f"No config file at {path}, using built-in defaults")
            return config
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"config file {path} does not exist")

    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"config file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"config file {path} could not be read: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"config file {path} must contain a JSON object")

    for key, value in loaded.items():
        if key not in DEFAULTS:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        config[key] = value

    if not isinstance(config["separator"], str):
        raise ConfigurationError(f"separator must be a string, got {config['separator']!r}")
    if not isinstance(config["pretty"], bool):
        raise ConfigurationError(f"pretty must be true or false, got {config['pretty']!r}")
    if not isinstance(config["encoding"], str):
        raise ConfigurationError(f"encoding must be a string, got {config['encoding']!r}")
    try:
        codecs.lookup(config["encoding"])
    except LookupError as e:
        raise ConfigurationError(f"unknown encoding: {config['encoding']}") from e

    if not _is_int(config["indent"]) or config["indent"] < 0:
        raise ConfigurationError(f"indent must be a non-negative integer, got {config['indent']!r}")
    if not _is_int(config["progress_interval"]) or config["progress_interval"] < 1:
        raise ConfigurationError(
            f"progress_interval must be a positive integer, got {config['progress_interval']!r}"
        )

    if str(config["log_level"]).upper() not in LOG_LEVELS:
        raise ConfigurationError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
    config["log_level"] = str(config["log_level"]).upper()

    logger.debug(f"Loaded config from {path}")
    return config
