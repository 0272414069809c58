import json
import logging
from pathlib import Path

import pytest

import converter
from converter.config import DEFAULT_CONFIG_PATH, DEFAULTS, load_config
from converter.errors import ConfigurationError


@pytest.fixture
def config_file(tmp_path):
    """Write a config file and return a function producing its path."""

    def _write(content):
        path = tmp_path / "converter.json"
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        return str(path)

    return _write


def test_default_config_matches_builtin_defaults():
    assert load_config() == DEFAULTS


def test_values_override_defaults(config_file):
    config = load_config(config_file({"pretty": True, "indent": 2}))
    assert config["pretty"] is True
    assert config["indent"] == 2
    assert config["separator"] == "comma"


def test_missing_explicit_config(tmp_path):
    with pytest.raises(ConfigurationError, match="does not exist"):
        load_config(str(tmp_path / "missing.json"))


def test_invalid_json(config_file):
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_config(config_file("{not json"))


def test_config_must_be_object(config_file):
    with pytest.raises(ConfigurationError, match="JSON object"):
        load_config(config_file([1, 2]))


@pytest.mark.parametrize(
    "content",
    [
        {"indent": -1},
        {"indent": "wide"},
        {"indent": True},
        {"progress_interval": 0},
        {"log_level": "LOUD"},
        {"encoding": "bogus"},
        {"encoding": 8},
        {"separator": ["comma"]},
        {"pretty": "false"},
        {"pretty": 1},
    ],
)
def test_invalid_values(config_file, content):
    with pytest.raises(ConfigurationError):
        load_config(config_file(content))


def test_unknown_keys_are_ignored(config_file, caplog):
    caplog.set_level(logging.WARNING, logger="converter.config")
    config = load_config(config_file({"colour": "blue"}))
    assert "colour" not in config
    assert "Ignoring unknown config key: colour" in caplog.text


def test_log_level_is_normalized(config_file):
    assert load_config(config_file({"log_level": "debug"}))["log_level"] == "DEBUG"


def test_default_config_ships_inside_package():
    package_dir = Path(converter.__file__).parent
    assert DEFAULT_CONFIG_PATH.is_file()
    assert package_dir in DEFAULT_CONFIG_PATH.parents
