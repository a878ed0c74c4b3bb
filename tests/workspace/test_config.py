# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the phpsym configuration file."""

from pathlib import Path

import pytest

from phpsym.workspace import (
    CONFIG_FILE_NAME,
    ConfigError,
    ParserConfig,
    find_config,
    load_config,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a config file and return its path."""
    config_file = tmp_path / CONFIG_FILE_NAME
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_defaults() -> None:
    """A fresh ParserConfig skips bodies and picks up .php files."""
    config = ParserConfig()
    assert config.parse_function_bodies is False
    assert config.file_extensions == [".php"]


def test_full_config(tmp_path: Path) -> None:
    """All fields are read from the file."""
    config_file = _write_config(
        tmp_path,
        "parse-function-bodies: true\nfile-extensions:\n  - php\n  - .INC\n",
    )
    config = load_config(config_file)
    assert config.parse_function_bodies is True
    assert config.file_extensions == [".php", ".inc"]


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    """An empty config file is equivalent to no config at all."""
    assert load_config(_write_config(tmp_path, "")) == ParserConfig()


def test_partial_config_keeps_other_defaults(tmp_path: Path) -> None:
    """Fields missing from the file keep their default values."""
    config = load_config(_write_config(tmp_path, "parse-function-bodies: true\n"))
    assert config.file_extensions == [".php"]


def test_find_config_without_file(tmp_path: Path) -> None:
    """find_config returns the defaults when the directory has no config file."""
    assert find_config(tmp_path) == ParserConfig()


def test_find_config_with_file(tmp_path: Path) -> None:
    """find_config loads the config file from the directory."""
    _write_config(tmp_path, "file-extensions: [phtml]\n")
    assert find_config(tmp_path).file_extensions == [".phtml"]


# ###############
# Error Cases
# ###############


def test_missing_file_raises(tmp_path: Path) -> None:
    """A path that does not exist raises ConfigError."""
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path / "missing.yaml")


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    """Malformed YAML raises ConfigError."""
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(_write_config(tmp_path, "file-extensions: [php\n"))


def test_non_mapping_raises(tmp_path: Path) -> None:
    """The top level of the file must be a mapping."""
    with pytest.raises(ConfigError, match="mapping"):
        load_config(_write_config(tmp_path, "- php\n- inc\n"))


def test_unknown_field_raises(tmp_path: Path) -> None:
    """Unknown keys are reported instead of being silently ignored."""
    with pytest.raises(ConfigError, match="unknown field"):
        load_config(_write_config(tmp_path, "parse-bodies: true\n"))


def test_non_boolean_flag_raises(tmp_path: Path) -> None:
    """parse-function-bodies must be a boolean."""
    with pytest.raises(ConfigError, match="must be a boolean"):
        load_config(_write_config(tmp_path, "parse-function-bodies: 1\n"))


@pytest.mark.parametrize(
    "value",
    ["[]", "php", "['']", "['.']", "[1]"],
)
def test_invalid_extensions_raise(tmp_path: Path, value: str) -> None:
    """file-extensions must be a non-empty list of non-empty strings."""
    with pytest.raises(ConfigError, match="file-extensions"):
        load_config(_write_config(tmp_path, f"file-extensions: {value}\n"))
