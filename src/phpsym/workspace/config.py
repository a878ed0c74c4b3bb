# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the phpsym configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".phpsym.yaml"


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class ParserConfig:
    """Settings that control how PHP files are discovered and parsed.

    Attributes:
        parse_function_bodies: Record local variables declared in function bodies.
        file_extensions: Suffixes of the files picked up when a directory is given.
    """

    parse_function_bodies: bool = False
    file_extensions: list[str] = field(default_factory=lambda: [".php"])


def load_config(path: Path) -> ParserConfig:
    """Load and parse a phpsym configuration file.

    Args:
        path: Path to the `.phpsym.yaml` file.

    Returns:
        A ParserConfig instance populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_config(text, source_label=str(path))


def find_config(directory: Path) -> ParserConfig:
    """Load `.phpsym.yaml` from *directory*, or return the defaults if it is absent.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    candidate = directory / CONFIG_FILE_NAME
    if not candidate.exists():
        return ParserConfig()
    return load_config(candidate)


# ################
# Implementation
# ################

_KNOWN_KEYS = frozenset({"parse-function-bodies", "file-extensions"})


def _parse_config(text: str, source_label: str = "<string>") -> ParserConfig:
    """Parse configuration YAML text into a ParserConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Returns:
        A ParserConfig instance.

    Raises:
        ConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return ParserConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    unknown = sorted(str(key) for key in data if key not in _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{source_label}: unknown field(s): {', '.join(unknown)}")

    config = ParserConfig()
    if "parse-function-bodies" in data:
        value = data["parse-function-bodies"]
        if not isinstance(value, bool):
            raise ConfigError(f"{source_label}: 'parse-function-bodies' must be a boolean")
        config.parse_function_bodies = value
    if "file-extensions" in data:
        config.file_extensions = _parse_extensions(data["file-extensions"], source_label)
    return config


def _parse_extensions(value: object, source_label: str) -> list[str]:
    """Validate the extension list, adding a leading dot where it is missing."""
    if not isinstance(value, list) or not value:
        raise ConfigError(f"{source_label}: 'file-extensions' must be a non-empty list")
    extensions: list[str] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, str) or not entry.strip("."):
            raise ConfigError(f"{source_label}: file-extensions[{index}] must be a non-empty string")
        entry = entry.lower()
        extensions.append(entry if entry.startswith(".") else f".{entry}")
    return extensions
