# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for phpsym."""

from phpsym.workspace.config import (
    CONFIG_FILE_NAME,
    ConfigError,
    ParserConfig,
    find_config,
    load_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ParserConfig",
    "find_config",
    "load_config",
]
