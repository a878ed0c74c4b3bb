# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-file symbol tables for PHP source code."""

from phpsym.parser import parse, parse_file

__all__ = [
    "parse",
    "parse_file",
]
