# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the phpsym API reference."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

project = "phpsym"
author = "phpsym Contributors"
release = "0.1.0"

extensions: list[str] = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]

# Docstrings use the Google style (Args/Returns/Raises sections).
napoleon_google_docstring = True
napoleon_numpy_docstring = False
autodoc_member_order = "bysource"
autodoc_default_options = {"members": True, "undoc-members": False}

html_theme = "alabaster"
