"""Sphinx configuration for the Contact Book API documentation."""

import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.abspath(".."))

project = "Contact Book API"
current_year = datetime.now().year
copyright = f"{current_year}, Contact Book"
author = "Contact Book Team"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]

autodoc_mock_imports = ["fakeredis", "fastapi_limiter", "redis"]

templates_path = ["_templates"]
exclude_patterns: list[str] = ["_build"]

html_theme = "alabaster"
