"""Common literal values used across handbook_pages.

These constants keep default paths and output filenames centralized so the
CLI, generator, and tests can import the same values without drifting.

Examples
--------
>>> from handbook_pages import _constants
>>> _constants.NAV_MANIFEST_NAME
'nav.json'
>>> str(_constants.DEFAULT_CONFIG)
'config/site.yaml'
"""

from pathlib import Path

DEFAULT_CONFIG = Path("config/site.yaml")
DEFAULT_DOCS_ROOT = Path("docs")
DEFAULT_OUTPUT_DIR = Path("dist")
NAV_MANIFEST_NAME = "nav.json"
NOT_FOUND_PAGE = "404.html"
