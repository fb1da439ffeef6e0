"""Local configuration for config-docs."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_FORMAT = "toml"
DEFAULT_OUTPUT_DIR = "docs"

# Format used by the CLI when --format is not given.
CONFIG_DOCS_FORMAT = os.getenv("CONFIG_DOCS_FORMAT", DEFAULT_FORMAT)
# Directory the generated documents are written to.
CONFIG_DOCS_OUTPUT_DIR = Path(os.getenv("CONFIG_DOCS_OUTPUT_DIR", DEFAULT_OUTPUT_DIR))
