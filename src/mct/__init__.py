"""mct: configuration journal tools.

This module exposes the package and project directories used to locate
configuration files.
"""

from pathlib import Path

THIS_DIR = Path(__file__).parent
PROJECT_DIR = (THIS_DIR / "../..").resolve()
