"""
Bundled data — default install configuration and systemd units.
"""

from pathlib import Path

DATA_DIR = Path(__file__).parent
DEFAULT_CONFIG = DATA_DIR / "install.yml"
UNIT_DIR = DATA_DIR / "systemd"
