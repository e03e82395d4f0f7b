"""Build-time constants shared by the settings store and the GUI."""

from __future__ import annotations

from mgt import __version__

# Reverse-DNS identifier, selects the schema namespace in the store
APP_ID = "org.mgt.Mgt"

# Compared against the stored "version" key for first-run detection
PACKAGE_VERSION = __version__

ORGANIZATION = "mgt"
APP_NAME = "Mgt"
