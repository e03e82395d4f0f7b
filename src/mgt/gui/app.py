"""Application entry point for the mgt GUI."""

from __future__ import annotations

import argparse
import sys


def run():
    """Launch the mgt GUI application.

    Supports ``--verbose`` to log the settings trace to stderr, e.g.::

        mgt --verbose
    """
    parser = argparse.ArgumentParser(description="mgt GUI", add_help=False)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args, remaining = parser.parse_known_args()

    from mgt.log import setup_logging
    setup_logging(args.verbose)

    from PyQt6.QtWidgets import QApplication

    from mgt.config import APP_ID, APP_NAME, ORGANIZATION, PACKAGE_VERSION

    app = QApplication([sys.argv[0], *remaining])
    app.setOrganizationName(ORGANIZATION)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(PACKAGE_VERSION)
    app.setDesktopFileName(APP_ID)

    from mgt.settings import new_settings
    from mgt.gui.main_window import MainWindow

    # Settings are torn down (and flushed) before the process exits
    with new_settings() as settings:
        window = MainWindow(settings)
        window.show()
        status = app.exec()

    sys.exit(status)


if __name__ == "__main__":
    run()
