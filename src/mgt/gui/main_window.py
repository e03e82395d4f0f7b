"""Main application window – restores and records its own state."""

from __future__ import annotations

from PyQt6.QtWidgets import QLabel, QMainWindow, QStatusBar
from PyQt6.QtCore import Qt

from mgt.config import APP_NAME, PACKAGE_VERSION
from mgt.settings import Geometry, Settings


class MainWindow(QMainWindow):
    """Top-level window of the application.

    The size and maximized state come from *settings* and are written back
    to it when the window closes; persisting them is left to the owner of
    *settings*.
    """

    def __init__(self, settings: Settings):
        super().__init__()
        self._settings = settings
        self.setWindowTitle(APP_NAME)

        label = QLabel(self.tr("{name} {version}").format(name=APP_NAME, version=PACKAGE_VERSION))
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setCentralWidget(label)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self.restore_state()

    def restore_state(self):
        geometry = self._settings.get_window_geometry()
        if geometry is not None:
            self.resize(geometry.width, geometry.height)

        if self._settings.get_window_maximized():
            self.setWindowState(self.windowState() | Qt.WindowState.WindowMaximized)

        if self._settings.is_first_run():
            self.status_bar.showMessage(
                self.tr("Welcome to {name} {version}").format(name=APP_NAME, version=PACKAGE_VERSION)
            )

    def store_state(self):
        """Stage the current window state in the settings."""
        maximized = self.isMaximized()
        self._settings.set_window_maximized(maximized)

        # Keep the last non-maximized size
        if not maximized:
            self._settings.set_window_geometry(
                Geometry(self.x(), self.y(), self.width(), self.height())
            )

    def closeEvent(self, event):
        """Save window state on close."""
        self.store_state()
        super().closeEvent(event)
