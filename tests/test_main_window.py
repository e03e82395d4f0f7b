"""Tests for mgt.gui.main_window – window state through the settings."""

from PyQt6.QtCore import Qt

from mgt.config import PACKAGE_VERSION
from mgt.gui.main_window import MainWindow
from mgt.settings import Settings


class TestRestoreState:
    def test_restores_size(self, qapp, make_backend):
        backend = make_backend({"version": PACKAGE_VERSION, "window-size": "(640, 480)"})
        window = MainWindow(Settings(backend))
        assert (window.width(), window.height()) == (640, 480)
        assert not window.isMaximized()
        assert window.status_bar.currentMessage() == ""

    def test_restores_maximized(self, qapp, make_backend):
        backend = make_backend({"version": PACKAGE_VERSION, "window-maximized": "true"})
        window = MainWindow(Settings(backend))
        assert window.isMaximized()

    def test_welcome_on_first_run(self, qapp, backend):
        window = MainWindow(Settings(backend))
        assert "Welcome" in window.status_bar.currentMessage()


class TestStoreState:
    def test_stages_size(self, qapp, backend):
        settings = Settings(backend)
        window = MainWindow(settings)
        window.resize(1024, 768)
        window.store_state()

        assert backend.commits == []
        assert settings.get_window_geometry() == (-1, -1, 1024, 768)
        assert settings.get_window_maximized() is False

    def test_maximized_keeps_last_size(self, qapp, make_backend):
        backend = make_backend({"window-size": "(640, 480)"})
        settings = Settings(backend)
        window = MainWindow(settings)
        window.setWindowState(window.windowState() | Qt.WindowState.WindowMaximized)
        window.store_state()

        assert settings.get_window_maximized() is True
        assert settings.get_window_geometry() == (-1, -1, 640, 480)
