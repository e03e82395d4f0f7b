import os

# Widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from mgt.errors import StoreWriteFailed
from mgt.store import QSettingsBackend, SettingsBackend


class MemoryBackend(SettingsBackend):
    """In-process backend recording every committed batch in ``commits``."""

    def __init__(self, values=None):
        self.values = dict(values or {})
        self.commits = []
        self._failures = 0

    def fail_next(self, count=1):
        self._failures += count

    def read(self, key):
        return self.values.get(key)

    def write(self, changes):
        if self._failures:
            self._failures -= 1
            raise StoreWriteFailed("memory backend: commit refused")
        self.values.update(changes)
        self.commits.append(dict(changes))


@pytest.fixture()
def make_backend():
    return MemoryBackend


@pytest.fixture()
def backend():
    return MemoryBackend()


@pytest.fixture()
def ini_path(tmp_path):
    return tmp_path / "mgt.ini"


@pytest.fixture()
def ini_backend(ini_path):
    return QSettingsBackend(path=ini_path)


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
