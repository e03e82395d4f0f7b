"""Application settings with deferred writes.

:class:`Settings` keeps the user-interface preferences of the application
(window size, maximized state, last-seen version).  Reads go straight to the
store; writes are staged and reach disk only on :meth:`Settings.save` or when
the settings object is torn down.

Teardown records the running version, which is how the next launch knows
whether it is the first one after an install or upgrade.  It runs exactly
once: on :meth:`Settings.close`, on leaving a ``with`` block, or when the
object is garbage collected or the interpreter exits.
"""

from __future__ import annotations

import logging
import weakref
from typing import NamedTuple, Optional

from mgt.config import APP_ID, PACKAGE_VERSION
from mgt.errors import StoreWriteFailed
from mgt.store import SettingsBackend, StoreHandle, open_store

log = logging.getLogger(__name__)


class Geometry(NamedTuple):
    """Window rectangle; ``x`` and ``y`` are -1 when the position is unknown."""

    x: int
    y: int
    width: int
    height: int


def _teardown(handle: StoreHandle) -> None:
    log.debug("disposing settings")
    try:
        handle.set_string("version", PACKAGE_VERSION)
        handle.apply()
    except StoreWriteFailed:
        log.warning("Failed to save settings on exit", exc_info=True)


class Settings:
    """The application settings.

    Create one instance at startup and pass it to whatever needs it.
    """

    def __init__(self, backend: Optional[SettingsBackend] = None):
        self._handle = open_store(APP_ID, backend)

        version = self._handle.get_string("version")
        self._first_run = version != PACKAGE_VERSION
        self._handle.set_delay_mode()

        self._finalizer = weakref.finalize(self, _teardown, self._handle)
        log.debug("settings opened (stored version %r, first run: %s)", version, self._first_run)

    def __enter__(self) -> Settings:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Settings {APP_ID} {state}>"

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    @property
    def has_unsaved_changes(self) -> bool:
        return self._handle.has_unapplied

    def _check_open(self, func: str) -> bool:
        if self._finalizer.alive:
            return True
        log.critical("%s: assertion 'settings are open' failed", func)
        return False

    def close(self) -> None:
        """Record the running version and commit staged writes.

        Safe to call more than once; only the first call has an effect.
        A failed commit is logged, not raised.
        """
        self._finalizer()

    def save(self) -> None:
        """Save modified settings to disk.

        Modified settings are otherwise saved only when the settings are
        closed.  Raises :class:`~mgt.errors.StoreWriteFailed` if the commit
        fails, in which case the modifications stay staged.
        """
        if not self._check_open("save"):
            return
        self._handle.apply()

    def is_first_run(self) -> bool:
        """``True`` for the first launch after install or update."""
        return self._first_run

    def get_window_maximized(self) -> bool:
        if not self._check_open("get_window_maximized"):
            return False
        return self._handle.get_bool("window-maximized")

    def set_window_maximized(self, maximized) -> None:
        if not self._check_open("set_window_maximized"):
            return
        self._handle.set_bool("window-maximized", bool(maximized))

    def get_window_geometry(self) -> Optional[Geometry]:
        """Return the saved window size; the position is always (-1, -1)."""
        if not self._check_open("get_window_geometry"):
            return None
        width, height = self._handle.get_pair_i32("window-size")
        return Geometry(-1, -1, width, height)

    def set_window_geometry(self, geometry) -> None:
        """Stage the size of *geometry*, any ``(x, y, width, height)``.

        Only the width and height are kept.
        """
        if not self._check_open("set_window_geometry"):
            return
        if geometry is None:
            log.critical("set_window_geometry: assertion 'geometry is not None' failed")
            return
        _x, _y, width, height = geometry
        self._handle.set_pair_i32("window-size", (width, height))


def new_settings(backend: Optional[SettingsBackend] = None) -> Settings:
    """Create the application :class:`Settings`; close it when done."""
    return Settings(backend)
