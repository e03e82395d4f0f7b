"""Typed key/value store with a delayed-write overlay.

The store works like a desktop configuration service: values are addressed
by key inside a schema selected by application id, every key has a registered
type and default, and a handle can be switched into *delay mode* where writes
are staged in memory until :meth:`StoreHandle.apply` commits them as one batch.

Values cross the adapter boundary as :class:`Variant` objects tagged with a
type string (``"s"``, ``"b"``, ``"(ii)"``).  Backends only ever see the text
form, so a malformed stored value is caught when it is decoded.

Persistence is behind :class:`SettingsBackend`; :class:`QSettingsBackend`
keeps the values in an ini file through ``QSettings``, which on
Linux/macOS/Windows lands in the user's config directory.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
import os
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from PyQt6.QtCore import QSettings

from mgt.config import APP_ID, ORGANIZATION
from mgt.errors import SchemaViolation, StoreUnavailable, StoreWriteFailed

log = logging.getLogger(__name__)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

_PAIR_RE = re.compile(r"^\s*\(\s*(-?\d+)\s*,\s*(-?\d+)\s*\)\s*$")


# ── Variant ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Variant:
    """A store value tagged with its type string."""

    type_string: str
    value: Any

    @classmethod
    def string(cls, value: str) -> Variant:
        if not isinstance(value, str):
            raise ValueError(f"expected str, got {type(value).__name__}")
        return cls("s", value)

    @classmethod
    def boolean(cls, value: bool) -> Variant:
        if not isinstance(value, bool):
            raise ValueError(f"expected bool, got {type(value).__name__}")
        return cls("b", value)

    @classmethod
    def pair_i32(cls, first: int, second: int) -> Variant:
        for item in (first, second):
            if isinstance(item, bool) or not isinstance(item, int):
                raise ValueError(f"expected int, got {type(item).__name__}")
            if not INT32_MIN <= item <= INT32_MAX:
                raise ValueError(f"{item} is out of int32 range")
        return cls("(ii)", (first, second))

    def to_text(self) -> str:
        """Render the value in the text form kept by the backends."""
        if self.type_string == "b":
            return "true" if self.value else "false"
        if self.type_string == "(ii)":
            return "({}, {})".format(*self.value)
        return self.value

    @classmethod
    def from_text(cls, type_string: str, text: str) -> Variant:
        """Decode *text* as *type_string*.

        Raises :class:`SchemaViolation` when the text does not have the
        expected shape.
        """
        if type_string == "s":
            return cls.string(text)

        if type_string == "b":
            if text == "true":
                return cls("b", True)
            if text == "false":
                return cls("b", False)
            raise SchemaViolation(f"cannot decode {text!r} as type 'b'")

        if type_string == "(ii)":
            m = _PAIR_RE.match(text)
            if m is None:
                raise SchemaViolation(f"cannot decode {text!r} as type '(ii)'")
            try:
                return cls.pair_i32(int(m.group(1)), int(m.group(2)))
            except ValueError as exc:
                raise SchemaViolation(f"cannot decode {text!r} as type '(ii)': {exc}") from exc

        raise SchemaViolation(f"unsupported type string {type_string!r}")


# Installed schemas: schema id -> {key: default}
SCHEMAS: dict[str, dict[str, Variant]] = {
    APP_ID: {
        "version": Variant.string(""),
        "window-maximized": Variant.boolean(False),
        "window-size": Variant.pair_i32(800, 600),
    },
}


# ── Backends ──────────────────────────────────────────────────────────

class SettingsBackend(ABC):
    """Persistent storage for the text form of store values."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored text for *key*, or ``None`` if it was never set."""

    @abstractmethod
    def write(self, changes: dict[str, str]) -> None:
        """Commit *changes* as one batch, raising :class:`StoreWriteFailed`."""


class QSettingsBackend(SettingsBackend):
    """Backend persisting to an ini file through ``QSettings``.

    Without *path* the file lives in the user scope under
    ``ORGANIZATION/<application>.ini``.
    """

    def __init__(
        self,
        application: str = APP_ID,
        path: Optional[Union[str, os.PathLike]] = None,
    ):
        self._application = application
        self._path = os.fspath(path) if path is not None else None

        qs = self._qs()
        status = qs.status()
        if status != QSettings.Status.NoError:
            raise StoreUnavailable(f"cannot open {qs.fileName()}: {status.name}")

    def _qs(self) -> QSettings:
        # A QSettings keeps its error status for life, so every operation
        # gets a fresh one
        if self._path is not None:
            return QSettings(self._path, QSettings.Format.IniFormat)
        return QSettings(
            QSettings.Format.IniFormat, QSettings.Scope.UserScope, ORGANIZATION, self._application
        )

    @property
    def file_name(self) -> str:
        return self._qs().fileName()

    def read(self, key: str) -> Optional[str]:
        value = self._qs().value(key)
        if value is None:
            return None
        # An unquoted comma in a hand-edited file is read back as a list
        if isinstance(value, list):
            return ", ".join(str(v) for v in value)
        return str(value)

    def write(self, changes: dict[str, str]) -> None:
        qs = self._qs()
        for key, text in changes.items():
            qs.setValue(key, text)
        qs.sync()

        status = qs.status()
        if status != QSettings.Status.NoError:
            raise StoreWriteFailed(f"cannot write {qs.fileName()}: {status.name}")


# ── Handle ────────────────────────────────────────────────────────────

class StoreHandle:
    """Typed access to one schema of a backend.

    Reads see staged values first, then the backend, then the schema
    default.  Writes go straight to the backend until
    :meth:`set_delay_mode` is called; from then on they are staged and
    committed together by :meth:`apply`.
    """

    def __init__(self, schema_id: str, schema: dict[str, Variant], backend: SettingsBackend):
        self._schema_id = schema_id
        self._schema = schema
        self._backend = backend
        self._delayed = False
        # key -> staged value, later stages overwrite earlier ones
        self._staged: dict[str, Variant] = {}

    @property
    def schema_id(self) -> str:
        return self._schema_id

    @property
    def backend(self) -> SettingsBackend:
        return self._backend

    @property
    def delayed(self) -> bool:
        return self._delayed

    @property
    def has_unapplied(self) -> bool:
        return bool(self._staged)

    # ── Reads ─────────────────────────────────────────────────────────

    def get_string(self, key: str) -> str:
        return self._lookup(key, "s").value

    def get_bool(self, key: str) -> bool:
        return self._lookup(key, "b").value

    def get_pair_i32(self, key: str) -> tuple[int, int]:
        return self._lookup(key, "(ii)").value

    # ── Writes ────────────────────────────────────────────────────────

    def set_string(self, key: str, value: str) -> None:
        self._store(key, Variant.string(value))

    def set_bool(self, key: str, value: bool) -> None:
        self._store(key, Variant.boolean(value))

    def set_pair_i32(self, key: str, value: tuple[int, int]) -> None:
        first, second = value
        self._store(key, Variant.pair_i32(first, second))

    def set_delay_mode(self) -> None:
        self._delayed = True

    def apply(self) -> None:
        """Commit all staged writes as one batch.

        Does nothing when nothing is staged.  On failure the staged
        values are kept so that a later call can retry.
        """
        if not self._staged:
            return

        changes = {key: variant.to_text() for key, variant in self._staged.items()}
        self._backend.write(changes)
        self._staged.clear()
        log.debug("applied %d key(s) to %s", len(changes), self._schema_id)

    # ── Internals ─────────────────────────────────────────────────────

    def _default(self, key: str) -> Variant:
        try:
            return self._schema[key]
        except KeyError:
            raise SchemaViolation(f"schema {self._schema_id!r} has no key {key!r}") from None

    def _check_type(self, key: str, type_string: str) -> Variant:
        default = self._default(key)
        if default.type_string != type_string:
            raise SchemaViolation(
                f"key {key!r} has type {default.type_string!r}, not {type_string!r}"
            )
        return default

    def _lookup(self, key: str, type_string: str) -> Variant:
        default = self._check_type(key, type_string)
        if key in self._staged:
            return self._staged[key]

        text = self._backend.read(key)
        if text is None:
            return default
        return Variant.from_text(type_string, text)

    def _store(self, key: str, variant: Variant) -> None:
        self._check_type(key, variant.type_string)
        if self._delayed:
            self._staged[key] = variant
        else:
            self._backend.write({key: variant.to_text()})


def open_store(schema_id: str, backend: Optional[SettingsBackend] = None) -> StoreHandle:
    """Open a handle on *schema_id*.

    Uses a :class:`QSettingsBackend` for the schema unless *backend* is
    given.  Raises :class:`StoreUnavailable` if the schema is not installed
    or the backend cannot be opened.
    """
    schema = SCHEMAS.get(schema_id)
    if schema is None:
        raise StoreUnavailable(f"schema {schema_id!r} is not installed")

    if backend is None:
        backend = QSettingsBackend(schema_id)
    return StoreHandle(schema_id, schema, backend)
