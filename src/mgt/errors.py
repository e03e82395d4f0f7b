"""Exceptions raised by the settings store and facade."""


class SettingsError(Exception):
    """Base class for all settings errors."""


class StoreUnavailable(SettingsError):
    """The backing store handle could not be opened."""


class StoreWriteFailed(SettingsError):
    """Committing staged writes to the backing store failed."""


class SchemaViolation(SettingsError):
    """A key or value does not match the registered schema."""
