"""mgt – application preferences with deferred writes."""

__version__ = "0.1.0"
