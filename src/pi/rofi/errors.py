"""Exception types for pi-rofi."""

from __future__ import annotations


class RofiError(Exception):
    """Base class for all pi-rofi errors."""


class ProtocolError(RofiError):
    """The launcher protocol cannot continue.

    Raised for a desynchronized event stream, a payload without commands,
    or a render model that cannot be serialized. Nothing in this package
    catches it.
    """


class CacheDirError(RofiError):
    """The per-user cache root could not be determined."""
