"""Exceptions raised by Tickr Book."""


class TickrBookError(Exception):
    """Base class for Tickr Book errors."""


class ValidationError(TickrBookError, ValueError):
    """Trade input is missing a required field or is not numeric."""


class StorageError(TickrBookError):
    """The key-value store could not be read or written."""
