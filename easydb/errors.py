"""Exceptions raised by easydb."""

from typing import Optional


class EasyDBError(Exception):
    """Base class for all easydb errors."""


class ConfigurationError(EasyDBError):
    """Missing or invalid constructor options."""


class ConnectionError(EasyDBError):
    """The database could not be connected, or reconnected after a failed ping."""


class ValidationError(EasyDBError, ValueError):
    """A call was missing required data or carried something unusable."""


class ExecutionError(EasyDBError):
    """Preparing, binding or executing a statement failed."""

    def __init__(self, message: str, statement: Optional[str] = None):
        self.message = message
        self.statement = statement
        super().__init__(message if statement is None else f'{message} [statement: {statement}]')
