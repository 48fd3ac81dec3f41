"""Simple database access: statement building, a self-healing connection and result shaping."""

from .easy import EasyDB
from .config import ConnectionConfig, Dialect, SelectOptions, UpdateOptions
from .conn import ConnectionManager, connection_string, database_url
from .executor import Executor, PreparedStatement
from .shaping import Build, Prepare, Indexed, Scalar, Rows, OutputMode, shape
from .builder import SQLBuilder, CompiledStatement, Condition, compile_where, compile_order
from .errors import (
    EasyDBError, ConfigurationError, ConnectionError, ValidationError, ExecutionError
)

__version__ = '2.0.0'

__all__ = [
    'EasyDB', 'ConnectionConfig', 'Dialect', 'SelectOptions', 'UpdateOptions',
    'ConnectionManager', 'connection_string', 'database_url', 'Executor',
    'PreparedStatement', 'Build', 'Prepare', 'Indexed', 'Scalar', 'Rows',
    'OutputMode', 'shape', 'SQLBuilder', 'CompiledStatement', 'Condition',
    'compile_where', 'compile_order', 'EasyDBError', 'ConfigurationError',
    'ConnectionError', 'ValidationError', 'ExecutionError'
]
