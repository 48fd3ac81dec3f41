"""SQL builder subpackage for generating statements and bind values."""

from .query_builder import SQLBuilder, CompiledStatement
from .conditions import Condition, compile_where, compile_order
from .adapt_sql import adapt_sql, bind_params

__all__ = [
    'SQLBuilder',
    'CompiledStatement',
    'Condition',
    'compile_where',
    'compile_order',
    'adapt_sql',
    'bind_params'
]
