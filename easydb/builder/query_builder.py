"""SQL statement builder for single-table CRUD operations."""

import logging
from typing import Any, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from ..errors import ValidationError
from .conditions import compile_order, compile_where
from .mappings import identifier

logger = logging.getLogger(__name__)


class CompiledStatement(NamedTuple):
    """SQL text with `?` placeholders and the values to bind, in order."""
    sql: str
    bind: Tuple[Any, ...] = ()


def _check_name(name: Any, kind: str = 'column') -> str:
    if not isinstance(name, str) or not identifier.match(name):
        raise ValidationError(f'Invalid {kind} name: {name!r}')
    return name


class SQLBuilder:
    """Builds SELECT, INSERT, UPDATE and DELETE statements."""

    def _where(self, where: Any) -> Tuple[str, list]:
        sql, bind = compile_where(where)
        return (f' WHERE {sql}' if sql else ''), bind

    def select(self, table: str, fields: Union[str, Sequence[str]] = '*', where: Any = None,
               order: Any = None, limit: Optional[int] = None, offset: Optional[int] = None) -> CompiledStatement:
        """Generate SELECT query.

        `fields` is a column name, a comma-separated string of column names,
        or a list of column names; `*` selects everything. A LIMIT clause is
        added only for a non-zero limit; offset is ignored without one.
        """
        _check_name(table, 'table')
        if isinstance(fields, str):
            fields = [f.strip() for f in fields.split(',')]
        if not fields:
            fields = ['*']
        cols = ', '.join(f if f == '*' else _check_name(f) for f in fields)
        sql = f'SELECT {cols} FROM {table}'
        w_sql, bind = self._where(where)
        sql += w_sql
        order_sql = compile_order(order)
        if order_sql:
            sql += f' {order_sql}'
        if limit:
            sql += f' LIMIT {int(limit)}'
            if offset is not None:
                sql += f' OFFSET {int(offset)}'
        return CompiledStatement(sql, tuple(bind))

    def insert(self, table: str, fields: Mapping[str, Any]) -> CompiledStatement:
        """Generate INSERT query for a single row."""
        _check_name(table, 'table')
        if not fields:
            raise ValidationError('insert() fields required')
        keys = sorted(_check_name(k) for k in fields)
        sql = f'INSERT INTO {table} ( {", ".join(keys)}) VALUES ( {", ".join("?" for _ in keys)} )'
        return CompiledStatement(sql, tuple(fields[k] for k in keys))

    def update(self, table: str, values: Mapping[str, Any], where: Any = None) -> CompiledStatement:
        """Generate UPDATE query. Without `where` every row is updated."""
        _check_name(table, 'table')
        if not values:
            raise ValidationError('update() set required')
        keys = sorted(_check_name(k) for k in values)
        sql = f'UPDATE {table} SET {", ".join(f"{k} = ?" for k in keys)}'
        w_sql, w_bind = self._where(where)
        if not w_sql:
            logger.debug('UPDATE on %s has no WHERE clause', table)
        return CompiledStatement(sql + w_sql, tuple(values[k] for k in keys) + tuple(w_bind))

    def delete(self, table: str, where: Any) -> CompiledStatement:
        """Generate DELETE query; refuses to build one that would empty the table."""
        _check_name(table, 'table')
        if not where:
            raise ValidationError('delete() where required')
        w_sql, bind = self._where(where)
        if not w_sql:
            raise ValidationError('delete() where required')
        return CompiledStatement(f'DELETE FROM {table}{w_sql}', tuple(bind))
