"""EasyDB: simple CRUD over a single lazily-connected database handle.

    db = EasyDB(type='mysql', db='test', user='myuser')
    rows = db.select('staff', where={'id': 'gil'})
    name = db.select('staff', where={'id': 'gil'}, returning='name')
    db.insert('staff', id='nick', name='Nick Stokes')
    db.update('staff', set={'office': 'Las Vegas'}, where={'id': 'nick'})
    db.delete('staff', id='nick')
"""

from typing import Any, Dict, Mapping, Optional

import pydantic
from sqlalchemy.engine import Connection, CursorResult

from .builder import CompiledStatement, SQLBuilder
from .config import ConnectionConfig, SelectOptions, UpdateOptions, parse_options
from .conn import ConnectionManager
from .errors import ConfigurationError, ValidationError
from .executor import Executor
from .shaping import Build, Prepare, shape


class EasyDB:
    """Database object wrapping statement building, execution and result shaping.

    Recognized constructor options:

      type  database dialect, defaults to 'mysql'
      db    database name (file path for sqlite), mandatory
      host  server hostname, defaults to the driver default
      port  server port, 0 for the dialect default
      user  database user
      pass  database password (or `password=`)
      echo, debug  SQL logging switches

    Nothing connects until the first statement runs.
    """

    def __init__(self, config: Optional[ConnectionConfig] = None, **options: Any):
        if config is None:
            try:
                config = ConnectionConfig.model_validate(options)
            except pydantic.ValidationError as e:
                raise ConfigurationError(f'Invalid database configuration: {e}') from e
        elif options:
            raise ConfigurationError('Pass either a ConnectionConfig or options, not both')
        self.config = config
        self.manager = ConnectionManager(config)
        self.executor = Executor(self.manager)
        self._sql = SQLBuilder()

    @property
    def dsn(self) -> str:
        return self.manager.dsn

    @property
    def dbh(self) -> Connection:
        """The live SQLAlchemy connection, created on demand."""
        return self.manager.ensure_live()

    @property
    def sql(self) -> SQLBuilder:
        return self._sql

    def select(self, table: str, **options: Any) -> Any:
        """Perform a select and return results in the requested format.

        Recognized options:

          where    mapping describing the WHERE clause
          get      column name, comma-separated names or list of names; defaults to all (*)
          order    column or list of columns to sort on
          index    return a dict of rows keyed by this column
          limit    maximum number of rows
          offset   starting row, used together with limit
          return   return a single column value (or `returning=`), implies limit 1
          build    return the CompiledStatement without executing it
          prepare  return a PreparedStatement without executing it
        """
        opts = parse_options(SelectOptions, options, 'select')
        statement = self._sql.select(
            table, opts.get or '*', opts.where, opts.order, opts.effective_limit, opts.offset
        )
        mode = opts.mode
        if isinstance(mode, Build):
            return statement
        if isinstance(mode, Prepare):
            return self.executor.prepare(statement.sql)
        return shape(self.executor.execute(statement), mode)

    def insert(self, table: str, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> CursorResult:
        """Insert a record, given as a mapping and/or keyword arguments."""
        row: Dict[str, Any] = dict(data or {})
        row.update(fields)
        return self.executor.execute(self._sql.insert(table, row))

    def update(self, table: str, **options: Any) -> CursorResult:
        """Update existing records. `set` is required; `where` is optional."""
        opts = parse_options(UpdateOptions, options, 'update')
        return self.executor.execute(self._sql.update(table, opts.values, opts.where))

    def delete(self, table: str, where: Optional[Mapping[str, Any]] = None, **conditions: Any) -> CursorResult:
        """Delete records. All conditions form the WHERE clause, and at least one is required."""
        if where is not None and not isinstance(where, Mapping):
            raise ValidationError('delete() where must be a mapping')
        cond: Dict[str, Any] = dict(where or {})
        cond.update(conditions)
        return self.executor.execute(self._sql.delete(table, cond))

    def execute(self, sql: str, *bind: Any) -> CursorResult:
        """Execute a raw statement with positional `?` bind values."""
        return self.executor.execute(CompiledStatement(sql, tuple(bind)))

    def close(self) -> None:
        """Release the connection if one was made. Safe to call more than once."""
        self.manager.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __del__(self):  # pragma: no cover - best effort cleanup
        manager = getattr(self, 'manager', None)
        if manager is not None and manager.connected:
            manager.close()

    def __repr__(self) -> str:
        return f'EasyDB({self.dsn!r})'
