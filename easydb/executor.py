"""Statement execution against the managed connection."""

import logging
from typing import Any, Sequence

from sqlalchemy import text
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError

from .builder import CompiledStatement, adapt_sql, bind_params
from .conn import ConnectionManager
from .errors import ExecutionError

logger = logging.getLogger(__name__)


def _driver_message(e: SQLAlchemyError) -> str:
    orig = getattr(e, 'orig', None)
    return str(orig) if orig is not None else str(e)


class PreparedStatement:
    """A statement compiled for execution but not yet run.

    Each execute() goes through the connection manager, so it survives a
    reconnect between calls.
    """

    def __init__(self, executor: 'Executor', sql: str):
        self.executor = executor
        self.sql = sql
        named, self.names = adapt_sql(sql)
        self.clause = text(named)

    def execute(self, *bind: Any) -> CursorResult:
        """Bind `bind` positionally and run the statement."""
        params = bind_params(self.names, bind, self.sql)
        self.executor._log(self.sql, bind)
        return self.executor.run(self.clause, params, self.sql)

    def __repr__(self) -> str:
        return f'PreparedStatement({self.sql!r})'


class Executor:
    """Runs compiled statements on the live connection of a ConnectionManager."""

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def _log(self, sql: str, bind: Sequence[Any]) -> None:
        """Log SQL and binds if debug enabled."""
        if self.manager.config.debug:
            logger.debug(f'SQL: {sql} | Bind: {list(bind)}')

    def prepare(self, sql: str) -> PreparedStatement:
        """Make sure the connection is live and return an unexecuted statement handle."""
        self.manager.ensure_live()
        return PreparedStatement(self, sql)

    def execute(self, statement: CompiledStatement) -> CursorResult:
        """Execute a compiled statement and return its cursor result."""
        sql, bind = statement
        named, names = adapt_sql(sql)
        params = bind_params(names, bind, sql)
        self._log(sql, bind)
        return self.run(text(named), params, sql)

    def run(self, clause, params: dict, sql: str) -> CursorResult:
        with self.manager.lock:
            conn = self.manager.ensure_live()
            try:
                return conn.execute(clause, params)
            except SQLAlchemyError as e:
                logger.error(f'Statement failed: {sql} | {_driver_message(e)}')
                raise ExecutionError(_driver_message(e), sql) from e
