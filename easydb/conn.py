"""Lazily created, self-healing database connection."""

import logging
from threading import RLock
from typing import Callable, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.engine.url import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from .builder.mappings import drivernames
from .config import ConnectionConfig, Dialect
from .errors import ConnectionError

logger = logging.getLogger(__name__)


def _file_dsn(config: ConnectionConfig) -> str:
    return f'dbname={config.db}'


def _server_dsn(config: ConnectionConfig) -> str:
    dsn = f'database={config.db}'
    if config.host:
        dsn += f';host={config.host}'
    if config.port:
        dsn += f';port={config.port}'
    return dsn


# One descriptor formatter per dialect
dsn_formatters: Dict[Dialect, Callable[[ConnectionConfig], str]] = {
    Dialect.SQLITE: _file_dsn,
    Dialect.MYSQL: _server_dsn,
    Dialect.POSTGRES: _server_dsn,
    Dialect.MSSQL: _server_dsn,
    Dialect.ORACLE: _server_dsn,
}


def connection_string(config: ConnectionConfig) -> str:
    """Build the connection descriptor, e.g. `mysql:database=test;host=db1;port=3307`."""
    return f'{config.type.value}:{dsn_formatters[config.type](config)}'


def database_url(config: ConnectionConfig) -> URL:
    """Build the SQLAlchemy URL for `config`."""
    drivername = drivernames[config.type.value]
    if config.type.file_based:
        return URL.create(drivername, database=config.db)
    return URL.create(
        drivername, username=config.user, password=config.password,
        host=config.host or None, port=config.port or None, database=config.db
    )


class ConnectionManager:
    """Owns the single connection of an EasyDB object.

    The connection is created on first use and replaced if a ping finds it
    dead. `lock` guards creation, the liveness check and replacement, and is
    held by the executor for the duration of each statement.
    """

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self.dsn = connection_string(config)
        self.lock = RLock()
        self._engine: Optional[Engine] = None
        self._conn: Optional[Connection] = None

    @property
    def connected(self) -> bool:
        """Whether a connection has been created and not yet released."""
        return self._conn is not None

    def _open(self) -> Connection:
        try:
            if self._engine is None:
                self._engine = create_engine(
                    database_url(self.config), poolclass=NullPool,
                    isolation_level='AUTOCOMMIT', echo=self.config.echo
                )
            conn = self._engine.connect()
        except (SQLAlchemyError, ImportError) as e:
            raise ConnectionError(f'Could not connect to database {self.dsn}: {e}') from e
        logger.info('Connected to %s', self.dsn)
        return conn

    def handle(self) -> Connection:
        """Return the connection, creating it on first call."""
        with self.lock:
            if self._conn is None:
                self._conn = self._open()
            return self._conn

    def ping(self, conn: Connection) -> bool:
        """Check that `conn` still reaches the database."""
        if conn.closed or conn.invalidated:
            return False
        dialect = conn.dialect
        try:
            return bool(dialect.do_ping(conn.connection.dbapi_connection))
        except (dialect.loaded_dbapi.Error, SQLAlchemyError) as e:
            logger.debug('Ping failed on %s: %s', self.dsn, e)
            return False

    def ensure_live(self) -> Connection:
        """Return a live connection, reconnecting once if the current one is dead."""
        with self.lock:
            conn = self.handle()
            if self.ping(conn):
                return conn
            logger.warning('Connection to %s lost, reconnecting', self.dsn)
            self._conn = None
            self._discard(conn)
            self._conn = self._open()
            return self._conn

    def _discard(self, conn: Connection) -> None:
        if conn.closed:
            return
        try:
            if not conn.invalidated:
                conn.invalidate()
            conn.close()
        except SQLAlchemyError as e:
            logger.debug('Error discarding dead connection to %s: %s', self.dsn, e)

    def close(self) -> None:
        """Release the connection and engine, if they were ever created."""
        with self.lock:
            conn, self._conn = self._conn, None
            engine, self._engine = self._engine, None
            if conn is not None:
                conn.close()
                logger.info('Disconnected from %s', self.dsn)
            if engine is not None:
                engine.dispose()
