"""Connection configuration and per-call option models."""

from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .builder.mappings import dialect_aliases
from .errors import ValidationError
from .shaping import Build, Indexed, OutputMode, Prepare, Rows, Scalar

M = TypeVar('M', bound=BaseModel)


class Dialect(str, Enum):
    """Supported database engines."""

    SQLITE = 'sqlite'
    MYSQL = 'mysql'
    POSTGRES = 'postgres'
    MSSQL = 'mssql'
    ORACLE = 'oracle'

    @property
    def file_based(self) -> bool:
        """Whether the database name is a file path and host/port are meaningless."""
        return self is Dialect.SQLITE


class ConnectionConfig(BaseModel):
    """Options used to connect to a database. Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='forbid')

    type: Dialect = Field(default=Dialect.MYSQL, description="Database dialect")
    db: str = Field(..., min_length=1, description="Database name, or file path for sqlite")
    host: str = Field(default='', description="Server hostname, empty for the driver default")
    port: int = Field(default=0, ge=0, description="Server port, 0 for the dialect default")
    user: Optional[str] = Field(default=None, description="Database user")
    password: Optional[str] = Field(default=None, alias='pass', description="Database password")
    echo: bool = Field(default=False, description="Echo SQL through the SQLAlchemy engine logger")
    debug: bool = Field(default=False, description="Debug-log every statement with its binds")

    @field_validator('type', mode='before')
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        """Accept dialect names case-insensitively, including common aliases."""
        if isinstance(v, str) and not isinstance(v, Dialect):
            name = v.strip().lower()
            return dialect_aliases.get(name, name)
        return v

    @field_validator('host', mode='before')
    @classmethod
    def none_host(cls, v: Any) -> Any:
        return '' if v is None else v

    @field_validator('port', mode='before')
    @classmethod
    def none_port(cls, v: Any) -> Any:
        return 0 if v is None else v


class SelectOptions(BaseModel):
    """Recognized options for select()."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='forbid')

    where: Any = None
    get: Optional[Union[str, List[str]]] = None
    order: Any = None
    index: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=0)
    offset: Optional[int] = Field(default=None, ge=0)
    returning: Optional[str] = Field(default=None, alias='return')
    build: bool = False
    prepare: bool = False

    @property
    def effective_limit(self) -> Optional[int]:
        """An explicit limit wins; otherwise `return` implies a single row."""
        if self.limit is not None:
            return self.limit
        if self.returning is not None:
            return 1
        return None

    @property
    def mode(self) -> OutputMode:
        """Resolve the requested output with build > prepare > index > return > rows."""
        if self.build:
            return Build()
        if self.prepare:
            return Prepare()
        if self.index is not None:
            return Indexed(self.index)
        if self.returning is not None:
            return Scalar(self.returning)
        return Rows()


class UpdateOptions(BaseModel):
    """Recognized options for update(). `set` has no default and is required."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='forbid')

    values: Dict[str, Any] = Field(alias='set')
    where: Any = None


def parse_options(model: Type[M], options: Dict[str, Any], operation: str) -> M:
    """Validate call options into `model`, reporting problems as ValidationError."""
    try:
        return model.model_validate(options)
    except pydantic.ValidationError as e:
        problems = []
        for err in e.errors():
            loc = '.'.join(str(p) for p in err['loc']) or operation
            if err['type'] == 'missing':
                problems.append(f'{loc} required')
            else:
                problems.append(f'{loc}: {err["msg"]}')
        raise ValidationError(f'{operation}() ' + '; '.join(problems)) from e
