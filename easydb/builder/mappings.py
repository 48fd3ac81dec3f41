"""Operator, identifier and dialect mappings shared by the builder and connection layer."""

import re

# Comparison operators compiled as `field <op> ?`
comparison_operators = ('=', '!=', '<>', '<', '>', '<=', '>=')

# Word operators, normalised to upper case with single spaces
valid_operators = comparison_operators + (
    'LIKE', 'NOT LIKE', 'ILIKE', 'NOT ILIKE', 'IN', 'NOT IN', 'BETWEEN', 'NOT BETWEEN'
)

# Logical connectives accepted as `-and` / `-or` keys
connectives = {'-AND': 'AND', '-OR': 'OR'}

sort_directions = ('ASC', 'DESC')

identifier = re.compile(r'^[\w.]+$')

# SQLAlchemy driver names per dialect
drivernames = {
    'sqlite': 'sqlite',
    'mysql': 'mysql+mysqlconnector',
    'postgres': 'postgresql+psycopg2',
    'mssql': 'mssql+pyodbc',
    'oracle': 'oracle+oracledb',
}

# Accepted spellings of dialect names, lower-cased
dialect_aliases = {
    'sqlite3': 'sqlite',
    'pg': 'postgres',
    'postgresql': 'postgres',
    'mariadb': 'mysql',
    'sqlserver': 'mssql',
}
