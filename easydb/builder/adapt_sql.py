"""Placeholder adaptation from positional `?` to SQLAlchemy named binds."""

import re
from typing import Any, Dict, List, Sequence, Tuple

from ..errors import ExecutionError

# Quoted literals are matched first so a `?` or `:` inside them is not taken as a bind
_rx_qmark = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|\?|:")


def adapt_sql(sql: str) -> Tuple[str, List[str]]:
    """Rewrite `?` placeholders as `:p0, :p1, ...` and return the bind names in order.

    Every other colon is escaped so text() passes it to the driver unchanged.
    """
    names: List[str] = []

    def repl(m: re.Match) -> str:
        tok = m.group(0)
        if tok == '?':
            names.append(f'p{len(names)}')
            return f':{names[-1]}'
        return tok.replace(':', r'\:')

    return _rx_qmark.sub(repl, sql), names


def bind_params(names: Sequence[str], bind: Sequence[Any], sql: str = '') -> Dict[str, Any]:
    """Pair positional bind values with the names produced by adapt_sql."""
    if len(names) != len(bind):
        raise ExecutionError(f'Statement expects {len(names)} bind values, got {len(bind)}', sql)
    return dict(zip(names, bind))
