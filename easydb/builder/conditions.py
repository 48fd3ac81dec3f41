"""Condition compilation for SQL WHERE and ORDER BY clauses.

Where clauses are plain Python structures:

    {'id': 1}                          ( id = ? )
    {'name': None}                     ( name IS NULL )
    {'id': [1, 2]}                     ( ( id = ? OR id = ? ) )
    {'weight': {'>': 1, '<': 5}}       ( ( weight < ? AND weight > ? ) )
    {'id': {'-in': [1, 2]}}            ( id IN ( ?, ? ) )
    {'-or': [{'a': 1}, {'b': 2}]}      ( ( ( a = ? ) OR ( b = ? ) ) )

Mapping keys are compiled in sorted order, so the same structure always
yields the same SQL and bind order.
"""

from typing import Any, List, Mapping, Tuple

from ..errors import ValidationError
from .mappings import connectives, identifier, sort_directions, valid_operators

Fragment = Tuple[str, List[Any]]


def _check_field(field: Any) -> str:
    if not isinstance(field, str) or not identifier.match(field):
        raise ValidationError(f'Invalid field name: {field!r}')
    return field


def _normalize_op(op: Any) -> str:
    norm = ' '.join(str(op).lstrip('-').replace('_', ' ').split()).upper()
    if norm not in valid_operators:
        raise ValidationError(f'Invalid operator: {op}')
    return norm


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple, set, frozenset)) else [value]


def _combine(parts: List[Fragment], conj: str) -> Fragment:
    parts = [p for p in parts if p[0]]
    sql = f' {conj} '.join(s for s, _ in parts)
    bind = [v for _, b in parts for v in b]
    return sql, bind


def _wrap(frag: Fragment) -> Fragment:
    sql, bind = frag
    return (f'( {sql} )' if sql else sql), bind


def _wrap_many(parts: List[Fragment], conj: str) -> Fragment:
    """Join parts with `conj`, adding parentheses only when there is more than one."""
    parts = [p for p in parts if p[0]]
    if len(parts) == 1:
        return parts[0]
    return _wrap(_combine(parts, conj))


class Condition:
    """Represents a single SQL condition (e.g., col > value)."""
    __slots__ = ('field', 'op', 'value')

    def __init__(self, field: str, op: str, value: Any):
        self.field = _check_field(field)
        self.op = _normalize_op(op)
        self.value = value

    def to_sql(self) -> Fragment:
        """Convert condition to SQL fragment and ordered bind values."""
        col, op, val = self.field, self.op, self.value

        if op in ('IN', 'NOT IN'):
            vals = _as_list(val)
            if not vals:
                return ('0=1' if op == 'IN' else '1=1'), []
            return f'{col} {op} ( {", ".join("?" for _ in vals)} )', vals

        if op in ('BETWEEN', 'NOT BETWEEN'):
            vals = _as_list(val)
            if len(vals) != 2:
                raise ValidationError(f'{op} requires exactly two values for {col}')
            return f'( {col} {op} ? AND ? )', vals

        if isinstance(val, (list, tuple)):
            if not val:
                return '0=1', []
            parts = []
            for v in val:
                if isinstance(v, Mapping):
                    if op != '=':
                        raise ValidationError(f'Operator mapping not allowed under {op} for {col}')
                    parts.append(_compile_field(col, v))
                else:
                    parts.append(Condition(col, op, v).to_sql())
            return _wrap_many(parts, 'OR')

        if val is None:
            if op == '=':
                return f'{col} IS NULL', []
            if op in ('!=', '<>'):
                return f'{col} IS NOT NULL', []

        return f'{col} {op} ?', [val]


def _compile_field(field: str, value: Any) -> Fragment:
    if isinstance(value, Mapping):
        if not value:
            raise ValidationError(f'Empty operator mapping for {field}')
        parts = [Condition(field, op, v).to_sql() for op, v in sorted(value.items(), key=lambda kv: str(kv[0]))]
        return _wrap_many(parts, 'AND')
    return Condition(field, '=', value).to_sql()


def _compile_connective(conj: str, value: Any) -> Fragment:
    if isinstance(value, Mapping):
        parts = [_compile_field(_check_field(k), v) for k, v in sorted(value.items())]
    elif isinstance(value, (list, tuple)):
        parts = [_compile_node(member) for member in value]
    else:
        raise ValidationError(f'-{conj.lower()} expects a mapping or a list of mappings')
    return _wrap(_combine(parts, conj))


def _compile_mapping(where: Mapping) -> Fragment:
    parts = []
    for key in sorted(where, key=str):
        conj = connectives.get(str(key).upper())
        if conj:
            parts.append(_compile_connective(conj, where[key]))
        else:
            parts.append(_compile_field(_check_field(key), where[key]))
    return _wrap(_combine(parts, 'AND'))


def _compile_node(node: Any) -> Fragment:
    if isinstance(node, Mapping):
        return _compile_mapping(node)
    if isinstance(node, (list, tuple)):
        return _wrap(_combine([_compile_node(n) for n in node], 'OR'))
    raise ValidationError(f'Unsupported condition type: {type(node).__name__}')


def compile_where(where: Any) -> Fragment:
    """Compile a where structure into a boolean SQL fragment and its bind values.

    Returns ('', []) when there is nothing to filter on.
    """
    if not where:
        return '', []
    return _compile_node(where)


def compile_order(order: Any) -> str:
    """Compile an ordering spec into an ORDER BY fragment.

    Accepts a column name, or a list whose entries are column names,
    (column, direction) pairs or {'-asc'|'-desc': column} mappings.
    """
    if not order:
        return ''
    items = [order] if isinstance(order, (str, Mapping)) else list(order)
    parts = []
    for item in items:
        if isinstance(item, str):
            field, direction = item, None
        elif isinstance(item, Mapping) and len(item) == 1:
            key, field = next(iter(item.items()))
            direction = str(key).lstrip('-').upper()
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            field, direction = item[0], str(item[1]).upper()
        else:
            raise ValidationError(f'Invalid order entry: {item!r}')
        _check_field(field)
        if direction is not None and direction not in sort_directions:
            raise ValidationError(f'Invalid sort direction for {field}: {direction}')
        parts.append(field if direction is None else f'{field} {direction}')
    return 'ORDER BY ' + ', '.join(parts)
