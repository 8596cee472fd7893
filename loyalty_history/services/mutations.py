"""
Update and delete statement builders for the history tables.

The table name is the only piece of SQL text that comes from the request,
so it is checked against HistoryTable before anything else and only the
enum's own value is interpolated. Every other value is a bound parameter.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

from ..models.history import POINT_EVENTS_TABLE, TRANSACTIONS_TABLE
from ..utils.exceptions import ValidationError, ValidationReason


class HistoryTable(str, Enum):
    """Tables that accept updates and deletes."""

    POINTS = POINT_EVENTS_TABLE
    TRANSACTIONS = TRANSACTIONS_TABLE


# Signed 64-bit range accepted for integer points
POINTS_MIN = -2 ** 63
POINTS_MAX = 2 ** 63 - 1

# Updatable fields per table, in assignment order
UPDATABLE_FIELDS = {
    HistoryTable.POINTS: ('points',),
    HistoryTable.TRANSACTIONS: ('points', 'description'),
}


@dataclass
class UpdateStatement:
    """A validated partial update of one history record."""

    table: HistoryTable
    record_id: Any
    assignments: List[Tuple[str, Any]] = field(default_factory=list)

    @property
    def fields(self) -> List[str]:
        return [name for name, _ in self.assignments]

    def to_sql(self, quote: Callable[[str], str] = str) -> Tuple[str, Dict[str, Any]]:
        """
        Render the statement text and its bound parameters.

        Args:
            quote: Identifier quoting for the target dialect
        """
        set_clause = ', '.join(f'{name} = :{name}' for name, _ in self.assignments)
        sql = f'UPDATE {quote(self.table.value)} SET {set_clause} WHERE id = :record_id'
        params = dict(self.assignments)
        params['record_id'] = self.record_id
        return sql, params


@dataclass
class DeleteStatement:
    """A validated delete of one history record."""

    table: HistoryTable
    record_id: Any

    def to_sql(self, quote: Callable[[str], str] = str) -> Tuple[str, Dict[str, Any]]:
        sql = f'DELETE FROM {quote(self.table.value)} WHERE id = :record_id'
        return sql, {'record_id': self.record_id}


def resolve_table(table: Union[HistoryTable, str]) -> HistoryTable:
    """
    Map a table argument onto HistoryTable.

    Raises:
        ValidationError: UNKNOWN_TABLE for anything outside the allow-list
    """
    if isinstance(table, HistoryTable):
        return table
    try:
        return HistoryTable(table)
    except ValueError:
        allowed = ' or '.join(t.value for t in HistoryTable)
        raise ValidationError(
            f'Invalid table. Use {allowed}.',
            ValidationReason.UNKNOWN_TABLE,
            field='table'
        ) from None


def is_number(value: Any) -> bool:
    """True for finite floats and 64-bit ints; bool is not a number here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, int):
        return POINTS_MIN <= value <= POINTS_MAX
    return math.isfinite(value)


def _check_points(value: Any) -> None:
    if not is_number(value):
        raise ValidationError('points must be a number', ValidationReason.INVALID_FIELD, field='points')


def _check_description(value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            'description must be a non-empty string',
            ValidationReason.INVALID_FIELD,
            field='description'
        )


_FIELD_CHECKS = {
    'points': _check_points,
    'description': _check_description,
}


def build_update(table: Union[HistoryTable, str], record_id: Any,
                 payload: Mapping[str, Any]) -> UpdateStatement:
    """
    Validate a partial update payload and build the update statement.

    A field counts as provided when its key is present with a non-null
    value; 0 is a valid points value.

    Raises:
        ValidationError: UNKNOWN_TABLE, MISSING_REQUIRED_FIELD,
            NO_UPDATABLE_FIELDS or INVALID_FIELD
    """
    history_table = resolve_table(table)
    payload = payload or {}

    provided = [
        name for name in UPDATABLE_FIELDS[history_table]
        if payload.get(name) is not None
    ]

    if not provided:
        if history_table is HistoryTable.POINTS:
            raise ValidationError(
                'Required updatable field: points',
                ValidationReason.MISSING_REQUIRED_FIELD,
                field='points'
            )
        raise ValidationError(
            'Updatable fields: points, description',
            ValidationReason.NO_UPDATABLE_FIELDS
        )

    for name in provided:
        _FIELD_CHECKS[name](payload[name])

    return UpdateStatement(
        table=history_table,
        record_id=record_id,
        assignments=[(name, payload[name]) for name in provided],
    )


def build_delete(table: Union[HistoryTable, str], record_id: Any) -> DeleteStatement:
    """
    Build the delete statement for one record.

    Raises:
        ValidationError: UNKNOWN_TABLE
    """
    return DeleteStatement(table=resolve_table(table), record_id=record_id)
