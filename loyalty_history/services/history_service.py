"""
History service for the loyalty points tables.

Handles:
- Recording point events (points earned) and transactions (points spent)
- Combined history for a user, optionally limited to a date range
- Partial updates and deletes by table name and record id

All statements go through the RecordStore as parameterized SQL. Table names
are module constants or HistoryTable members, never request text.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import DateTime, bindparam, text

from ..models.history import POINT_EVENTS_TABLE, TRANSACTIONS_TABLE
from ..utils.exceptions import NotFoundError, ValidationError, ValidationReason
from .history_merge import MergedHistoryEntry, merge_and_sort, parse_timestamp
from .mutations import HistoryTable, build_delete, build_update, is_number
from .record_store import RecordStore

logger = logging.getLogger(__name__)

DATE_FORMAT = '%Y-%m-%d'


def _missing(field: str) -> ValidationError:
    return ValidationError(
        f'Missing required field: {field}',
        ValidationReason.MISSING_REQUIRED_FIELD,
        field=field
    )


def _invalid(field: str, message: str) -> ValidationError:
    return ValidationError(message, ValidationReason.INVALID_FIELD, field=field)


def _required_text(data: Mapping[str, Any], field: str, *aliases: str) -> str:
    """Read a required non-empty string (ints are accepted and stringified)."""
    value = None
    for key in (field,) + aliases:
        if data.get(key) is not None:
            value = data[key]
            break

    if value is None or value == '':
        raise _missing(field)
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise _invalid(field, f'{field} must be a string')

    value = str(value).strip()
    if not value:
        raise _missing(field)
    return value


def _required_points(data: Mapping[str, Any]) -> Union[int, float]:
    if data.get('points') is None:
        raise _missing('points')
    if not is_number(data['points']):
        raise _invalid('points', 'points must be a number')
    return data['points']


def _event_date(data: Mapping[str, Any]) -> datetime:
    """Caller-supplied ISO-8601 date, or now (UTC) when absent."""
    raw = data.get('date')
    if raw is None:
        return datetime.utcnow()
    parsed = parse_timestamp(raw) if isinstance(raw, str) else None
    if parsed is None:
        raise _invalid('date', 'date must be an ISO-8601 timestamp')
    return parsed


def parse_day(value: Optional[str], field: str) -> datetime:
    """Parse a YYYY-MM-DD query parameter."""
    if not value:
        raise ValidationError(
            f'{field} is required (format YYYY-MM-DD)',
            ValidationReason.MISSING_REQUIRED_FIELD,
            field=field
        )
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise _invalid(field, f'{field} must use the format YYYY-MM-DD') from None


class HistoryService:
    """Reads and writes a user's point and transaction history."""

    def __init__(self, store: RecordStore):
        self.store = store

    def _table(self, name: str) -> str:
        return self.store.quote_identifier(name)

    # ==========================================================================
    # WRITES
    # ==========================================================================

    def add_point_event(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Record points earned.

        Args:
            data: id, userId (or iduser), points, optional date

        Returns:
            The stored values, date as ISO-8601
        """
        data = data or {}
        record = {
            'id': _required_text(data, 'id'),
            'user_id': _required_text(data, 'userId', 'iduser'),
            'points': _required_points(data),
            'date': _event_date(data),
        }

        statement = text(
            f'INSERT INTO {self._table(POINT_EVENTS_TABLE)} (id, iduser, points, date) '
            'VALUES (:id, :user_id, :points, :date)'
        ).bindparams(bindparam('date', type_=DateTime()))
        self.store.execute(statement, record)

        logger.info(f"Recorded point event {record['id']} for user {record['user_id']}: {record['points']} pts")
        return {
            'id': record['id'],
            'userId': record['user_id'],
            'points': record['points'],
            'date': record['date'].isoformat(),
        }

    def add_transaction(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Record a redemption transaction. The id is generated by the store.

        Args:
            data: userId (or iduser), description, points, optional date
        """
        data = data or {}
        record = {
            'user_id': _required_text(data, 'userId', 'iduser'),
            'description': _required_text(data, 'description'),
            'points': _required_points(data),
            'date': _event_date(data),
        }

        statement = text(
            f'INSERT INTO {self._table(TRANSACTIONS_TABLE)} (iduser, description, points, date) '
            'VALUES (:user_id, :description, :points, :date)'
        ).bindparams(bindparam('date', type_=DateTime()))
        self.store.execute(statement, record)

        logger.info(f"Recorded transaction for user {record['user_id']}: {record['points']} pts")
        return {
            'userId': record['user_id'],
            'description': record['description'],
            'points': record['points'],
            'date': record['date'].isoformat(),
        }

    def update_record(self, table: Union[HistoryTable, str], record_id: Any,
                      payload: Mapping[str, Any]) -> HistoryTable:
        """
        Apply a partial update to one record.

        Raises:
            ValidationError: Unknown table or invalid payload
            NotFoundError: No record with that id
        """
        statement = build_update(table, record_id, payload)
        statement.record_id = self._record_key(statement.table, record_id)

        sql, params = statement.to_sql(self.store.quote_identifier)
        if self.store.execute(sql, params) == 0:
            raise NotFoundError('Record', record_id)

        logger.info(f"Updated {statement.table.value} record {record_id}: {', '.join(statement.fields)}")
        return statement.table

    def delete_record(self, table: Union[HistoryTable, str], record_id: Any) -> HistoryTable:
        """
        Delete one record.

        Raises:
            ValidationError: Unknown table
            NotFoundError: No record with that id
        """
        statement = build_delete(table, record_id)
        statement.record_id = self._record_key(statement.table, record_id)

        sql, params = statement.to_sql(self.store.quote_identifier)
        if self.store.execute(sql, params) == 0:
            raise NotFoundError('Record', record_id)

        logger.info(f"Deleted {statement.table.value} record {record_id}")
        return statement.table

    @staticmethod
    def _record_key(table: HistoryTable, record_id: Any) -> Any:
        """Transaction ids are integers; point ids are free text."""
        if table is HistoryTable.TRANSACTIONS:
            try:
                return int(record_id)
            except (TypeError, ValueError):
                raise NotFoundError('Record', record_id) from None
        return str(record_id)

    # ==========================================================================
    # READS
    # ==========================================================================

    def get_history(self, user_id: str, start_date: Optional[str],
                    end_date: Optional[str]) -> List[MergedHistoryEntry]:
        """
        Combined history for a user between two days, both inclusive.

        Args:
            user_id: Owning user
            start_date: First day, YYYY-MM-DD
            end_date: Last day, YYYY-MM-DD

        Raises:
            ValidationError: Missing or malformed dates, or start after end
        """
        start = parse_day(start_date, 'start_date')
        end = parse_day(end_date, 'end_date')
        if start > end:
            raise _invalid('start_date', 'start_date must not be after end_date')

        params = {'user_id': user_id, 'start_at': start}
        date_filter = ' AND date >= :start_at'
        # the last representable day has no following day to stop before
        if end.date() < date.max:
            params['end_before'] = end + timedelta(days=1)
            date_filter += ' AND date < :end_before'
        return self._combined(user_id, params, date_filter)

    def get_full_history(self, user_id: str) -> List[MergedHistoryEntry]:
        """Combined history for a user with no date filter."""
        return self._combined(user_id, {'user_id': user_id})

    def _combined(self, user_id: str, params: Dict[str, Any], date_filter: str = '') -> List[MergedHistoryEntry]:
        points = self.store.query(
            self._select(
                f'SELECT id, iduser AS user_id, points, date '
                f'FROM {self._table(POINT_EVENTS_TABLE)} '
                f'WHERE iduser = :user_id{date_filter} ORDER BY date DESC, id',
                params
            ),
            params
        )
        transactions = self.store.query(
            self._select(
                f'SELECT id, iduser AS user_id, description, points, date '
                f'FROM {self._table(TRANSACTIONS_TABLE)} '
                f'WHERE iduser = :user_id{date_filter} ORDER BY date DESC, id',
                params
            ),
            params
        )

        logger.debug(f"History for user {user_id}: {len(points)} point events, {len(transactions)} transactions")
        return merge_and_sort(points, transactions)

    @staticmethod
    def _select(sql: str, params: Mapping[str, Any]):
        statement = text(sql)
        date_params = [bindparam(name, type_=DateTime()) for name in ('start_at', 'end_before') if name in params]
        if date_params:
            statement = statement.bindparams(*date_params)
        return statement
