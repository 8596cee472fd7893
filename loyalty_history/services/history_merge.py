"""
Combined history: merge point events and transactions into one feed.

Both record sets arrive in whatever order the store returned them. They are
tagged by kind, concatenated (points first) and sorted newest first.

Ordering rules:
- The sort is stable: entries with the same timestamp keep input order.
- Entries whose date is missing or cannot be parsed go after every dated
  entry, in input order.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional


class HistoryKind(str, Enum):
    """Discriminant of a merged history entry."""

    POINT = 'point'
    TRANSACTION = 'transaction'


@dataclass(frozen=True)
class MergedHistoryEntry:
    """One row of a user's combined history."""

    kind: HistoryKind
    user_id: str
    points: Any
    date: Any
    id: Optional[str] = None
    description: Optional[str] = None

    @property
    def timestamp(self) -> Optional[datetime]:
        return parse_timestamp(self.date)

    def to_dict(self) -> Dict[str, Any]:
        parsed = self.timestamp
        return {
            'kind': self.kind.value,
            'id': self.id,
            'userId': self.user_id,
            'points': points_value(self.points),
            'date': parsed.isoformat() if parsed else self.date,
            'description': self.description,
        }


def points_value(value: Any) -> Any:
    """Whole-number floats from REAL columns are rendered as ints."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Coerce a stored date value to a naive UTC datetime.

    Accepts datetime, date and ISO-8601 strings (space or T separator,
    optional fraction, optional offset or trailing Z). Returns None for
    anything else.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith('Z'):
            raw = raw[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(raw)
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        # offsets that push the instant outside year 1..9999 have no UTC form
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            return None
    return parsed


def tag_point(row: Mapping[str, Any]) -> MergedHistoryEntry:
    return MergedHistoryEntry(
        kind=HistoryKind.POINT,
        user_id=row['user_id'],
        points=row['points'],
        date=row['date'],
        id=row['id'],
    )


def tag_transaction(row: Mapping[str, Any]) -> MergedHistoryEntry:
    return MergedHistoryEntry(
        kind=HistoryKind.TRANSACTION,
        user_id=row['user_id'],
        points=row['points'],
        date=row['date'],
        description=row['description'],
    )


def _sort_key(entry: MergedHistoryEntry):
    parsed = entry.timestamp
    if parsed is None:
        return (False, datetime.min)
    return (True, parsed)


def merge_and_sort(point_records: Iterable[Mapping[str, Any]],
                   transaction_records: Iterable[Mapping[str, Any]]) -> List[MergedHistoryEntry]:
    """
    Merge point and transaction rows into one list, most recent first.

    Args:
        point_records: Rows with id, user_id, points, date
        transaction_records: Rows with user_id, description, points, date

    Returns:
        Tagged entries sorted by date descending
    """
    entries = [tag_point(row) for row in point_records]
    entries.extend(tag_transaction(row) for row in transaction_records)
    # reverse=True keeps equal keys in input order
    return sorted(entries, key=_sort_key, reverse=True)
