"""
Tests for the update/delete statement builders.

Covers:
- Table allow-list checked before payload validation
- Required points for histPoints (0 is valid)
- Partial updates for histtransactions
- Field type checks
- Rendered SQL keeps values as bound parameters
"""
import pytest

from loyalty_history.services.mutations import (
    HistoryTable,
    build_delete,
    build_update,
    resolve_table,
)
from loyalty_history.utils.exceptions import ValidationError, ValidationReason


class TestResolveTable:
    """Tests for the table allow-list."""

    def test_enum_passes_through(self):
        assert resolve_table(HistoryTable.POINTS) is HistoryTable.POINTS

    def test_string_values_accepted(self):
        assert resolve_table('histPoints') is HistoryTable.POINTS
        assert resolve_table('histtransactions') is HistoryTable.TRANSACTIONS

    @pytest.mark.parametrize('name', ['unknownTable', 'histpoints', 'users', '', 'histPoints; DROP TABLE x'])
    def test_unknown_tables_rejected(self, name):
        with pytest.raises(ValidationError) as exc:
            resolve_table(name)
        assert exc.value.reason is ValidationReason.UNKNOWN_TABLE


class TestBuildUpdatePoints:
    """Tests for build_update on histPoints."""

    def test_missing_points(self):
        """An empty payload is missing the required field."""
        with pytest.raises(ValidationError) as exc:
            build_update(HistoryTable.POINTS, 'a1', {})
        assert exc.value.reason is ValidationReason.MISSING_REQUIRED_FIELD
        assert exc.value.field == 'points'

    def test_null_points_is_missing(self):
        with pytest.raises(ValidationError) as exc:
            build_update(HistoryTable.POINTS, 'a1', {'points': None})
        assert exc.value.reason is ValidationReason.MISSING_REQUIRED_FIELD

    def test_zero_points_is_valid(self):
        """Zero is a value, not an absent field."""
        statement = build_update(HistoryTable.POINTS, 'a1', {'points': 0})

        assert statement.assignments == [('points', 0)]
        assert statement.record_id == 'a1'

    def test_description_ignored_for_points_table(self):
        """histPoints has no description column to update."""
        statement = build_update('histPoints', 'a1', {'points': 3, 'description': 'x'})

        assert statement.fields == ['points']

    def test_description_alone_is_missing_points(self):
        with pytest.raises(ValidationError) as exc:
            build_update('histPoints', 'a1', {'description': 'x'})
        assert exc.value.reason is ValidationReason.MISSING_REQUIRED_FIELD

    @pytest.mark.parametrize('value', ['10', True, [1], {'n': 1}, float('nan'), 10 ** 30, -(10 ** 30)])
    def test_points_must_be_number(self, value):
        with pytest.raises(ValidationError) as exc:
            build_update(HistoryTable.POINTS, 'a1', {'points': value})
        assert exc.value.reason is ValidationReason.INVALID_FIELD


class TestBuildUpdateTransactions:
    """Tests for build_update on histtransactions."""

    def test_no_fields(self):
        with pytest.raises(ValidationError) as exc:
            build_update(HistoryTable.TRANSACTIONS, 7, {})
        assert exc.value.reason is ValidationReason.NO_UPDATABLE_FIELDS

    def test_description_only(self):
        """Only the provided field is assigned."""
        statement = build_update(HistoryTable.TRANSACTIONS, 7, {'description': 'x'})

        assert statement.assignments == [('description', 'x')]

    def test_points_only(self):
        statement = build_update(HistoryTable.TRANSACTIONS, 7, {'points': 0})

        assert statement.assignments == [('points', 0)]

    def test_both_fields_in_fixed_order(self):
        statement = build_update(HistoryTable.TRANSACTIONS, 7, {'description': 'x', 'points': 2.5})

        assert statement.assignments == [('points', 2.5), ('description', 'x')]

    def test_empty_description_rejected(self):
        with pytest.raises(ValidationError) as exc:
            build_update(HistoryTable.TRANSACTIONS, 7, {'description': '   '})
        assert exc.value.reason is ValidationReason.INVALID_FIELD
        assert exc.value.field == 'description'


class TestUnknownTableFirst:
    """The table check runs before any payload check."""

    def test_unknown_table_with_valid_payload(self):
        with pytest.raises(ValidationError) as exc:
            build_update('unknownTable', 'a1', {'points': 1})
        assert exc.value.reason is ValidationReason.UNKNOWN_TABLE

    def test_unknown_table_with_empty_payload(self):
        with pytest.raises(ValidationError) as exc:
            build_update('unknownTable', 'a1', {})
        assert exc.value.reason is ValidationReason.UNKNOWN_TABLE


class TestRenderedSql:
    """Tests for UpdateStatement/DeleteStatement.to_sql."""

    def test_update_sql_uses_bound_parameters(self):
        statement = build_update(HistoryTable.TRANSACTIONS, 7, {'points': 3, 'description': "x'; --"})

        sql, params = statement.to_sql()

        assert sql == 'UPDATE histtransactions SET points = :points, description = :description WHERE id = :record_id'
        assert params == {'points': 3, 'description': "x'; --", 'record_id': 7}

    def test_update_sql_quotes_table(self):
        statement = build_update(HistoryTable.POINTS, 'a1', {'points': 1})

        sql, params = statement.to_sql(lambda name: f'"{name}"')

        assert sql == 'UPDATE "histPoints" SET points = :points WHERE id = :record_id'
        assert params == {'points': 1, 'record_id': 'a1'}

    def test_delete_sql(self):
        sql, params = build_delete('histtransactions', 3).to_sql()

        assert sql == 'DELETE FROM histtransactions WHERE id = :record_id'
        assert params == {'record_id': 3}

    def test_delete_unknown_table(self):
        with pytest.raises(ValidationError) as exc:
            build_delete('members', 3)
        assert exc.value.reason is ValidationReason.UNKNOWN_TABLE
