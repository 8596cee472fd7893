"""
History API endpoints.

Handles:
- Recording point events and redemption transactions
- Combined history for a user (date range or everything)
- Updating and deleting a record by table name and id

Validation, not-found and store errors raised by the service are turned
into JSON error responses by the app-level error handlers.
"""
from flask import Blueprint, request, jsonify, current_app

from ..services.history_service import HistoryService
from ..services.record_store import RecordStore
from ..utils.errors import bad_request

history_bp = Blueprint('history', __name__)


def get_record_store() -> RecordStore:
    """The RecordStore built for this app in create_app()."""
    return current_app.extensions['record_store']


def get_history_service() -> HistoryService:
    return HistoryService(get_record_store())


def get_json_body():
    """Request JSON object, or None when the body is missing or not an object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


# ==============================================================================
# CREATE
# ==============================================================================

@history_bp.route('/points', methods=['POST'])
def create_point_event():
    """
    Record points earned (e.g. after a QR code scan).

    Request body:
        id: Unique event id (required)
        userId: Owning user (required)
        points: Number of points (required)
        date: ISO-8601 timestamp (optional, defaults to now)

    Returns:
        201 with the stored event id
    """
    data = get_json_body()
    if data is None:
        return bad_request('Request body must be a JSON object')

    event = get_history_service().add_point_event(data)
    return jsonify({
        'message': 'Point event recorded',
        'id': event['id']
    }), 201


@history_bp.route('/transactions', methods=['POST'])
def create_transaction():
    """
    Record a points redemption.

    Request body:
        userId: Owning user (required)
        description: What the points were spent on (required)
        points: Number of points (required)
        date: ISO-8601 timestamp (optional, defaults to now)
    """
    data = get_json_body()
    if data is None:
        return bad_request('Request body must be a JSON object')

    get_history_service().add_transaction(data)
    return jsonify({'message': 'Transaction recorded'}), 201


# ==============================================================================
# READ
# ==============================================================================

@history_bp.route('/all/<user_id>', methods=['GET'])
def get_full_history(user_id):
    """Every point event and transaction for a user, most recent first."""
    entries = get_history_service().get_full_history(user_id)
    return jsonify([entry.to_dict() for entry in entries])


@history_bp.route('/<user_id>', methods=['GET'])
def get_history(user_id):
    """
    Combined history for a user within a date range.

    Query params:
        start_date: First day, YYYY-MM-DD (required)
        end_date: Last day, YYYY-MM-DD (required)

    Returns:
        Point events and transactions, most recent first
    """
    entries = get_history_service().get_history(
        user_id,
        request.args.get('start_date'),
        request.args.get('end_date')
    )
    return jsonify([entry.to_dict() for entry in entries])


# ==============================================================================
# UPDATE / DELETE
# ==============================================================================

@history_bp.route('/<table>/<record_id>', methods=['PUT'])
def update_record(table, record_id):
    """
    Update points and/or description of a record.

    Path params:
        table: histPoints or histtransactions
        record_id: Record id

    Request body:
        points: New points value (histPoints: required)
        description: New description (histtransactions only)
    """
    data = request.get_json(silent=True)
    if data is not None and not isinstance(data, dict):
        return bad_request('Request body must be a JSON object')

    updated_table = get_history_service().update_record(table, record_id, data or {})
    return jsonify({'message': f'Record updated in table {updated_table.value}'}), 200


@history_bp.route('/<table>/<record_id>', methods=['DELETE'])
def delete_record(table, record_id):
    """Delete a record from histPoints or histtransactions."""
    deleted_table = get_history_service().delete_record(table, record_id)
    return jsonify({'message': f'Record removed from table {deleted_table.value}'}), 200
