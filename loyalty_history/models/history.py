"""
Schema for the two history tables.

Request code never goes through these models: reads and writes are
parameterized SQL run by the RecordStore. The models exist so that
db.create_all() and the Alembic migration agree on one schema.
"""
from datetime import datetime
from ..extensions import db

POINT_EVENTS_TABLE = 'histPoints'
TRANSACTIONS_TABLE = 'histtransactions'


class PointEvent(db.Model):
    """
    Points earned by a user (e.g. scanning a QR code).

    The id is supplied by the caller, usually derived from the scanned code,
    so scanning the same code twice is a primary key violation.
    """
    __tablename__ = POINT_EVENTS_TABLE

    id = db.Column(db.String(100), primary_key=True)
    user_id = db.Column('iduser', db.String(100), nullable=False, index=True)
    points = db.Column(db.Float, nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<PointEvent {self.id}: {self.points} pts for user {self.user_id}>'


class TransactionEvent(db.Model):
    """Points redeemed by a user, with a free-text description."""
    __tablename__ = TRANSACTIONS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column('iduser', db.String(100), nullable=False, index=True)
    description = db.Column(db.String(500), nullable=False)
    points = db.Column(db.Float, nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<TransactionEvent {self.id}: {self.points} pts for user {self.user_id}>'
