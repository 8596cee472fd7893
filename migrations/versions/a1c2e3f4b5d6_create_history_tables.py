"""Create histPoints and histtransactions tables.

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c2e3f4b5d6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create point event and transaction tables."""
    op.create_table(
        'histPoints',
        sa.Column('id', sa.String(100), nullable=False),
        sa.Column('iduser', sa.String(100), nullable=False),
        sa.Column('points', sa.Float(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_histPoints_iduser', 'histPoints', ['iduser'])
    op.create_index('ix_histPoints_date', 'histPoints', ['date'])

    op.create_table(
        'histtransactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('iduser', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('points', sa.Float(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_histtransactions_iduser', 'histtransactions', ['iduser'])
    op.create_index('ix_histtransactions_date', 'histtransactions', ['date'])


def downgrade():
    """Drop point event and transaction tables."""
    op.drop_index('ix_histtransactions_date', table_name='histtransactions')
    op.drop_index('ix_histtransactions_iduser', table_name='histtransactions')
    op.drop_table('histtransactions')
    op.drop_index('ix_histPoints_date', table_name='histPoints')
    op.drop_index('ix_histPoints_iduser', table_name='histPoints')
    op.drop_table('histPoints')
