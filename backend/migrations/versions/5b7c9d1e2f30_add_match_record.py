"""add match_record archive table

Revision ID: 5b7c9d1e2f30
Revises:
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7c9d1e2f30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'match_record' in set(insp.get_table_names()):
        return
    op.create_table(
        'match_record',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('winner', sa.String(length=1), nullable=True),
        sa.Column('reason', sa.String(length=32), nullable=False),
        sa.Column('rounds_played', sa.Integer(), nullable=False),
        sa.Column('balance_a', sa.Integer(), nullable=False),
        sa.Column('balance_b', sa.Integer(), nullable=False),
        sa.Column('finished_at', sa.Float(), nullable=False),
        sa.Column('round_history', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('match_record') as batch_op:
        batch_op.create_index('ix_match_record_finished_at', ['finished_at'])


def downgrade():
    with op.batch_alter_table('match_record') as batch_op:
        batch_op.drop_index('ix_match_record_finished_at')
    op.drop_table('match_record')
