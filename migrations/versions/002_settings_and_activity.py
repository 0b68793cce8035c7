"""Restaurant settings, operator activity log, absolute stock counts

Revision ID: 002_settings_and_activity
Revises: 001_initial_schema
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

stock_movements = sa.table(
    'stock_movements',
    sa.column('movement_type', sa.String),
    sa.column('is_absolute', sa.Boolean),
)

# revision identifiers, used by Alembic.
revision: str = '002_settings_and_activity'
down_revision: Union[str, None] = '001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Stock counts are adjustments flagged as absolute
    with op.batch_alter_table('stock_movements') as batch_op:
        batch_op.add_column(
            sa.Column('is_absolute', sa.Boolean(), nullable=False, server_default=sa.false())
        )
    op.execute(
        stock_movements.update()
        .where(stock_movements.c.movement_type == 'set')
        .values(movement_type='adjustment', is_absolute=True)
    )

    op.create_table(
        'settings',
        sa.Column('key', sa.String(100), primary_key=True),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        'user_activity_log',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('idx_user_activity_user', 'user_activity_log', ['user_id'])
    op.create_index('idx_user_activity_date', 'user_activity_log', ['created_at'])


def downgrade() -> None:
    op.drop_index('idx_user_activity_date', table_name='user_activity_log')
    op.drop_index('idx_user_activity_user', table_name='user_activity_log')
    op.drop_table('user_activity_log')
    op.drop_table('settings')

    op.execute(
        stock_movements.update()
        .where(stock_movements.c.is_absolute.is_(True))
        .values(movement_type='set')
    )
    with op.batch_alter_table('stock_movements') as batch_op:
        batch_op.drop_column('is_absolute')
