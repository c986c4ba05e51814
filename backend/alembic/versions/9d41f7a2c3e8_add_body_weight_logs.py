"""add body weight logs

Revision ID: 9d41f7a2c3e8
Revises: 4b2e9c1d7a10
Create Date: 2026-10-20 09:03:17.552904

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9d41f7a2c3e8'
down_revision: Union[str, None] = '4b2e9c1d7a10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'body_weight_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('log_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_index('ix_body_weight_logs_user_date', 'body_weight_logs', ['user_id', 'log_date'])


def downgrade() -> None:
    op.drop_index('ix_body_weight_logs_user_date', table_name='body_weight_logs')
    op.drop_table('body_weight_logs')
