"""Create sites and audit_settings tables

Revision ID: d3a91c0e7b52
Revises:
Create Date: 2026-10-17 09:00:00.000000

Per-site options/comments tables are provisioned with the site, not here.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'd3a91c0e7b52'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'sites',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('domain', sa.Text(), nullable=False),
        sa.Column('path', sa.Text(), nullable=False, server_default='/'),
        sa.Column('deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('spam', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('registered', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_sites_active', 'sites', ['deleted', 'archived', 'spam'])

    op.create_table(
        'audit_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('values', sa.JSON(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('audit_settings')
    op.drop_index('ix_sites_active', table_name='sites')
    op.drop_table('sites')
