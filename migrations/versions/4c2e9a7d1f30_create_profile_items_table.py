"""create_profile_items_table

Revision ID: 4c2e9a7d1f30
Revises:
Create Date: 2026-10-18 10:12:44.381902

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c2e9a7d1f30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the single-table profile store with its email index."""
    op.create_table('profile_items',
        sa.Column('pk', sa.Text(), nullable=False),
        sa.Column('sk', sa.String(length=100), nullable=False),
        sa.Column('gsi1pk', sa.Text(), nullable=False),
        sa.Column('gsi1sk', sa.Text(), nullable=False),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('given_name', sa.Text(), nullable=False),
        sa.Column('family_name', sa.Text(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=False),
        sa.Column('avatar_url', sa.Text(), nullable=False),
        sa.Column('created_at', sa.String(length=40), nullable=False),
        sa.Column('updated_at', sa.String(length=40), nullable=False),
        sa.PrimaryKeyConstraint('pk', 'sk'),
    )
    op.create_index('ix_profile_items_gsi1', 'profile_items', ['gsi1pk', 'gsi1sk'], unique=False)


def downgrade() -> None:
    """Drop the profile store."""
    op.drop_index('ix_profile_items_gsi1', table_name='profile_items')
    op.drop_table('profile_items')
