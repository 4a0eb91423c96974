"""create waitlist entries table

Revision ID: waitlist_entries
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'waitlist_entries'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'waitlist_entries',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('target_language', sa.String(), nullable=True),
        sa.Column('source', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('email', name='uq_waitlist_email'),
    )
    op.create_index('ix_waitlist_entries_email', 'waitlist_entries', ['email'], unique=True)

def downgrade():
    op.drop_index('ix_waitlist_entries_email', table_name='waitlist_entries')
    op.drop_table('waitlist_entries')
