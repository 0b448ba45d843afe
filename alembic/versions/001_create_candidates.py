"""
Create the candidates table.

Revision ID: 001_create_candidates
Revises: 
Create Date: 2026-10-18

Email uniqueness, the age range and the status domain are enforced by
named constraints so the application can map violations back to fields.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_create_candidates'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the candidates table and its indexes."""
    
    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('skills', sa.Text(), nullable=True),
        sa.Column('experience', sa.String(50), nullable=True),
        sa.Column('applied_position', sa.String(100), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='Applied'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('email', name='uq_candidates_email'),
        sa.CheckConstraint('age >= 1 AND age <= 150', name='ck_candidates_age_range'),
        sa.CheckConstraint(
            "status IN ('Applied', 'Interviewing', 'Hired', 'Rejected', 'On Hold')",
            name='ck_candidates_status',
        ),
    )
    op.create_index('idx_candidates_status', 'candidates', ['status'])


def downgrade() -> None:
    """Drop the candidates table."""
    op.drop_index('idx_candidates_status', table_name='candidates')
    op.drop_table('candidates')
