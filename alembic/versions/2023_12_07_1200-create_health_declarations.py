"""create health declarations table

Revision ID: create_health_declarations
Revises:
Create Date: 2023-12-07 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'create_health_declarations'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

declaration_status = sa.Enum('pending', 'approved', 'rejected', name='declaration_status')


def upgrade() -> None:
    op.create_table('health_declarations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('temperature', sa.Numeric(precision=4, scale=2), nullable=False),
        sa.Column('has_symptoms', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('symptoms', sa.Text(), nullable=True),
        sa.Column('has_contact', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('contact_details', sa.Text(), nullable=True),
        sa.Column('status', declaration_status, nullable=False, server_default='pending'),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_health_declarations_created_at', 'health_declarations', ['created_at'], unique=False)
    op.create_index('ix_health_declarations_name', 'health_declarations', ['name'], unique=False)
    op.create_index('ix_health_declarations_status', 'health_declarations', ['status'], unique=False)
    op.create_index('ix_health_declarations_temperature', 'health_declarations', ['temperature'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_health_declarations_temperature', table_name='health_declarations')
    op.drop_index('ix_health_declarations_status', table_name='health_declarations')
    op.drop_index('ix_health_declarations_name', table_name='health_declarations')
    op.drop_index('ix_health_declarations_created_at', table_name='health_declarations')
    op.drop_table('health_declarations')
    declaration_status.drop(op.get_bind(), checkfirst=True)
