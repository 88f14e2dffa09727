"""initial_schema

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-19 10:12:31.418205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='student'),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('auth_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_jti', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_activity', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE')
    )
    op.create_index('ix_auth_sessions_id', 'auth_sessions', ['id'])
    op.create_index('ix_auth_sessions_token_jti', 'auth_sessions', ['token_jti'], unique=True)

    op.create_table('question_banks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('test_type', sa.String(20), nullable=False),
        sa.Column('test_id', sa.String(64), nullable=False),
        sa.Column('question_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('questions_json', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('test_type', 'test_id', name='uq_question_bank_test')
    )
    op.create_index('ix_question_banks_id', 'question_banks', ['id'])
    op.create_index('ix_question_banks_test_type', 'question_banks', ['test_type'])

    op.create_table('results',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('test_name', sa.String(200), nullable=False),
        sa.Column('test_type', sa.String(20), nullable=True),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('date', sa.String(32), nullable=True),
        sa.Column('time_taken', sa.String(32), nullable=True),
        sa.Column('total_questions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('correct_answers', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('user_name', sa.String(100), nullable=False),
        sa.Column('user_email', sa.String(255), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_results_id', 'results', ['id'])
    op.create_index('ix_results_user_id', 'results', ['user_id'])
    op.create_index('ix_results_timestamp', 'results', ['timestamp'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_results_timestamp', table_name='results')
    op.drop_index('ix_results_user_id', table_name='results')
    op.drop_index('ix_results_id', table_name='results')
    op.drop_table('results')
    op.drop_index('ix_question_banks_test_type', table_name='question_banks')
    op.drop_index('ix_question_banks_id', table_name='question_banks')
    op.drop_table('question_banks')
    op.drop_index('ix_auth_sessions_token_jti', table_name='auth_sessions')
    op.drop_index('ix_auth_sessions_id', table_name='auth_sessions')
    op.drop_table('auth_sessions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
