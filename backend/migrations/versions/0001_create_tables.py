"""create prefectures, accounts and jwt_tokens

Revision ID: 0001_create_tables
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

from account_api.seeds.prefectures import PREFECTURES

# revision identifiers, used by Alembic.
revision = '0001_create_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    prefectures = op.create_table(
        'prefectures',
        sa.Column('code', sa.SmallInteger(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=10), nullable=False),
        sa.PrimaryKeyConstraint('code', name='pk_prefectures'),
    )
    op.bulk_insert(prefectures, [{'code': code, 'name': name} for code, name in PREFECTURES])

    op.create_table(
        'accounts',
        sa.Column('id', sa.CHAR(length=26), nullable=False),
        sa.Column('email', sa.String(length=256), nullable=False),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column('password', sa.String(length=512), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('fixed_number', sa.String(length=20), nullable=True),
        sa.Column('mobile_number', sa.String(length=20), nullable=True),
        sa.Column('postal_code', sa.CHAR(length=8), nullable=False),
        sa.Column('prefecture_code', sa.SmallInteger(), nullable=False),
        sa.Column('address_details', sa.String(length=100), nullable=False),
        sa.Column('logged_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(
            ['prefecture_code'],
            ['prefectures.code'],
            name='accounts_prefecture_code_to_prefectures',
            ondelete='RESTRICT',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_accounts'),
    )
    op.create_index('accounts_email_index', 'accounts', ['email'], unique=True)

    op.create_table(
        'jwt_tokens',
        sa.Column('id', sa.CHAR(length=26), nullable=False),
        sa.Column('account_id', sa.CHAR(length=26), nullable=False),
        sa.Column('access', sa.String(length=8192), nullable=False),
        sa.Column('access_expired_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('refresh', sa.String(length=8192), nullable=False),
        sa.Column('refresh_expired_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['account_id'],
            ['accounts.id'],
            name='jwt_tokens_id_to_accounts',
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_jwt_tokens'),
    )
    op.create_index('jwt_tokens_access_index', 'jwt_tokens', ['access'], unique=True)
    op.create_index('jwt_tokens_refresh_index', 'jwt_tokens', ['refresh'], unique=True)


def downgrade():
    op.drop_index('jwt_tokens_refresh_index', table_name='jwt_tokens')
    op.drop_index('jwt_tokens_access_index', table_name='jwt_tokens')
    op.drop_table('jwt_tokens')
    op.drop_index('accounts_email_index', table_name='accounts')
    op.drop_table('accounts')
    op.drop_table('prefectures')
