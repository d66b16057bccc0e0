"""ScamShield core schema

Revision ID: 5f3c2a9d1b7e
Revises: 
Create Date: 2026-10-19 09:12:44.318205

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '5f3c2a9d1b7e'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create scam_patterns table
    op.create_table('scam_patterns',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('pattern_text', sa.Text(), nullable=False),
        sa.Column('pattern_category', sa.String(length=50), nullable=False),
        sa.Column('risk_level', sa.String(length=20), nullable=False),
        sa.Column('keywords', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('regex_pattern', sa.Text(), nullable=True),
        sa.Column('corpus_version', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint("risk_level IN ('LOW', 'MEDIUM', 'HIGH', 'CRITICAL')", name='valid_risk_level'),
        sa.CheckConstraint('LENGTH(pattern_text) > 0', name='non_empty_pattern_text'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_scam_patterns_category', 'scam_patterns', ['pattern_category'])

    # Create telemarketer_registry table
    op.create_table('telemarketer_registry',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('brand_name', sa.String(length=255), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_scammer', sa.Boolean(), nullable=False),
        sa.Column('is_dnd', sa.Boolean(), nullable=False),
        sa.Column('report_count', sa.Integer(), nullable=False),
        sa.Column('last_verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('report_count >= 0', name='non_negative_report_count'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('phone_number')
    )
    op.create_index('idx_telemarketer_brand', 'telemarketer_registry', ['brand_name'])
    op.create_index('idx_telemarketer_scammer', 'telemarketer_registry', ['is_scammer'])

    # Create verified_brands table
    op.create_table('verified_brands',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('brand_name', sa.String(length=255), nullable=False),
        sa.Column('official_contacts', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('verification_status', sa.String(length=20), nullable=False),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("verification_status IN ('VERIFIED', 'PENDING', 'REVOKED')", name='valid_verification_status'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('brand_name')
    )

    # Create family_members table
    op.create_table('family_members',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('relationship', sa.String(length=20), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('alerts_enabled', sa.Boolean(), nullable=False),
        sa.Column('daily_alert_count', sa.Integer(), nullable=False),
        sa.Column('last_alert_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('daily_alert_count >= 0', name='non_negative_daily_alert_count'),
        sa.CheckConstraint('LENGTH(name) >= 2', name='min_name_length'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_family_members_user', 'family_members', ['user_id', 'alerts_enabled'])

    # Create family_alerts table
    op.create_table('family_alerts',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('family_member_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('alert_type', sa.String(length=50), nullable=False),
        sa.Column('alert_message', sa.Text(), nullable=False),
        sa.Column('channel_statuses', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('acknowledged', sa.Boolean(), nullable=False),
        sa.Column('sent_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['family_member_id'], ['family_members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_family_alerts_user', 'family_alerts', ['user_id'])
    op.create_index('idx_family_alerts_member_sent', 'family_alerts', ['family_member_id', 'sent_at'])


def downgrade() -> None:
    # Drop tables in reverse order due to foreign key constraints
    op.drop_table('family_alerts')
    op.drop_table('family_members')
    op.drop_table('verified_brands')
    op.drop_table('telemarketer_registry')
    op.drop_table('scam_patterns')
