"""Initial CropCast schema

Revision ID: 001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")
SOIL_TYPES = ('Clay', 'Sandy', 'Loamy', 'Silty', 'Peaty', 'Chalky', 'Mixed')
CROP_STAGES = ('planning', 'planting', 'growing', 'flowering', 'harvesting')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'farms',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('location', sa.String(255), nullable=False, server_default=''),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('area_size', sa.Float(), nullable=False, server_default='0'),
        sa.Column('soil_type', sa.String(100), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('area_size >= 0', name='ck_farms_area_size'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_farms_user_id', 'farms', ['user_id'])
    op.create_index('ix_farms_created_at', 'farms', ['created_at'])

    op.create_table(
        'fields',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('farm_id', sa.Uuid(), nullable=False),
        sa.Column('field_name', sa.String(200), nullable=False),
        sa.Column('soil_type', sa.Enum(*SOIL_TYPES, name='soil_type', native_enum=False), nullable=False),
        sa.Column('field_location', sa.String(255), nullable=False, server_default=''),
        sa.Column('area_size', sa.Float(), nullable=False, server_default='0'),
        sa.Column('previous_crops', JSON, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['farm_id'], ['farms.id'], ondelete='CASCADE'),
        sa.CheckConstraint('area_size >= 0', name='ck_fields_area_size'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_fields_farm_id', 'fields', ['farm_id'])

    op.create_table(
        'crops',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('farm_id', sa.Uuid(), nullable=False),
        sa.Column('crop_type', sa.String(100), nullable=False),
        sa.Column('variety', sa.String(100), nullable=False, server_default=''),
        sa.Column('current_stage', sa.Enum(*CROP_STAGES, name='crop_stage', native_enum=False),
                  nullable=False, server_default='planning'),
        sa.Column('planting_date', sa.Date(), nullable=True),
        sa.Column('expected_harvest_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['farm_id'], ['farms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_crops_farm_id', 'crops', ['farm_id'])

    op.create_table(
        'seasonal_reminders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('reminder_date', sa.Date(), nullable=False),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_seasonal_reminders_user_id', 'seasonal_reminders', ['user_id'])

    op.create_table(
        'chat_messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('response', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_chat_messages_user_id', 'chat_messages', ['user_id'])
    op.create_index('ix_chat_messages_created_at', 'chat_messages', ['created_at'])

    op.create_table(
        'crop_recommendations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('field_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('crop_type', sa.String(100), nullable=False),
        sa.Column('suitability_percentage', sa.Integer(), nullable=False),
        sa.Column('recommendation_factors', JSON, nullable=False),
        sa.Column('weather_data', JSON, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['field_id'], ['fields.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint(
            'suitability_percentage >= 0 AND suitability_percentage <= 100',
            name='ck_crop_recommendations_suitability',
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_crop_recommendations_field_id', 'crop_recommendations', ['field_id'])
    op.create_index('ix_crop_recommendations_user_id', 'crop_recommendations', ['user_id'])

    op.create_table(
        'recommendations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('crop_type', sa.String(100), nullable=False),
        sa.Column('recommendation_text', sa.Text(), nullable=False),
        sa.Column('confidence_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_recommendations_user_id', 'recommendations', ['user_id'])


def downgrade() -> None:
    op.drop_table('recommendations')
    op.drop_table('crop_recommendations')
    op.drop_table('chat_messages')
    op.drop_table('seasonal_reminders')
    op.drop_table('crops')
    op.drop_table('fields')
    op.drop_table('farms')
    op.drop_table('profiles')
    op.drop_table('users')
