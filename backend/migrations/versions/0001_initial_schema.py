"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2024-06-01
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('locations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_id', sa.Integer(), nullable=True),
        sa.Column('location_name', sa.String(length=150), nullable=False),
        sa.Column('address', sa.String(length=255)),
        sa.Column('city', sa.String(length=100)),
        sa.Column('state', sa.String(length=64)),
        sa.Column('zip_code', sa.String(length=16)),
        sa.Column('country', sa.String(length=2), nullable=False, server_default='US'),
        sa.Column('phone', sa.String(length=32)),
        sa.Column('email', sa.String(length=150)),
        sa.Column('manager_contact', sa.JSON(), nullable=True),
        sa.Column('monthly_target_waste_percentage', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_locations_restaurant_id', 'locations', ['restaurant_id'])
    op.create_index('ix_locations_location_name', 'locations', ['location_name'])
    op.create_index('ix_locations_is_active', 'locations', ['is_active'])

    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=128), nullable=False, unique=True),
        sa.Column('full_name', sa.String(length=128)),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='operator'),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id'), nullable=True),
        sa.Column('restaurant_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_location_id', 'users', ['location_id'])
    op.create_index('ix_users_restaurant_id', 'users', ['restaurant_id'])

    op.create_table('waste_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id'), nullable=False),
        sa.Column('logged_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('waste_category', sa.String(length=32), nullable=False),
        sa.Column('food_item', sa.String(length=150), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=8), nullable=False),
        sa.Column('estimated_cost', sa.Float(), nullable=True),
        sa.Column('photo_url', sa.String(length=512), nullable=True),
        sa.Column('root_cause', sa.String(length=32), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('quantity >= 0', name='ck_waste_logs_quantity_non_negative'),
    )
    op.create_index('ix_waste_logs_location_id', 'waste_logs', ['location_id'])
    op.create_index('ix_waste_logs_logged_by', 'waste_logs', ['logged_by'])
    op.create_index('ix_waste_logs_timestamp', 'waste_logs', ['timestamp'])
    op.create_index('ix_waste_logs_waste_category', 'waste_logs', ['waste_category'])
    op.create_index('ix_waste_logs_food_item', 'waste_logs', ['food_item'])

    op.create_table('esg_reports',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_id', sa.Integer(), nullable=True),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id'), nullable=True),
        sa.Column('report_type', sa.String(length=16), nullable=False, server_default='monthly'),
        sa.Column('report_period_start', sa.Date(), nullable=False),
        sa.Column('report_period_end', sa.Date(), nullable=False),
        sa.Column('food_waste_kg', sa.Float()),
        sa.Column('food_waste_cost', sa.Float()),
        sa.Column('total_waste_reduction_percentage', sa.Float()),
        sa.Column('carbon_impact_kg', sa.Float()),
        sa.Column('report_data', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text()),
        sa.Column('generated_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('generated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_esg_reports_restaurant_id', 'esg_reports', ['restaurant_id'])
    op.create_index('ix_esg_reports_location_id', 'esg_reports', ['location_id'])
    op.create_index('ix_esg_reports_report_period_start', 'esg_reports', ['report_period_start'])

    op.create_table('benchmarks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id'), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('total_waste_lbs', sa.Float()),
        sa.Column('total_waste_cost', sa.Float()),
        sa.Column('waste_percentage_of_sales', sa.Float()),
        sa.Column('top_wasted_items', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_benchmarks_location_id', 'benchmarks', ['location_id'])

    op.create_table('cookie_consents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('session_id', sa.String(length=64), nullable=True),
        sa.Column('necessary', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('analytics', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('marketing', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('third_party', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('ip_address', sa.String(length=64)),
        sa.Column('user_agent', sa.String(length=512)),
        sa.Column('consent_date', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_cookie_consents_user_id', 'cookie_consents', ['user_id'])
    op.create_index('ix_cookie_consents_session_id', 'cookie_consents', ['session_id'])

    op.create_table('kb_articles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False, unique=True),
        sa.Column('summary', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('video_url', sa.String(length=512)),
        sa.Column('helpful_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('not_helpful_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('search_keywords', sa.JSON(), nullable=True),
        sa.Column('related_articles', sa.JSON(), nullable=True),
        sa.Column('published', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_kb_articles_category', 'kb_articles', ['category'])
    op.create_index('ix_kb_articles_slug', 'kb_articles', ['slug'])
    op.create_index('ix_kb_articles_published', 'kb_articles', ['published'])

    op.create_table('kb_feedback',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('article_id', sa.Integer(), sa.ForeignKey('kb_articles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('helpful', sa.Boolean(), nullable=False),
        sa.Column('feedback_text', sa.Text()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('article_id', 'user_id', name='uq_kb_feedback_user'),
    )
    op.create_index('ix_kb_feedback_article_id', 'kb_feedback', ['article_id'])

    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('actor_user_id', sa.Integer(), nullable=False),
        sa.Column('actor_role', sa.String(length=16), nullable=True),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('entity', sa.String(length=64), nullable=True),
        sa.Column('entity_id', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_audit_logs_actor_user_id', 'audit_logs', ['actor_user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])


def downgrade():
    for table in ('audit_logs', 'kb_feedback', 'kb_articles', 'cookie_consents', 'benchmarks',
                  'esg_reports', 'waste_logs', 'users', 'locations'):
        op.drop_table(table)
