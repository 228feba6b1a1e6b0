"""
Create quote submissions, line items, adjustments, results, holidays,
app settings and the admin activity log.

Revision ID: 20261019_01_create_quote_tables
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from typing import Union

# revision identifiers, used by Alembic.
revision: str = '20261019_01_create_quote_tables'
down_revision: Union[str, None] = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'quote_submissions',
        sa.Column('quote_id', sa.String(length=36), primary_key=True),
        sa.Column('quote_number', sa.String(length=32), nullable=True, unique=True),
        sa.Column('quote_state', sa.String(length=32), nullable=False, server_default='draft'),
        sa.Column('state_changed_at', sa.DateTime(), nullable=True),
        sa.Column('state_changed_by', sa.String(length=64), nullable=True),
        sa.Column('last_edited_by', sa.String(length=64), nullable=True),
        sa.Column('last_edited_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'quote_results',
        sa.Column(
            'quote_id',
            sa.String(length=36),
            sa.ForeignKey('quote_submissions.quote_id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('tax', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('shipping_total', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='CAD'),
        sa.Column('results_json', sa.JSON(), nullable=True),
        sa.Column('computed_at', sa.DateTime(), nullable=True),
        sa.Column('estimated_delivery_date', sa.Date(), nullable=True),
        sa.Column('delivery_estimate_text', sa.String(length=255), nullable=True),
        sa.Column('quote_expires_at', sa.DateTime(), nullable=True),
        sa.Column('location_id', sa.String(length=64), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'quote_sub_orders',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column(
            'quote_id',
            sa.String(length=36),
            sa.ForeignKey('quote_submissions.quote_id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('file_id', sa.String(length=64), nullable=True),
        sa.Column('filename', sa.String(length=255), nullable=True),
        sa.Column('doc_type', sa.String(length=255), nullable=True),
        sa.Column('billable_pages', sa.Numeric(10, 2), nullable=True),
        sa.Column('unit_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('unit_rate_override', sa.Numeric(10, 2), nullable=True),
        sa.Column('override_reason', sa.String(length=500), nullable=True),
        sa.Column('certification_type_name', sa.String(length=255), nullable=True),
        sa.Column('certification_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('source_language', sa.String(length=64), nullable=True),
        sa.Column('target_language', sa.String(length=64), nullable=True),
        sa.Column('line_total', sa.Numeric(12, 2), nullable=True),
        sa.Column('source', sa.String(length=32), nullable=False, server_default='analysis'),
        *_timestamps(),
    )
    op.create_index('ix_quote_sub_orders_quote_id', 'quote_sub_orders', ['quote_id'])

    op.create_table(
        'quote_adjustments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column(
            'quote_id',
            sa.String(length=36),
            sa.ForeignKey('quote_submissions.quote_id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('is_taxable', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('quantity', sa.Numeric(10, 2), nullable=True),
        sa.Column('unit_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('discount_type', sa.String(length=16), nullable=True),
        sa.Column('discount_value', sa.Numeric(12, 2), nullable=True),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_quote_adjustments_quote_id', 'quote_adjustments', ['quote_id'])

    op.create_table(
        'company_holidays',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('location_id', sa.String(length=64), nullable=False),
        sa.Column('holiday_name', sa.String(length=255), nullable=False),
        sa.Column('holiday_date', sa.Date(), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('is_closed', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_company_holidays_location_id', 'company_holidays', ['location_id'])
    op.create_index('ix_company_holidays_holiday_date', 'company_holidays', ['holiday_date'])

    op.create_table(
        'app_settings',
        sa.Column('setting_key', sa.String(length=128), primary_key=True),
        sa.Column('setting_value', sa.String(), nullable=True),
        sa.Column('description', sa.String(length=500), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'admin_activity_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('action', sa.String(length=128), nullable=False),
        sa.Column('actor_id', sa.String(length=64), nullable=True),
        sa.Column('target_id', sa.String(length=64), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_admin_activity_logs_action', 'admin_activity_logs', ['action'])
    op.create_index('ix_admin_activity_logs_target_id', 'admin_activity_logs', ['target_id'])


def downgrade() -> None:
    op.drop_index('ix_admin_activity_logs_target_id', table_name='admin_activity_logs')
    op.drop_index('ix_admin_activity_logs_action', table_name='admin_activity_logs')
    op.drop_table('admin_activity_logs')
    op.drop_table('app_settings')
    op.drop_index('ix_company_holidays_holiday_date', table_name='company_holidays')
    op.drop_index('ix_company_holidays_location_id', table_name='company_holidays')
    op.drop_table('company_holidays')
    op.drop_index('ix_quote_adjustments_quote_id', table_name='quote_adjustments')
    op.drop_table('quote_adjustments')
    op.drop_index('ix_quote_sub_orders_quote_id', table_name='quote_sub_orders')
    op.drop_table('quote_sub_orders')
    op.drop_table('quote_results')
    op.drop_table('quote_submissions')
