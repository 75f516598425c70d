"""Initial schema for tenants, reference data, assets and procurement

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_ASSIGNMENT = "status = 'active' AND deleted_at IS NULL"
LIVE_ROW = "deleted_at IS NULL"


def _tenant_columns() -> list:
    """tenant_id plus the timestamp / soft-delete columns every scoped table has."""
    return [
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
    ]


def _tenant_indexes(table: str) -> None:
    op.create_index(f'ix_{table}_id', table, ['id'], unique=False)
    op.create_index(f'ix_{table}_tenant_id', table, ['tenant_id'], unique=False)
    op.create_index(f'ix_{table}_deleted_at', table, ['deleted_at'], unique=False)


def upgrade() -> None:
    # Create tenants table
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('plan', sa.String(50), nullable=False, server_default='free'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('domain', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('domain'),
    )
    op.create_index('ix_tenants_id', 'tenants', ['id'], unique=False)

    # Create people table
    op.create_table(
        'people',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(100), nullable=False),
        sa.Column('role', sa.String(50), nullable=False),
        sa.Column('position', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        *_tenant_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('people')
    # Email is unique among live people only
    op.create_index(
        'uq_people_tenant_email',
        'people',
        ['tenant_id', 'email'],
        unique=True,
        postgresql_where=sa.text(LIVE_ROW),
        sqlite_where=sa.text(LIVE_ROW),
    )

    # Create reference data tables
    op.create_table(
        'asset_categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        *_tenant_columns(),
        sa.ForeignKeyConstraint(['parent_id'], ['asset_categories.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('asset_categories')
    op.create_index('ix_asset_categories_parent_id', 'asset_categories', ['parent_id'], unique=False)

    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('type', sa.String(50), nullable=True),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        *_tenant_columns(),
        sa.ForeignKeyConstraint(['parent_id'], ['locations.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('locations')
    op.create_index('ix_locations_parent_id', 'locations', ['parent_id'], unique=False)

    op.create_table(
        'vendors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('contact_name', sa.String(100), nullable=True),
        sa.Column('contact_email', sa.String(100), nullable=True),
        sa.Column('contact_phone', sa.String(20), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('website', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_tenant_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('vendors')

    # Create assets table
    op.create_table(
        'assets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('serial_number', sa.String(100), nullable=True),
        sa.Column('model_number', sa.String(100), nullable=True),
        sa.Column('manufacturer', sa.String(100), nullable=True),
        sa.Column('purchase_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('purchase_price', sa.Float(), nullable=True),
        sa.Column('warranty_expiry', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='in_stock'),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('current_assignee_id', sa.Integer(), nullable=True),
        sa.Column('expected_lifespan', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tags', sa.String(255), nullable=True),
        sa.Column('barcode', sa.String(100), nullable=True),
        *_tenant_columns(),
        sa.ForeignKeyConstraint(['category_id'], ['asset_categories.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['current_assignee_id'], ['people.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('assets')
    op.create_index('ix_assets_category_id', 'assets', ['category_id'], unique=False)
    op.create_index('ix_assets_location_id', 'assets', ['location_id'], unique=False)
    op.create_index('ix_assets_current_assignee_id', 'assets', ['current_assignee_id'], unique=False)

    # Create asset_assignments table
    op.create_table(
        'asset_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asset_id', sa.Integer(), nullable=False),
        sa.Column('assigned_to_id', sa.Integer(), nullable=False),
        sa.Column('assigned_by_id', sa.Integer(), nullable=False),
        sa.Column('assignment_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('return_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expected_return', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        *_tenant_columns(),
        sa.ForeignKeyConstraint(['asset_id'], ['assets.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['assigned_to_id'], ['people.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['assigned_by_id'], ['people.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('asset_assignments')
    op.create_index('ix_asset_assignments_asset_id', 'asset_assignments', ['asset_id'], unique=False)
    op.create_index('ix_asset_assignments_assigned_to_id', 'asset_assignments', ['assigned_to_id'], unique=False)
    op.create_index('ix_asset_assignments_assigned_by_id', 'asset_assignments', ['assigned_by_id'], unique=False)
    # One live active assignment per asset
    op.create_index(
        'uq_asset_assignments_active_asset',
        'asset_assignments',
        ['tenant_id', 'asset_id'],
        unique=True,
        postgresql_where=sa.text(ACTIVE_ASSIGNMENT),
        sqlite_where=sa.text(ACTIVE_ASSIGNMENT),
    )

    # Create maintenance_records table
    op.create_table(
        'maintenance_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asset_id', sa.Integer(), nullable=False),
        sa.Column('maintenance_type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('performed_by_id', sa.Integer(), nullable=True),
        sa.Column('vendor_id', sa.Integer(), nullable=True),
        sa.Column('cost', sa.Float(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('results', sa.Text(), nullable=True),
        sa.Column('next_scheduled', sa.DateTime(timezone=True), nullable=True),
        *_tenant_columns(),
        sa.ForeignKeyConstraint(['asset_id'], ['assets.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['performed_by_id'], ['people.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('maintenance_records')
    op.create_index('ix_maintenance_records_asset_id', 'maintenance_records', ['asset_id'], unique=False)
    op.create_index('ix_maintenance_records_performed_by_id', 'maintenance_records', ['performed_by_id'], unique=False)
    op.create_index('ix_maintenance_records_vendor_id', 'maintenance_records', ['vendor_id'], unique=False)

    # Create procurement tables
    op.create_table(
        'procurement_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('request_number', sa.String(50), nullable=False),
        sa.Column('requested_by_id', sa.Integer(), nullable=False),
        sa.Column('approved_by_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('request_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('approval_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expected_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_budget', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_tenant_columns(),
        sa.ForeignKeyConstraint(['requested_by_id'], ['people.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['approved_by_id'], ['people.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'request_number', name='uq_procurement_requests_number'),
    )
    _tenant_indexes('procurement_requests')
    op.create_index('ix_procurement_requests_request_number', 'procurement_requests', ['request_number'], unique=False)
    op.create_index('ix_procurement_requests_requested_by_id', 'procurement_requests', ['requested_by_id'], unique=False)
    op.create_index('ix_procurement_requests_approved_by_id', 'procurement_requests', ['approved_by_id'], unique=False)

    op.create_table(
        'procurement_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('procurement_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('estimated_price', sa.Float(), nullable=True),
        sa.Column('preferred_vendor_id', sa.Integer(), nullable=True),
        sa.Column('justification', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        *_tenant_columns(),
        sa.ForeignKeyConstraint(['procurement_id'], ['procurement_requests.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['asset_categories.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['preferred_vendor_id'], ['vendors.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('procurement_items')
    op.create_index('ix_procurement_items_procurement_id', 'procurement_items', ['procurement_id'], unique=False)
    op.create_index('ix_procurement_items_category_id', 'procurement_items', ['category_id'], unique=False)
    op.create_index('ix_procurement_items_preferred_vendor_id', 'procurement_items', ['preferred_vendor_id'], unique=False)

    op.create_table(
        'purchase_orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_number', sa.String(50), nullable=False),
        sa.Column('procurement_id', sa.Integer(), nullable=True),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('order_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=True),
        sa.Column('created_by_id', sa.Integer(), nullable=False),
        *_tenant_columns(),
        sa.ForeignKeyConstraint(['procurement_id'], ['procurement_requests.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['created_by_id'], ['people.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    _tenant_indexes('purchase_orders')
    op.create_index('ix_purchase_orders_procurement_id', 'purchase_orders', ['procurement_id'], unique=False)
    op.create_index('ix_purchase_orders_vendor_id', 'purchase_orders', ['vendor_id'], unique=False)
    op.create_index('ix_purchase_orders_created_by_id', 'purchase_orders', ['created_by_id'], unique=False)


def downgrade() -> None:
    # Dropping a table drops its indexes
    for table in (
        'purchase_orders',
        'procurement_items',
        'procurement_requests',
        'maintenance_records',
        'asset_assignments',
        'assets',
        'vendors',
        'locations',
        'asset_categories',
        'people',
        'tenants',
    ):
        op.drop_table(table)
