"""initial_schema

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '1a2b3c4d5e6f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list:
    cols = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False)]
    if updated:
        cols.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False))
    return cols


def upgrade() -> None:
    conn = op.get_bind()
    # Dev databases may already have been created by create_all at start-up
    if conn.dialect.has_table(conn, 'dive_centers'):
        return

    op.create_table(
        'dive_centers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_dive_centers_id'), 'dive_centers', ['id'], unique=False)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dive_center_id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['dive_center_id'], ['dive_centers.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_dive_center_id'), 'users', ['dive_center_id'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dive_center_id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['dive_center_id'], ['dive_centers.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_customers_id'), 'customers', ['id'], unique=False)
    op.create_index(op.f('ix_customers_dive_center_id'), 'customers', ['dive_center_id'], unique=False)

    op.create_table(
        'dive_packages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dive_center_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('total_dives', sa.Integer(), nullable=False),
        sa.Column('dives_used', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('per_dive_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('duration_days', sa.Integer(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('Active', 'Completed', 'Expired', 'Cancelled', name='packagestatus'),
            nullable=False,
        ),
        sa.Column('notes', sa.String(length=2000), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('dives_used >= 0 AND dives_used <= total_dives', name='ck_package_dives_used'),
        sa.ForeignKeyConstraint(['dive_center_id'], ['dive_centers.id']),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_dive_packages_id'), 'dive_packages', ['id'], unique=False)
    op.create_index(op.f('ix_dive_packages_dive_center_id'), 'dive_packages', ['dive_center_id'], unique=False)
    op.create_index(op.f('ix_dive_packages_customer_id'), 'dive_packages', ['customer_id'], unique=False)

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dive_center_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('dive_package_id', sa.Integer(), nullable=True),
        sa.Column('booking_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['dive_center_id'], ['dive_centers.id']),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.ForeignKeyConstraint(['dive_package_id'], ['dive_packages.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_bookings_id'), 'bookings', ['id'], unique=False)
    op.create_index(op.f('ix_bookings_dive_center_id'), 'bookings', ['dive_center_id'], unique=False)
    op.create_index(op.f('ix_bookings_customer_id'), 'bookings', ['customer_id'], unique=False)
    op.create_index(op.f('ix_bookings_dive_package_id'), 'bookings', ['dive_package_id'], unique=False)

    op.create_table(
        'equipment_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dive_center_id', sa.Integer(), nullable=False),
        sa.Column('equipment_type', sa.String(length=128), nullable=False),
        sa.Column('inventory_code', sa.String(length=64), nullable=True),
        sa.Column('serial_no', sa.String(length=128), nullable=True),
        sa.Column('size', sa.String(length=32), nullable=True),
        sa.Column('brand', sa.String(length=128), nullable=True),
        sa.Column(
            'status',
            sa.Enum('Available', 'Rented', 'Maintenance', name='itemstatus'),
            nullable=False,
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(['dive_center_id'], ['dive_centers.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_equipment_items_id'), 'equipment_items', ['id'], unique=False)
    op.create_index(op.f('ix_equipment_items_dive_center_id'), 'equipment_items', ['dive_center_id'], unique=False)
    op.create_index(op.f('ix_equipment_items_inventory_code'), 'equipment_items', ['inventory_code'], unique=False)

    op.create_table(
        'equipment_baskets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dive_center_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=True),
        sa.Column('basket_no', sa.String(length=32), nullable=False),
        sa.Column('center_bucket_no', sa.String(length=255), nullable=True),
        sa.Column('checkout_date', sa.Date(), nullable=True),
        sa.Column('expected_return_date', sa.Date(), nullable=True),
        sa.Column('actual_return_date', sa.Date(), nullable=True),
        sa.Column('status', sa.Enum('Active', 'Returned', name='basketstatus'), nullable=False),
        sa.Column('notes', sa.String(length=2000), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['dive_center_id'], ['dive_centers.id']),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('dive_center_id', 'basket_no', name='uq_basket_no_per_center'),
    )
    op.create_index(op.f('ix_equipment_baskets_id'), 'equipment_baskets', ['id'], unique=False)
    op.create_index(op.f('ix_equipment_baskets_dive_center_id'), 'equipment_baskets', ['dive_center_id'], unique=False)
    op.create_index(op.f('ix_equipment_baskets_customer_id'), 'equipment_baskets', ['customer_id'], unique=False)
    op.create_index(op.f('ix_equipment_baskets_basket_no'), 'equipment_baskets', ['basket_no'], unique=False)
    op.create_index(op.f('ix_equipment_baskets_status'), 'equipment_baskets', ['status'], unique=False)

    op.create_table(
        'assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=True),
        sa.Column('basket_id', sa.Integer(), nullable=True),
        sa.Column('equipment_source', sa.Enum('Center', 'Customer Own', name='equipmentsource'), nullable=False),
        sa.Column('equipment_item_id', sa.Integer(), nullable=True),
        sa.Column('customer_equipment_type', sa.String(length=255), nullable=True),
        sa.Column('customer_equipment_brand', sa.String(length=255), nullable=True),
        sa.Column('customer_equipment_model', sa.String(length=255), nullable=True),
        sa.Column('customer_equipment_serial', sa.String(length=255), nullable=True),
        sa.Column('customer_equipment_notes', sa.String(length=2000), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('checkout_date', sa.Date(), nullable=True),
        sa.Column('return_date', sa.Date(), nullable=True),
        sa.Column('actual_return_date', sa.Date(), nullable=True),
        sa.Column(
            'assignment_status',
            sa.Enum('Pending', 'Checked Out', 'Returned', 'Lost', name='assignmentstatus'),
            nullable=False,
        ),
        sa.Column('damage_reported', sa.Boolean(), nullable=False),
        sa.Column('damage_description', sa.String(length=2000), nullable=True),
        sa.Column('damage_cost', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('charge_customer', sa.Boolean(), nullable=False),
        sa.Column('damage_charge_amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('damage_charged_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('damage_invoice_ref', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id']),
        sa.ForeignKeyConstraint(['basket_id'], ['equipment_baskets.id']),
        sa.ForeignKeyConstraint(['equipment_item_id'], ['equipment_items.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_assignments_id'), 'assignments', ['id'], unique=False)
    op.create_index(op.f('ix_assignments_booking_id'), 'assignments', ['booking_id'], unique=False)
    op.create_index(op.f('ix_assignments_basket_id'), 'assignments', ['basket_id'], unique=False)
    op.create_index(
        'ix_assignments_item_status', 'assignments', ['equipment_item_id', 'assignment_status'], unique=False,
    )

    op.create_table(
        'booking_dives',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('dive_package_id', sa.Integer(), nullable=True),
        sa.Column('package_dive_number', sa.Integer(), nullable=True),
        sa.Column('dive_site', sa.String(length=255), nullable=False),
        sa.Column('dive_date', sa.Date(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id']),
        sa.ForeignKeyConstraint(['dive_package_id'], ['dive_packages.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_booking_dives_id'), 'booking_dives', ['id'], unique=False)
    op.create_index(op.f('ix_booking_dives_booking_id'), 'booking_dives', ['booking_id'], unique=False)
    op.create_index(op.f('ix_booking_dives_dive_package_id'), 'booking_dives', ['dive_package_id'], unique=False)


def downgrade() -> None:
    for table in (
        'booking_dives', 'assignments', 'equipment_baskets', 'equipment_items',
        'bookings', 'dive_packages', 'customers', 'users', 'dive_centers',
    ):
        op.drop_table(table)
    # Drop the enum types (needed for PostgreSQL/MariaDB, no-op for SQLite)
    for name in ('assignmentstatus', 'equipmentsource', 'basketstatus', 'itemstatus', 'packagestatus'):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
