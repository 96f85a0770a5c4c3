"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

DEPARTMENTS = ('IT', 'AI&DS', 'CSE', 'Physics', 'Chemistry', 'Bio-tech', 'Chemical', 'Mechanical')
APP_ROLES = ('admin', 'hod', 'staff')
SERVICE_TYPES = ('internal', 'external')
NATURES_OF_SERVICE = ('maintenance', 'repair', 'calibration', 'installation')
SERVICE_STATUSES = ('pending', 'in_progress', 'completed')

ENUMS = {
    'department': DEPARTMENTS,
    'app_role': APP_ROLES,
    'service_type': SERVICE_TYPES,
    'nature_of_service': NATURES_OF_SERVICE,
    'service_status': SERVICE_STATUSES,
}


def enum(name):
    # Types are created once up front; tables only reference them
    return sa.Enum(*ENUMS[name], name=name).with_variant(
        postgresql.ENUM(*ENUMS[name], name=name, create_type=False), 'postgresql'
    )


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name, values in ENUMS.items():
            postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('email_confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('email_confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('department', enum('department'), nullable=True),
        sa.Column('approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        *timestamps(),
    )

    op.create_table(
        'user_roles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', enum('app_role'), nullable=False),
        sa.Column('department', enum('department'), nullable=True),
        *timestamps(),
        sa.UniqueConstraint('user_id', name='uq_user_roles_user_id'),
    )
    op.create_index('ix_user_roles_id', 'user_roles', ['id'])
    op.create_index('ix_user_roles_user_id', 'user_roles', ['user_id'])

    op.create_table(
        'registration_requests',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('department', enum('department'), nullable=False),
        sa.Column('requested_role', enum('app_role'), nullable=False),
        sa.Column('justification', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('reviewed_by', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_registration_requests_id', 'registration_requests', ['id'])
    op.create_index('ix_registration_requests_email', 'registration_requests', ['email'])
    op.create_index('ix_registration_requests_status', 'registration_requests', ['status'])

    op.create_table(
        'inventory_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('model', sa.String(255), nullable=True),
        sa.Column('serial_number', sa.String(255), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('department', enum('department'), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('cabin_number', sa.String(50), nullable=True),
        sa.Column('low_stock_threshold', sa.Integer(), nullable=True, server_default='5'),
        sa.Column('status', sa.String(50), nullable=True, server_default='available'),
        sa.Column('specifications', sa.JSON(), nullable=True),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('created_by', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('creation_seq', sa.BigInteger(), nullable=False),
        *timestamps(),
        sa.CheckConstraint('quantity >= 0', name='ck_inventory_items_quantity_non_negative'),
        sa.CheckConstraint('low_stock_threshold >= 0', name='ck_inventory_items_threshold_non_negative'),
    )
    op.create_index('ix_inventory_items_id', 'inventory_items', ['id'])
    op.create_index('ix_inventory_items_name', 'inventory_items', ['name'])
    op.create_index('ix_inventory_items_department', 'inventory_items', ['department'])
    op.create_index('ix_inventory_items_creation_seq', 'inventory_items', ['creation_seq'])

    op.create_table(
        'alerts',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('item_id', sa.String(36), sa.ForeignKey('inventory_items.id', ondelete='SET NULL'), nullable=True),
        sa.Column('alert_type', sa.String(50), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('severity', sa.String(20), nullable=True, server_default='medium'),
        sa.Column('is_resolved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('resolved_by', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_alerts_id', 'alerts', ['id'])
    op.create_index('ix_alerts_item_id', 'alerts', ['item_id'])
    op.create_index('ix_alerts_is_resolved', 'alerts', ['is_resolved'])

    op.create_table(
        'services',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('equipment_id', sa.String(36), sa.ForeignKey('inventory_items.id', ondelete='SET NULL'), nullable=True),
        sa.Column('department', enum('department'), nullable=False),
        sa.Column('service_type', enum('service_type'), nullable=False),
        sa.Column('nature_of_service', enum('nature_of_service'), nullable=False),
        sa.Column('service_date', sa.Date(), nullable=False),
        sa.Column('status', enum('service_status'), nullable=False, server_default='pending'),
        sa.Column('technician_vendor_name', sa.String(200), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('bill_photo_url', sa.String(500), nullable=True),
        sa.Column('created_by', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_services_id', 'services', ['id'])
    op.create_index('ix_services_equipment_id', 'services', ['equipment_id'])
    op.create_index('ix_services_department', 'services', ['department'])

    op.create_table(
        'audit_log',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('table_name', sa.String(100), nullable=False),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('record_id', sa.String(36), nullable=True),
        sa.Column('old_data', sa.JSON(), nullable=True),
        sa.Column('new_data', sa.JSON(), nullable=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_audit_log_id', 'audit_log', ['id'])
    op.create_index('ix_audit_log_record_id', 'audit_log', ['record_id'])


def downgrade() -> None:
    for table in ('audit_log', 'services', 'alerts', 'inventory_items', 'registration_requests',
                  'user_roles', 'profiles', 'users'):
        op.drop_table(table)

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name in ENUMS:
            postgresql.ENUM(name=name).drop(bind, checkfirst=True)
