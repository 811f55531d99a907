"""Initial event dashboard schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

Creates the event dashboard tables:
- events, staff, speakers
- budget_categories, budget_items
- staff_assignments, sponsors (weak budget_item_id pointers, no FK)
- agenda_sessions

Every table carries a UUIDv7 ``uuid`` column backing its public GUID.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _uuid_column() -> sa.Column:
    return sa.Column(
        'uuid',
        postgresql.UUID(as_uuid=True).with_variant(sa.LargeBinary(16), 'sqlite'),
        nullable=False,
    )


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def _uuid_index(table_name: str) -> None:
    op.create_index(f'ix_{table_name}_uuid', table_name, ['uuid'], unique=True)


def upgrade() -> None:
    """
    Create all event dashboard tables.

    Tables are created parents first so foreign keys resolve.
    """
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    _uuid_index('events')
    op.create_index('ix_events_start_date', 'events', ['start_date'])

    op.create_table(
        'staff',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('hourly_rate', sa.Numeric(12, 2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    _uuid_index('staff')

    op.create_table(
        'speakers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('company', sa.String(length=200), nullable=True),
        sa.Column('job_title', sa.String(length=200), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    _uuid_index('speakers')
    op.create_index('ix_speakers_event_id', 'speakers', ['event_id'])

    op.create_table(
        'budget_categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(length=7), nullable=False),
        sa.Column('icon', sa.String(length=50), nullable=True),
        sa.Column('allocated_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('spent_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    _uuid_index('budget_categories')
    op.create_index('ix_budget_categories_event_id', 'budget_categories', ['event_id'])

    op.create_table(
        'budget_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column('estimated_cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('actual_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('vendor', sa.String(length=255), nullable=True),
        sa.Column('invoice_number', sa.String(length=100), nullable=True),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['budget_categories.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    _uuid_index('budget_items')
    op.create_index('ix_budget_items_category_id', 'budget_items', ['category_id'])
    op.create_index('ix_budget_items_event_id', 'budget_items', ['event_id'])

    # budget_item_id: weak pointer, indexed, no foreign key
    op.create_table(
        'staff_assignments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('assignment_status', sa.String(length=50), nullable=False),
        sa.Column('payment_status', sa.String(length=50), nullable=False),
        sa.Column('payment_terms', sa.String(length=50), nullable=False),
        sa.Column('payment_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('payment_due_date', sa.DateTime(), nullable=True),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('payment_notes', sa.Text(), nullable=True),
        sa.Column('invoice_number', sa.String(length=100), nullable=True),
        sa.Column('invoice_url', sa.String(length=2048), nullable=True),
        sa.Column('budget_item_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    _uuid_index('staff_assignments')
    op.create_index('ix_staff_assignments_event_id', 'staff_assignments', ['event_id'])
    op.create_index('ix_staff_assignments_staff_id', 'staff_assignments', ['staff_id'])
    op.create_index('ix_staff_assignments_budget_item_id', 'staff_assignments', ['budget_item_id'])

    op.create_table(
        'sponsors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('company_name', sa.String(length=200), nullable=False),
        sa.Column('contact_person', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('sponsorship_level', sa.String(length=50), nullable=False),
        sa.Column('sponsorship_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('contract_signed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('contract_date', sa.DateTime(), nullable=True),
        sa.Column('payment_status', sa.String(length=50), nullable=False),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('website_url', sa.String(length=2048), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('budget_item_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    _uuid_index('sponsors')
    op.create_index('ix_sponsors_event_id', 'sponsors', ['event_id'])
    op.create_index('ix_sponsors_budget_item_id', 'sponsors', ['budget_item_id'])

    op.create_table(
        'agenda_sessions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('session_type', sa.String(length=50), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('room', sa.String(length=100), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('speaker_id', sa.Integer(), nullable=True),
        sa.Column('max_attendees', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['speaker_id'], ['speakers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    _uuid_index('agenda_sessions')
    op.create_index('ix_agenda_sessions_event_id', 'agenda_sessions', ['event_id'])
    op.create_index('ix_agenda_sessions_speaker_id', 'agenda_sessions', ['speaker_id'])
    op.create_index('idx_agenda_sessions_event_start', 'agenda_sessions', ['event_id', 'start_time'])


def downgrade() -> None:
    """Drop all event dashboard tables, children first."""
    for table_name in (
        'agenda_sessions',
        'sponsors',
        'staff_assignments',
        'budget_items',
        'budget_categories',
        'speakers',
        'staff',
        'events',
    ):
        op.drop_table(table_name)
