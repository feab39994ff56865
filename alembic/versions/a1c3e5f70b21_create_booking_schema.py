"""create booking schema

Revision ID: a1c3e5f70b21
Revises:
Create Date: 2026-10-18 09:12:44.512301

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f70b21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # btree_gist lets the exclusion constraint combine uuid equality with range overlap
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # 1. Users
    user_role = postgresql.ENUM('owner', 'salon_owner', 'stylist', 'customer', name='userrole')
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(255), nullable=True, unique=True),
        sa.Column('first_name', sa.String(120), nullable=True),
        sa.Column('last_name', sa.String(120), nullable=True),
        sa.Column('role', user_role, nullable=False, server_default='customer'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_users_email', 'users', ['email'])

    # 2. Salons
    op.create_table(
        'salons',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False, unique=True),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('lat', sa.Numeric(10, 8), nullable=True),
        sa.Column('lng', sa.Numeric(11, 8), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='Europe/Berlin'),
        sa.Column('open_hours_json', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_salons_slug', 'salons', ['slug'])

    # 3. Services
    op.create_table(
        'services',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('salon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('duration_min', sa.Integer(), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('duration_min > 0', name='ck_services_duration_positive'),
        sa.CheckConstraint('price_cents >= 0', name='ck_services_price_non_negative')
    )
    op.create_index('ix_services_salon_id', 'services', ['salon_id'])
    op.create_index('ix_services_active', 'services', ['active'])

    # 4. Stylists
    op.create_table(
        'stylists',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('salon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('display_name', sa.String(120), nullable=False),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('is_apprentice', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_stylists_salon_id', 'stylists', ['salon_id'])

    # 5. Work hours (weekday 0=Sunday, salon-local clock times)
    op.create_table(
        'work_hours',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('salon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('stylist_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stylists.id', ondelete='CASCADE'), nullable=False),
        sa.Column('weekday', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('start_time < end_time', name='ck_work_hours_start_before_end'),
        sa.CheckConstraint('weekday BETWEEN 0 AND 6', name='ck_work_hours_weekday_range')
    )
    op.create_index('ix_work_hours_salon_id', 'work_hours', ['salon_id'])
    op.create_index('ix_work_hours_stylist_id', 'work_hours', ['stylist_id'])

    # 6. Absences
    op.create_table(
        'absences',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('salon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('stylist_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stylists.id', ondelete='CASCADE'), nullable=False),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('starts_at < ends_at', name='ck_absences_start_before_end')
    )
    op.create_index('ix_absences_salon_id', 'absences', ['salon_id'])
    op.create_index('ix_absences_stylist_id', 'absences', ['stylist_id'])

    # 7. Bookings
    op.create_table(
        'bookings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('salon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.Column('stylist_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stylists.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='requested'),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('reminder_sent', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('starts_at < ends_at', name='ck_bookings_start_before_end')
    )
    op.create_index('ix_bookings_stylist_range', 'bookings', ['stylist_id', 'starts_at', 'ends_at'])
    op.create_index('ix_bookings_salon_starts_at', 'bookings', ['salon_id', 'starts_at'])
    op.create_index('ix_bookings_customer_id', 'bookings', ['customer_id'])

    # No two occupying bookings of one stylist may overlap, even under concurrent commits
    op.execute("""
        ALTER TABLE bookings
        ADD CONSTRAINT bookings_no_overlap_per_stylist
        EXCLUDE USING gist (
            stylist_id WITH =,
            tstzrange(starts_at, ends_at, '[)') WITH &&
        )
        WHERE (status <> 'cancelled')
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_overlap_per_stylist")

    op.drop_index('ix_bookings_customer_id', table_name='bookings')
    op.drop_index('ix_bookings_salon_starts_at', table_name='bookings')
    op.drop_index('ix_bookings_stylist_range', table_name='bookings')
    op.drop_table('bookings')

    op.drop_index('ix_absences_stylist_id', table_name='absences')
    op.drop_index('ix_absences_salon_id', table_name='absences')
    op.drop_table('absences')

    op.drop_index('ix_work_hours_stylist_id', table_name='work_hours')
    op.drop_index('ix_work_hours_salon_id', table_name='work_hours')
    op.drop_table('work_hours')

    op.drop_index('ix_stylists_salon_id', table_name='stylists')
    op.drop_table('stylists')

    op.drop_index('ix_services_active', table_name='services')
    op.drop_index('ix_services_salon_id', table_name='services')
    op.drop_table('services')

    op.drop_index('ix_salons_slug', table_name='salons')
    op.drop_table('salons')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.execute("DROP TYPE IF EXISTS userrole")
