"""init_reservation_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Schema:
- movie / screen / seat / show: catalog (read-only for the engine)
- reservation: one row per HOLD or CONFIRMED claim, keyed by UUID7
- reserved_seat: seats of a reservation, removed with it (ON DELETE CASCADE)
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog and reservation tables."""

    # ========== Catalog ==========

    op.create_table(
        'movie',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'screen',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('seats', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'seat',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('screen_id', UUID(as_uuid=True), nullable=False),
        sa.Column('row', sa.String(length=5), nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('seat_type', sa.String(length=20), nullable=False, server_default='STANDARD'),
        sa.ForeignKeyConstraint(['screen_id'], ['screen.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('screen_id', 'row', 'number', name='uq_seat_position'),
    )

    op.create_table(
        'show',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('movie_id', UUID(as_uuid=True), nullable=False),
        sa.Column('screen_id', UUID(as_uuid=True), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('base_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.ForeignKeyConstraint(['movie_id'], ['movie.id']),
        sa.ForeignKeyConstraint(['screen_id'], ['screen.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_show_screen_id'), 'show', ['screen_id'], unique=False)

    # ========== Reservations ==========

    op.create_table(
        'reservation',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('show_id', UUID(as_uuid=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='HOLD'),
        sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['show_id'], ['show.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reservation_user_id'), 'reservation', ['user_id'], unique=False)
    op.create_index(
        'ix_reservation_show_id_status', 'reservation', ['show_id', 'status'], unique=False
    )
    op.create_index(
        'ix_reservation_status_expires_at', 'reservation', ['status', 'expires_at'], unique=False
    )

    op.create_table(
        'reserved_seat',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('reservation_id', UUID(as_uuid=True), nullable=False),
        sa.Column('seat_id', UUID(as_uuid=True), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservation.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['seat_id'], ['seat.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_reserved_seat_reservation_id'), 'reserved_seat', ['reservation_id'], unique=False
    )
    op.create_index(op.f('ix_reserved_seat_seat_id'), 'reserved_seat', ['seat_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_reserved_seat_seat_id'), table_name='reserved_seat')
    op.drop_index(op.f('ix_reserved_seat_reservation_id'), table_name='reserved_seat')
    op.drop_table('reserved_seat')

    op.drop_index('ix_reservation_status_expires_at', table_name='reservation')
    op.drop_index('ix_reservation_show_id_status', table_name='reservation')
    op.drop_index(op.f('ix_reservation_user_id'), table_name='reservation')
    op.drop_table('reservation')

    op.drop_index(op.f('ix_show_screen_id'), table_name='show')
    op.drop_table('show')
    op.drop_table('seat')
    op.drop_table('screen')
    op.drop_table('movie')
