"""Trip cities, tasks, notes, tags and itinerary templates

Revision ID: planning_002
Revises: initial_001
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = 'planning_002'
down_revision: Union[str, None] = 'initial_001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid_pk():
    return sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()'))


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def upgrade() -> None:
    # --- Trip cities ---
    op.create_table('trip_cities',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('city_id', sa.UUID(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('arrival_date', sa.Date(), nullable=True),
        sa.Column('departure_date', sa.Date(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['city_id'], ['cities.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('trip_id', 'city_id', name='uq_trip_cities_trip_city'),
    )
    op.create_index('ix_trip_cities_trip_id', 'trip_cities', ['trip_id'])

    op.add_column('itinerary_sections', sa.Column('trip_city_id', sa.UUID(), nullable=True))
    op.create_foreign_key(
        'fk_itinerary_sections_trip_city_id', 'itinerary_sections', 'trip_cities',
        ['trip_city_id'], ['id'], ondelete='SET NULL',
    )

    # --- Itinerary templates ---
    op.create_table('itinerary_templates',
        _uuid_pk(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=80), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('city_id', sa.UUID(), nullable=True),
        sa.Column('destination_name', sa.String(length=100), nullable=True),
        sa.Column('duration_days', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('copied_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('source_trip_id', sa.UUID(), nullable=True),
        sa.Column('created_by', sa.UUID(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['city_id'], ['cities.id']),
        sa.ForeignKeyConstraint(['source_trip_id'], ['trips.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table('itinerary_template_items',
        _uuid_pk(),
        sa.Column('template_id', sa.UUID(), nullable=False),
        sa.Column('day', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('item_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('item_type', sa.String(length=50), nullable=False, server_default='activity'),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('place_id', sa.String(length=255), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('estimated_cost', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=True),
        sa.ForeignKeyConstraint(['template_id'], ['itinerary_templates.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_itinerary_template_items_template_id', 'itinerary_template_items', ['template_id'])

    # --- Tags, tasks, notes ---
    op.create_table('tags',
        _uuid_pk(),
        sa.Column('name', sa.String(length=50), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table('tasks',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='suggested'),
        sa.Column('priority', sa.String(length=10), nullable=False, server_default='medium'),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('assignee_id', sa.UUID(), nullable=True),
        sa.Column('votes_up', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('votes_down', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['assignee_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tasks_trip_id', 'tasks', ['trip_id'])

    op.create_table('task_votes',
        _uuid_pk(),
        sa.Column('task_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('vote_type', sa.String(length=10), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('task_id', 'user_id', name='uq_task_votes_task_user'),
    )
    op.create_index('ix_task_votes_task_id', 'task_votes', ['task_id'])

    op.create_table('task_tags',
        sa.Column('task_id', sa.UUID(), nullable=False),
        sa.Column('tag_id', sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('task_id', 'tag_id'),
    )

    op.create_table('trip_notes',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('created_by', sa.UUID(), nullable=False),
        sa.Column('updated_by', sa.UUID(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.ForeignKeyConstraint(['updated_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_trip_notes_trip_id', 'trip_notes', ['trip_id'])

    op.create_table('note_tags',
        sa.Column('note_id', sa.UUID(), nullable=False),
        sa.Column('tag_id', sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(['note_id'], ['trip_notes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('note_id', 'tag_id'),
    )


def downgrade() -> None:
    for table in (
        'note_tags', 'trip_notes', 'task_tags', 'task_votes', 'tasks', 'tags',
        'itinerary_template_items', 'itinerary_templates',
    ):
        op.drop_table(table)
    op.drop_constraint('fk_itinerary_sections_trip_city_id', 'itinerary_sections', type_='foreignkey')
    op.drop_column('itinerary_sections', 'trip_city_id')
    op.drop_table('trip_cities')
