"""Initial schema: profiles, trips, itinerary, polls, groups, social, budget, forms

Revision ID: initial_001
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = 'initial_001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid_pk():
    return sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()'))


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def upgrade() -> None:
    # --- Profiles & cities ---
    op.create_table('profiles',
        _uuid_pk(),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('username', sa.String(length=50), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_guest', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('guest_token', sa.String(length=64), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('username'),
    )
    op.create_index('ix_profiles_guest_token', 'profiles', ['guest_token'], unique=True)

    op.create_table('cities',
        _uuid_pk(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('country', sa.String(length=100), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_cities_name', 'cities', ['name'])

    # --- Trips ---
    op.create_table('trips',
        _uuid_pk(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.UUID(), nullable=False),
        sa.Column('city_id', sa.UUID(), nullable=True),
        sa.Column('destination_name', sa.String(length=100), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('duration_days', sa.Integer(), nullable=True),
        sa.Column('budget', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='USD'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='planning'),
        sa.Column('trip_type', sa.String(length=20), nullable=True),
        sa.Column('privacy_setting', sa.String(length=20), nullable=False, server_default='private'),
        sa.Column('public_slug', sa.String(length=80), nullable=True),
        sa.Column('cover_image_url', sa.String(length=500), nullable=True),
        sa.Column('cover_image_position_y', sa.Integer(), nullable=True),
        sa.Column('playlist_url', sa.String(length=500), nullable=True),
        sa.Column('is_guest', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.ForeignKeyConstraint(['city_id'], ['cities.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('public_slug'),
    )

    op.create_table('trip_members',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='viewer'),
        sa.Column('invited_by', sa.UUID(), nullable=True),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['invited_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('trip_id', 'user_id', name='uq_trip_members_trip_user'),
    )
    op.create_index('ix_trip_members_trip_id', 'trip_members', ['trip_id'])
    op.create_index('ix_trip_members_user_id', 'trip_members', ['user_id'])

    op.create_table('access_requests',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('requested_role', sa.String(length=20), nullable=False, server_default='viewer'),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('resolved_by', sa.UUID(), nullable=True),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['resolved_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_access_requests_trip_id', 'access_requests', ['trip_id'])

    # --- Itinerary ---
    op.create_table('itinerary_sections',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('day_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_itinerary_sections_trip_id', 'itinerary_sections', ['trip_id'])

    op.create_table('itinerary_items',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('section_id', sa.UUID(), nullable=True),
        sa.Column('day_number', sa.Integer(), nullable=True),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('item_type', sa.String(length=50), nullable=False, server_default='activity'),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='suggested'),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('place_name', sa.String(length=255), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('place_id', sa.String(length=255), nullable=True),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('estimated_cost', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('votes_up', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('votes_down', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by', sa.UUID(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['section_id'], ['itinerary_sections.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_itinerary_items_trip_id', 'itinerary_items', ['trip_id'])

    op.create_table('itinerary_item_votes',
        _uuid_pk(),
        sa.Column('itinerary_item_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('vote', sa.String(length=10), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['itinerary_item_id'], ['itinerary_items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('itinerary_item_id', 'user_id', name='uq_item_votes_item_user'),
    )
    op.create_index('ix_itinerary_item_votes_itinerary_item_id', 'itinerary_item_votes', ['itinerary_item_id'])

    # --- Polls ---
    op.create_table('trip_vote_polls',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.UUID(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_trip_vote_polls_trip_id', 'trip_vote_polls', ['trip_id'])

    op.create_table('trip_vote_options',
        _uuid_pk(),
        sa.Column('poll_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
        sa.ForeignKeyConstraint(['poll_id'], ['trip_vote_polls.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_trip_vote_options_poll_id', 'trip_vote_options', ['poll_id'])

    op.create_table('trip_votes',
        _uuid_pk(),
        sa.Column('poll_id', sa.UUID(), nullable=False),
        sa.Column('option_id', sa.UUID(), nullable=False),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['poll_id'], ['trip_vote_polls.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['option_id'], ['trip_vote_options.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('poll_id', 'user_id', name='uq_trip_votes_poll_user'),
    )
    op.create_index('ix_trip_votes_poll_id', 'trip_votes', ['poll_id'])

    # --- Groups & idea board ---
    op.create_table('groups',
        _uuid_pk(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('emoji', sa.String(length=16), nullable=True),
        sa.Column('visibility', sa.String(length=20), nullable=False, server_default='private'),
        sa.Column('slug', sa.String(length=80), nullable=False),
        sa.Column('created_by', sa.UUID(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table('group_members',
        _uuid_pk(),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='member'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('group_id', 'user_id', name='uq_group_members_group_user'),
    )
    op.create_index('ix_group_members_group_id', 'group_members', ['group_id'])
    op.create_index('ix_group_members_user_id', 'group_members', ['user_id'])

    op.create_table('group_plans',
        _uuid_pk(),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=80), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='brainstorming'),
        sa.Column('created_by', sa.UUID(), nullable=False),
        sa.Column('trip_id', sa.UUID(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_group_plans_group_id', 'group_plans', ['group_id'])

    op.create_table('group_plan_ideas',
        _uuid_pk(),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('plan_id', sa.UUID(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('created_by', sa.UUID(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('meta', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('position', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('votes_up', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('votes_down', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['plan_id'], ['group_plans.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_group_plan_ideas_group_id', 'group_plan_ideas', ['group_id'])
    op.create_index('ix_group_plan_ideas_plan_id', 'group_plan_ideas', ['plan_id'])

    op.create_table('group_plan_idea_votes',
        _uuid_pk(),
        sa.Column('idea_id', sa.UUID(), nullable=False),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('vote_type', sa.String(length=10), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['idea_id'], ['group_plan_ideas.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('idea_id', 'user_id', name='uq_idea_votes_idea_user'),
    )
    op.create_index('ix_group_plan_idea_votes_idea_id', 'group_plan_idea_votes', ['idea_id'])

    op.create_table('group_plan_readiness',
        _uuid_pk(),
        sa.Column('plan_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('is_ready', sa.Boolean(), nullable=False, server_default='false'),
        _updated_at(),
        sa.ForeignKeyConstraint(['plan_id'], ['group_plans.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('plan_id', 'user_id', name='uq_plan_readiness_plan_user'),
    )
    op.create_index('ix_group_plan_readiness_plan_id', 'group_plan_readiness', ['plan_id'])

    # --- Likes, comments, invitations, notifications ---
    op.create_table('likes',
        _uuid_pk(),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('item_id', sa.UUID(), nullable=False),
        sa.Column('item_type', sa.String(length=30), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'item_id', 'item_type', name='uq_likes_user_item'),
    )
    op.create_index('ix_likes_user_id', 'likes', ['user_id'])
    op.create_index('ix_likes_item_id', 'likes', ['item_id'])

    op.create_table('comments',
        _uuid_pk(),
        sa.Column('content_type', sa.String(length=30), nullable=False),
        sa.Column('content_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_content_id', 'comments', ['content_id'])

    op.create_table('invitations',
        _uuid_pk(),
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('invitation_type', sa.String(length=10), nullable=False),
        sa.Column('trip_id', sa.UUID(), nullable=True),
        sa.Column('group_id', sa.UUID(), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='viewer'),
        sa.Column('invited_by', sa.UUID(), nullable=True),
        sa.Column('invitation_status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('accepted_by', sa.UUID(), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['invited_by'], ['profiles.id']),
        sa.ForeignKeyConstraint(['accepted_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_invitations_token', 'invitations', ['token'], unique=True)

    op.create_table('notifications',
        _uuid_pk(),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('reference_type', sa.String(length=50), nullable=True),
        sa.Column('reference_id', sa.UUID(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    # --- Budget ---
    op.create_table('expenses',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='USD'),
        sa.Column('category', sa.String(length=30), nullable=False, server_default='other'),
        sa.Column('paid_by', sa.UUID(), nullable=False),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.UUID(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['paid_by'], ['profiles.id']),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expenses_trip_id', 'expenses', ['trip_id'])

    # --- Forms & feedback ---
    op.create_table('forms',
        _uuid_pk(),
        sa.Column('trip_id', sa.UUID(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('visibility', sa.String(length=20), nullable=False, server_default='members'),
        sa.Column('form_type', sa.String(length=20), nullable=False, server_default='general'),
        sa.Column('allow_anonymous', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_template', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('template_id', sa.UUID(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('settings', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_by', sa.UUID(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['template_id'], ['forms.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_forms_trip_id', 'forms', ['trip_id'])

    op.create_table('form_questions',
        _uuid_pk(),
        sa.Column('form_id', sa.UUID(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('label', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('question_type', sa.String(length=20), nullable=False, server_default='text'),
        sa.Column('required', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('options', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_form_questions_form_id', 'form_questions', ['form_id'])

    op.create_table('form_responses',
        _uuid_pk(),
        sa.Column('form_id', sa.UUID(), nullable=False),
        sa.Column('respondent_id', sa.UUID(), nullable=True),
        sa.Column('answers', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['respondent_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_form_responses_form_id', 'form_responses', ['form_id'])

    op.create_table('feedback',
        _uuid_pk(),
        sa.Column('user_id', sa.UUID(), nullable=True),
        sa.Column('feedback_type', sa.String(length=20), nullable=False, server_default='general'),
        sa.Column('rating', sa.SmallInteger(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('page_url', sa.String(length=500), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    for table in (
        'feedback', 'form_responses', 'form_questions', 'forms', 'expenses',
        'notifications', 'invitations', 'comments', 'likes',
        'group_plan_readiness', 'group_plan_idea_votes', 'group_plan_ideas', 'group_plans',
        'group_members', 'groups', 'trip_votes', 'trip_vote_options', 'trip_vote_polls',
        'itinerary_item_votes', 'itinerary_items', 'itinerary_sections',
        'access_requests', 'trip_members', 'trips', 'cities', 'profiles',
    ):
        op.drop_table(table)
