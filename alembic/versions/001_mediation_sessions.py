"""Mediation sessions, participants, messages, partnerships and mediator settings

Revision ID: 001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None  # This is the first migration
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'partnerships',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user1_id', sa.String(255), nullable=False),
        sa.Column('user2_id', sa.String(255), nullable=True),
        sa.Column('invite_code', sa.String(32), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_partnerships_user1_id', 'partnerships', ['user1_id'])
    op.create_index('ix_partnerships_user2_id', 'partnerships', ['user2_id'])
    op.create_index('ix_partnerships_invite_code', 'partnerships', ['invite_code'], unique=True)

    op.create_table(
        'mediation_sessions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column(
            'partnership_id',
            sa.String(),
            sa.ForeignKey('partnerships.id', ondelete='CASCADE'),
            nullable=True,
        ),
        sa.Column('initiator_id', sa.String(255), nullable=False),
        sa.Column('topic', sa.Text(), nullable=False),
        sa.Column('stage', sa.String(40), nullable=False, server_default='intake'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('session_mode', sa.String(20), nullable=False, server_default='solo'),
        sa.Column('invite_code', sa.String(16), nullable=True),
        sa.Column('invite_expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_mediation_sessions_partnership_id', 'mediation_sessions', ['partnership_id'])
    op.create_index('ix_mediation_sessions_initiator_id', 'mediation_sessions', ['initiator_id'])
    op.create_index('ix_mediation_sessions_status', 'mediation_sessions', ['status'])
    op.create_index('ix_mediation_sessions_updated_at', 'mediation_sessions', ['updated_at'])
    op.create_index('ix_mediation_sessions_invite_code', 'mediation_sessions', ['invite_code'], unique=True)

    # Slot 1 is the initiator, slot 2 the partner; the constraints cap a session at two members
    op.create_table(
        'session_participants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'session_id',
            sa.String(),
            sa.ForeignKey('mediation_sessions.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('slot', sa.Integer(), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('last_seen_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('session_id', 'slot', name='uq_session_participant_slot'),
        sa.UniqueConstraint('session_id', 'user_id', name='uq_session_participant_user'),
        sa.CheckConstraint('slot IN (1, 2)', name='ck_session_participant_slot'),
    )
    op.create_index('ix_session_participants_session_id', 'session_participants', ['session_id'])
    op.create_index('ix_session_participants_user_id', 'session_participants', ['user_id'])

    op.create_table(
        'session_messages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'session_id',
            sa.String(),
            sa.ForeignKey('mediation_sessions.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('user_id', sa.String(255), nullable=True),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('stage', sa.String(40), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_session_messages_session_id', 'session_messages', ['session_id'])
    op.create_index('ix_session_messages_created_at', 'session_messages', ['created_at'])

    op.create_table(
        'mediator_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('tone', sa.String(20), nullable=False, server_default='warm'),
        sa.Column('formality', sa.String(20), nullable=False, server_default='balanced'),
        sa.Column('response_length', sa.String(20), nullable=False, server_default='moderate'),
        sa.Column('use_emoji', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('use_metaphors', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('cultural_context', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_mediator_settings_user_id', 'mediator_settings', ['user_id'], unique=True)


def downgrade():
    op.drop_table('mediator_settings')
    op.drop_table('session_messages')
    op.drop_table('session_participants')
    op.drop_table('mediation_sessions')
    op.drop_table('partnerships')
