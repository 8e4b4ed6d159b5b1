"""create game, game_session, session_player and score tables

Revision ID: 3a7c9e21b4f0
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7c9e21b4f0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'game',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('min_players', sa.Integer(), nullable=False),
        sa.Column('max_players', sa.Integer(), nullable=False),
        sa.Column('highest_wins', sa.Boolean(), nullable=False),
        sa.Column('is_custom', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'game_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('session_code', sa.String(length=4), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_complete', sa.Boolean(), nullable=False),
        sa.Column('score_limit', sa.Integer(), nullable=True),
        sa.Column('winner_player_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['game_id'], ['game.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_session') as batch_op:
        batch_op.create_index('ix_game_session_session_code', ['session_code'], unique=True)

    op.create_table(
        'session_player',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('seat', sa.Integer(), nullable=False),
        sa.Column('join_time', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['game_session.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('session_player') as batch_op:
        batch_op.create_index('ix_session_player_session_id', ['session_id'], unique=False)

    # Added after session_player exists; the two tables reference each other.
    with op.batch_alter_table('game_session') as batch_op:
        batch_op.create_foreign_key(
            'fk_game_session_winner_player_id', 'session_player', ['winner_player_id'], ['id']
        )

    op.create_table(
        'score',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.Integer(), nullable=False),
        sa.Column('round', sa.Integer(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('kind', sa.String(length=16), nullable=False),
        sa.Column('is_reversal', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['player_id'], ['session_player.id']),
        sa.ForeignKeyConstraint(['session_id'], ['game_session.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('score') as batch_op:
        batch_op.create_index('ix_score_session_id', ['session_id'], unique=False)
        batch_op.create_index('ix_score_player_id', ['player_id'], unique=False)


def downgrade():
    op.drop_table('score')
    with op.batch_alter_table('game_session') as batch_op:
        batch_op.drop_constraint('fk_game_session_winner_player_id', type_='foreignkey')
    op.drop_table('session_player')
    op.drop_table('game_session')
    op.drop_table('game')
