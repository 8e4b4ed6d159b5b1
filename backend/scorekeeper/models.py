from datetime import datetime, timezone
import string
import random

from scorekeeper import db


def _now():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    min_players = db.Column(db.Integer, nullable=False, default=1)
    max_players = db.Column(db.Integer, nullable=False, default=10)
    highest_wins = db.Column(db.Boolean, nullable=False, default=True)
    is_custom = db.Column(db.Boolean, nullable=False, default=False)
    sessions = db.relationship('GameSession', back_populates='game', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'min_players': self.min_players,
            'max_players': self.max_players,
            'highest_wins': self.highest_wins,
            'is_custom': self.is_custom,
        }


def generate_session_code(length=4):
    """Generate a unique, short session code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not GameSession.query.filter_by(session_code=code).first():
            return code


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False)
    session_code = db.Column(db.String(4), unique=True, index=True, nullable=False)
    start_time = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    end_time = db.Column(db.DateTime(timezone=True), nullable=True)
    is_complete = db.Column(db.Boolean, nullable=False, default=False)
    score_limit = db.Column(db.Integer, nullable=True)
    # Frozen at completion; later reads never re-rank.
    winner_player_id = db.Column(
        db.Integer,
        db.ForeignKey('session_player.id', name='fk_game_session_winner_player_id', use_alter=True),
        nullable=True,
    )
    game = db.relationship('Game', back_populates='sessions')
    players = db.relationship(
        'SessionPlayer',
        foreign_keys='SessionPlayer.session_id',
        back_populates='session',
        order_by='SessionPlayer.seat',
    )

    def __init__(self, **kwargs):
        super(GameSession, self).__init__(**kwargs)
        if not self.session_code:
            self.session_code = generate_session_code()

    def to_dict(self):
        return {
            'id': self.id,
            'game_id': self.game_id,
            'session_code': self.session_code,
            'start_time': _iso(self.start_time),
            'end_time': _iso(self.end_time),
            'is_complete': self.is_complete,
            'score_limit': self.score_limit,
            'winner_player_id': self.winner_player_id,
            'players': [p.to_dict() for p in self.players],
        }


class SessionPlayer(db.Model):
    __tablename__ = 'session_player'
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    name = db.Column(db.String(64), nullable=False)
    seat = db.Column(db.Integer, nullable=False, default=0)
    join_time = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    session = db.relationship('GameSession', foreign_keys=[session_id], back_populates='players')

    def to_dict(self):
        return {
            'id': self.id,
            'session_id': self.session_id,
            'name': self.name,
            'seat': self.seat,
        }


class Score(db.Model):
    __tablename__ = 'score'
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('session_player.id'), nullable=False, index=True)
    round = db.Column(db.Integer, nullable=False)
    score = db.Column(db.Integer, nullable=False)
    kind = db.Column(db.String(16), nullable=False, default='regular')
    is_reversal = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
