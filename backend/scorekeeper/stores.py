"""SQLAlchemy-backed repositories used by the scoring services.

Each write commits on its own. On failure the session is rolled back and the
original exception propagates unchanged.
"""

from datetime import datetime, timezone
from typing import List

from scorekeeper import db
from scorekeeper.models import Game, GameSession, SessionPlayer, Score
from scorekeeper.services.scoring import NotFoundError, ScoreEntry, ScoreKind


def _commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


class GameCatalog:
    def list_games(self) -> List[Game]:
        return Game.query.order_by(Game.id).all()

    def get_game(self, game_id) -> Game:
        game = db.session.get(Game, game_id) if game_id is not None else None
        if not game:
            raise NotFoundError('Game not found')
        return game

    def find_by_name(self, name):
        return Game.query.filter(db.func.lower(Game.name) == name.lower()).first()

    def create_game(self, **fields) -> Game:
        game = Game(**fields)
        db.session.add(game)
        _commit()
        return game


class SessionStore:
    def create_session(self, game_id, roster, score_limit=None) -> GameSession:
        session = GameSession(game_id=game_id, score_limit=score_limit)
        db.session.add(session)
        try:
            db.session.flush()
            for seat, name in enumerate(roster):
                db.session.add(SessionPlayer(session_id=session.id, name=name, seat=seat))
        except Exception:
            db.session.rollback()
            raise
        _commit()
        return session

    def get_session(self, session_id) -> GameSession:
        session = db.session.get(GameSession, session_id) if session_id is not None else None
        if not session:
            raise NotFoundError('Session not found')
        return session

    def get_session_by_code(self, code) -> GameSession:
        session = GameSession.query.filter_by(session_code=(code or '').upper()).first()
        if not session:
            raise NotFoundError('Session not found')
        return session

    def list_players(self, session_id) -> List[SessionPlayer]:
        return SessionPlayer.query.filter_by(session_id=session_id).order_by(SessionPlayer.seat).all()

    def get_player(self, player_id) -> SessionPlayer:
        player = db.session.get(SessionPlayer, player_id) if player_id is not None else None
        if not player:
            raise NotFoundError('Player not found')
        return player

    def complete_session(self, session_id, winner_player_id=None) -> GameSession:
        session = self.get_session(session_id)
        session.is_complete = True
        session.end_time = datetime.now(timezone.utc)
        session.winner_player_id = winner_player_id
        db.session.add(session)
        _commit()
        return session

    def list_completed(self, game_id=None) -> List[GameSession]:
        query = GameSession.query.filter_by(is_complete=True)
        if game_id is not None:
            query = query.filter_by(game_id=game_id)
        return query.order_by(GameSession.end_time).all()


def _to_entry(row: Score) -> ScoreEntry:
    return ScoreEntry(
        session_id=row.session_id,
        player_id=row.player_id,
        round=row.round,
        amount=row.score,
        kind=ScoreKind(row.kind),
        is_reversal=bool(row.is_reversal),
        id=row.id,
        created_at=row.created_at,
    )


def _to_row(entry: ScoreEntry) -> Score:
    return Score(
        session_id=entry.session_id,
        player_id=entry.player_id,
        round=entry.round,
        score=entry.amount,
        kind=entry.kind.value,
        is_reversal=entry.is_reversal,
    )


class ScoreStore:
    def append_score(self, entry: ScoreEntry) -> ScoreEntry:
        row = _to_row(entry)
        db.session.add(row)
        _commit()
        return _to_entry(row)

    def append_scores(self, entries) -> List[ScoreEntry]:
        """Append several entries in one transaction; either all are stored or none."""
        rows = [_to_row(e) for e in entries]
        db.session.add_all(rows)
        _commit()
        return [_to_entry(r) for r in rows]

    def list_scores_for_session(self, session_id) -> List[ScoreEntry]:
        rows = Score.query.filter_by(session_id=session_id).order_by(Score.id).all()
        return [_to_entry(r) for r in rows]

    def list_scores_for_player(self, player_id) -> List[ScoreEntry]:
        rows = Score.query.filter_by(player_id=player_id).order_by(Score.id).all()
        return [_to_entry(r) for r in rows]
