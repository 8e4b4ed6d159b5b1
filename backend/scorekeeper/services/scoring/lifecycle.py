import logging
from typing import Any, Dict, Optional, Sequence

from .entries import ScoreBounds, parse_amount
from .exceptions import SessionClosedError, ValidationError
from .ledger import Ledger
from .standings import leader
from .tracker import GameInfo, Participant, ScoreTracker

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """Opens and completes sessions and hands out their live trackers.

    Trackers of open sessions are kept per session id until the session is
    completed. A tracker that is not cached (e.g. after a restart) is rebuilt
    by replaying the session's scores from the store; its undo/redo history
    starts empty.
    """

    def __init__(self, catalog, session_store, score_store, bounds: Optional[ScoreBounds] = None,
                 strict_rounds: bool = False, default_score_limit: Optional[int] = None):
        self.catalog = catalog
        self.session_store = session_store
        self.score_store = score_store
        self.bounds = bounds
        self.strict_rounds = strict_rounds
        self.default_score_limit = default_score_limit
        self._trackers: Dict[int, ScoreTracker] = {}

    def start(self, game_id, roster: Sequence[str], score_limit: Any = None):
        game = self.catalog.get_game(game_id)
        names = self._validate_roster(game, roster)
        if score_limit is None or score_limit == '':
            score_limit = self.default_score_limit
        else:
            score_limit = parse_amount(score_limit)
        session = self.session_store.create_session(game.id, names, score_limit)
        players = self.session_store.list_players(session.id)
        self._trackers[session.id] = ScoreTracker(
            session.id,
            GameInfo(id=game.id, name=game.name, highest_wins=game.highest_wins),
            [Participant(id=p.id, name=p.name) for p in players],
            self.score_store,
            score_limit=score_limit,
            bounds=self.bounds,
            strict_rounds=self.strict_rounds,
        )
        logger.info("session %s started for game %s with %s players", session.id, game.name, len(names))
        return session

    def tracker(self, session_id) -> ScoreTracker:
        """The tracker for a session, checked against the stored completion flag.

        Only open sessions are cached. A session found complete in the store
        is dropped from the cache and served a closed tracker, so nothing can
        be appended to it even when it was completed by another process.
        """
        session = self.session_store.get_session(session_id)
        if session.is_complete:
            self._trackers.pop(session.id, None)
            return self._rebuild(session)
        tracker = self._trackers.get(session.id)
        if tracker is None:
            tracker = self._rebuild(session)
            self._trackers[session.id] = tracker
        return tracker

    def _rebuild(self, session) -> ScoreTracker:
        game = self.catalog.get_game(session.game_id)
        players = self.session_store.list_players(session.id)
        entries = self.score_store.list_scores_for_session(session.id)
        tracker = ScoreTracker(
            session.id,
            GameInfo(id=game.id, name=game.name, highest_wins=game.highest_wins),
            [Participant(id=p.id, name=p.name) for p in players],
            self.score_store,
            ledger=Ledger(session.id, entries, closed=bool(session.is_complete)),
            score_limit=session.score_limit,
            bounds=self.bounds,
            strict_rounds=self.strict_rounds,
        )
        logger.info("session %s tracker rebuilt from %s stored scores", session.id, len(entries))
        return tracker

    def complete(self, session_id):
        """Mark a session complete and freeze its winner.

        Completing twice raises SessionClosedError.
        """
        session = self.session_store.get_session(session_id)
        if session.is_complete:
            raise SessionClosedError(f"Session {session_id} is already complete")
        tracker = self.tracker(session.id)
        top = leader(tracker.standings())
        session = self.session_store.complete_session(session.id, top.player_id if top else None)
        tracker.close()
        self._trackers.pop(session.id, None)
        logger.info("session %s complete, winner=%s", session.id, top.player_id if top else None)
        return session

    def winner(self, session_id):
        """The frozen winner of a completed session, or None while it is open."""
        session = self.session_store.get_session(session_id)
        if not session.is_complete or session.winner_player_id is None:
            return None
        return self.session_store.get_player(session.winner_player_id)

    def forget(self, session_id) -> None:
        self._trackers.pop(session_id, None)

    def _validate_roster(self, game, roster):
        if not isinstance(roster, (list, tuple)):
            raise ValidationError("Players must be a list of names")
        names = []
        for raw in roster:
            name = str(raw or '').strip()
            if not name:
                raise ValidationError("Player names cannot be blank")
            if name.lower() in (n.lower() for n in names):
                raise ValidationError(f"Player name {name!r} is already taken")
            names.append(name)
        if len(names) < game.min_players:
            raise ValidationError(f"{game.name} needs at least {game.min_players} players")
        if len(names) > game.max_players:
            raise ValidationError(f"{game.name} allows at most {game.max_players} players")
        return names
