import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .entries import ScoreBounds, ScoreEntry, ScoreKind, make_entry
from .exceptions import NotFoundError, ValidationError
from .history import UndoRedoController
from .ledger import Ledger
from .rounds import RoundCompleted, RoundCoordinator
from .standings import PlayerStanding, any_player_at_or_above_limit, compute_standings, leader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Participant:
    id: int
    name: str


@dataclass(frozen=True)
class GameInfo:
    id: int
    name: str
    highest_wins: bool


@dataclass
class SubmitResult:
    entries: List[ScoreEntry]
    rounds_completed: List[RoundCompleted] = field(default_factory=list)
    limit_reached: bool = False
    standings: List[PlayerStanding] = field(default_factory=list)

    @property
    def entry(self) -> Optional[ScoreEntry]:
        return self.entries[-1] if self.entries else None

    def to_dict(self):
        return {
            'entries': [e.to_dict() for e in self.entries],
            'rounds_completed': [c.to_dict() for c in self.rounds_completed],
            'limit_reached': self.limit_reached,
            'standings': [s.to_dict() for s in self.standings],
        }


class ScoreTracker:
    """Live, session-scoped scoring state.

    Owns the ledger, the round coordinator and the undo/redo stacks for one
    session. Every mutation goes to ``score_store`` first; the in-memory
    ledger only changes once the store call has returned, so a failed write
    leaves totals, rounds and history untouched.
    """

    def __init__(self, session_id: int, game: GameInfo, players: Sequence[Participant], score_store,
                 ledger: Optional[Ledger] = None, score_limit: Optional[int] = None,
                 bounds: Optional[ScoreBounds] = None, strict_rounds: bool = False):
        self.session_id = session_id
        self.game = game
        self.players = tuple(players)
        self.score_store = score_store
        self.ledger = ledger if ledger is not None else Ledger(session_id)
        self.score_limit = score_limit
        self.bounds = bounds
        self.strict_rounds = strict_rounds
        self.coordinator = RoundCoordinator([p.id for p in self.players])
        self.coordinator.current_round = self.coordinator.first_open_round(self.ledger)
        if self.ledger.closed:
            self.coordinator.end()
        self.history = UndoRedoController()

    @property
    def closed(self) -> bool:
        return self.ledger.closed

    def player(self, player_id) -> Participant:
        for p in self.players:
            if p.id == player_id:
                return p
        raise NotFoundError(f"Player {player_id} is not in session {self.session_id}")

    def standings(self) -> List[PlayerStanding]:
        return compute_standings(self.ledger, self.game, self.players)

    def limit_reached(self, standings: Optional[List[PlayerStanding]] = None) -> bool:
        if standings is None:
            standings = self.standings()
        return any_player_at_or_above_limit(standings, self.score_limit)

    def next_round_for(self, player_id: int) -> int:
        r = self.coordinator.current_round
        while self.ledger.live_count(player_id, r) > 0:
            r += 1
        return r

    def submit_score(self, player_id, raw_amount: Any, kind: Any = ScoreKind.REGULAR,
                     round: Any = None) -> SubmitResult:
        self.ledger.ensure_open()
        entry = self._build(player_id, raw_amount, kind, round)
        stored = self._append(entry)
        self.history.record(stored)
        return self._after_change([stored])

    def submit_round(self, scores: Iterable[Dict[str, Any]]) -> SubmitResult:
        """Submit one score per player in a single call.

        Every score is validated before anything is appended, so one bad
        value rejects the whole round. The entries are written to the store
        as a single batch and only reach the ledger once it has succeeded.
        """
        self.ledger.ensure_open()
        pending = []
        seen = set()
        for item in scores:
            player_id = item.get('player_id')
            if player_id in seen:
                raise ValidationError(f"Player {player_id} appears twice in the round")
            seen.add(player_id)
            pending.append(self._build(player_id, item.get('score'), item.get('kind'), item.get('round')))
        if not pending:
            raise ValidationError("No scores submitted")
        stored = self.score_store.append_scores(pending)
        for s in stored:
            self.ledger.append(s)
            self.history.record(s)
        return self._after_change(stored)

    def undo(self) -> Optional[SubmitResult]:
        self.ledger.ensure_open()
        stored = self.history.undo(self._append)
        if stored is None:
            return None
        logger.info("session %s undo player=%s round=%s amount=%s",
                    self.session_id, stored.player_id, stored.round, stored.amount)
        return self._after_change([stored])

    def redo(self) -> Optional[SubmitResult]:
        self.ledger.ensure_open()
        stored = self.history.redo(self._append)
        if stored is None:
            return None
        logger.info("session %s redo player=%s round=%s amount=%s",
                    self.session_id, stored.player_id, stored.round, stored.amount)
        return self._after_change([stored])

    def close(self) -> None:
        self.ledger.close()
        self.coordinator.end()
        self.history.clear()

    def to_dict(self):
        standings = self.standings()
        top = leader(standings)
        return {
            'session_id': self.session_id,
            'standings': [s.to_dict() for s in standings],
            'leader': top.to_dict() if top else None,
            'round': self.coordinator.to_dict(self.ledger),
            'score_limit': self.score_limit,
            'limit_reached': self.limit_reached(standings),
            'can_undo': self.history.can_undo and not self.closed,
            'can_redo': self.history.can_redo and not self.closed,
        }

    def _build(self, player_id, raw_amount, kind, round) -> ScoreEntry:
        player = self.player(player_id)
        if round is None:
            round = self.next_round_for(player.id)
        entry = make_entry(self.session_id, player.id, round, raw_amount, kind, self.bounds)
        if self.strict_rounds and entry.kind is ScoreKind.REGULAR and self._live_regular(player.id, entry.round) > 0:
            raise ValidationError(f"{player.name} already has a score for round {entry.round}")
        return entry

    def _live_regular(self, player_id: int, round: int) -> int:
        count = 0
        for e in self.ledger.entries_for(player_id):
            if e.round == round and e.kind is ScoreKind.REGULAR:
                count += -1 if e.is_reversal else 1
        return count

    def _append(self, entry: ScoreEntry) -> ScoreEntry:
        self.ledger.ensure_open()
        stored = self.score_store.append_score(entry)
        return self.ledger.append(stored)

    def _after_change(self, entries: List[ScoreEntry]) -> SubmitResult:
        standings = self.standings()
        completed = self.coordinator.sync(self.ledger, standings)
        return SubmitResult(
            entries=entries,
            rounds_completed=completed,
            limit_reached=self.limit_reached(standings),
            standings=standings,
        )
