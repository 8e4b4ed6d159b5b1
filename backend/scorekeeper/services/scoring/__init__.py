"""Score ledger and standings engine.

Pure(ish) domain logic imported by the HTTP routes and socket handlers.
Nothing in here touches Flask; persistence is reached only through the
store objects handed in by the caller.
"""

from .exceptions import ScoreError, ValidationError, SessionClosedError, NotFoundError
from .entries import ScoreKind, ScoreEntry, ScoreBounds, make_entry, parse_amount
from .ledger import Ledger
from .standings import PlayerStanding, compute_standings, any_player_at_or_above_limit, leader
from .rounds import RoundState, RoundCompleted, RoundCoordinator
from .history import UndoRedoController
from .tracker import ScoreTracker, SubmitResult
from .lifecycle import SessionLifecycle

__all__ = [
    'ScoreError', 'ValidationError', 'SessionClosedError', 'NotFoundError',
    'ScoreKind', 'ScoreEntry', 'ScoreBounds', 'make_entry', 'parse_amount',
    'Ledger',
    'PlayerStanding', 'compute_standings', 'any_player_at_or_above_limit', 'leader',
    'RoundState', 'RoundCompleted', 'RoundCoordinator',
    'UndoRedoController',
    'ScoreTracker', 'SubmitResult',
    'SessionLifecycle',
]
