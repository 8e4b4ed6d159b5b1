import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .ledger import Ledger
from .standings import PlayerStanding

logger = logging.getLogger(__name__)


class RoundState(str, Enum):
    """Resting states of a round.

    round_complete is never held: a round that closes hands over to the next
    one in the same change, and the RoundCompleted notice is its only trace.
    """

    AWAITING_ENTRIES = 'awaiting_entries'
    GAME_ENDED = 'game_ended'


@dataclass(frozen=True)
class RoundCompleted:
    """Transient notice that a round closed. Never written to the ledger."""

    round: int
    leader: Optional[PlayerStanding]

    def to_dict(self):
        return {
            'round': self.round,
            'leader': self.leader.to_dict() if self.leader else None,
        }


class RoundCoordinator:
    """Tracks the current round of a session.

    A round is complete once every player on the roster has a live entry for
    it (forward entries outnumber reversals). Completion moves straight on to
    the next round, so the only resting states are awaiting_entries and
    game_ended.
    """

    def __init__(self, player_ids: Sequence[int], current_round: int = 0):
        self.player_ids = tuple(player_ids)
        self.current_round = current_round
        self.ended = False

    @property
    def state(self) -> RoundState:
        return RoundState.GAME_ENDED if self.ended else RoundState.AWAITING_ENTRIES

    def submitted(self, ledger: Ledger, round: int) -> List[int]:
        return [pid for pid in self.player_ids if ledger.live_count(pid, round) > 0]

    def pending(self, ledger: Ledger, round: Optional[int] = None) -> List[int]:
        round = self.current_round if round is None else round
        return [pid for pid in self.player_ids if ledger.live_count(pid, round) <= 0]

    def is_round_complete(self, ledger: Ledger, round: int) -> bool:
        if not self.player_ids:
            return False
        return len(self.submitted(ledger, round)) == len(self.player_ids)

    def first_open_round(self, ledger: Ledger) -> int:
        r = 0
        while self.is_round_complete(ledger, r):
            r += 1
        return r

    def sync(self, ledger: Ledger, standings: Sequence[PlayerStanding]) -> List[RoundCompleted]:
        """Re-evaluate the current round after the ledger changed.

        Returns one RoundCompleted per round closed by the change, each naming
        the leader as of now. An undo can re-open a round, which moves the
        current round back without any notice.
        """
        if self.ended:
            return []
        previous = self.current_round
        self.current_round = self.first_open_round(ledger)
        if self.current_round < previous:
            logger.info("round %s re-opened (was on round %s)", self.current_round, previous)
            return []
        top = standings[0] if standings else None
        completed = [RoundCompleted(round=r, leader=top) for r in range(previous, self.current_round)]
        for c in completed:
            logger.info("round %s complete, leader=%s", c.round, top.player_id if top else None)
        return completed

    def end(self) -> None:
        self.ended = True

    def to_dict(self, ledger: Ledger):
        return {
            'current_round': self.current_round,
            'state': self.state.value,
            'pending_player_ids': [] if self.ended else self.pending(ledger),
        }
