"""Standings: totals and ranking derived from the ledger.

Nothing here is cached. Every call walks the ledger again so totals can never
drift from the entries they are built from.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .ledger import Ledger


@dataclass(frozen=True)
class PlayerStanding:
    player_id: int
    name: str
    total: int
    scores_by_round: Tuple[int, ...]

    def to_dict(self):
        return {
            'player_id': self.player_id,
            'name': self.name,
            'total': self.total,
            'scores_by_round': list(self.scores_by_round),
        }


def _round_sums(ledger: Ledger, player_id: int) -> Tuple[int, ...]:
    sums: Dict[int, int] = {}
    for e in ledger.entries_for(player_id):
        sums[e.round] = sums.get(e.round, 0) + e.amount
    if not sums:
        return ()
    return tuple(sums.get(r, 0) for r in range(max(sums) + 1))


def compute_standings(ledger: Ledger, game, players: Sequence) -> List[PlayerStanding]:
    """Rank players by total score.

    ``game`` needs a ``highest_wins`` attribute, each player an ``id`` and a
    ``name``. Descending when highest wins, ascending otherwise. Ties keep the
    order of ``players``.
    """
    rows = []
    for p in players:
        entries = ledger.entries_for(p.id)
        rows.append(PlayerStanding(
            player_id=p.id,
            name=p.name,
            total=sum(e.amount for e in entries),
            scores_by_round=_round_sums(ledger, p.id),
        ))
    return sorted(rows, key=lambda s: s.total, reverse=bool(game.highest_wins))


def any_player_at_or_above_limit(standings: Sequence[PlayerStanding], score_limit: Optional[int]) -> bool:
    # Upper threshold for both win directions.
    if score_limit is None:
        return False
    return any(s.total >= score_limit for s in standings)


def leader(standings: Sequence[PlayerStanding]) -> Optional[PlayerStanding]:
    return standings[0] if standings else None
