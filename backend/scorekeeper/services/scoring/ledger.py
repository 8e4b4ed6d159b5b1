from typing import Iterable, Iterator, Tuple

from .entries import ScoreEntry
from .exceptions import SessionClosedError


class Ledger:
    """Append-only log of score entries for one session.

    Entries are never edited or removed. Undo appends an inverse entry, so the
    full history can always be replayed.
    """

    def __init__(self, session_id: int, entries: Iterable[ScoreEntry] = (), closed: bool = False):
        self.session_id = session_id
        self._entries = []
        for entry in entries:
            self._check_session(entry)
            self._entries.append(entry)
        self._closed = closed

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    def ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Session {self.session_id} is already complete")

    def append(self, entry: ScoreEntry) -> ScoreEntry:
        self.ensure_open()
        self._check_session(entry)
        self._entries.append(entry)
        return entry

    def entries_for(self, player_id: int) -> Tuple[ScoreEntry, ...]:
        return tuple(e for e in self._entries if e.player_id == player_id)

    def all_entries(self) -> Tuple[ScoreEntry, ...]:
        return tuple(self._entries)

    def live_count(self, player_id: int, round: int) -> int:
        """Forward entries minus reversals for one (player, round)."""
        count = 0
        for e in self._entries:
            if e.player_id == player_id and e.round == round:
                count += -1 if e.is_reversal else 1
        return count

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ScoreEntry]:
        return iter(tuple(self._entries))

    def _check_session(self, entry: ScoreEntry) -> None:
        if entry.session_id != self.session_id:
            raise ValueError(
                f"Entry for session {entry.session_id} appended to ledger of session {self.session_id}"
            )
