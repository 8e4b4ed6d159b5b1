from typing import Callable, List, Optional

from .entries import ScoreEntry

Append = Callable[[ScoreEntry], ScoreEntry]


class UndoRedoController:
    """Undo and redo stacks layered over an append-only ledger.

    ``append`` persists an entry and returns the stored copy. If it raises,
    both stacks are left exactly as they were.
    """

    def __init__(self):
        self.undo_stack: List[ScoreEntry] = []
        self.redo_stack: List[ScoreEntry] = []

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def record(self, entry: ScoreEntry) -> None:
        """Track a new forward entry. Any redo branch is dropped."""
        self.undo_stack.append(entry)
        self.redo_stack.clear()

    def undo(self, append: Append) -> Optional[ScoreEntry]:
        if not self.undo_stack:
            return None
        entry = self.undo_stack[-1]
        stored = append(entry.inverse())
        self.undo_stack.pop()
        self.redo_stack.append(entry)
        return stored

    def redo(self, append: Append) -> Optional[ScoreEntry]:
        if not self.redo_stack:
            return None
        entry = self.redo_stack[-1]
        stored = append(entry.reapplied())
        self.redo_stack.pop()
        self.undo_stack.append(stored)
        return stored

    def clear(self) -> None:
        self.undo_stack.clear()
        self.redo_stack.clear()
