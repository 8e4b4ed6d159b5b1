import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .exceptions import ValidationError


# Plain ASCII decimal, optionally with a fractional part.
_DECIMAL = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?")


class ScoreKind(str, Enum):
    REGULAR = 'regular'
    PENALTY = 'penalty'
    BONUS = 'bonus'

    @classmethod
    def parse(cls, value: Any) -> 'ScoreKind':
        if value is None or value == '':
            return cls.REGULAR
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown score kind {value!r}") from None


@dataclass(frozen=True)
class ScoreEntry:
    session_id: int
    player_id: int
    round: int
    amount: int
    kind: ScoreKind = ScoreKind.REGULAR
    is_reversal: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = field(default=None, compare=False)

    def inverse(self) -> 'ScoreEntry':
        """The entry that cancels this one out when appended."""
        return ScoreEntry(
            session_id=self.session_id,
            player_id=self.player_id,
            round=self.round,
            amount=-self.amount,
            kind=self.kind,
            is_reversal=True,
        )

    def reapplied(self) -> 'ScoreEntry':
        """A fresh, unpersisted copy of this entry."""
        return ScoreEntry(
            session_id=self.session_id,
            player_id=self.player_id,
            round=self.round,
            amount=self.amount,
            kind=self.kind,
            is_reversal=self.is_reversal,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'session_id': self.session_id,
            'player_id': self.player_id,
            'round': self.round,
            'amount': self.amount,
            'kind': self.kind.value,
            'is_reversal': self.is_reversal,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ScoreBounds:
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def check(self, amount: int) -> None:
        if self.minimum is not None and amount < self.minimum:
            raise ValidationError(f"Score {amount} is below the minimum of {self.minimum}")
        if self.maximum is not None and amount > self.maximum:
            raise ValidationError(f"Score {amount} is above the maximum of {self.maximum}")


def parse_amount(raw: Any) -> int:
    """Parse a raw score input into an integer.

    Accepts ints, integral floats and numeric strings. Empty, boolean,
    non-numeric, non-finite and fractional input raises ValidationError.
    """
    if raw is None or isinstance(raw, bool):
        raise ValidationError("Score is required and must be a number")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ValidationError("Score is required and must be a number")
        if not _DECIMAL.fullmatch(text):
            raise ValidationError(f"Score {raw!r} is not a number")
        if '.' not in text:
            return int(text)
        raw = float(text)
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise ValidationError("Score must be a finite number")
        if not raw.is_integer():
            raise ValidationError(f"Score {raw} must be a whole number")
        return int(raw)
    raise ValidationError(f"Score {raw!r} is not a number")


def parse_round(raw: Any) -> int:
    if isinstance(raw, bool) or (isinstance(raw, str) and not _DECIMAL.fullmatch(raw.strip())):
        raise ValidationError("Round must be a non-negative integer")
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Round {raw!r} must be a non-negative integer") from None
    if value < 0 or (isinstance(raw, float) and not raw.is_integer()):
        raise ValidationError(f"Round {raw!r} must be a non-negative integer")
    return value


def make_entry(session_id: int, player_id: int, round: Any, raw_amount: Any,
               kind: Any = ScoreKind.REGULAR, bounds: Optional[ScoreBounds] = None) -> ScoreEntry:
    """Validate one score submission and build the entry to append.

    Penalties are always stored as a negative magnitude. Regular and bonus
    entries keep the input as given; bonus is a label, not a sign change.
    """
    kind = ScoreKind.parse(kind)
    amount = parse_amount(raw_amount)
    if kind is ScoreKind.PENALTY:
        amount = -abs(amount)
    if bounds is not None:
        bounds.check(amount)
    return ScoreEntry(
        session_id=session_id,
        player_id=player_id,
        round=parse_round(round),
        amount=amount,
        kind=kind,
    )
