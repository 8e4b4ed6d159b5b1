import pytest

from scorekeeper.services.scoring import (
    Ledger,
    NotFoundError,
    RoundCoordinator,
    RoundState,
    ScoreBounds,
    ScoreEntry,
    ScoreKind,
    ScoreTracker,
    SessionClosedError,
    UndoRedoController,
    ValidationError,
    any_player_at_or_above_limit,
    compute_standings,
    make_entry,
    parse_amount,
)
from scorekeeper.services.scoring.tracker import GameInfo, Participant


class MemoryScoreStore:
    """Stands in for the database-backed store; assigns ids like a table would."""

    def __init__(self):
        self.rows = []
        self.fail_next = False
        self.fail_on_row = None

    def append_score(self, entry):
        if self.fail_next:
            self.fail_next = False
            raise RuntimeError('store unavailable')
        stored = ScoreEntry(
            session_id=entry.session_id,
            player_id=entry.player_id,
            round=entry.round,
            amount=entry.amount,
            kind=entry.kind,
            is_reversal=entry.is_reversal,
            id=len(self.rows) + 1,
        )
        self.rows.append(stored)
        return stored

    def append_scores(self, entries):
        # Stage the batch so a failure part-way stores nothing, like a rolled back commit.
        staged = []
        for entry in entries:
            if self.fail_on_row == len(staged) + 1:
                self.fail_on_row = None
                raise RuntimeError('store unavailable')
            staged.append(ScoreEntry(
                session_id=entry.session_id,
                player_id=entry.player_id,
                round=entry.round,
                amount=entry.amount,
                kind=entry.kind,
                is_reversal=entry.is_reversal,
                id=len(self.rows) + len(staged) + 1,
            ))
        self.rows.extend(staged)
        return staged


HIGHEST = GameInfo(id=1, name='Poker', highest_wins=True)
LOWEST = GameInfo(id=2, name='UNO', highest_wins=False)
A = Participant(id=1, name='A')
B = Participant(id=2, name='B')
C = Participant(id=3, name='C')


def make_tracker(game=HIGHEST, players=(A, B), **kwargs):
    return ScoreTracker(10, game, list(players), MemoryScoreStore(), **kwargs)


def totals(tracker):
    return [(s.name, s.total) for s in tracker.standings()]


# ---- Score entry ----

def test_penalty_is_always_negative():
    assert make_entry(1, 1, 0, 7, 'penalty').amount == -7
    assert make_entry(1, 1, 0, -7, 'penalty').amount == -7
    assert make_entry(1, 1, 0, '7', ScoreKind.PENALTY).amount == -7


def test_bonus_and_regular_keep_sign():
    assert make_entry(1, 1, 0, 5, 'bonus').amount == 5
    assert make_entry(1, 1, 0, -5, 'bonus').amount == -5
    assert make_entry(1, 1, 0, -5, 'regular').amount == -5
    assert make_entry(1, 1, 0, 3, None).kind is ScoreKind.REGULAR


@pytest.mark.parametrize('raw', ['', '   ', None, 'abc', 'nan', 'inf', True, 2.5, '1.5', [], {},
                                 '1_000', '١٢', '1e3', float('inf')])
def test_malformed_amounts_are_rejected(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_numeric_strings_and_integral_floats_parse():
    assert parse_amount(' 12 ') == 12
    assert parse_amount('-4') == -4
    assert parse_amount('3.0') == 3
    assert parse_amount(8.0) == 8


def test_bad_kind_and_round_are_rejected():
    with pytest.raises(ValidationError):
        make_entry(1, 1, 0, 5, 'double')
    with pytest.raises(ValidationError):
        make_entry(1, 1, -1, 5)
    with pytest.raises(ValidationError):
        make_entry(1, 1, 'first', 5)
    with pytest.raises(ValidationError):
        make_entry(1, 1, '1_0', 5)
    assert make_entry(1, 1, ' 2 ', 5).round == 2


def test_bounds_apply_to_stored_amount():
    bounds = ScoreBounds(minimum=-10, maximum=100)
    assert make_entry(1, 1, 0, 100, bounds=bounds).amount == 100
    with pytest.raises(ValidationError):
        make_entry(1, 1, 0, 101, bounds=bounds)
    with pytest.raises(ValidationError):
        make_entry(1, 1, 0, 11, 'penalty', bounds=bounds)


# ---- Ledger ----

def test_ledger_is_append_only_and_ordered():
    ledger = Ledger(1)
    first = ledger.append(ScoreEntry(1, 1, 0, 10))
    ledger.append(ScoreEntry(1, 2, 0, 4))
    ledger.append(ScoreEntry(1, 1, 1, -3))
    assert ledger.all_entries()[0] == first
    assert [e.amount for e in ledger.entries_for(1)] == [10, -3]
    assert len(ledger) == 3


def test_closed_ledger_rejects_appends():
    ledger = Ledger(1)
    ledger.close()
    with pytest.raises(SessionClosedError):
        ledger.append(ScoreEntry(1, 1, 0, 10))
    assert len(ledger) == 0


def test_ledger_rejects_other_sessions():
    with pytest.raises(ValueError):
        Ledger(1).append(ScoreEntry(2, 1, 0, 10))


# ---- Standings ----

def _ledger_with_totals(values):
    ledger = Ledger(1)
    for pid, amount in enumerate(values, start=1):
        ledger.append(ScoreEntry(1, pid, 0, amount))
    return ledger


def test_ranking_direction():
    ledger = _ledger_with_totals([10, 30, 20])
    players = [A, B, C]
    assert [s.total for s in compute_standings(ledger, HIGHEST, players)] == [30, 20, 10]
    assert [s.total for s in compute_standings(ledger, LOWEST, players)] == [10, 20, 30]


def test_ties_keep_roster_order():
    ledger = _ledger_with_totals([5, 9, 5])
    for game in (HIGHEST, LOWEST):
        names = [s.name for s in compute_standings(ledger, game, [A, B, C]) if s.total == 5]
        assert names == ['A', 'C']


def test_standings_are_recomputed_identically():
    ledger = _ledger_with_totals([10, 30, 20])
    assert compute_standings(ledger, HIGHEST, [A, B, C]) == compute_standings(ledger, HIGHEST, [A, B, C])


def test_scores_by_round_sums_each_round():
    ledger = Ledger(1)
    ledger.append(ScoreEntry(1, 1, 0, 10))
    ledger.append(ScoreEntry(1, 1, 2, 5))
    ledger.append(ScoreEntry(1, 1, 2, 1, ScoreKind.BONUS))
    standing = compute_standings(ledger, HIGHEST, [A])[0]
    assert standing.scores_by_round == (10, 0, 6)
    assert standing.total == 16


def test_score_limit_ignores_win_direction():
    ledger = _ledger_with_totals([99, 100])
    for game in (HIGHEST, LOWEST):
        standings = compute_standings(ledger, game, [A, B])
        assert any_player_at_or_above_limit(standings, 100)
        assert not any_player_at_or_above_limit(standings, 101)
        assert not any_player_at_or_above_limit(standings, None)


# ---- Rounds ----

def test_round_completes_only_after_last_player():
    tracker = make_tracker()
    first = tracker.submit_score(A.id, 10, round=0)
    assert first.rounds_completed == []
    assert tracker.coordinator.current_round == 0
    assert tracker.coordinator.pending(tracker.ledger) == [B.id]

    second = tracker.submit_score(B.id, 15, round=0)
    assert [c.round for c in second.rounds_completed] == [0]
    assert second.rounds_completed[0].leader.name == 'B'
    assert tracker.coordinator.current_round == 1
    assert tracker.coordinator.state is RoundState.AWAITING_ENTRIES


def test_round_defaults_to_players_next_open_round():
    tracker = make_tracker()
    assert tracker.submit_score(A.id, 1).entry.round == 0
    assert tracker.submit_score(A.id, 1).entry.round == 1
    assert tracker.submit_score(B.id, 1).entry.round == 0


def test_undo_reopens_completed_round():
    tracker = make_tracker()
    tracker.submit_score(A.id, 10, round=0)
    tracker.submit_score(B.id, 15, round=0)
    assert tracker.coordinator.current_round == 1
    tracker.undo()
    assert tracker.coordinator.current_round == 0
    assert tracker.coordinator.pending(tracker.ledger) == [B.id]
    redone = tracker.redo()
    assert [c.round for c in redone.rounds_completed] == [0]


def test_coordinator_with_empty_roster_never_completes():
    coordinator = RoundCoordinator([])
    assert coordinator.first_open_round(Ledger(1)) == 0


def test_limit_reached_is_reported_on_submit():
    tracker = make_tracker(score_limit=50)
    assert not tracker.submit_score(A.id, 49).limit_reached
    assert tracker.submit_score(B.id, 50).limit_reached


# ---- Undo / redo ----

def test_undo_then_redo_restores_total():
    tracker = make_tracker()
    tracker.submit_score(A.id, 12)
    tracker.submit_score(A.id, 8)
    before = totals(tracker)
    undone = tracker.undo()
    assert undone.entry.amount == -8
    assert undone.entry.is_reversal
    assert dict(totals(tracker))['A'] == 12
    tracker.redo()
    assert totals(tracker) == before


def test_undo_never_removes_entries():
    tracker = make_tracker()
    tracker.submit_score(A.id, 12)
    tracker.undo()
    amounts = [e.amount for e in tracker.ledger.all_entries()]
    assert amounts == [12, -12]


def test_new_submission_clears_redo():
    tracker = make_tracker()
    tracker.submit_score(A.id, 12)
    tracker.undo()
    tracker.submit_score(B.id, 3)
    assert tracker.redo() is None
    assert dict(totals(tracker)) == {'A': 0, 'B': 3}


def test_undo_and_redo_on_empty_history_are_noops():
    tracker = make_tracker()
    assert tracker.undo() is None
    assert tracker.redo() is None
    assert len(tracker.ledger) == 0


def test_failed_store_write_changes_nothing():
    tracker = make_tracker()
    tracker.submit_score(A.id, 12)
    tracker.score_store.fail_next = True
    with pytest.raises(RuntimeError):
        tracker.submit_score(B.id, 4)
    assert len(tracker.ledger) == 1
    assert tracker.history.undo_stack[-1].amount == 12

    tracker.score_store.fail_next = True
    with pytest.raises(RuntimeError):
        tracker.undo()
    assert len(tracker.ledger) == 1
    assert tracker.history.can_undo and not tracker.history.can_redo


def test_controller_stacks_directly():
    history = UndoRedoController()
    appended = []

    def append(entry):
        appended.append(entry)
        return entry

    e = ScoreEntry(1, 1, 0, 5)
    history.record(e)
    history.undo(append)
    assert appended[-1].amount == -5
    history.redo(append)
    assert appended[-1].amount == 5 and not appended[-1].is_reversal
    assert history.can_undo and not history.can_redo


# ---- Tracker edges ----

def test_unknown_player_is_not_found():
    with pytest.raises(NotFoundError):
        make_tracker().submit_score(99, 5)


def test_invalid_round_submission_appends_nothing():
    tracker = make_tracker()
    with pytest.raises(ValidationError):
        tracker.submit_round([
            {'player_id': A.id, 'score': 10},
            {'player_id': B.id, 'score': 'ten'},
        ])
    assert len(tracker.ledger) == 0


def test_failed_round_write_appends_nothing():
    tracker = make_tracker()
    tracker.score_store.fail_on_row = 2
    with pytest.raises(RuntimeError):
        tracker.submit_round([
            {'player_id': A.id, 'score': 10},
            {'player_id': B.id, 'score': 5},
        ])
    assert tracker.score_store.rows == []
    assert len(tracker.ledger) == 0
    assert not tracker.history.can_undo
    assert tracker.coordinator.current_round == 0

    result = tracker.submit_round([
        {'player_id': A.id, 'score': 10},
        {'player_id': B.id, 'score': 5},
    ])
    assert [c.round for c in result.rounds_completed] == [0]
    assert [e.id for e in result.entries] == [1, 2]


def test_round_submission_rejects_duplicate_players():
    tracker = make_tracker()
    with pytest.raises(ValidationError):
        tracker.submit_round([
            {'player_id': A.id, 'score': 10},
            {'player_id': A.id, 'score': 5},
        ])


def test_strict_rounds_rejects_second_regular_entry():
    tracker = make_tracker(strict_rounds=True)
    tracker.submit_score(A.id, 10, round=0)
    with pytest.raises(ValidationError):
        tracker.submit_score(A.id, 4, round=0)
    tracker.submit_score(A.id, 4, kind='bonus', round=0)
    tracker.undo()
    tracker.undo()
    tracker.submit_score(A.id, 4, round=0)
    assert dict(totals(tracker))['A'] == 4


def test_closed_tracker_rejects_everything():
    tracker = make_tracker()
    tracker.submit_score(A.id, 10)
    tracker.close()
    assert tracker.coordinator.state is RoundState.GAME_ENDED
    with pytest.raises(SessionClosedError):
        tracker.submit_score(A.id, 1)
    with pytest.raises(SessionClosedError):
        tracker.undo()
    with pytest.raises(SessionClosedError):
        tracker.redo()


def test_two_player_scenario():
    tracker = make_tracker()
    tracker.submit_score(A.id, 10, 'regular', round=0)
    tracker.submit_score(B.id, 15, 'regular', round=0)
    assert totals(tracker) == [('B', 15), ('A', 10)]

    tracker.submit_score(A.id, 20, 'bonus', round=1)
    tracker.submit_score(B.id, 5, 'penalty', round=1)
    assert totals(tracker) == [('A', 30), ('B', 10)]

    tracker.undo()
    assert totals(tracker) == [('A', 30), ('B', 15)]
