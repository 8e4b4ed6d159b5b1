from flask import Blueprint, jsonify, request, current_app
from scorekeeper.socketio_events import broadcast

sessions = Blueprint('sessions', __name__)


def _lifecycle():
    return current_app.extensions['scorekeeper']


def _session_payload(session):
    tracker = _lifecycle().tracker(session.id)
    payload = session.to_dict()
    payload['game'] = session.game.to_dict()
    payload.update(tracker.to_dict())
    return payload


def _announce(session_id, result) -> None:
    broadcast('state_update', session_id)
    for completed in result.rounds_completed:
        broadcast('round_complete', session_id, completed.to_dict())
    if result.limit_reached:
        tracker = _lifecycle().tracker(session_id)
        broadcast('score_limit_reached', session_id, {'score_limit': tracker.score_limit})


def _result_payload(session_id, result):
    tracker = _lifecycle().tracker(session_id)
    payload = result.to_dict()
    payload['entry'] = result.entry.to_dict() if result.entry else None
    payload['round'] = tracker.coordinator.to_dict(tracker.ledger)
    payload['can_undo'] = tracker.history.can_undo
    payload['can_redo'] = tracker.history.can_redo
    return payload


def _submit_score(session_id, data):
    tracker = _lifecycle().tracker(session_id)
    result = tracker.submit_score(
        data.get('player_id'),
        data.get('score'),
        kind=data.get('kind'),
        round=data.get('round'),
    )
    entry = result.entry
    current_app.logger.info(
        f"[score] session={session_id} player={entry.player_id} round={entry.round} amount={entry.amount} kind={entry.kind.value}"
    )
    for completed in result.rounds_completed:
        current_app.logger.info(f"[round_complete] session={session_id} round={completed.round}")
    _announce(session_id, result)
    return jsonify(_result_payload(session_id, result)), 201


@sessions.route('/sessions', methods=['POST'])
def create_session():
    data = request.get_json(silent=True) or {}
    game_id = data.get('game_id')
    if not isinstance(game_id, int) or isinstance(game_id, bool):
        return jsonify({'error': 'game_id is required'}), 400
    session = _lifecycle().start(game_id, data.get('players') or [], data.get('score_limit'))
    current_app.logger.info(f"[session] started session={session.id} game={session.game_id} code={session.session_code}")
    return jsonify(_session_payload(session)), 201


@sessions.route('/sessions/<int:session_id>', methods=['GET'])
def get_session(session_id):
    session = _lifecycle().session_store.get_session(session_id)
    return jsonify(_session_payload(session))


@sessions.route('/sessions/code/<string:code>', methods=['GET'])
def get_session_by_code(code):
    session = _lifecycle().session_store.get_session_by_code(code)
    return jsonify(_session_payload(session))


@sessions.route('/sessions/<int:session_id>/scores', methods=['POST'])
def submit_session_score(session_id):
    data = request.get_json(silent=True) or {}
    return _submit_score(session_id, data)


@sessions.route('/scores', methods=['POST'])
def submit_score():
    data = request.get_json(silent=True) or {}
    session_id = data.get('session_id')
    if not isinstance(session_id, int) or isinstance(session_id, bool):
        return jsonify({'error': 'session_id is required'}), 400
    return _submit_score(session_id, data)


@sessions.route('/sessions/<int:session_id>/rounds', methods=['POST'])
def submit_round(session_id):
    data = request.get_json(silent=True) or {}
    scores = data.get('scores')
    if not isinstance(scores, list) or not all(isinstance(s, dict) for s in scores):
        return jsonify({'error': 'scores must be a list of {player_id, score}'}), 400
    tracker = _lifecycle().tracker(session_id)
    result = tracker.submit_round(scores)
    current_app.logger.info(f"[round] session={session_id} submitted {len(result.entries)} scores")
    _announce(session_id, result)
    return jsonify(_result_payload(session_id, result)), 201


@sessions.route('/sessions/<int:session_id>/scores', methods=['GET'])
def list_session_scores(session_id):
    tracker = _lifecycle().tracker(session_id)
    return jsonify([e.to_dict() for e in tracker.ledger.all_entries()])


@sessions.route('/players/<int:player_id>/scores', methods=['GET'])
def list_player_scores(player_id):
    lifecycle = _lifecycle()
    lifecycle.session_store.get_player(player_id)
    return jsonify([e.to_dict() for e in lifecycle.score_store.list_scores_for_player(player_id)])


@sessions.route('/sessions/<int:session_id>/standings', methods=['GET'])
def get_standings(session_id):
    tracker = _lifecycle().tracker(session_id)
    standings = tracker.standings()
    return jsonify({
        'standings': [s.to_dict() for s in standings],
        'limit_reached': tracker.limit_reached(standings),
    })


@sessions.route('/sessions/<int:session_id>/undo', methods=['POST'])
def undo_score(session_id):
    result = _lifecycle().tracker(session_id).undo()
    if result is None:
        return jsonify({'message': 'Nothing to undo', 'entry': None})
    current_app.logger.info(f"[undo] session={session_id} player={result.entry.player_id} round={result.entry.round}")
    _announce(session_id, result)
    return jsonify(_result_payload(session_id, result))


@sessions.route('/sessions/<int:session_id>/redo', methods=['POST'])
def redo_score(session_id):
    result = _lifecycle().tracker(session_id).redo()
    if result is None:
        return jsonify({'message': 'Nothing to redo', 'entry': None})
    current_app.logger.info(f"[redo] session={session_id} player={result.entry.player_id} round={result.entry.round}")
    _announce(session_id, result)
    return jsonify(_result_payload(session_id, result))


@sessions.route('/sessions/<int:session_id>/complete', methods=['POST'])
def complete_session(session_id):
    session = _lifecycle().complete(session_id)
    current_app.logger.info(f"[finish] session={session.id} winner={session.winner_player_id}")
    broadcast('session_completed', session.id, {'winner_player_id': session.winner_player_id})
    return jsonify(_session_payload(session))


@sessions.route('/sessions/<int:session_id>/winner', methods=['GET'])
def get_winner(session_id):
    lifecycle = _lifecycle()
    player = lifecycle.winner(session_id)
    if player is None:
        return jsonify({'winner': None, 'is_complete': lifecycle.session_store.get_session(session_id).is_complete})
    total = sum(e.amount for e in lifecycle.tracker(session_id).ledger.entries_for(player.id))
    return jsonify({'winner': player.to_dict(), 'total': total, 'is_complete': True})
