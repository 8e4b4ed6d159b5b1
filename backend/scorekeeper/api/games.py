from flask import Blueprint, jsonify, request, current_app
from scorekeeper.resources import get_game_info

games = Blueprint('games', __name__)


def _lifecycle():
    return current_app.extensions['scorekeeper']


@games.route('/games', methods=['GET'])
def list_games():
    return jsonify([g.to_dict() for g in _lifecycle().catalog.list_games()])


@games.route('/games/<int:game_id>', methods=['GET'])
def get_game(game_id):
    return jsonify(_lifecycle().catalog.get_game(game_id).to_dict())


@games.route('/games/<int:game_id>/info', methods=['GET'])
def get_game_details(game_id):
    game = _lifecycle().catalog.get_game(game_id)
    return jsonify(get_game_info(game))


@games.route('/games', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Game name is required'}), 400
    try:
        min_players = int(data.get('min_players', 1))
        max_players = int(data.get('max_players', 10))
    except (TypeError, ValueError):
        return jsonify({'error': 'Player counts must be whole numbers'}), 400
    if min_players < 1 or max_players < min_players:
        return jsonify({'error': 'Invalid player range'}), 400
    highest_wins = data.get('highest_wins', True)
    if not isinstance(highest_wins, bool):
        return jsonify({'error': 'highest_wins must be true or false'}), 400

    catalog = _lifecycle().catalog
    if catalog.find_by_name(name):
        return jsonify({'error': 'A game with that name already exists'}), 400
    game = catalog.create_game(
        name=name,
        description=(data.get('description') or '').strip(),
        min_players=min_players,
        max_players=max_players,
        highest_wins=highest_wins,
        is_custom=True,
    )
    current_app.logger.info(f"[game] created custom game={game.id} name={game.name!r}")
    return jsonify(game.to_dict()), 201


@games.route('/leaderboard', methods=['GET'])
def leaderboard():
    """Wins per player name across completed sessions, best win rate first."""
    game_id = request.args.get('game_id', type=int)
    lifecycle = _lifecycle()
    if game_id is not None:
        lifecycle.catalog.get_game(game_id)
    played = {}
    won = {}
    for session in lifecycle.session_store.list_completed(game_id):
        for p in session.players:
            played[p.name] = played.get(p.name, 0) + 1
            if p.id == session.winner_player_id:
                won[p.name] = won.get(p.name, 0) + 1
    rows = []
    for name, count in played.items():
        wins = won.get(name, 0)
        rows.append({
            'name': name,
            'games_played': count,
            'games_won': wins,
            'win_rate': round(wins / count, 4),
        })
    rows.sort(key=lambda r: (-r['win_rate'], -r['games_won'], r['name']))
    return jsonify(rows)
