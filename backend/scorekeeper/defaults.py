DEFAULT_GAMES = [
    {'name': 'Poker', 'description': "Texas Hold'em poker scoring", 'min_players': 2, 'max_players': 10, 'highest_wins': True},
    {'name': 'UNO', 'description': 'Classic UNO card game', 'min_players': 2, 'max_players': 10, 'highest_wins': False},
    {'name': 'Scrabble', 'description': 'Word building board game', 'min_players': 2, 'max_players': 4, 'highest_wins': True},
    {'name': 'Yahtzee', 'description': 'Dice rolling and scoring game', 'min_players': 1, 'max_players': 8, 'highest_wins': True},
    {'name': 'Hearts', 'description': 'Classic Hearts card game', 'min_players': 3, 'max_players': 4, 'highest_wins': False},
    {'name': 'Rummy', 'description': 'Card matching and set collection', 'min_players': 2, 'max_players': 6, 'highest_wins': True},
    {'name': 'Bowling', 'description': 'Ten-pin bowling scoring', 'min_players': 1, 'max_players': 8, 'highest_wins': True},
    {'name': 'Darts', 'description': 'Classic darts scoring', 'min_players': 1, 'max_players': 8, 'highest_wins': True},
    {'name': 'Bridge', 'description': 'Contract bridge scoring', 'min_players': 4, 'max_players': 4, 'highest_wins': True},
    {'name': 'Golf', 'description': 'Golf card game scoring', 'min_players': 2, 'max_players': 8, 'highest_wins': False},
]


def seed_default_games(catalog):
    """Insert any default game missing from the catalog. Returns the games added."""
    added = []
    for defaults in DEFAULT_GAMES:
        if catalog.find_by_name(defaults['name']):
            continue
        added.append(catalog.create_game(is_custom=False, **defaults))
    return added
