"""Presentation data for games: rules text and tutorial links, keyed by name."""

GAME_RULES = {
    'Poker': {
        'scoring_info': 'Players accumulate chips through betting and winning hands',
        'win_condition': 'Player with the most chips at the end wins',
    },
    'UNO': {
        'scoring_info': 'Number cards = face value, Action cards = 20 points, Wild cards = 50 points',
        'win_condition': 'Player with the lowest total points wins',
    },
}

GAME_RESOURCES = {
    'Poker': [
        {'title': 'Basic Poker Rules', 'url': 'https://www.pokernews.com/poker-rules/', 'type': 'article'},
        {'title': 'Poker Hand Rankings', 'url': 'https://www.pokerstars.com/poker/games/rules/hand-rankings/', 'type': 'article'},
        {'title': 'Essential Poker Strategy', 'url': 'https://www.pokernews.com/strategy/', 'type': 'tutorial'},
    ],
    'Bridge': [
        {'title': 'Bridge Basics', 'url': 'https://www.acbl.org/learn/', 'type': 'article'},
        {'title': 'Bridge Bidding Guide', 'url': 'https://www.bridgebum.com/bridge_basics.php', 'type': 'tutorial'},
        {'title': 'Bridge Game Rules', 'url': 'https://bicyclecards.com/how-to-play/bridge/', 'type': 'article'},
    ],
    'Golf': [
        {'title': 'Golf Card Game Rules', 'url': 'https://bicyclecards.com/how-to-play/golf/', 'type': 'article'},
        {'title': 'Golf Strategy Tips', 'url': 'https://www.pagat.com/draw/golf.html', 'type': 'tutorial'},
    ],
    'Darts': [
        {'title': 'How to Play Darts', 'url': 'https://www.wikihow.com/Play-Darts', 'type': 'tutorial'},
        {'title': 'Darts Scoring Guide', 'url': 'https://www.darting.com/Darts-Rules/', 'type': 'article'},
    ],
    'UNO': [
        {'title': 'How to Play UNO', 'url': 'https://www.wikihow.com/Play-UNO', 'type': 'tutorial'},
        {'title': 'Official UNO Rules', 'url': 'https://www.mattel.com/en-us/uno', 'type': 'article'},
    ],
    'Yahtzee': [
        {'title': 'How to Play Yahtzee', 'url': 'https://www.wikihow.com/Play-Yahtzee', 'type': 'tutorial'},
        {'title': 'Yahtzee Strategy Guide', 'url': 'https://www.ultraboardgames.com/yahtzee/strategy.php', 'type': 'article'},
    ],
    'Hearts': [
        {'title': 'How to Play Hearts', 'url': 'https://www.wikihow.com/Play-Hearts', 'type': 'tutorial'},
        {'title': 'Hearts Strategy', 'url': 'https://www.pagat.com/reverse/hearts.html', 'type': 'article'},
    ],
    'Rummy': [
        {'title': 'How to Play Rummy', 'url': 'https://www.wikihow.com/Play-Rummy', 'type': 'tutorial'},
        {'title': 'Rummy Rules', 'url': 'https://bicyclecards.com/how-to-play/rummy-rum/', 'type': 'article'},
    ],
}


def get_game_info(game):
    rules = GAME_RULES.get(game.name, {})
    return {
        'name': game.name,
        'description': game.description,
        'scoring_info': rules.get('scoring_info', 'Custom scoring rules'),
        'win_condition': rules.get(
            'win_condition',
            'Highest score wins' if game.highest_wins else 'Lowest score wins',
        ),
        'players': f"{game.min_players}-{game.max_players} players",
        'resources': list(GAME_RESOURCES.get(game.name, [])),
    }
