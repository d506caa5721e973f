"""Validation functions for games and matches."""

from collections.abc import Iterable

from .constants import BINARY_WIN_SCORE
from .models import Game, Match, parse_winning_conditions


def validate_game(game: Game) -> list[str]:
    """
    Check that a game's scoring rules are internally consistent.

    Checks:
    - countAllScores and countLosersOnly are not both set
    - Winning conditions string agrees with the flags

    Args:
        game: Game to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if game.count_all_scores and game.count_losers_only:
        errors.append(f'{game.title} counts all scores and losers only at the same time')

    game_high, round_high = parse_winning_conditions(game.winning_conditions)
    if game_high != game.highest_score_wins:
        errors.append(
            f'{game.title} winning conditions "{game.winning_conditions}" '
            f'disagree with highest_score_wins={game.highest_score_wins}'
        )
    if round_high != game.highest_round_score_wins:
        errors.append(
            f'{game.title} winning conditions "{game.winning_conditions}" '
            f'disagree with highest_round_score_wins={game.highest_round_score_wins}'
        )

    return errors


def validate_match(match: Match, game: Game) -> list[str]:
    """
    Validate a match against the rules of its game.

    Checks:
    - Match belongs to the game
    - Player count is supported
    - Teams present exactly when the game is team-based
    - Teams cover exactly the players in player_order
    - Only the winner field matching the game type is set
    - Binary scores are 0 or 1

    Args:
        match: Match to validate
        game: Game the match is played in

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if match.game_id != game.id:
        errors.append(f'Match {match.id} is for game {match.game_id}, not {game.id}')

    player_count = len(match.player_order)
    if player_count and not game.supports_player_count(player_count):
        supported = ', '.join(str(n) for n in sorted(game.supported_player_counts))
        errors.append(f'{game.title} does not support {player_count} players (supports {supported})')

    if game.is_team_based:
        if not match.teams:
            errors.append(f'Match {match.id} of team game {game.title} has no teams')
        else:
            team_players = {p for team in match.teams for p in team.player_ids}
            ordered = set(match.player_order)
            if team_players != ordered:
                missing = sorted(ordered - team_players)
                extra = sorted(team_players - ordered)
                errors.append(
                    f'Match {match.id} teams do not match player order '
                    f'(unassigned: {missing}, unknown: {extra})'
                )
        if match.winner_id is not None:
            errors.append(f'Match {match.id} of team game {game.title} has a player winner')
    else:
        if match.teams:
            errors.append(f'Match {match.id} of individual game {game.title} has teams')
        if match.winner_team_id is not None:
            errors.append(f'Match {match.id} of individual game {game.title} has a team winner')

    if game.is_binary_score:
        invalid = sorted({s for s in match.scores if s not in (0, BINARY_WIN_SCORE)})
        if invalid:
            errors.append(f'Match {match.id} has non-binary scores: {invalid}')

    return errors


def validate_all_matches(
    matches: Iterable[Match],
    games: dict[str, Game],
) -> tuple[list[str], list[str]]:
    """
    Validate a match history against a game catalog.

    Args:
        matches: Matches to validate
        games: Dict of game_id -> Game

    Returns:
        Tuple of (errors, warnings)
        - errors: Matches referencing a game that is not in the catalog
        - warnings: Per-match rule problems to review
    """
    errors: list[str] = []
    warnings: list[str] = []

    for match in matches:
        game = games.get(match.game_id) if match.game_id else None
        if game is None:
            errors.append(f'Match {match.id} references unknown game {match.game_id}')
            continue
        warnings.extend(validate_match(match, game))

    return errors, warnings
