"""Match outcome resolution.

resolve() is pure: it reads a Match and a Game and never mutates either,
so it can be called on every snapshot from a live feed, from any thread.

Ties at the extreme score go to the first team (or seat) that reaches
it. Comparisons against the running extreme are strict, so a later
equal value never displaces the incumbent.
"""

import logging

from .constants import BINARY_WIN_SCORE
from .models import UNKNOWN, Game, Match, Outcome, WinnerPlayer, WinnerTeam
from .scoring import team_scores

logger = logging.getLogger('skunk.resolver')


def _legacy_outcome(match: Match) -> Outcome:
    """Outcome stored on the record by older clients."""
    if match.winner_team_id:
        return WinnerTeam(match.winner_team_id)
    if match.winner_id:
        return WinnerPlayer(match.winner_id)
    return UNKNOWN


def _team_fallback(match: Match) -> Outcome:
    if match.winner_team_id:
        return WinnerTeam(match.winner_team_id)
    return UNKNOWN


def _player_fallback(match: Match) -> Outcome:
    if match.winner_id:
        return WinnerPlayer(match.winner_id)
    return UNKNOWN


def extreme_index(values: list[int], highest_wins: bool) -> int | None:
    """
    Index of the first value reaching the maximum (or minimum).

    Returns:
        Index into values, or None if values is empty
    """
    best = None
    for i, value in enumerate(values):
        if best is None:
            best = i
        elif highest_wins and value > values[best]:
            best = i
        elif not highest_wins and value < values[best]:
            best = i
    return best


def _resolve_team(match: Match, game: Game) -> Outcome:
    teams = match.teams or []

    if game.is_binary_score:
        index_of = {player_id: i for i, player_id in enumerate(match.player_order)}
        for team in teams:
            for player_id in team.player_ids:
                i = index_of.get(player_id)
                if i is not None and i < len(match.scores) and match.scores[i] == BINARY_WIN_SCORE:
                    return WinnerTeam(team.team_id)
        logger.debug(f'No winning team in binary match {match.id}, using stored winner')
        return _team_fallback(match)

    totals = team_scores(match)
    best = extreme_index([score for _team_id, score in totals], game.highest_score_wins)
    if best is None:
        return _team_fallback(match)
    return WinnerTeam(totals[best][0])


def _resolve_player(match: Match, game: Game) -> Outcome:
    scores = match.scores

    if game.is_binary_score:
        winner = next((i for i, score in enumerate(scores) if score == BINARY_WIN_SCORE), None)
    else:
        winner = extreme_index(scores, game.highest_score_wins)

    if winner is None or winner >= len(match.player_order):
        logger.debug(f'No resolvable winner index in match {match.id}, using stored winner')
        return _player_fallback(match)
    return WinnerPlayer(match.player_order[winner])


def resolve(match: Match, game: Game) -> Outcome:
    """
    Decide who won a match.

    Resolution order:
        1. No scores yet: the legacy winner fields (team first, then player)
        2. Team games with teams assigned: aggregated team scores
        3. Otherwise: individual scores aligned to player_order

    Binary games award the win to the first score of exactly 1; other
    games use highest_score_wins to pick the maximum or minimum.

    Args:
        match: Match to resolve
        game: Game whose rules apply

    Returns:
        WinnerPlayer, WinnerTeam, or UNKNOWN
    """
    if not match.scores:
        return _legacy_outcome(match)

    if game.is_team_based and match.teams:
        return _resolve_team(match, game)

    return _resolve_player(match, game)


def resolve_winner_id(match: Match, game: Game) -> str | None:
    """Convenience wrapper returning just the winning player or team id."""
    return resolve(match, game).winner_id
