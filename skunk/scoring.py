"""Round tallying, team score aggregation and score entry."""

import logging
from datetime import datetime, timezone

from .constants import SCORE_CALC_ALL, SCORE_CALC_LOSERS_SUM
from .models import Game, Match, normalize_timestamp

logger = logging.getLogger('skunk.scoring')


def round_winner_index(round_scores: list[int], highest_round_score_wins: bool) -> int | None:
    """
    Find the winner of a single round.

    The first index holding the extreme value wins, so ties go to the
    earlier seat.

    Returns:
        Index of the round winner, or None for an empty round
    """
    if not round_scores:
        return None
    target = max(round_scores) if highest_round_score_wins else min(round_scores)
    return round_scores.index(target)


def tally_rounds(rounds: list[list[int]], game: Game, player_count: int) -> list[int]:
    """
    Roll a match's rounds up into per-player totals.

    Scoring modes:
        - all: element-wise sum of every round
        - losers_sum: each round's winner is credited with the sum of
          the other players' round scores
        - winner_only: each round's winner is credited with their own
          round score

    Binary games have no running total; the latest round is the result.

    Args:
        rounds: Round score vectors aligned to player order
        game: Game whose rules apply
        player_count: Number of players in the match

    Returns:
        Totals aligned to player order (all zeros when there are no rounds)
    """
    totals = [0] * player_count
    if not rounds:
        return totals

    if game.is_binary_score:
        return list(rounds[-1])

    mode = game.score_calculation
    for round_scores in rounds:
        if mode == SCORE_CALC_ALL:
            totals = [total + score for total, score in zip(totals, round_scores)]
            continue

        winner = round_winner_index(round_scores, game.highest_round_score_wins)
        if winner is None:
            continue
        if mode == SCORE_CALC_LOSERS_SUM:
            totals[winner] += sum(s for i, s in enumerate(round_scores) if i != winner)
        else:
            totals[winner] += round_scores[winner]

    return totals


def team_scores(match: Match) -> list[tuple[str, int]]:
    """
    Sum each team's players' scores.

    A player missing from player_order (or beyond the scores list)
    contributes 0.

    Returns:
        List of (team_id, score) in team order (empty for non-team matches)
    """
    index_of = {player_id: i for i, player_id in enumerate(match.player_order)}
    results = []
    for team in match.teams or []:
        total = 0
        for player_id in team.player_ids:
            i = index_of.get(player_id)
            if i is not None and i < len(match.scores):
                total += match.scores[i]
        results.append((team.team_id, total))
    return results


def with_team_scores(match: Match) -> Match:
    """Return a copy of the match with each team's derived score filled in."""
    if not match.teams:
        return match.model_copy(deep=True)
    totals = dict(team_scores(match))
    teams = [team.model_copy(update={'score': totals[team.team_id]}) for team in match.teams]
    return match.model_copy(update={'teams': teams}, deep=True)


def record_round(
    match: Match,
    round_scores: list[int],
    game: Game,
    now: datetime | None = None,
) -> Match:
    """
    Enter one round of scores.

    Appends the round, recomputes the match totals from all rounds and
    stamps last_modified. This mutates the match in place.

    Args:
        match: Match receiving the round
        round_scores: One score per player, aligned to player_order
        game: Game whose rules determine the totals
        now: Modification time (default: current UTC time)

    Returns:
        The same match, for chaining

    Raises:
        ValueError: If the round does not have one score per player
    """
    player_count = len(match.player_order)
    if len(round_scores) != player_count:
        raise ValueError(
            f'Round has {len(round_scores)} scores but match {match.id} has {player_count} players'
        )

    match.rounds = [*match.rounds, list(round_scores)]
    match.scores = tally_rounds(match.rounds, game, player_count)
    match.last_modified = normalize_timestamp(now or datetime.now(timezone.utc))

    logger.debug(f'Recorded round {len(match.rounds)} for match {match.id}: {match.scores}')
    return match
