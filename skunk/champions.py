"""Champion aggregation over a game's match history."""

import logging
from collections.abc import Iterable, Iterator

from .models import UNKNOWN, Champion, Game, Match, WinnerPlayer, WinnerTeam
from .resolver import resolve

logger = logging.getLogger('skunk.champions')


def chronological(matches: Iterable[Match]) -> list[Match]:
    """Sort matches by (date, id), a stable order for aggregate()."""
    return sorted(matches, key=lambda m: (m.date, m.id))


def _wins(matches: Iterable[Match], game: Game) -> Iterator[WinnerPlayer | WinnerTeam]:
    for match in matches:
        if match.game_id != game.id:
            continue
        outcome = resolve(match, game)
        if outcome != UNKNOWN:
            yield outcome


def win_counts(matches: Iterable[Match], game: Game) -> dict[WinnerPlayer | WinnerTeam, int]:
    """
    Count resolved wins per player or team for one game.

    Keys are outcome values, so a player and a team sharing an id are
    counted separately. Matches for other games and matches with no
    resolvable winner are skipped. Keys are in first-win order.
    """
    counts: dict[WinnerPlayer | WinnerTeam, int] = {}
    for outcome in _wins(matches, game):
        counts[outcome] = counts.get(outcome, 0) + 1
    return counts


def aggregate(matches: Iterable[Match], game: Game) -> Champion:
    """
    Find the player or team with the most wins in a game.

    The leader only changes when a tally strictly exceeds the current
    leader's, so on a tie whoever got there first keeps the title. The
    result therefore depends on iteration order; pass matches in a
    stable order such as chronological().

    Args:
        matches: Match history (any games; filtered to this one)
        game: Game to find the champion of

    Returns:
        Champion (champion_id None and win_count 0 when nobody has won)
    """
    counts: dict[WinnerPlayer | WinnerTeam, int] = {}
    leader = None
    leader_count = 0

    for outcome in _wins(matches, game):
        counts[outcome] = counts.get(outcome, 0) + 1
        if counts[outcome] > leader_count:
            leader = outcome
            leader_count = counts[outcome]

    if leader is None:
        return Champion()

    co_champions = tuple(o.winner_id for o, count in counts.items() if count == leader_count)
    return Champion(champion_id=leader.winner_id, win_count=leader_count, co_champion_ids=co_champions)


def aggregate_all(matches: Iterable[Match], games: Iterable[Game]) -> dict[str, Champion]:
    """
    Compute a champion for every game.

    Games with no matches get an empty Champion.

    Returns:
        Dict of game_id -> Champion
    """
    by_game: dict[str, list[Match]] = {}
    for match in matches:
        if match.game_id is not None:
            by_game.setdefault(match.game_id, []).append(match)

    champions = {}
    for game in games:
        champions[game.id] = aggregate(by_game.get(game.id, []), game)

    logger.debug(f'Computed champions for {len(champions)} games')
    return champions
