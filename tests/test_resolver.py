"""Unit tests for match outcome resolution."""

from datetime import datetime, timezone

import pytest

from skunk.models import UNKNOWN, Game, Match, Team, WinnerPlayer, WinnerTeam
from skunk.resolver import extreme_index, resolve, resolve_winner_id

DATE = datetime(2025, 3, 1, 19, 30, tzinfo=timezone.utc)


def make_game(**rules) -> Game:
    return Game(id='g1', title='Test Game', **rules)


def make_match(scores, order=('A', 'B', 'C'), **fields) -> Match:
    return Match(
        id='m1',
        game_id='g1',
        date=DATE,
        player_ids=set(order),
        player_order=list(order),
        scores=list(scores),
        **fields,
    )


class TestIndividualResolution:
    """Tests for individual-player games."""

    def test_binary_first_one_wins(self):
        """Test binary scoring: the player scoring exactly 1 wins."""
        outcome = resolve(make_match([0, 1, 0]), make_game(is_binary_score=True))
        assert outcome == WinnerPlayer('B')

    def test_binary_first_of_several_ones(self):
        """Test binary scoring picks the first 1 in seat order."""
        outcome = resolve(make_match([0, 1, 1]), make_game(is_binary_score=True))
        assert outcome == WinnerPlayer('B')

    def test_binary_without_winner_uses_stored_winner(self):
        """Test binary match with no 1 falls back to winner_id."""
        match = make_match([0, 0, 0], winner_id='C')
        assert resolve(match, make_game(is_binary_score=True)) == WinnerPlayer('C')

    def test_binary_without_winner_or_fallback(self):
        """Test binary match with no 1 and no stored winner is unknown."""
        assert resolve(make_match([0, 2, 0]), make_game(is_binary_score=True)) is UNKNOWN

    def test_highest_score_wins(self):
        """Test highest score wins: [3, 7, 2] -> index 1."""
        outcome = resolve(make_match([3, 7, 2]), make_game(highest_score_wins=True))
        assert outcome == WinnerPlayer('B')

    def test_lowest_score_wins(self):
        """Test lowest score wins: [3, 7, 2] -> index 2."""
        outcome = resolve(make_match([3, 7, 2]), make_game(highest_score_wins=False))
        assert outcome == WinnerPlayer('C')

    def test_lowest_score_in_first_seat(self):
        """Test lowest score wins when it is in the first seat."""
        outcome = resolve(make_match([2, 7, 3]), make_game(highest_score_wins=False))
        assert outcome == WinnerPlayer('A')

    def test_tie_at_maximum_goes_to_first_seat(self):
        """Test tie at the top: [5, 5, 2] -> index 0, not the last tied seat."""
        outcome = resolve(make_match([5, 5, 2]), make_game(highest_score_wins=True))
        assert outcome == WinnerPlayer('A')

    def test_tie_at_minimum_goes_to_first_seat(self):
        """Test tie at the bottom goes to the earliest seat reaching it."""
        outcome = resolve(make_match([4, 1, 1]), make_game(highest_score_wins=False))
        assert outcome == WinnerPlayer('B')

    def test_negative_scores(self):
        """Test negative totals compare normally."""
        outcome = resolve(make_match([-4, -1, -9]), make_game(highest_score_wins=True))
        assert outcome == WinnerPlayer('B')

    def test_winner_index_beyond_player_order_falls_back(self):
        """Test an index outside player_order uses the stored winner."""
        match = Match.model_construct(
            id='m1',
            game_id='g1',
            date=DATE,
            last_modified=DATE,
            player_ids={'A', 'B'},
            player_order=['A', 'B'],
            scores=[0, 0, 5],
            rounds=[],
            teams=None,
            winner_id='A',
            winner_team_id=None,
        )
        assert resolve(match, make_game()) == WinnerPlayer('A')

    def test_team_game_without_teams_uses_individual_scores(self):
        """Test team-based game with no teams assigned resolves per player."""
        outcome = resolve(make_match([1, 9, 4]), make_game(is_team_based=True))
        assert outcome == WinnerPlayer('B')


class TestTeamResolution:
    """Tests for team-based games."""

    ORDER = ('p1', 'p2', 'p3', 'p4')

    def teams(self):
        return [
            Team(team_id='red', player_ids=['p1', 'p2']),
            Team(team_id='blue', player_ids=['p3', 'p4']),
        ]

    def test_binary_team_with_winning_player(self):
        """Test team binary: red [1, 0] vs blue [0, 0] -> red."""
        match = make_match([1, 0, 0, 0], order=self.ORDER, teams=self.teams())
        game = make_game(is_team_based=True, is_binary_score=True)
        assert resolve(match, game) == WinnerTeam('red')

    def test_binary_team_second_team(self):
        """Test team binary where the second team holds the 1."""
        match = make_match([0, 0, 0, 1], order=self.ORDER, teams=self.teams())
        game = make_game(is_team_based=True, is_binary_score=True)
        assert resolve(match, game) == WinnerTeam('blue')

    def test_binary_team_without_winner_uses_stored_team(self):
        """Test team binary with no 1 falls back to winner_team_id."""
        match = make_match([0, 0, 0, 0], order=self.ORDER, teams=self.teams(), winner_team_id='blue')
        game = make_game(is_team_based=True, is_binary_score=True)
        assert resolve(match, game) == WinnerTeam('blue')

    def test_binary_team_ignores_player_winner_field(self):
        """Test team binary with no 1 and only winner_id set is unknown."""
        match = make_match([0, 0, 0, 0], order=self.ORDER, teams=self.teams(), winner_id='p1')
        game = make_game(is_team_based=True, is_binary_score=True)
        assert resolve(match, game) is UNKNOWN

    def test_highest_team_total_wins(self):
        """Test team totals: red 3+4=7 vs blue 5+6=11 -> blue."""
        match = make_match([3, 4, 5, 6], order=self.ORDER, teams=self.teams())
        game = make_game(is_team_based=True, highest_score_wins=True)
        assert resolve(match, game) == WinnerTeam('blue')

    def test_lowest_team_total_wins(self):
        """Test lowest team total wins."""
        match = make_match([3, 4, 5, 6], order=self.ORDER, teams=self.teams())
        game = make_game(is_team_based=True, highest_score_wins=False)
        assert resolve(match, game) == WinnerTeam('red')

    def test_team_tie_goes_to_first_team(self):
        """Test tied team totals go to the first team in team order."""
        match = make_match([5, 5, 4, 6], order=self.ORDER, teams=self.teams())
        game = make_game(is_team_based=True, highest_score_wins=True)
        assert resolve(match, game) == WinnerTeam('red')

    def test_unknown_player_contributes_zero(self):
        """Test team member missing from player_order adds nothing."""
        teams = [
            Team(team_id='red', player_ids=['p1', 'ghost']),
            Team(team_id='blue', player_ids=['p2']),
        ]
        match = make_match([3, 4], order=('p1', 'p2'), teams=teams)
        game = make_game(is_team_based=True)
        assert resolve(match, game) == WinnerTeam('blue')


class TestLegacyFallback:
    """Tests for matches with no scores."""

    def test_stored_player_winner(self):
        """Test empty scores with winner_id returns it regardless of rules."""
        match = make_match([], winner_id='X')
        for game in (make_game(), make_game(is_binary_score=True), make_game(is_team_based=True)):
            assert resolve(match, game) == WinnerPlayer('X')

    def test_stored_team_winner_takes_precedence(self):
        """Test winner_team_id is preferred over winner_id."""
        match = make_match([], winner_id='X', winner_team_id='T')
        assert resolve(match, make_game()) == WinnerTeam('T')

    def test_nothing_stored(self):
        """Test empty scores and no stored winner is unknown."""
        assert resolve(make_match([]), make_game()) is UNKNOWN


class TestPurity:
    """Tests for idempotence and non-mutation."""

    def test_repeated_calls_match_and_inputs_unchanged(self):
        """Test resolving twice gives the same outcome and leaves inputs alone."""
        teams = [Team(team_id='red', player_ids=['A']), Team(team_id='blue', player_ids=['B', 'C'])]
        match = make_match([4, 1, 2], teams=teams)
        game = make_game(is_team_based=True)
        match_before = match.model_dump()
        game_before = game.model_dump()

        first = resolve(match, game)
        second = resolve(match, game)

        assert first == second == WinnerTeam('red')
        assert match.model_dump() == match_before
        assert game.model_dump() == game_before
        assert all(team.score is None for team in match.teams)

    def test_resolve_winner_id(self):
        """Test the id-only convenience wrapper."""
        assert resolve_winner_id(make_match([0, 1, 0]), make_game(is_binary_score=True)) == 'B'
        assert resolve_winner_id(make_match([]), make_game()) is None


class TestExtremeIndex:
    """Tests for the first-extreme scan."""

    @pytest.mark.parametrize(
        'values, highest, expected',
        [
            ([], True, None),
            ([7], False, 0),
            ([1, 3, 3], True, 1),
            ([2, 1, 1], False, 1),
            ([0, 0, 0], True, 0),
        ],
    )
    def test_extreme_index(self, values, highest, expected):
        """Test first index reaching the max/min is returned."""
        assert extreme_index(values, highest) == expected
