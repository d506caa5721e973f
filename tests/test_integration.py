"""Integration tests for end-to-end workflows."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from skunk import (
    Champion,
    Match,
    Team,
    WinnerTeam,
    aggregate_all,
    chronological,
    decode_matches,
    encode_match,
    record_round,
    resolve,
    validate_all_matches,
)
from skunk.config import get_default_catalog

START = datetime(2025, 1, 10, 20, 0, tzinfo=timezone.utc)


def to_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


@pytest.fixture
def feed_records():
    """Raw records as a live feed would deliver them, newest first."""
    return [
        {
            'id': 'hearts-2',
            'gameID': 'hearts',
            'date': to_ms(START + timedelta(days=2)),
            'playerIDs': json.dumps(['ann', 'bob', 'cat']),
            'playerOrder': json.dumps(['bob', 'cat', 'ann']),
            'scores': json.dumps([40, 12, 55]),
        },
        {
            # legacy client: no scores, stored winner only
            'id': 'chess-1',
            'gameID': 'chess',
            'date': to_ms(START + timedelta(days=1)),
            'playerIDs': json.dumps(['ann', 'bob']),
            'winnerID': 'bob',
        },
        {
            'id': 'hearts-1',
            'gameID': 'hearts',
            'date': to_ms(START),
            'playerIDs': ['ann', 'bob', 'cat'],
            'scores': [30, 31, 90],
            'status': 'active',
        },
        {
            # corrupt: no date
            'id': 'broken',
            'gameID': 'chess',
            'playerIDs': json.dumps(['ann']),
        },
    ]


class TestFeedToChampions:
    """Decode a feed batch and derive champions per game."""

    def test_champions_from_feed(self, feed_records):
        """Test decoding, ordering and aggregation together."""
        catalog = get_default_catalog()
        matches = chronological(decode_matches(feed_records))

        assert [m.id for m in matches] == ['hearts-1', 'chess-1', 'hearts-2']

        champions = aggregate_all(matches, catalog.values())

        # hearts: lowest wins; hearts-1 -> ann (30), hearts-2 -> cat (12)
        assert champions['hearts'] == Champion('ann', 1, ('ann', 'cat'))
        assert champions['chess'] == Champion('bob', 1, ('bob',))
        assert champions['go'] == Champion()

    def test_feed_validation(self, feed_records):
        """Test decoded feed matches validate against the catalog."""
        matches = decode_matches(feed_records)
        errors, warnings = validate_all_matches(matches, get_default_catalog())
        assert errors == []
        assert warnings == []


class TestScoreEntryRoundTrip:
    """Enter rounds for a team game and push the record back out."""

    def test_team_match_lifecycle(self):
        """Test a euchre match from creation to resolved, re-decoded record."""
        euchre = get_default_catalog()['euchre']
        match = Match.new(euchre, created_by_id='a', date=START, player_ids=['a', 'b', 'c', 'd'])
        match.teams = [
            Team(team_id='north', player_ids=['a', 'c']),
            Team(team_id='south', player_ids=['b', 'd']),
        ]

        record_round(match, [1, 2, 0, 1], euchre, now=START + timedelta(minutes=5))
        record_round(match, [2, 0, 2, 0], euchre, now=START + timedelta(minutes=10))

        assert match.scores == [3, 2, 2, 1]
        assert resolve(match, euchre) == WinnerTeam('north')

        decoded = decode_matches([encode_match(match)])
        assert decoded == [match]
        assert resolve(decoded[0], euchre) == WinnerTeam('north')
