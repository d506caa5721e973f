import logging

from .models import (
    Champion,
    Game,
    Match,
    Outcome,
    Team,
    UNKNOWN,
    Unknown,
    WinnerPlayer,
    WinnerTeam,
    format_winning_conditions,
    parse_winning_conditions,
)
from .exceptions import MalformedRecord, MissingGameReference, SkunkError
from .resolver import resolve, resolve_winner_id
from .champions import aggregate, aggregate_all, chronological, win_counts
from .codec import (
    DecodeFailure,
    decode_game,
    decode_match,
    decode_matches,
    encode_game,
    encode_match,
    player_ids_string,
)
from .scoring import record_round, tally_rounds, team_scores, with_team_scores
from .validators import validate_all_matches, validate_game, validate_match
from .config import get_default_catalog, load_game_catalog, save_game_catalog
from .logging_config import setup_logging, teardown_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Models
    'Game',
    'Team',
    'Match',
    'Outcome',
    'WinnerPlayer',
    'WinnerTeam',
    'Unknown',
    'UNKNOWN',
    'Champion',
    'parse_winning_conditions',
    'format_winning_conditions',
    # Errors
    'SkunkError',
    'MalformedRecord',
    'MissingGameReference',
    # Winner resolution
    'resolve',
    'resolve_winner_id',
    # Champions
    'aggregate',
    'aggregate_all',
    'chronological',
    'win_counts',
    # Record codec
    'DecodeFailure',
    'encode_match',
    'decode_match',
    'decode_matches',
    'encode_game',
    'decode_game',
    'player_ids_string',
    # Score entry
    'record_round',
    'tally_rounds',
    'team_scores',
    'with_team_scores',
    # Validation
    'validate_game',
    'validate_match',
    'validate_all_matches',
    # Game catalog
    'load_game_catalog',
    'save_game_catalog',
    'get_default_catalog',
    # Logging
    'setup_logging',
    'teardown_logging',
]
