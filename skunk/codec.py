"""Mapping between Match/Game entities and flat wire records.

Collection fields travel as opaque JSON blobs. Older clients omit many
fields, so decoding defaults everything except the identity fields
(id, gameID, date, playerIDs); a record missing one of those is dropped.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import StrictInt, TypeAdapter, ValidationError

from . import constants as c
from .exceptions import MalformedRecord, MissingGameReference
from .models import Game, Match, Team, format_winning_conditions, normalize_timestamp
from .schemas import GameRecord, TeamRecord

logger = logging.getLogger('skunk.codec')

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_STRING_LIST = TypeAdapter(list[str])
_INT_LIST = TypeAdapter(list[StrictInt])
_ROUNDS = TypeAdapter(list[list[StrictInt]])
_TEAMS = TypeAdapter(list[TeamRecord])


@dataclass(frozen=True)
class DecodeFailure:
    """A record that could not be turned into an entity."""
    reason: str
    field: str | None = None


def player_ids_string(player_ids: Iterable[str]) -> str:
    """Sorted, comma-joined player ids used for prefix and equality lookups."""
    return c.PLAYER_IDS_SEPARATOR.join(sorted(player_ids))


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _dump_blob(value: Any) -> str:
    return json.dumps(value, separators=(',', ':'))


def _load_blob(value: Any, adapter: TypeAdapter) -> Any:
    """Decode a JSON blob, or validate an already-structured value."""
    if isinstance(value, (str, bytes, bytearray)):
        return adapter.validate_json(value)
    return adapter.validate_python(value)


def encode_timestamp(value: datetime) -> int:
    """Epoch milliseconds."""
    return (normalize_timestamp(value) - EPOCH) // timedelta(milliseconds=1)


def decode_timestamp(value: Any) -> datetime:
    """
    Parse a wire timestamp.

    Accepts datetimes, epoch milliseconds (int or float) and ISO-8601
    strings.

    Raises:
        ValueError: If the value is not a recognisable timestamp
    """
    if isinstance(value, bool):
        raise ValueError(f'Not a timestamp: {value!r}')
    if isinstance(value, datetime):
        return normalize_timestamp(value)
    if isinstance(value, (int, float)):
        try:
            return normalize_timestamp(EPOCH + timedelta(milliseconds=value))
        except OverflowError as e:
            raise ValueError(f'Timestamp out of range: {value!r}') from e
    if isinstance(value, str):
        return normalize_timestamp(datetime.fromisoformat(value))
    raise ValueError(f'Not a timestamp: {value!r}')


def _required_string(record: Mapping[str, Any], field: str) -> str:
    value = record.get(field)
    if not isinstance(value, str) or not value:
        raise MalformedRecord(field, 'missing or not a non-empty string')
    return value


def _optional_string(record: Mapping[str, Any], field: str) -> str | None:
    value = record.get(field)
    return value if isinstance(value, str) else None


def _optional_blob(record: Mapping[str, Any], field: str, adapter: TypeAdapter, match_id: str) -> Any:
    """Decoded blob, or None when the field is absent or undecodable."""
    value = record.get(field)
    if value is None:
        logger.debug(f'Match {match_id}: {field} absent, using default')
        return None
    try:
        return _load_blob(value, adapter)
    except (ValidationError, ValueError) as e:
        logger.warning(f'Match {match_id}: {field} undecodable, using default ({e})')
        return None


def _optional_flag(record: Mapping[str, Any], field: str) -> bool | None:
    """A bool, or the 0/1 int the cloud record store writes for one."""
    value = record.get(field)
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    return None


def _dedupe(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


# ---------------------------------------------------------------------------
# Match
# ---------------------------------------------------------------------------

def encode_match(match: Match) -> dict[str, Any]:
    """
    Encode a match as a flat wire record.

    Collections are re-serialised on every call and playerIDsString is
    always derived. Optional fields that are unset are left out.

    Raises:
        MissingGameReference: If the match has no game_id
    """
    if not match.game_id:
        raise MissingGameReference(match.id)

    record: dict[str, Any] = {
        c.MATCH_ID: match.id,
        c.MATCH_DATE: encode_timestamp(match.date),
        c.MATCH_GAME_ID: match.game_id,
        c.MATCH_PLAYER_IDS: _dump_blob(sorted(match.player_ids)),
        c.MATCH_PLAYER_IDS_STRING: player_ids_string(match.player_ids),
        c.MATCH_PLAYER_ORDER: _dump_blob(match.player_order),
        c.MATCH_SCORES: _dump_blob(match.scores),
        c.MATCH_ROUNDS: _dump_blob(match.rounds),
        c.MATCH_IS_MULTIPLAYER: match.is_multiplayer,
        c.MATCH_STATUS: match.status,
        c.MATCH_INVITED_PLAYER_IDS: _dump_blob(sorted(match.invited_player_ids)),
        c.MATCH_ACCEPTED_PLAYER_IDS: _dump_blob(sorted(match.accepted_player_ids)),
        c.MATCH_LAST_MODIFIED: encode_timestamp(match.last_modified),
    }

    if match.teams is not None:
        record[c.MATCH_TEAMS] = _dump_blob([_team_to_wire(team) for team in match.teams])

    optional = {
        c.MATCH_WINNER_ID: match.winner_id,
        c.MATCH_WINNER_TEAM_ID: match.winner_team_id,
        c.MATCH_CREATED_BY_ID: match.created_by_id,
        c.MATCH_SESSION_CODE: match.session_code,
    }
    record.update({k: v for k, v in optional.items() if v is not None})

    return record


def _team_to_wire(team: Team) -> dict[str, Any]:
    wire: dict[str, Any] = {c.TEAM_ID: team.team_id, c.TEAM_PLAYER_IDS: team.player_ids}
    if team.score is not None:
        wire[c.TEAM_SCORE] = team.score
    return wire


def _decode_identity(record: Mapping[str, Any]) -> tuple[str, str, datetime, list[str]]:
    match_id = _required_string(record, c.MATCH_ID)
    game_id = _required_string(record, c.MATCH_GAME_ID)

    raw_date = record.get(c.MATCH_DATE)
    if raw_date is None:
        raise MalformedRecord(c.MATCH_DATE, 'missing')
    try:
        date = decode_timestamp(raw_date)
    except ValueError as e:
        raise MalformedRecord(c.MATCH_DATE, str(e)) from e

    raw_players = record.get(c.MATCH_PLAYER_IDS)
    if raw_players is None:
        raise MalformedRecord(c.MATCH_PLAYER_IDS, 'missing')
    try:
        player_ids = _load_blob(raw_players, _STRING_LIST)
    except (ValidationError, ValueError) as e:
        raise MalformedRecord(c.MATCH_PLAYER_IDS, f'undecodable: {e}') from e

    return match_id, game_id, date, _dedupe(player_ids)


def _decode_teams(record: Mapping[str, Any], match_id: str) -> list[Team] | None:
    team_records = _optional_blob(record, c.MATCH_TEAMS, _TEAMS, match_id)
    if team_records is None:
        return None
    try:
        teams = [team.to_team() for team in team_records]
    except ValidationError as e:
        logger.warning(f'Match {match_id}: invalid team, dropping teams ({e})')
        return None

    seen_players: set[str] = set()
    seen_teams: set[str] = set()
    for team in teams:
        if team.team_id in seen_teams or seen_players.intersection(team.player_ids):
            logger.warning(f'Match {match_id}: overlapping teams, dropping teams')
            return None
        seen_teams.add(team.team_id)
        seen_players.update(team.player_ids)
    return teams


def decode_match(record: Mapping[str, Any]) -> Match | DecodeFailure:
    """
    Decode a wire record into a Match.

    Defaults (each applied independently):
        - playerOrder: playerIDs in record order
        - scores / rounds: empty
        - teams: none
        - invitedPlayerIDs / acceptedPlayerIDs: empty
        - isMultiplayer: more than one player
        - status: 'active'
        - lastModified: date

    An optional field whose value contradicts playerOrder (wrong length,
    overlapping teams) is treated as undecodable and defaulted.

    Returns:
        Match, or DecodeFailure if an identity field cannot be recovered
    """
    try:
        match_id, game_id, date, player_ids = _decode_identity(record)
    except MalformedRecord as e:
        logger.warning(f'Dropping match record {record.get(c.MATCH_ID)!r}: {e}')
        return DecodeFailure(reason=e.reason, field=e.field)

    player_order = _optional_blob(record, c.MATCH_PLAYER_ORDER, _STRING_LIST, match_id)
    if player_order is not None and len(set(player_order)) != len(player_order):
        logger.warning(f'Match {match_id}: duplicate players in playerOrder, using playerIDs')
        player_order = None
    if player_order is None:
        player_order = list(player_ids)
    player_count = len(player_order)

    scores = _optional_blob(record, c.MATCH_SCORES, _INT_LIST, match_id) or []
    if scores and len(scores) != player_count:
        logger.warning(
            f'Match {match_id}: {len(scores)} scores for {player_count} players, dropping scores'
        )
        scores = []

    rounds = _optional_blob(record, c.MATCH_ROUNDS, _ROUNDS, match_id) or []
    if any(len(round_scores) != player_count for round_scores in rounds):
        logger.warning(f'Match {match_id}: rounds misaligned with playerOrder, dropping rounds')
        rounds = []

    teams = _decode_teams(record, match_id)

    invited = _optional_blob(record, c.MATCH_INVITED_PLAYER_IDS, _STRING_LIST, match_id) or []
    accepted = _optional_blob(record, c.MATCH_ACCEPTED_PLAYER_IDS, _STRING_LIST, match_id) or []

    is_multiplayer = _optional_flag(record, c.MATCH_IS_MULTIPLAYER)
    if is_multiplayer is None:
        is_multiplayer = len(player_ids) > 1

    status = record.get(c.MATCH_STATUS)
    if not isinstance(status, str) or not status:
        status = c.STATUS_ACTIVE

    last_modified = date
    raw_modified = record.get(c.MATCH_LAST_MODIFIED)
    if raw_modified is not None:
        try:
            last_modified = decode_timestamp(raw_modified)
        except ValueError as e:
            logger.warning(f'Match {match_id}: lastModified undecodable, using date ({e})')

    try:
        return Match(
            id=match_id,
            game_id=game_id,
            date=date,
            player_ids=set(player_ids),
            player_order=player_order,
            scores=scores,
            rounds=rounds,
            teams=teams,
            winner_id=_optional_string(record, c.MATCH_WINNER_ID),
            winner_team_id=_optional_string(record, c.MATCH_WINNER_TEAM_ID),
            is_multiplayer=is_multiplayer,
            status=status,
            invited_player_ids=set(invited),
            accepted_player_ids=set(accepted),
            created_by_id=_optional_string(record, c.MATCH_CREATED_BY_ID),
            last_modified=last_modified,
            session_code=_optional_string(record, c.MATCH_SESSION_CODE),
        )
    except ValidationError as e:
        logger.warning(f'Dropping match record {match_id!r}: {e}')
        return DecodeFailure(reason=str(e))


def decode_matches(records: Iterable[Mapping[str, Any]]) -> list[Match]:
    """Decode a batch of records, dropping those that fail."""
    matches = []
    dropped = 0
    for record in records:
        result = decode_match(record)
        if isinstance(result, DecodeFailure):
            dropped += 1
            continue
        matches.append(result)
    if dropped:
        logger.warning(f'Dropped {dropped} undecodable match records')
    return matches


# ---------------------------------------------------------------------------
# Game
# ---------------------------------------------------------------------------

def encode_game(game: Game) -> dict[str, Any]:
    """
    Encode a game as a flat wire record.

    Flags are written as 0/1 and winningConditions is rebuilt from the
    flags, matching what the cloud record store expects.
    """
    record: dict[str, Any] = {
        c.GAME_ID: game.id,
        c.GAME_TITLE: game.title,
        c.GAME_IS_BINARY_SCORE: int(game.is_binary_score),
        c.GAME_IS_TEAM_BASED: int(game.is_team_based),
        c.GAME_HIGHEST_SCORE_WINS: int(game.highest_score_wins),
        c.GAME_HIGHEST_ROUND_SCORE_WINS: int(game.highest_round_score_wins),
        c.GAME_COUNT_ALL_SCORES: int(game.count_all_scores),
        c.GAME_COUNT_LOSERS_ONLY: int(game.count_losers_only),
        c.GAME_SUPPORTED_PLAYER_COUNTS: _dump_blob(sorted(game.supported_player_counts)),
        c.GAME_WINNING_CONDITIONS: format_winning_conditions(
            game.highest_score_wins, game.highest_round_score_wins
        ),
    }
    if game.created_by_id is not None:
        record[c.GAME_CREATED_BY_ID] = game.created_by_id
    return record


def decode_game(record: Mapping[str, Any]) -> Game | DecodeFailure:
    """
    Decode a wire record into a Game.

    Returns:
        Game, or DecodeFailure if id, title or supportedPlayerCounts
        cannot be recovered
    """
    try:
        return GameRecord.model_validate(dict(record)).to_game()
    except ValidationError as e:
        errors = e.errors()
        field = str(errors[0]['loc'][0]) if errors and errors[0]['loc'] else None
        logger.warning(f'Dropping game record {record.get(c.GAME_ID)!r}: {e}')
        return DecodeFailure(reason=str(e), field=field)
