"""Data models for the Skunk scoring core."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import (
    CONDITION_HIGH,
    CONDITION_LOW,
    CONDITION_SEPARATOR,
    GAME_CONDITION_PREFIX,
    ROUND_CONDITION_PREFIX,
    SCORE_CALC_ALL,
    SCORE_CALC_LOSERS_SUM,
    SCORE_CALC_WINNER_ONLY,
    STATUS_ACTIVE,
)


def parse_winning_conditions(conditions: str) -> tuple[bool, bool]:
    """
    Parse a winning conditions display string.

    Components are matched by prefix, so order does not matter. A missing
    or unrecognised component defaults to high.

    Args:
        conditions: String such as 'game:low|round:high'

    Returns:
        Tuple of (highest_score_wins, highest_round_score_wins)
    """
    game_high = True
    round_high = True
    for component in conditions.split(CONDITION_SEPARATOR):
        component = component.strip()
        if component.startswith(GAME_CONDITION_PREFIX):
            game_high = CONDITION_LOW not in component
        elif component.startswith(ROUND_CONDITION_PREFIX):
            round_high = CONDITION_LOW not in component
    return game_high, round_high


def format_winning_conditions(highest_score_wins: bool, highest_round_score_wins: bool) -> str:
    """Build the 'game:<high|low>|round:<high|low>' display string."""
    game = GAME_CONDITION_PREFIX + (CONDITION_HIGH if highest_score_wins else CONDITION_LOW)
    round_ = ROUND_CONDITION_PREFIX + (CONDITION_HIGH if highest_round_score_wins else CONDITION_LOW)
    return f'{game}{CONDITION_SEPARATOR}{round_}'


def normalize_timestamp(value: datetime) -> datetime:
    """Convert to UTC and truncate to the millisecond precision the wire carries."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def _utcnow() -> datetime:
    return normalize_timestamp(datetime.now(timezone.utc))


class Game(BaseModel):
    """Scoring rules for one game. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    is_binary_score: bool = False
    is_team_based: bool = False
    highest_score_wins: bool = True
    highest_round_score_wins: bool = True
    count_all_scores: bool = True
    count_losers_only: bool = False
    supported_player_counts: frozenset[int] = Field(default_factory=frozenset)
    winning_conditions: str = ''
    created_by_id: str | None = None

    @model_validator(mode='before')
    @classmethod
    def fill_winning_conditions(cls, data):
        """Derive the display string from the flags when it is not given."""
        if isinstance(data, dict) and not data.get('winning_conditions'):
            data = dict(data)
            data['winning_conditions'] = format_winning_conditions(
                data.get('highest_score_wins', True),
                data.get('highest_round_score_wins', True),
            )
        return data

    @field_validator('supported_player_counts')
    @classmethod
    def validate_player_counts(cls, v):
        """Player counts must be positive."""
        for count in v:
            if count < 1:
                raise ValueError(f'Invalid player count: {count}')
        return v

    @property
    def score_calculation(self) -> str:
        """How round scores roll up into match totals."""
        if self.count_all_scores:
            return SCORE_CALC_ALL
        if self.count_losers_only:
            return SCORE_CALC_LOSERS_SUM
        return SCORE_CALC_WINNER_ONLY

    def supports_player_count(self, count: int) -> bool:
        """An empty supported set means any player count is allowed."""
        return not self.supported_player_counts or count in self.supported_player_counts


class Team(BaseModel):
    """A team within a match. The score is derived, never authoritative."""

    team_id: str = Field(..., min_length=1)
    player_ids: list[str] = Field(default_factory=list)
    score: int | None = None

    @field_validator('player_ids')
    @classmethod
    def validate_unique_players(cls, v):
        """A player appears at most once on a team."""
        if len(set(v)) != len(v):
            raise ValueError(f'Duplicate players in team: {v}')
        return v


class Match(BaseModel):
    """
    One played instance of a game.

    scores and every round are aligned to player_order. game_id may be
    unset while a match is being drafted; encoding requires it.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1)
    game_id: str | None = None
    date: datetime
    player_ids: set[str] = Field(default_factory=set)
    player_order: list[str] = Field(default_factory=list)
    scores: list[int] = Field(default_factory=list)
    rounds: list[list[int]] = Field(default_factory=list)
    teams: list[Team] | None = None
    winner_id: str | None = None
    winner_team_id: str | None = None
    is_multiplayer: bool = False
    status: str = STATUS_ACTIVE
    invited_player_ids: set[str] = Field(default_factory=set)
    accepted_player_ids: set[str] = Field(default_factory=set)
    created_by_id: str | None = None
    last_modified: datetime
    session_code: str | None = None

    @model_validator(mode='before')
    @classmethod
    def fill_derived_fields(cls, data):
        """Default date, last_modified, player_order and is_multiplayer."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get('date') is None:
            data['date'] = _utcnow()
        if data.get('last_modified') is None:
            data['last_modified'] = data['date']
        player_ids = data.get('player_ids') or ()
        if data.get('player_order') is None:
            data['player_order'] = sorted(player_ids)
        if data.get('is_multiplayer') is None:
            data['is_multiplayer'] = len(set(player_ids)) > 1
        return data

    @field_validator('date', 'last_modified')
    @classmethod
    def validate_timestamp(cls, v):
        """Store timestamps as UTC with millisecond precision."""
        return normalize_timestamp(v)

    @model_validator(mode='after')
    def check_alignment(self):
        """Enforce the invariants that hold regardless of the game."""
        if len(set(self.player_order)) != len(self.player_order):
            raise ValueError(f'Duplicate players in player_order: {self.player_order}')

        player_count = len(self.player_order)
        if self.scores and len(self.scores) != player_count:
            raise ValueError(
                f'scores has {len(self.scores)} entries but player_order has {player_count}'
            )
        for index, round_scores in enumerate(self.rounds):
            if len(round_scores) != player_count:
                raise ValueError(
                    f'round {index} has {len(round_scores)} entries but player_order has {player_count}'
                )

        if self.teams:
            team_ids = [team.team_id for team in self.teams]
            if len(set(team_ids)) != len(team_ids):
                raise ValueError(f'Duplicate team ids: {team_ids}')
            seen: set[str] = set()
            for team in self.teams:
                overlap = seen.intersection(team.player_ids)
                if overlap:
                    raise ValueError(f'Players on more than one team: {sorted(overlap)}')
                seen.update(team.player_ids)

        return self

    @classmethod
    def new(
        cls,
        game: Game,
        created_by_id: str | None = None,
        date: datetime | None = None,
        player_ids: list[str] | tuple[str, ...] = (),
    ) -> 'Match':
        """
        Create a match in its initial state for a game.

        Args:
            game: Game the match is played in
            created_by_id: Creator's user id (optional)
            date: Match date (default: now)
            player_ids: Participants in seating order

        Returns:
            Active match with empty scores and rounds
        """
        return cls(
            game_id=game.id,
            date=date,
            player_ids=set(player_ids),
            player_order=list(player_ids),
            created_by_id=created_by_id,
        )


@dataclass(frozen=True)
class WinnerPlayer:
    """A single player won the match."""
    player_id: str

    @property
    def winner_id(self) -> str:
        return self.player_id


@dataclass(frozen=True)
class WinnerTeam:
    """A team won the match."""
    team_id: str

    @property
    def winner_id(self) -> str:
        return self.team_id


@dataclass(frozen=True)
class Unknown:
    """No winner could be determined."""

    @property
    def winner_id(self) -> None:
        return None


UNKNOWN = Unknown()

Outcome = WinnerPlayer | WinnerTeam | Unknown


@dataclass(frozen=True)
class Champion:
    """Leading player or team for a game's match history."""
    champion_id: str | None = None
    win_count: int = 0
    co_champion_ids: tuple[str, ...] = ()  # everyone tied at win_count, first-seen order
