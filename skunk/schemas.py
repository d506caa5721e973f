"""Pydantic schemas for wire records and the game catalog file."""

import json

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Game, Team, format_winning_conditions, parse_winning_conditions


class TeamRecord(BaseModel):
    """Team entry inside a match's teams blob."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    team_id: str = Field(..., alias='teamId', min_length=1)
    player_ids: list[str] = Field(default_factory=list, alias='playerIDs')
    score: int | None = None

    def to_team(self) -> Team:
        return Team(team_id=self.team_id, player_ids=self.player_ids, score=self.score)


class GameRecord(BaseModel):
    """
    Game as stored by the clients.

    Flags may arrive as bools or as the 0/1 ints the cloud record store
    uses. supportedPlayerCounts may be a JSON blob or a plain list.
    """

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    is_binary_score: bool = Field(False, alias='isBinaryScore')
    is_team_based: bool = Field(False, alias='isTeamBased')
    highest_score_wins: bool = Field(True, alias='highestScoreWins')
    highest_round_score_wins: bool | None = Field(None, alias='highestRoundScoreWins')
    count_all_scores: bool = Field(False, alias='countAllScores')
    count_losers_only: bool = Field(False, alias='countLosersOnly')
    supported_player_counts: list[int] = Field(..., alias='supportedPlayerCounts')
    winning_conditions: str | None = Field(None, alias='winningConditions')
    created_by_id: str | None = Field(None, alias='createdByID')

    @field_validator('supported_player_counts', mode='before')
    @classmethod
    def decode_counts_blob(cls, v):
        """Unpack a JSON-encoded blob."""
        if isinstance(v, (str, bytes, bytearray)):
            return json.loads(v)
        return v

    def to_game(self) -> Game:
        """
        Build the immutable Game descriptor.

        highest_round_score_wins falls back to the winning conditions
        string, then to high.
        """
        round_high = self.highest_round_score_wins
        if round_high is None:
            if self.winning_conditions:
                _game_high, round_high = parse_winning_conditions(self.winning_conditions)
            else:
                round_high = True

        conditions = self.winning_conditions or format_winning_conditions(
            self.highest_score_wins, round_high
        )

        return Game(
            id=self.id,
            title=self.title,
            is_binary_score=self.is_binary_score,
            is_team_based=self.is_team_based,
            highest_score_wins=self.highest_score_wins,
            highest_round_score_wins=round_high,
            count_all_scores=self.count_all_scores,
            count_losers_only=self.count_losers_only,
            supported_player_counts=frozenset(self.supported_player_counts),
            winning_conditions=conditions,
            created_by_id=self.created_by_id,
        )


class GamesFile(BaseModel):
    """Complete game catalog file structure."""

    games: list[GameRecord]

    model_config = ConfigDict(extra='forbid')
