#!/usr/bin/env python3
"""
Scorekeeper Event Models
========================

Pydantic models for the raw event records the scorekeeper stores: games,
goals, penalties, attendance snapshots and team rosters. Field names follow
the stored document shape (camelCase) through aliases, and the models are
frozen: the engine only reads them.
"""

import re
from typing import Optional, List, Dict, Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

MAX_ASSISTS = 2
DEFAULT_POSITION = 'Player'
NO_JERSEY = 'N/A'
GAME_SUBMISSION = 'game-submission'

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


class EventModel(BaseModel):
    """Base for stored event documents."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra='ignore',
        coerce_numbers_to_str=True
    )


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among keys."""
    for key in keys:
        value = data.get(key)
        if value not in (None, '', []):
            return value
    return None


def _player_display_name(player: Any) -> str:
    """Resolve a display name from a bare name or a stored player object."""
    if isinstance(player, str):
        return player.strip()
    if isinstance(player, dict):
        name = _first_present(player, 'name', 'fullName', 'playerName')
        if name:
            return str(name).strip()
        first = (player.get('firstName') or '').strip()
        last = (player.get('lastName') or '').strip()
        return f"{first} {last}".strip()
    return ''


def parse_penalty_minutes(value: Any) -> int:
    """
    Parse a stored penalty length into whole minutes.

    Leading digits are honoured ("2 min" -> 2); anything unparsable or
    negative yields 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(int(match.group(1)), 0)


class GameSummary(EventModel):
    """Completed-game summary attached at submission."""
    goals_by_team: Dict[str, int] = Field(default_factory=dict, description="Goals keyed by team name")
    total_goals: Optional[int] = Field(None, description="Total goals in the game")
    total_penalties: Optional[int] = Field(None, description="Total penalties in the game")


class Game(EventModel):
    """A scheduled or submitted game."""
    id: Optional[str] = Field(None, description="Document ID")
    game_id: str = Field(..., description="Game identifier")
    home_team: Optional[str] = Field(None, description="Home team name")
    away_team: Optional[str] = Field(None, description="Away team name")
    division: Optional[str] = Field(None, description="Division (Gold, Silver, ...)")
    season: Optional[str] = Field(None, description="Season label")
    scheduled_date: Optional[str] = Field(None, description="Scheduled date (ISO)")
    submitted_at: Optional[str] = Field(None, description="Submission timestamp (ISO)")
    event_type: Optional[str] = Field(None, description="'game-submission' for submitted games")
    status: Optional[str] = Field(None, description="Game status")
    final_score: Optional[Dict[str, int]] = Field(None, description="Final score keyed by team name")
    game_summary: Optional[GameSummary] = Field(None, description="Summary of a completed game")
    total_goals: Optional[int] = Field(None, description="Total goals recorded at submission")
    total_penalties: Optional[int] = Field(None, description="Total penalties recorded at submission")

    @model_validator(mode='before')
    @classmethod
    def _fill_game_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not _first_present(data, 'gameId', 'game_id'):
            data = dict(data)
            if data.get('id') not in (None, ''):
                data['gameId'] = data['id']
        return data

    @property
    def teams(self) -> List[str]:
        return [team for team in (self.home_team, self.away_team) if team]

    @property
    def is_submission(self) -> bool:
        """Submitted games only; untyped documents need a submission time or a result."""
        if self.status == 'scheduled':
            return False
        if self.event_type is not None:
            return self.event_type == GAME_SUBMISSION
        return self.submitted_at is not None or self.has_summary

    @property
    def has_summary(self) -> bool:
        return self.game_summary is not None or self.final_score is not None


class Goal(EventModel):
    """A goal with its scorer and up to two assists, in preference order."""
    id: Optional[str] = Field(None, description="Document ID")
    game_id: str = Field(..., description="Game identifier")
    team_name: Optional[str] = Field(None, description="Scoring team name")
    player_name: Optional[str] = Field(None, description="Scoring player name")
    assisted_by: List[str] = Field(default_factory=list, description="Assisting players (0-2, first assist first)")
    period: Optional[Union[int, str]] = Field(None, description="Period 1-3 or 'OT'")
    time_remaining: Optional[str] = Field(None, description="Time remaining in MM:SS")
    shot_type: Optional[str] = Field(None, description="Shot type tag")
    goal_type: Optional[str] = Field(None, description="Goal type tag (even strength, power play, ...)")
    breakaway: bool = Field(False, description="Whether the goal came on a breakaway")
    recorded_at: Optional[str] = Field(None, description="Recording timestamp")

    @model_validator(mode='before')
    @classmethod
    def _normalize_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        scorer = _first_present(data, 'playerName', 'player_name', 'scorer')
        team = _first_present(data, 'teamName', 'team_name', 'scoringTeam')
        data['playerName'] = str(scorer).strip() if scorer is not None else None
        data['teamName'] = team

        raw_assists = _first_present(data, 'assistedBy', 'assisted_by', 'assists', 'assist')
        if raw_assists is None:
            raw_assists = []
        elif not isinstance(raw_assists, (list, tuple)):
            raw_assists = [raw_assists]

        assists = []
        for assist in raw_assists:
            name = _player_display_name(assist)
            if name and name != data['playerName'] and name not in assists:
                assists.append(name)
        data['assistedBy'] = assists[:MAX_ASSISTS]
        for key in ('assisted_by', 'assists', 'assist', 'player_name', 'team_name'):
            data.pop(key, None)
        return data


class Penalty(EventModel):
    """A penalty assessed to a player."""
    id: Optional[str] = Field(None, description="Document ID")
    game_id: str = Field(..., description="Game identifier")
    team_name: Optional[str] = Field(None, description="Penalized team name")
    player_name: Optional[str] = Field(None, description="Penalized player name")
    penalty_type: Optional[str] = Field(None, description="Infraction type")
    penalty_length: Optional[Union[int, float, str]] = Field(None, description="Length in minutes as stored")
    period: Optional[Union[int, str]] = Field(None, description="Period 1-3 or 'OT'")
    time_remaining: Optional[str] = Field(None, description="Time remaining in MM:SS")
    recorded_at: Optional[str] = Field(None, description="Recording timestamp")

    @model_validator(mode='before')
    @classmethod
    def _normalize_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data['playerName'] = _first_present(data, 'playerName', 'player_name', 'penalizedPlayer')
        data['teamName'] = _first_present(data, 'teamName', 'team_name', 'penalizedTeam')
        length = _first_present(data, 'penaltyLength', 'penalty_length', 'length')
        data['penaltyLength'] = length
        for key in ('player_name', 'team_name', 'penalty_length', 'length'):
            data.pop(key, None)
        return data

    @property
    def penalty_minutes(self) -> int:
        return parse_penalty_minutes(self.penalty_length)


class TeamRosterSnapshot(EventModel):
    """Expected roster of one team at the time attendance was taken."""
    team_name: str = Field(..., description="Team name")
    team_id: Optional[str] = Field(None, description="Team identifier")
    total_players: List[str] = Field(default_factory=list, description="Expected player names")

    @field_validator('total_players', mode='before')
    @classmethod
    def _names(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [name for name in (_player_display_name(p) for p in value) if name]
        return value

    @model_validator(mode='before')
    @classmethod
    def _players_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and 'totalPlayers' not in data and 'total_players' not in data:
            data = dict(data)
            data['totalPlayers'] = data.get('players', [])
        return data


class TeamAttendance(EventModel):
    """Players marked present for one team."""
    team_name: str = Field(..., description="Team name")
    players_present: List[str] = Field(default_factory=list, description="Names marked present")


class AttendanceRecord(EventModel):
    """Attendance snapshot for exactly one game."""
    id: Optional[str] = Field(None, description="Document ID")
    game_id: str = Field(..., description="Game identifier")
    recorded_at: Optional[str] = Field(None, description="Recording timestamp")
    roster: List[TeamRosterSnapshot] = Field(default_factory=list, description="Per-team expected rosters")
    attendance: List[TeamAttendance] = Field(default_factory=list, description="Per-team present lists")

    def involves_team(self, team_name: str) -> bool:
        return any(team.team_name == team_name for team in self.roster)

    def roster_for(self, team_name: str) -> List[str]:
        for team in self.roster:
            if team.team_name == team_name:
                return team.total_players
        return []

    def present_for(self, team_name: str) -> List[str]:
        for team in self.attendance:
            if team.team_name == team_name:
                return team.players_present
        return []


class RosterPlayer(EventModel):
    """A player listed on a team roster."""
    name: str = Field(..., description="Display name")
    jersey_number: str = Field(NO_JERSEY, description="Jersey number or 'N/A'")
    position: str = Field(DEFAULT_POSITION, description="Position or the generic 'Player'")

    @model_validator(mode='before')
    @classmethod
    def _resolve(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {'name': data}
        if isinstance(data, dict):
            data = dict(data)
            data['name'] = _player_display_name(data)
            data['jerseyNumber'] = _first_present(data, 'jerseyNumber', 'jersey_number') or NO_JERSEY
            data['position'] = data.get('position') or DEFAULT_POSITION
            data.pop('jersey_number', None)
        return data


class RosterEntry(EventModel):
    """Authoritative roster for one team in one season."""
    id: Optional[str] = Field(None, description="Document ID")
    team_name: str = Field(..., description="Team name")
    team_id: Optional[str] = Field(None, description="Team identifier")
    division: Optional[str] = Field(None, description="Division")
    season: Optional[str] = Field(None, description="Season label")
    players: List[RosterPlayer] = Field(default_factory=list, description="Rostered players")

    def find_player(self, player_name: str) -> Optional[RosterPlayer]:
        for player in self.players:
            if player.name == player_name:
                return player
        return None
