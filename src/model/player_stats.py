#!/usr/bin/env python3
"""
Player Stats Data Models
========================

Pydantic models for the derived per-player analytical profile. One
document exists per (team, player) pair and is upserted by its id.
"""

import re
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_WHITESPACE = re.compile(r'\s+')


def player_key(team_name: str, player_name: str) -> str:
    """
    Stable key for a rostered player: "{team}-{name}", lower-cased, with
    every whitespace run replaced by a single hyphen.

    The key only governs document identity; attendance matching still uses
    the exact stored display name.
    """
    raw = f"{(team_name or '').strip()}-{(player_name or '').strip()}"
    return _WHITESPACE.sub('-', raw).lower()


class DerivedModel(BaseModel):
    """Base for documents produced by the engine."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AttendanceHistoryEntry(DerivedModel):
    """Attendance outcome for one game, in supplied (chronological) order."""
    game_id: str = Field(..., description="Game identifier")
    date: Optional[str] = Field(None, description="When attendance was recorded")
    attended: bool = Field(..., description="Whether the player was marked present")


class RecentForm(DerivedModel):
    """Attendance over the most recent window of games."""
    last_five_games: int = Field(0, description="Games in the window (at most five)")
    recent_attendance: int = Field(0, description="Games attended in the window")
    recent_percentage: int = Field(0, description="Rounded attendance percentage in the window")


class AttendanceBlock(DerivedModel):
    """Attendance analytics for a player."""
    games_attended: int = Field(0, description="Games the player was marked present")
    total_team_games: int = Field(0, description="Games with an attendance record for the team")
    attendance_percentage: int = Field(0, ge=0, le=100, description="Rounded overall percentage")
    recent_form: RecentForm = Field(default_factory=RecentForm, description="Recent-form window")
    history: List[AttendanceHistoryEntry] = Field(default_factory=list, description="Per-game outcomes")


class PlayerInfo(DerivedModel):
    """Roster details used in storylines and facts."""
    position: str = Field('Player', description="Position or the generic 'Player'")
    jersey_number: str = Field('N/A', description="Jersey number or 'N/A'")


class PlayerInsights(DerivedModel):
    """Announcer-facing insights derived from attendance."""
    reliability_rating: str = Field(..., description="Five-level reliability label")
    trend: str = Field(..., description="Hot Streak, Cold Streak, Improving, Declining or Insufficient Data")
    announcements: List[str] = Field(default_factory=list, description="Free-text announcer lines")
    personality: List[str] = Field(default_factory=list, description="Personality tags")
    storylines: List[str] = Field(default_factory=list, description="Narrative hooks")
    contextual_facts: List[str] = Field(default_factory=list, description="Short facts")


class PlayerStat(DerivedModel):
    """Complete analytical profile of one player."""
    id: str = Field(..., description="Document ID ({playerId}-stats)")
    player_id: str = Field(..., description="Normalized team+name key")
    player_name: str = Field(..., description="Display name")
    team_name: str = Field(..., description="Team name")
    season: str = Field(..., description="Season label")
    attendance: AttendanceBlock = Field(..., description="Attendance analytics")
    player_info: PlayerInfo = Field(default_factory=PlayerInfo, description="Roster details")
    insights: PlayerInsights = Field(..., description="Derived insights")
    last_updated: str = Field(..., description="Generation timestamp (ISO)")
    data_version: str = Field('1.0', description="Document schema version")
