#!/usr/bin/env python3
"""
Rink Report Data Models
=======================

Pydantic models for the per-division narrative report. One report exists
per (division, cycle); regenerating it overwrites the stored document.
"""

from typing import Optional, List

from pydantic import Field

from src.model.player_stats import DerivedModel

MAX_HIGHLIGHTS = 6
MAX_STANDOUT_PLAYERS = 3


class StandoutPlayer(DerivedModel):
    """One of the top-ranked scorers of a report cycle."""
    name: str = Field(..., description="Player name")
    team: Optional[str] = Field(None, description="Team name")
    stats: str = Field(..., description="'{goals} goals, {assists} assists'")
    highlight: str = Field(..., description="Single chosen highlight phrase")


class Prediction(DerivedModel):
    """Upcoming-matchup prediction entry."""
    matchup: str = Field(..., description="Matchup headline")
    prediction: str = Field(..., description="Prediction text")
    key_factor: str = Field(..., description="Deciding factor")


class ReportContent(DerivedModel):
    """Narrative sections produced from one batch of games."""
    html: str = Field('', description="Article body")
    highlights: List[str] = Field(default_factory=list, max_length=MAX_HIGHLIGHTS)
    standout_players: List[StandoutPlayer] = Field(default_factory=list, max_length=MAX_STANDOUT_PLAYERS)
    league_updates: List[str] = Field(default_factory=list)
    upcoming_predictions: List[Prediction] = Field(default_factory=list)


class RinkReport(DerivedModel):
    """Stored rink report document."""
    id: str = Field(..., description="Stable '{division}-{cycle}' identifier")
    division: str = Field(..., description="Division name")
    week: Optional[str] = Field(None, description="Report cycle identifier")
    week_label: Optional[str] = Field(None, description="Human-readable cycle label")
    published_at: str = Field(..., description="Generation timestamp (ISO)")
    author: str = Field(..., description="Report author")
    title: str = Field(..., description="Report title")
    html: str = Field('', description="Article body")
    highlights: List[str] = Field(default_factory=list, max_length=MAX_HIGHLIGHTS)
    standout_players: List[StandoutPlayer] = Field(default_factory=list, max_length=MAX_STANDOUT_PLAYERS)
    league_updates: List[str] = Field(default_factory=list)
    upcoming_predictions: List[Prediction] = Field(default_factory=list)
    generated_by: str = Field('auto', description="'auto' for generated reports")
    last_updated: str = Field(..., description="Last update timestamp (ISO)")
