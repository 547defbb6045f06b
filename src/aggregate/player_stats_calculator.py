#!/usr/bin/env python3
"""
Player Stats Calculator
=======================

Builds the per-player analytical profile used by the announcer: attendance
totals and recent form, a reliability rating, an attendance trend, and the
free-text announcements, personality tags, storylines and contextual facts
derived from them.

Every profile is computed from the attendance records alone; the calculator
has no side effects. Persisting the profiles is the caller's job.
"""

import logging
from collections import OrderedDict
from dataclasses import asdict
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from config.league_config import LeagueConfig
from src.aggregate.attendance_aggregator import (
    PlayerAttendance,
    aggregate_team_attendance,
    attendance_percentage,
)
from src.aggregate.insight_rules import (
    ANNOUNCEMENT_RULES,
    COMPARATIVE_FACT_RULES,
    EXPERIENCE_RULES,
    FACT_RULES,
    INSUFFICIENT_DATA,
    MILESTONE_ANNOUNCEMENTS,
    PERSONALITY_RULES,
    RELIABILITY_RULES,
    STORYLINE_RULES,
    TREND_RULES,
    AttendanceProfile,
    all_matches,
    first_match,
)
from src.model.events import AttendanceRecord, RosterEntry, RosterPlayer
from src.model.player_stats import (
    AttendanceBlock,
    AttendanceHistoryEntry,
    PlayerInfo,
    PlayerInsights,
    PlayerStat,
    RecentForm,
    player_key,
)
from src.utils.errors import AttendanceDataError, EventStoreError

AttendanceSource = Union[Sequence[AttendanceRecord], Callable[[str], Iterable[AttendanceRecord]]]


def recent_form(history: Sequence[AttendanceHistoryEntry], window: int = 5) -> RecentForm:
    """Attendance over the last `window` games (fewer if the history is shorter)."""
    recent = list(history)[-window:] if window > 0 else []
    attended = sum(1 for entry in recent if entry.attended)
    return RecentForm(
        last_five_games=len(recent),
        recent_attendance=attended,
        recent_percentage=attendance_percentage(attended, len(recent))
    )


def reliability_rating(overall: int, recent: int) -> str:
    """Five-level reliability label from overall and recent attendance %."""
    return first_match(RELIABILITY_RULES, overall, recent)


def attendance_trend(history: Sequence[AttendanceHistoryEntry], window: int = 3) -> str:
    """Trend over the last `window` games; 'Insufficient Data' below that many."""
    if len(history) < window:
        return INSUFFICIENT_DATA
    attended = sum(1 for entry in list(history)[-window:] if entry.attended)
    return first_match(TREND_RULES, attended, window)


def generate_announcements(profile: AttendanceProfile) -> List[str]:
    """Percentage-based line (at most one) followed by any milestone line."""
    announcements = []
    line = first_match(ANNOUNCEMENT_RULES, profile)
    if line:
        announcements.append(line.format(**asdict(profile)))
    milestone = MILESTONE_ANNOUNCEMENTS.get(profile.games_attended)
    if milestone:
        announcements.append(milestone.format(**asdict(profile)))
    return announcements


def personality_tags(percentage: int, games_attended: int) -> List[str]:
    tags = list(first_match(PERSONALITY_RULES, percentage, default=()))
    tags.extend(first_match(EXPERIENCE_RULES, games_attended, default=()))
    return tags


def generate_storylines(profile: AttendanceProfile) -> List[str]:
    return all_matches(STORYLINE_RULES, profile)


def generate_contextual_facts(profile: AttendanceProfile) -> List[str]:
    facts = all_matches(FACT_RULES, profile)
    comparative = first_match(COMPARATIVE_FACT_RULES, profile)
    if comparative:
        facts.append(comparative)
    return facts


class PlayerStatsCalculator:
    """
    Produces one PlayerStat per (team, player) pair.

    The attendance source is either the full list of attendance records or
    a callable returning them for a team name. A source that fails to read
    raises AttendanceDataError; the caller decides whether to skip the
    player or abort the batch.
    """

    def __init__(self, config: LeagueConfig, attendance_source: AttendanceSource):
        """Initialize the calculator."""
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self._attendance_source = attendance_source

    def _read_attendance(self, team_name: str) -> List[AttendanceRecord]:
        source = self._attendance_source
        if source is None:
            raise AttendanceDataError(team_name, "no attendance source configured")
        try:
            records = source(team_name) if callable(source) else source
            return list(records)
        except (EventStoreError, OSError, ValueError) as e:
            raise AttendanceDataError(team_name, str(e)) from e

    def team_attendance(self, team_name: str, roster_names: Iterable[str] = ()) -> Dict[str, PlayerAttendance]:
        """Attendance totals for every non-placeholder player of a team."""
        records = self._read_attendance(team_name)
        return aggregate_team_attendance(
            records, team_name,
            roster_names=roster_names,
            exclude_names=self.config.sub_placeholder_names
        )

    def calculate_player_stats(self, player_name: str, team_name: str,
                               roster_player: Optional[RosterPlayer] = None,
                               season: Optional[str] = None,
                               team_attendance: Optional[Dict[str, PlayerAttendance]] = None,
                               timestamp: Optional[str] = None) -> PlayerStat:
        """
        Calculate the complete profile for one player.

        Args:
            player_name: Display name as stored in attendance records
            team_name: Team the player belongs to
            roster_player: Roster details (position, jersey) if known
            season: Season label; defaults to the configured season
            team_attendance: Precomputed team aggregation, to avoid re-reading
            timestamp: Generation timestamp; defaults to now

        Returns:
            PlayerStat document
        """
        if team_attendance is None:
            team_attendance = self.team_attendance(team_name, roster_names=[player_name])
        totals = team_attendance.get(player_name) or PlayerAttendance(player_name=player_name, team_name=team_name)

        history = list(totals.history)
        overall = totals.attendance_percentage
        form = recent_form(history, self.config.recent_form_window)

        info = PlayerInfo(
            position=roster_player.position if roster_player else 'Player',
            jersey_number=roster_player.jersey_number if roster_player else 'N/A'
        )
        profile = AttendanceProfile(
            player_name=player_name,
            attendance_percentage=overall,
            games_attended=totals.games_attended,
            total_team_games=totals.total_team_games,
            position=info.position,
            jersey_number=info.jersey_number
        )

        insights = PlayerInsights(
            reliability_rating=reliability_rating(overall, form.recent_percentage),
            trend=attendance_trend(history, self.config.trend_window),
            announcements=generate_announcements(profile),
            personality=personality_tags(overall, totals.games_attended),
            storylines=generate_storylines(profile),
            contextual_facts=generate_contextual_facts(profile)
        )

        key = player_key(team_name, player_name)
        return PlayerStat(
            id=f"{key}-stats",
            player_id=key,
            player_name=player_name,
            team_name=team_name,
            season=season or self.config.season,
            attendance=AttendanceBlock(
                games_attended=totals.games_attended,
                total_team_games=totals.total_team_games,
                attendance_percentage=overall,
                recent_form=form,
                history=history
            ),
            player_info=info,
            insights=insights,
            last_updated=timestamp or datetime.now().isoformat()
        )

    def calculate_roster_stats(self, roster: RosterEntry, timestamp: Optional[str] = None) -> List[PlayerStat]:
        """Profiles for every real player of a roster plus anyone marked present for the team."""
        roster_names = [p.name for p in roster.players]
        team_attendance = self.team_attendance(roster.team_name, roster_names=roster_names)

        stats = []
        for player_name in team_attendance:
            stats.append(self.calculate_player_stats(
                player_name,
                roster.team_name,
                roster_player=roster.find_player(player_name),
                season=roster.season,
                team_attendance=team_attendance,
                timestamp=timestamp
            ))
        self.logger.info(f"Calculated stats for {len(stats)} players from {roster.team_name}")
        return stats

    def refresh_all_stats(self, rosters: Sequence[RosterEntry], timestamp: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
        """
        Profile every team found in the roster entries.

        Entries for the same team are merged. A team whose attendance cannot
        be read is reported as failed; the other teams still run.

        Returns:
            Mapping of team name -> {'success', 'player_stats' | 'error'}
        """
        merged: "OrderedDict[str, RosterEntry]" = OrderedDict()
        for roster in rosters:
            existing = merged.get(roster.team_name)
            if existing is None:
                merged[roster.team_name] = roster
            else:
                merged[roster.team_name] = existing.model_copy(
                    update={'players': list(existing.players) + list(roster.players)}
                )

        results: Dict[str, Dict[str, Any]] = {}
        for team_name, roster in merged.items():
            try:
                results[team_name] = {
                    'success': True,
                    'player_stats': self.calculate_roster_stats(roster, timestamp=timestamp)
                }
            except AttendanceDataError as e:
                self.logger.error(f"Skipping {team_name}: {e}")
                results[team_name] = {'success': False, 'error': str(e)}

        refreshed = sum(len(r.get('player_stats', [])) for r in results.values())
        self.logger.info(f"Refreshed stats for {refreshed} players across {len(results)} teams")
        return results
