#!/usr/bin/env python3
"""
Attendance Aggregator
=====================

Folds per-game attendance snapshots into per-player attendance counts for
one team. Names are matched by exact string equality on the stored display
name: two spellings of the same person are two attendance identities.
"""

import logging
import math
from dataclasses import dataclass, replace
from functools import reduce
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from src.model.events import AttendanceRecord
from src.model.player_stats import AttendanceHistoryEntry

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def attendance_percentage(attended: int, total: int) -> int:
    """Rounded attendance percentage; 0 when there are no games."""
    if total <= 0:
        return 0
    return round_half_up(attended / total * 100)


@dataclass(frozen=True)
class PlayerAttendance:
    """Attendance totals for one player against one team's games."""
    player_name: str
    team_name: str
    games_attended: int = 0
    total_team_games: int = 0
    history: Tuple[AttendanceHistoryEntry, ...] = ()

    @property
    def attendance_percentage(self) -> int:
        return attendance_percentage(self.games_attended, self.total_team_games)


def collect_player_names(records: Sequence[AttendanceRecord], team_name: str,
                         roster_names: Iterable[str] = (),
                         exclude_names: Iterable[str] = ()) -> List[str]:
    """
    Names to profile for a team, in first-seen order: the authoritative
    roster, then each snapshot's expected roster, then anyone marked
    present. Placeholder names are left out.
    """
    excluded = set(exclude_names)
    names: List[str] = []

    def _add(name: str) -> None:
        if name and name not in excluded and name not in names:
            names.append(name)

    for name in roster_names:
        _add(name)
    for record in records:
        for name in record.roster_for(team_name):
            _add(name)
        for name in record.present_for(team_name):
            _add(name)
    return names


def _record_game(totals: PlayerAttendance, record: AttendanceRecord, attended: bool) -> PlayerAttendance:
    entry = AttendanceHistoryEntry(game_id=record.game_id, date=record.recorded_at, attended=attended)
    return replace(
        totals,
        games_attended=totals.games_attended + (1 if attended else 0),
        total_team_games=totals.total_team_games + 1,
        history=totals.history + (entry,)
    )


def aggregate_team_attendance(records: Sequence[AttendanceRecord], team_name: str,
                              roster_names: Iterable[str] = (),
                              exclude_names: Iterable[str] = ()) -> Dict[str, PlayerAttendance]:
    """
    Attendance totals for every player of a team.

    Args:
        records: All attendance records, assumed chronological
        team_name: Team to aggregate
        roster_names: Names from the team's authoritative roster
        exclude_names: Placeholder names that are not reliability subjects

    Returns:
        Mapping of player name -> PlayerAttendance, in first-seen order
    """
    records = list(records)
    names = collect_player_names(records, team_name, roster_names, exclude_names)

    def _fold(totals: Mapping[str, PlayerAttendance], record: AttendanceRecord) -> Dict[str, PlayerAttendance]:
        if not record.involves_team(team_name):
            return dict(totals)
        present = set(record.present_for(team_name))
        return {name: _record_game(totals[name], record, name in present) for name in names}

    initial = {name: PlayerAttendance(player_name=name, team_name=team_name) for name in names}
    result = reduce(_fold, records, initial)

    team_games = sum(1 for record in records if record.involves_team(team_name))
    logger.debug(f"Aggregated attendance for {team_name}: {len(result)} players across {team_games} games")
    return result
