#!/usr/bin/env python3
"""
Insight Rule Tables
===================

Threshold tables behind the player insights. Each table is an ordered list
of (predicate, outcome) pairs; `first_match` returns the outcome of the
first predicate that holds, `all_matches` collects every outcome whose
predicate holds. Outcomes that are strings are formatted with the fields of
an AttendanceProfile.
"""

from dataclasses import dataclass, asdict
from typing import Any, Callable, List, Sequence, Tuple

Rule = Tuple[Callable[..., bool], Any]

INSUFFICIENT_DATA = 'Insufficient Data'
GENERIC_POSITION = 'Player'
NO_JERSEY = 'N/A'


@dataclass(frozen=True)
class AttendanceProfile:
    """Inputs shared by the announcement, storyline and fact rules."""
    player_name: str
    attendance_percentage: int
    games_attended: int
    total_team_games: int
    position: str = GENERIC_POSITION
    jersey_number: str = NO_JERSEY

    @property
    def has_position(self) -> bool:
        return bool(self.position) and self.position != GENERIC_POSITION

    @property
    def has_jersey(self) -> bool:
        return bool(self.jersey_number) and self.jersey_number != NO_JERSEY


def first_match(rules: Sequence[Rule], *args: Any, default: Any = None) -> Any:
    """Outcome of the first rule whose predicate accepts args."""
    for predicate, outcome in rules:
        if predicate(*args):
            return outcome
    return default


def all_matches(rules: Sequence[Rule], profile: AttendanceProfile) -> List[str]:
    """Formatted outcomes of every rule whose predicate accepts the profile."""
    fields = asdict(profile)
    return [outcome.format(**fields) for predicate, outcome in rules if predicate(profile)]


# (overall %, recent %) -> rating
RELIABILITY_RULES: List[Rule] = [
    (lambda overall, recent: overall >= 90 and recent >= 80, 'Highly Reliable'),
    (lambda overall, recent: overall >= 70 and recent >= 60, 'Reliable'),
    (lambda overall, recent: overall >= 50, 'Moderately Reliable'),
    (lambda overall, recent: overall >= 30, 'Inconsistent'),
    (lambda overall, recent: True, 'Unreliable'),
]

# (attended in window, window size) -> trend
TREND_RULES: List[Rule] = [
    (lambda attended, window: attended == window, 'Hot Streak'),
    (lambda attended, window: attended == 0, 'Cold Streak'),
    (lambda attended, window: attended >= 2, 'Improving'),
    (lambda attended, window: True, 'Declining'),
]

# attendance % -> personality tags
PERSONALITY_RULES: List[Rule] = [
    (lambda pct: pct >= 90, ('reliable', 'dedicated', 'team-player')),
    (lambda pct: pct >= 70, ('consistent', 'committed')),
    (lambda pct: pct >= 50, ('sporadic', 'unpredictable')),
    (lambda pct: True, ('infrequent', 'occasional')),
]

# games attended -> experience tags
EXPERIENCE_RULES: List[Rule] = [
    (lambda attended: attended == 1, ('newcomer', 'fresh-face')),
    (lambda attended: attended >= 10, ('veteran', 'experienced')),
]

ANNOUNCEMENT_RULES: List[Rule] = [
    (lambda p: p.attendance_percentage >= 90,
     "{player_name} is one of our most reliable players, showing up to {attendance_percentage}% of games this season!"),
    (lambda p: p.attendance_percentage >= 70,
     "{player_name} has been solid this season with {attendance_percentage}% attendance."),
    (lambda p: p.attendance_percentage < 50 and p.total_team_games > 0,
     "{player_name} has attended {games_attended} of {total_team_games} games this season."),
]

MILESTONE_ANNOUNCEMENTS = {
    1: "Welcome {player_name} to their first game of the season!",
    5: "{player_name} hits the 5-game milestone tonight!",
    10: "{player_name} hits the 10-game milestone tonight!",
}

STORYLINE_RULES: List[Rule] = [
    (lambda p: p.attendance_percentage == 100,
     "Perfect attendance story: {player_name} hasn't missed a game this season"),
    (lambda p: p.attendance_percentage < 30,
     "Comeback potential: When {player_name} shows up, the team knows it's game time"),
    (lambda p: p.has_position,
     "{position} spotlight: {player_name} brings experience to the {position} position"),
    (lambda p: p.games_attended == 5,
     "Milestone moment: {player_name} celebrates their 5th game appearance"),
]

FACT_RULES: List[Rule] = [
    (lambda p: True, "{attendance_percentage}% attendance rate this season"),
    (lambda p: True, "{games_attended} games played out of {total_team_games} possible"),
    (lambda p: p.has_jersey, "Wears jersey #{jersey_number}"),
    (lambda p: p.has_position, "Plays {position} position"),
]

COMPARATIVE_FACT_RULES: List[Rule] = [
    (lambda p: p.attendance_percentage > 80, 'Above average attendance for the league'),
    (lambda p: p.attendance_percentage < 50, 'Below average attendance this season'),
]
