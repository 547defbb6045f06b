#!/usr/bin/env python3
"""
Game Stats Aggregator
=====================

Folds one report cycle's games, goals and penalties (already filtered to a
single division) into team and player scoring/penalty totals for the rink
report. Each step of the fold returns a new WeekStats; nothing is updated in
place.

Players are keyed by player_key(team, name), so the same name on two teams
stays two players.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from config.league_config import LeagueConfig
from src.model.events import Game, Goal, Penalty
from src.model.player_stats import player_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerTotals:
    """Scoring and penalty totals for one player in the cycle."""
    key: str
    name: str
    team: Optional[str] = None
    goals: int = 0
    assists: int = 0
    points: int = 0
    pim: int = 0
    goals_by_game: Mapping[str, int] = field(default_factory=dict)

    @property
    def best_game_goals(self) -> int:
        """Most goals scored in a single game (hat-trick detection)."""
        return max(self.goals_by_game.values(), default=0)


@dataclass(frozen=True)
class TeamTotals:
    """Scoring and penalty totals for one team in the cycle."""
    name: str
    goals: int = 0
    penalties: int = 0
    pim: int = 0
    games: int = 0

    @property
    def goals_per_game(self) -> float:
        return self.goals / self.games if self.games > 0 else 0.0


@dataclass(frozen=True)
class GameResult:
    """Normalized result of one completed game."""
    game_id: str
    teams: Tuple[str, ...]
    scores: Mapping[str, int]
    total_goals: int
    total_penalties: int

    @property
    def goal_margin(self) -> Optional[int]:
        """Absolute score difference for a two-team result, else None."""
        if len(self.teams) != 2 or any(team not in self.scores for team in self.teams):
            return None
        return abs(self.scores[self.teams[0]] - self.scores[self.teams[1]])

    @property
    def ranked_teams(self) -> Tuple[str, ...]:
        """Teams ordered by score, winner first; ties keep stored order."""
        return tuple(sorted(self.teams, key=lambda team: -self.scores.get(team, 0)))


@dataclass(frozen=True)
class WeekStats:
    """Aggregate totals for one division and report cycle."""
    total_games: int = 0
    total_goals: int = 0
    total_penalties: int = 0
    total_pim: int = 0
    teams: Mapping[str, TeamTotals] = field(default_factory=dict)
    players: Mapping[str, PlayerTotals] = field(default_factory=dict)
    game_results: Tuple[GameResult, ...] = ()
    top_scorers: Tuple[PlayerTotals, ...] = ()


def _with_player(players: Mapping[str, PlayerTotals], team: Optional[str], name: str, **increments) -> Dict[str, PlayerTotals]:
    key = player_key(team or '', name)
    current = players.get(key) or PlayerTotals(key=key, name=name, team=team)
    updated = replace(current, **{attr: getattr(current, attr) + amount for attr, amount in increments.items()})
    return {**players, key: updated}


def _with_team(teams: Mapping[str, TeamTotals], name: str, **increments) -> Dict[str, TeamTotals]:
    current = teams.get(name) or TeamTotals(name=name)
    updated = replace(current, **{attr: getattr(current, attr) + amount for attr, amount in increments.items()})
    return {**teams, name: updated}


def apply_goal(stats: WeekStats, goal: Goal) -> WeekStats:
    """Credit one goal: scorer goal+point, each assister assist+point, team goal."""
    players = stats.players
    if goal.player_name:
        players = _with_player(players, goal.team_name, goal.player_name, goals=1, points=1)
        key = player_key(goal.team_name or '', goal.player_name)
        scorer = players[key]
        by_game = dict(scorer.goals_by_game)
        by_game[goal.game_id] = by_game.get(goal.game_id, 0) + 1
        players = {**players, key: replace(scorer, goals_by_game=by_game)}
    else:
        logger.warning(f"Goal in game {goal.game_id} has no scorer name; crediting team only")

    for assister in goal.assisted_by:
        players = _with_player(players, goal.team_name, assister, assists=1, points=1)

    teams = _with_team(stats.teams, goal.team_name, goals=1) if goal.team_name else stats.teams
    return replace(stats, total_goals=stats.total_goals + 1, players=players, teams=teams)


def apply_penalty(stats: WeekStats, penalty: Penalty) -> WeekStats:
    """Add one penalty's minutes to the player and team; unparsable lengths count as 0."""
    minutes = penalty.penalty_minutes
    if minutes == 0 and penalty.penalty_length not in (None, 0, '0'):
        logger.warning(f"Unparsable penalty length {penalty.penalty_length!r} in game {penalty.game_id}; using 0")

    players = stats.players
    if penalty.player_name:
        players = _with_player(players, penalty.team_name, penalty.player_name, pim=minutes)
    teams = stats.teams
    if penalty.team_name:
        teams = _with_team(teams, penalty.team_name, penalties=1, pim=minutes)

    return replace(
        stats,
        total_penalties=stats.total_penalties + 1,
        total_pim=stats.total_pim + minutes,
        players=players,
        teams=teams
    )


def normalize_game_result(game: Game, goal_counts: Mapping[str, int],
                          penalty_counts: Mapping[str, int]) -> Optional[GameResult]:
    """
    Normalized result for a game carrying a completed summary, else None.

    Per-team scores come from the summary's goals-by-team, falling back to
    the final score. A submitted summary omits teams that did not score, so
    home and away teams are filled in with 0. Totals prefer the recorded
    summary values, then the scores, then the event records of the game.
    """
    if not game.has_summary:
        return None
    summary = game.game_summary
    scores = dict(summary.goals_by_team) if summary and summary.goals_by_team else dict(game.final_score or {})
    if len(game.teams) == 2 and set(scores) <= set(game.teams):
        for team in game.teams:
            scores.setdefault(team, 0)
        teams = tuple(game.teams)
    else:
        teams = tuple(scores.keys()) or tuple(game.teams)

    total_goals = next((value for value in (
        summary.total_goals if summary else None,
        game.total_goals,
        sum(scores.values()) if scores else None
    ) if value is not None), goal_counts.get(game.game_id, 0))

    total_penalties = next((value for value in (
        summary.total_penalties if summary else None,
        game.total_penalties
    ) if value is not None), penalty_counts.get(game.game_id, 0))

    return GameResult(
        game_id=game.game_id,
        teams=teams,
        scores=scores,
        total_goals=total_goals,
        total_penalties=total_penalties
    )


def rank_top_scorers(players: Iterable[PlayerTotals], limit: int = 10) -> Tuple[PlayerTotals, ...]:
    """Players with points, by points desc, goals desc, then name asc."""
    scorers = [player for player in players if player.points > 0]
    scorers.sort(key=lambda p: (-p.points, -p.goals, p.name))
    return tuple(scorers[:limit])


def rank_teams_by_scoring(teams: Iterable[TeamTotals]) -> List[TeamTotals]:
    """Teams with games played, by goals per game (highest first), then name."""
    played = [team for team in teams if team.games > 0]
    return sorted(played, key=lambda team: (-team.goals_per_game, team.name))


def aggregate_game_stats(games: Sequence[Game], goals: Sequence[Goal], penalties: Sequence[Penalty],
                         top_scorer_limit: int = 10) -> WeekStats:
    """Fold a batch of games and their events into WeekStats."""
    games, goals, penalties = list(games), list(goals), list(penalties)

    stats = WeekStats(total_games=len(games))
    stats = reduce(apply_goal, goals, stats)
    stats = reduce(apply_penalty, penalties, stats)

    goal_counts = Counter(goal.game_id for goal in goals)
    penalty_counts = Counter(penalty.game_id for penalty in penalties)
    results = tuple(
        result for result in (normalize_game_result(game, goal_counts, penalty_counts) for game in games)
        if result is not None
    )

    teams = stats.teams
    for result in results:
        for team_name in result.teams:
            teams = _with_team(teams, team_name, games=1)

    return replace(
        stats,
        teams=teams,
        game_results=results,
        top_scorers=rank_top_scorers(stats.players.values(), top_scorer_limit)
    )


class GameStatsAggregator:
    """Aggregates one division's report-cycle batch for the rink report."""

    def __init__(self, config: LeagueConfig):
        """Initialize the aggregator."""
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def aggregate(self, games: Sequence[Game], goals: Sequence[Goal], penalties: Sequence[Penalty]) -> WeekStats:
        stats = aggregate_game_stats(games, goals, penalties, self.config.top_scorer_limit)
        self.logger.info(
            f"Aggregated {stats.total_games} games: {stats.total_goals} goals, "
            f"{stats.total_penalties} penalties ({stats.total_pim} PIM), "
            f"{len(stats.players)} players, {len(stats.game_results)} completed results"
        )
        return stats
