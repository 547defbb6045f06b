#!/usr/bin/env python3
"""
Report Content Generator
========================

Turns one cycle's WeekStats into the narrative sections of a rink report:
highlights, standout players, league updates, predictions and the article
HTML. Output depends only on the aggregated stats, so regenerating from the
same batch yields identical lists.
"""

import logging
from html import escape
from typing import Callable, List, Optional, Sequence

from config.league_config import LeagueConfig
from src.aggregate.game_stats_aggregator import PlayerTotals, WeekStats, rank_teams_by_scoring
from src.model.rink_report import (
    MAX_HIGHLIGHTS,
    MAX_STANDOUT_PLAYERS,
    Prediction,
    ReportContent,
    StandoutPlayer,
)

HIGH_SCORING_GOALS = 8
PHYSICAL_GAME_PENALTIES = 8
HAT_TRICK_GOALS = 3


# Highlights

def high_scoring_highlights(stats: WeekStats) -> List[str]:
    return [
        f"High-scoring thriller: {' vs '.join(result.teams)} combines for {result.total_goals} goals"
        for result in stats.game_results if result.total_goals >= HIGH_SCORING_GOALS
    ]


def hat_trick_highlights(stats: WeekStats) -> List[str]:
    return [
        f"{player.name} records hat trick with {player.best_game_goals} goals"
        for player in stats.players.values() if player.best_game_goals >= HAT_TRICK_GOALS
    ]


def close_game_highlights(stats: WeekStats) -> List[str]:
    highlights = []
    for result in stats.game_results:
        if result.goal_margin != 1:
            continue
        winner, loser = result.ranked_teams
        highlights.append(
            f"Nail-biter: {winner} edges {loser} {result.scores[winner]}-{result.scores[loser]} "
            f"in one-goal thriller"
        )
    return highlights


def physical_game_highlights(stats: WeekStats) -> List[str]:
    return [
        f"Physical matchup: {' vs '.join(result.teams)} accumulates {result.total_penalties} penalties"
        for result in stats.game_results if result.total_penalties >= PHYSICAL_GAME_PENALTIES
    ]


HIGHLIGHT_RULES: Sequence[Callable[[WeekStats], List[str]]] = (
    high_scoring_highlights,
    hat_trick_highlights,
    close_game_highlights,
    physical_game_highlights,
)


def fallback_highlights(stats: WeekStats) -> List[str]:
    highlights = [
        f"{stats.total_games} exciting games played this week",
        f"Players combined for {stats.total_goals} goals across all matchups",
    ]
    if stats.top_scorers:
        leader = stats.top_scorers[0]
        highlights.append(f"{leader.name} leads weekly scoring with {leader.points} points")
    return highlights


def generate_highlights(stats: WeekStats, limit: int = MAX_HIGHLIGHTS) -> List[str]:
    """Rule highlights in rule order, or the generic fallback; at most `limit`."""
    highlights = [line for rule in HIGHLIGHT_RULES for line in rule(stats)]
    if not highlights:
        highlights = fallback_highlights(stats)
    return highlights[:min(limit, MAX_HIGHLIGHTS)]


# Standout players

STANDOUT_PHRASES = (
    (lambda p: p.best_game_goals >= HAT_TRICK_GOALS, "Hat trick hero with {goals} goals"),
    (lambda p: p.assists >= 3, "Playmaker extraordinaire with {assists} assists"),
    (lambda p: p.points >= 4, "Consistent performer with {points} points"),
    (lambda p: True, "Solid contributor with {goals}G, {assists}A"),
)


def standout_phrase(player: PlayerTotals) -> str:
    for predicate, template in STANDOUT_PHRASES:
        if predicate(player):
            return template.format(goals=player.goals, assists=player.assists, points=player.points)
    return ''


def generate_standout_players(stats: WeekStats, limit: int = MAX_STANDOUT_PLAYERS) -> List[StandoutPlayer]:
    return [
        StandoutPlayer(
            name=player.name,
            team=player.team,
            stats=f"{player.goals} goals, {player.assists} assists",
            highlight=standout_phrase(player)
        )
        for player in stats.top_scorers[:min(limit, MAX_STANDOUT_PLAYERS)]
    ]


# League updates and predictions

def generate_league_updates(division: str, stats: WeekStats) -> List[str]:
    updates = [
        f"{division} division completed {stats.total_games} games this week",
        f"Players scored {stats.total_goals} goals across all matchups",
    ]
    if stats.total_pim > 0:
        updates.append(f"{stats.total_pim} penalty minutes assessed this week")
    if stats.total_games > 0:
        updates.append(f"Average of {stats.total_goals / stats.total_games:.1f} goals per game this week")
    updates.append('Playoff race continues to intensify as season progresses')
    updates.append('Teams preparing for upcoming championship tournament')
    return updates


def generate_upcoming_predictions() -> List[Prediction]:
    # Static until schedule data is wired in.
    return [
        Prediction(
            matchup='Top Teams Face Off',
            prediction='Expecting high-intensity matchups as playoff race heats up',
            key_factor='Special teams performance will be crucial'
        ),
        Prediction(
            matchup='Divisional Showdowns',
            prediction='Key games that could determine playoff seeding',
            key_factor='Consistent scoring and strong defensive play'
        ),
    ]


# Article HTML: each section returns a fragment or None

def intro_section(division: str, cycle_label: str, stats: WeekStats) -> Optional[str]:
    return (
        f"<p>The {escape(division)} Division showcased exceptional hockey during {escape(cycle_label)} "
        f"with {stats.total_games} thrilling matchups. Players combined for {stats.total_goals} goals, "
        f"demonstrating the high level of skill and competition in our league.</p>"
    )


def week_highlights_section(division: str, cycle_label: str, stats: WeekStats) -> Optional[str]:
    if stats.total_games == 0:
        return None
    return (
        "<h3>Week Highlights</h3>\n"
        "<p>This week's action was highlighted by outstanding individual performances and team efforts. "
        "The competition remains fierce as teams battle for playoff positioning with every game taking "
        "on added significance.</p>"
    )


def scoring_leader_section(division: str, cycle_label: str, stats: WeekStats) -> Optional[str]:
    if not stats.top_scorers:
        return None
    leader = stats.top_scorers[0]
    return (
        "<h3>Scoring Leader</h3>\n"
        f"<p>{escape(leader.name)} led all {escape(division)} division players with {leader.points} points "
        f"({leader.goals}G, {leader.assists}A), establishing themselves as a key offensive threat. "
        "Their consistent performance has been instrumental in their team's success this week.</p>"
    )


def team_performance_section(division: str, cycle_label: str, stats: WeekStats) -> Optional[str]:
    ranked = rank_teams_by_scoring(stats.teams.values())
    if not ranked:
        return None
    team = ranked[0]
    return (
        "<h3>Team Performance</h3>\n"
        f"<p>{escape(team.name)} showcased strong offensive capabilities, averaging "
        f"{team.goals_per_game:.1f} goals per game. Their balanced attack and solid team play have "
        "positioned them well in the division standings.</p>"
    )


def physical_play_section(division: str, cycle_label: str, stats: WeekStats) -> Optional[str]:
    if stats.total_penalties == 0:
        return None
    return (
        "<h3>Physical Play</h3>\n"
        f"<p>The intensity was evident with {stats.total_penalties} penalties totaling {stats.total_pim} "
        "minutes. While teams competed hard, the focus remained on skillful, competitive hockey.</p>"
    )


def looking_forward_section(division: str, cycle_label: str, stats: WeekStats) -> Optional[str]:
    return (
        "<h3>Looking Forward</h3>\n"
        "<p>As the season progresses, every game becomes more crucial. Teams are fine-tuning their systems "
        "and building chemistry for what promises to be an exciting playoff race. The depth of talent in "
        f"the {escape(division)} division continues to make for unpredictable and entertaining hockey.</p>\n"
        "<p>Next week's matchups will provide more opportunities for players to showcase their skills and "
        "for teams to build momentum heading into the final stretch of the regular season.</p>"
    )


ARTICLE_SECTIONS = (
    intro_section,
    week_highlights_section,
    scoring_leader_section,
    team_performance_section,
    physical_play_section,
    looking_forward_section,
)


def generate_article_html(division: str, cycle_label: str, stats: WeekStats) -> str:
    fragments = (section(division, cycle_label, stats) for section in ARTICLE_SECTIONS)
    return "\n\n".join(fragment for fragment in fragments if fragment)


class ReportContentGenerator:
    """Builds the narrative content of a rink report from aggregated stats."""

    def __init__(self, config: LeagueConfig):
        """Initialize the generator."""
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def generate(self, division: str, stats: WeekStats, cycle_label: str = 'this week') -> ReportContent:
        content = ReportContent(
            html=generate_article_html(division, cycle_label, stats),
            highlights=generate_highlights(stats, self.config.max_highlights),
            standout_players=generate_standout_players(stats, self.config.max_standout_players),
            league_updates=generate_league_updates(division, stats),
            upcoming_predictions=generate_upcoming_predictions()
        )
        self.logger.info(
            f"Generated {division} report content: {len(content.highlights)} highlights, "
            f"{len(content.standout_players)} standout players"
        )
        return content
