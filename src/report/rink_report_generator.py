#!/usr/bin/env python3
"""
Rink Report Generator
=====================

Assembles the stored rink report for one division and report cycle:

1. Select the division's submitted games inside the week window, with
   their goals and penalties
2. Aggregate the batch (GameStatsAggregator)
3. Generate the narrative sections (ReportContentGenerator)
4. Wrap them in a RinkReport document whose id is stable per
   (division, week), so storing it again overwrites the previous version

Divisions with no submitted games get the season-preview report instead.
Generation and publishing are separate steps; a report that fails to
publish has to be regenerated.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config.league_config import LeagueConfig
from src.aggregate.game_stats_aggregator import GameStatsAggregator
from src.model.events import Game, Goal, Penalty
from src.model.rink_report import Prediction, RinkReport
from src.report.report_content_generator import ReportContentGenerator
from src.utils.errors import RinkStatsError
from src.utils.week_utils import get_current_week_id, get_week_date_range, get_week_label, in_week

EventBatch = Tuple[List[Game], List[Goal], List[Penalty]]


def select_week_batch(division: str, week_id: str, games: Sequence[Game], goals: Sequence[Goal],
                      penalties: Sequence[Penalty], now: Optional[datetime] = None) -> EventBatch:
    """Submitted games of a division inside the week window, plus their events."""
    week_range = get_week_date_range(week_id, now)
    selected = [
        game for game in games
        if game.division == division
        and game.is_submission
        and in_week(game.submitted_at or game.scheduled_date, week_range)
    ]
    game_ids = {game.game_id for game in selected}
    return (
        selected,
        [goal for goal in goals if goal.game_id in game_ids],
        [penalty for penalty in penalties if penalty.game_id in game_ids]
    )


class RinkReportGenerator:
    """Generates rink reports per division and report cycle."""

    def __init__(self, config: LeagueConfig, publisher=None):
        """
        Initialize the generator.

        Args:
            config: League configuration
            publisher: Optional object with publish(report); reports are
                only returned when omitted
        """
        self.config = config
        self.publisher = publisher
        self.logger = logging.getLogger(self.__class__.__name__)
        self.aggregator = GameStatsAggregator(config)
        self.content_generator = ReportContentGenerator(config)

    def generate_rink_report(self, division: str, week_id: str, games: Sequence[Game],
                             goals: Sequence[Goal], penalties: Sequence[Penalty],
                             now: Optional[datetime] = None) -> RinkReport:
        """Build the weekly report for a division from the full event collections."""
        now = now or datetime.now()
        week_games, week_goals, week_penalties = select_week_batch(
            division, week_id, games, goals, penalties, now
        )
        if not week_games:
            self.logger.info(f"No submitted {division} games in {week_id}; generating season preview")
            return self.generate_basic_report(division, now)

        self.logger.info(
            f"Generating {division} report for {week_id}: {len(week_games)} games, "
            f"{len(week_goals)} goals, {len(week_penalties)} penalties"
        )
        week_label = get_week_label(week_id)
        stats = self.aggregator.aggregate(week_games, week_goals, week_penalties)
        content = self.content_generator.generate(division, stats, week_label)

        timestamp = now.isoformat()
        return RinkReport(
            id=f"{division}-{week_id}",
            division=division,
            week=week_id,
            week_label=week_label,
            published_at=timestamp,
            author=self.config.report_author,
            title=f"{division} Division Weekly Roundup",
            html=content.html,
            highlights=content.highlights,
            standout_players=content.standout_players,
            league_updates=content.league_updates,
            upcoming_predictions=content.upcoming_predictions,
            generated_by='auto',
            last_updated=timestamp
        )

    def generate_basic_report(self, division: str, now: Optional[datetime] = None) -> RinkReport:
        """Season-preview report for a division with no submitted games."""
        timestamp = (now or datetime.now()).isoformat()
        html = (
            f"<p>The {division} Division season is ready to begin! Games are scheduled and teams are "
            "preparing for what promises to be an exciting season of hockey.</p>\n\n"
            "<h3>Season Preview</h3>\n"
            "<p>Teams have been practicing hard and rosters are finalized. The upcoming games will showcase "
            "the talent and competitive spirit that makes this division so entertaining to watch.</p>\n\n"
            "<h3>Looking Ahead</h3>\n"
            "<p>As games begin to be played and results are submitted, this report will showcase the "
            "highlights, standout performances, and exciting moments from each matchup. Check back after "
            "games are completed to see detailed statistics and analysis.</p>\n\n"
            f"<p>Get ready for an amazing season of {division} division hockey!</p>"
        )
        return RinkReport(
            id=f"{division}-all-submitted",
            division=division,
            published_at=timestamp,
            author=self.config.report_author,
            title=f"{division} Division Roundup",
            html=html,
            highlights=[
                f"{division} division season ready to begin",
                'Teams have finalized rosters and are prepared for competition',
                'Exciting games scheduled ahead',
            ],
            standout_players=[],
            league_updates=[
                f"{division} division rosters are complete",
                'Teams are preparing for the upcoming season',
                'Games are scheduled and ready to begin',
            ],
            upcoming_predictions=[
                Prediction(
                    matchup='Season Opener',
                    prediction='Expect competitive, high-energy hockey as teams debut their lineups',
                    key_factor='Early season chemistry and execution will be crucial'
                )
            ],
            generated_by='auto',
            last_updated=timestamp
        )

    def generate_reports_for_all_divisions(self, games: Sequence[Game], goals: Sequence[Goal],
                                           penalties: Sequence[Penalty],
                                           week_id: Optional[str] = None,
                                           divisions: Optional[Sequence[str]] = None,
                                           now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """
        Generate (and publish, when a publisher is set) one report per division.

        A failing division is logged and reported; the others still run.

        Returns:
            List of {'division', 'success', 'report' | 'error'}
        """
        now = now or datetime.now()
        week_id = week_id or get_current_week_id(now)
        divisions = list(divisions) if divisions is not None else self.config.divisions
        self.logger.info(f"Generating weekly reports for {len(divisions)} divisions - week {week_id}")

        results = []
        for division in divisions:
            try:
                report = self.generate_rink_report(division, week_id, games, goals, penalties, now)
                if self.publisher is not None:
                    self.publisher.publish(report)
                results.append({'division': division, 'success': True, 'report': report})
            except (RinkStatsError, ValueError) as e:
                self.logger.error(f"Failed to generate report for {division}: {e}")
                results.append({'division': division, 'success': False, 'error': str(e)})

        succeeded = sum(1 for result in results if result['success'])
        self.logger.info(f"Generated {succeeded}/{len(results)} division reports")
        return results
