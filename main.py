#!/usr/bin/env python3
"""
Rink Stats Engine - Step-Based Processing
=========================================

Turns the scorekeeper's raw event collections (games, goals, penalties,
attendance, rosters) into per-player analytical profiles and per-division
rink reports.

Processing Steps:
- step_01_load_events: Load the event collections from storage
- step_02_validate: Check goals and penalties against games and rosters
- step_03_player_stats: Build and store one PlayerStat per rostered player
- step_04_rink_reports: Generate and publish one rink report per division
- step_05_export: Export player stats to CSV

Derived documents are upserted by id, so re-running a step replaces the
previous documents instead of duplicating them.
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from config.league_config import LeagueConfig, create_default_config
from src.aggregate.player_stats_calculator import PlayerStatsCalculator
from src.report.rink_report_generator import RinkReportGenerator
from src.utils.errors import RinkStatsError
from src.utils.event_store import EventStore
from src.utils.storage import DocumentStore, RinkReportPublisher, export_player_stats_csv
from src.utils.week_utils import get_current_week_id
from src.validate.validator import EventValidator

LOG_HANDLER_NAMES = ('rink_stats_console', 'rink_stats_file')


class RinkStatsSystem:
    """
    Step-based driver for the rink stats engine.

    Each step reads what earlier steps produced from the instance, so a
    step can only run once its dependencies have completed.
    """

    # Define processing steps
    PROCESSING_STEPS = [
        'step_01_load_events',
        'step_02_validate',
        'step_03_player_stats',
        'step_04_rink_reports',
        'step_05_export'
    ]

    # Define step dependencies
    STEP_DEPENDENCIES = {
        'step_01_load_events': [],
        'step_02_validate': ['step_01_load_events'],
        'step_03_player_stats': ['step_01_load_events'],
        'step_04_rink_reports': ['step_01_load_events'],
        'step_05_export': ['step_03_player_stats']
    }

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize the rink stats system.

        Args:
            config: Configuration dictionary with system parameters, or None for default
        """
        if config is None:
            self.config_dict = create_default_config()
        else:
            self.config_dict = config

        self.config = LeagueConfig(self.config_dict)
        self.config.create_storage_directories()

        self.logger = self._setup_logging()

        # Initialize components
        self.event_store = EventStore(self.config)
        self.document_store = DocumentStore(self.config)
        self.validator = EventValidator(self.config)
        self.report_generator = RinkReportGenerator(
            self.config, publisher=RinkReportPublisher(self.document_store)
        )

        # Track completed steps for dependency management
        self.completed_steps = set()
        self.step_results = {}
        self.events: Dict[str, List[Any]] = {}
        self.player_stats = []

    def _setup_logging(self) -> logging.Logger:
        """Set up console and file logging for the whole engine."""
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG if self.config.verbose else logging.INFO)

        # Replace handlers left by an earlier instance
        for handler in list(root_logger.handlers):
            if handler.get_name() in LOG_HANDLER_NAMES:
                root_logger.removeHandler(handler)
                handler.close()

        console_handler = logging.StreamHandler(sys.stdout)
        log_file = os.path.join(
            self.config.file_paths['logs'],
            f'rink_stats_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        )
        file_handler = logging.FileHandler(log_file)
        console_handler.set_name('rink_stats_console')
        file_handler.set_name('rink_stats_file')

        log_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(log_format)
        file_handler.setFormatter(log_format)

        root_logger.addHandler(console_handler)
        root_logger.addHandler(file_handler)

        return logging.getLogger('RinkStats')

    def full_update(self, divisions: Optional[List[str]] = None, week_id: Optional[str] = None) -> None:
        """Run every step in order."""
        divisions = divisions or self.config.divisions
        week_id = week_id or get_current_week_id()
        self.logger.info(f"Starting full update for week {week_id}: {', '.join(divisions)}")

        for step in self.PROCESSING_STEPS:
            try:
                self.execute_step(step, divisions, week_id)
            except Exception as e:
                self.logger.error(f"Error in {step}: {e}")
                raise

        self.logger.info("Full update completed successfully")

    def execute_step(self, step_name: str, divisions: Optional[List[str]] = None,
                     week_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Execute a specific processing step.

        Args:
            step_name: Name of the step to execute
            divisions: Divisions to process
            week_id: Report cycle ('current', 'week-N' or 'YYYY-Www')

        Returns:
            Dictionary containing step results
        """
        if step_name not in self.STEP_DEPENDENCIES:
            raise ValueError(f"Unknown step: {step_name}")
        divisions = divisions or self.config.divisions
        week_id = week_id or get_current_week_id()

        missing_deps = [dep for dep in self.STEP_DEPENDENCIES[step_name] if dep not in self.completed_steps]
        if missing_deps:
            raise ValueError(f"Step {step_name} missing dependencies: {missing_deps}")

        self.logger.info(f"Executing {step_name}")
        result = getattr(self, step_name)(divisions, week_id)

        self.completed_steps.add(step_name)
        self.step_results[step_name] = result
        self.logger.info(f"Completed {step_name}")
        return result

    def step_01_load_events(self, divisions: List[str], week_id: str) -> Dict[str, Any]:
        """Step 1: Load the event collections."""
        self.events = self.event_store.load_all()
        return {name: len(records) for name, records in self.events.items()}

    def step_02_validate(self, divisions: List[str], week_id: str) -> Dict[str, Any]:
        """Step 2: Validate goals and penalties. Problems are reported, not fatal."""
        result = self.validator.validate_batch(
            self.event_store.read_documents('goals'),
            self.event_store.read_documents('penalties'),
            self.events['games'],
            self.events['rosters']
        )
        for error in result['errors'][:20]:
            self.logger.warning(error)
        return {
            'valid': result['valid'],
            'errors': len(result['errors']),
            'warnings': len(result['warnings']),
            'data_quality_score': result['data_quality_score']
        }

    def step_03_player_stats(self, divisions: List[str], week_id: str) -> Dict[str, Any]:
        """Step 3: Profile every rostered player and upsert the PlayerStat documents."""
        rosters = [
            roster for roster in self.events['rosters']
            if roster.division is None or roster.division in divisions
        ]
        calculator = PlayerStatsCalculator(self.config, attendance_source=self.events['attendance'])
        team_results = calculator.refresh_all_stats(rosters, timestamp=datetime.now().isoformat())

        self.player_stats = [
            stat for result in team_results.values() if result['success'] for stat in result['player_stats']
        ]
        stored = self.document_store.save_player_stats(self.player_stats)
        failed = sorted(team for team, result in team_results.items() if not result['success'])
        return {'teams': len(team_results), 'players': stored, 'failed_teams': failed}

    def step_04_rink_reports(self, divisions: List[str], week_id: str) -> Dict[str, Any]:
        """Step 4: Generate and publish one rink report per division."""
        results = self.report_generator.generate_reports_for_all_divisions(
            self.events['games'], self.events['goals'], self.events['penalties'],
            week_id=week_id, divisions=divisions
        )
        return {
            'reports': [result['report'].id for result in results if result['success']],
            'failed': {result['division']: result['error'] for result in results if not result['success']}
        }

    def step_05_export(self, divisions: List[str], week_id: str) -> Dict[str, Any]:
        """Step 5: Export player stats to CSV."""
        if not self.config.produce_csv:
            self.logger.info("CSV export disabled")
            return {'exported': 0}
        output_path = os.path.join(
            self.config.file_paths['csv_exports'],
            f'player_stats_{datetime.now().strftime("%Y%m%d_%H%M%S")}.csv'
        )
        export_player_stats_csv(self.player_stats, output_path)
        return {'exported': len(self.player_stats), 'path': output_path}


def main():
    """Main entry point for the rink stats engine."""
    parser = argparse.ArgumentParser(
        description="Rink Stats Engine - player stats and weekly rink reports"
    )

    parser.add_argument(
        '--mode',
        choices=['full', 'step'],
        default='full',
        help='Operation mode (default: full)'
    )

    parser.add_argument(
        '--step',
        choices=RinkStatsSystem.PROCESSING_STEPS,
        help='Specific step to execute (only used with --mode step)'
    )

    parser.add_argument(
        '--steps',
        nargs='+',
        choices=RinkStatsSystem.PROCESSING_STEPS,
        help='Multiple specific steps to execute in sequence (only used with --mode step)'
    )

    parser.add_argument(
        '--divisions',
        nargs='+',
        help='Divisions to process (default: all configured divisions)'
    )

    parser.add_argument(
        '--week',
        help="Report cycle: 'current', 'week-N' or 'YYYY-Www' (default: current ISO week)"
    )

    parser.add_argument(
        '--storage-root',
        help='Root directory of the event collections and derived documents'
    )

    parser.add_argument(
        '--season',
        help='Season label stamped on player stats'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args()

    config = create_default_config()
    config['verbose'] = args.verbose
    if args.storage_root:
        config['storage_root'] = args.storage_root
    if args.season:
        config['season'] = args.season

    system = RinkStatsSystem(config)

    try:
        if args.mode == 'full':
            system.full_update(args.divisions, args.week)
        elif args.mode == 'step':
            steps = args.steps or ([args.step] if args.step else [])
            if not steps:
                print("Error: --step or --steps must be specified when using --mode step")
                sys.exit(1)
            for step in steps:
                result = system.execute_step(step, args.divisions, args.week)
                print(f"Step {step} completed successfully")
                if args.verbose:
                    print(f"  Result: {result}")

    except KeyboardInterrupt:
        system.logger.info("Operation cancelled by user")
        sys.exit(1)
    except (RinkStatsError, ValueError) as e:
        system.logger.error(f"Operation failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
