#!/usr/bin/env python3
"""
League Configuration
====================

This module provides the configuration system for the rink stats engine:
storage locations for the event and derived-document collections, the
season label stamped on player stats, the divisions that receive rink
reports, and the list-size limits used by the report generator.
"""

import os
from typing import Dict, List, Any


class LeagueConfig:
    """
    Configuration class for the rink stats engine.

    Built from a plain configuration dictionary; any key left out falls
    back to the value in create_default_config().
    """

    def __init__(self, config_dict: Dict[str, Any] = None):
        """Initialize the configuration."""
        if config_dict is None:
            config_dict = {}

        # Basic settings
        self.verbose = config_dict.get('verbose', False)
        self.produce_csv = config_dict.get('produce_csv', True)
        self.max_workers = config_dict.get('max_workers', 4)

        # League settings
        self.season = config_dict.get('season', 'winter 2025')
        self.divisions: List[str] = list(config_dict.get('divisions', ['Gold', 'Silver', 'Bronze']))
        self.sub_placeholder_names: List[str] = list(config_dict.get('sub_placeholder_names', ['Sub']))
        self.report_author = config_dict.get('report_author', 'AI Report Generator')

        # Aggregation windows and list limits
        self.recent_form_window = config_dict.get('recent_form_window', 5)
        self.trend_window = config_dict.get('trend_window', 3)
        self.top_scorer_limit = config_dict.get('top_scorer_limit', 10)
        self.max_highlights = config_dict.get('max_highlights', 6)
        self.max_standout_players = config_dict.get('max_standout_players', 3)

        # File paths setup
        self.current_path = os.getcwd()
        self.storage_root = config_dict.get('storage_root', os.path.join(self.current_path, "storage"))

        self.file_paths = {
            # Event collections supplied by the scorekeeper
            "games": os.path.join(self.storage_root, "json", "games.json"),
            "goals": os.path.join(self.storage_root, "json", "goals.json"),
            "penalties": os.path.join(self.storage_root, "json", "penalties.json"),
            "attendance": os.path.join(self.storage_root, "json", "attendance.json"),
            "rosters": os.path.join(self.storage_root, "json", "rosters.json"),

            # Derived documents (upsert keyed by id)
            "player_stats": os.path.join(self.storage_root, "documents", "player-stats.json"),
            "rink_reports": os.path.join(self.storage_root, "documents", "rink-reports.json"),

            # CSV exports
            "csv_exports": os.path.join(self.storage_root, "csv"),

            # Logs
            "logs": os.path.join(self.storage_root, "logs")
        }

    def get_collection_path(self, collection: str) -> str:
        """
        Return the file path for a named collection.

        Args:
            collection: Collection key (games, goals, penalties, ...)

        Returns:
            Absolute or storage-relative path of the collection file
        """
        if collection not in self.file_paths:
            raise KeyError(f"Unknown collection: {collection}")
        return self.file_paths[collection]

    def create_storage_directories(self) -> None:
        """Create the storage directories used for documents, exports and logs."""
        stable_dirs = [
            self.storage_root,
            os.path.dirname(self.file_paths["games"]),
            os.path.dirname(self.file_paths["player_stats"]),
            self.file_paths["logs"],
        ]
        if self.produce_csv:
            stable_dirs.append(self.file_paths["csv_exports"])
        for directory in stable_dirs:
            os.makedirs(directory, exist_ok=True)


def create_default_config() -> Dict[str, Any]:
    """Create default configuration dictionary."""
    return {
        'verbose': False,
        'produce_csv': True,
        'max_workers': 4,
        'storage_root': os.path.join(os.getcwd(), "storage"),

        # League
        'season': 'winter 2025',
        'divisions': ['Gold', 'Silver', 'Bronze'],
        'sub_placeholder_names': ['Sub'],
        'report_author': 'AI Report Generator',

        # Aggregation windows and report limits
        'recent_form_window': 5,
        'trend_window': 3,
        'top_scorer_limit': 10,
        'max_highlights': 6,
        'max_standout_players': 3
    }
