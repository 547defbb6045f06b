#!/usr/bin/env python3
"""
Document Storage for the Rink Stats Engine
==========================================

JSON document collections for the derived PlayerStat and RinkReport
documents, plus CSV export of player stats. Documents are keyed by `id`
and every write is an upsert: storing a document again replaces the
previous version instead of appending a duplicate.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from config.league_config import LeagueConfig
from src.model.player_stats import PlayerStat
from src.model.rink_report import RinkReport
from src.utils.errors import ReportPublishError

PLAYER_STATS_CSV_COLUMNS = [
    'player_id', 'player_name', 'team_name', 'season',
    'games_attended', 'total_team_games', 'attendance_percentage',
    'recent_games', 'recent_attendance', 'recent_percentage',
    'reliability_rating', 'trend', 'position', 'jersey_number', 'last_updated',
]


class DocumentStore:
    """
    Upsert-keyed JSON document collections.

    Each collection is one JSON file holding a list of documents; the file
    location comes from LeagueConfig.file_paths.
    """

    def __init__(self, config: LeagueConfig):
        """Initialize the document store."""
        self.config = config
        self.logger = logging.getLogger('DocumentStore')

    def _path(self, collection: str) -> Path:
        return Path(self.config.get_collection_path(collection))

    def read_all(self, collection: str) -> List[Dict[str, Any]]:
        """All documents of a collection; empty when nothing was stored yet."""
        path = self._path(collection)
        if not path.exists():
            return []
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        for document in self.read_all(collection):
            if document.get('id') == document_id:
                return document
        return None

    def _write_all(self, collection: str, documents: List[Dict[str, Any]]) -> None:
        path = self._path(collection)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(documents, f, indent=2)
        os.replace(tmp_path, path)

    def upsert_many(self, collection: str, documents: Sequence[Dict[str, Any]]) -> int:
        """
        Insert or replace documents by id.

        Args:
            collection: Collection key (player_stats, rink_reports)
            documents: Documents carrying an 'id'

        Returns:
            Number of documents written
        """
        if not documents:
            return 0
        for document in documents:
            if not document.get('id'):
                raise ValueError(f"Document without id cannot be stored in {collection}")

        stored = self.read_all(collection)
        positions = {document.get('id'): index for index, document in enumerate(stored)}
        replaced = 0
        for document in documents:
            index = positions.get(document['id'])
            if index is None:
                positions[document['id']] = len(stored)
                stored.append(document)
            else:
                stored[index] = document
                replaced += 1

        self._write_all(collection, stored)
        self.logger.info(
            f"Upserted {len(documents)} documents into {collection} "
            f"({replaced} replaced, {len(documents) - replaced} new)"
        )
        return len(documents)

    def upsert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        self.upsert_many(collection, [document])
        return document

    def save_player_stats(self, player_stats: Sequence[PlayerStat]) -> int:
        """Store PlayerStat documents, one per (team, player)."""
        return self.upsert_many('player_stats', [stat.model_dump(by_alias=True) for stat in player_stats])


class RinkReportPublisher:
    """Persists rink reports; one stored document per (division, cycle)."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.logger = logging.getLogger('RinkReportPublisher')

    def publish(self, report: RinkReport) -> Dict[str, Any]:
        document = report.model_dump(by_alias=True)
        try:
            self.store.upsert('rink_reports', document)
        except (OSError, TypeError, ValueError) as e:
            raise ReportPublishError(f"Failed to publish report {report.id}: {e}") from e
        self.logger.info(f"Published rink report {report.id}")
        return document


def player_stats_rows(player_stats: Sequence[PlayerStat]) -> List[Dict[str, Any]]:
    """Flatten PlayerStat documents into CSV rows."""
    return [
        {
            'player_id': stat.player_id,
            'player_name': stat.player_name,
            'team_name': stat.team_name,
            'season': stat.season,
            'games_attended': stat.attendance.games_attended,
            'total_team_games': stat.attendance.total_team_games,
            'attendance_percentage': stat.attendance.attendance_percentage,
            'recent_games': stat.attendance.recent_form.last_five_games,
            'recent_attendance': stat.attendance.recent_form.recent_attendance,
            'recent_percentage': stat.attendance.recent_form.recent_percentage,
            'reliability_rating': stat.insights.reliability_rating,
            'trend': stat.insights.trend,
            'position': stat.player_info.position,
            'jersey_number': stat.player_info.jersey_number,
            'last_updated': stat.last_updated,
        }
        for stat in player_stats
    ]


def export_player_stats_csv(player_stats: Sequence[PlayerStat], output_path: str) -> str:
    """Write player stats as one CSV row per player; returns the file path."""
    stats_df = pd.DataFrame(player_stats_rows(player_stats), columns=PLAYER_STATS_CSV_COLUMNS)
    stats_df = stats_df.sort_values(['team_name', 'player_name']).reset_index(drop=True)
    os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
    stats_df.to_csv(output_path, index=False)
    logging.getLogger('DocumentStore').info(f"Exported {len(stats_df)} player stats to {output_path}")
    return output_path
