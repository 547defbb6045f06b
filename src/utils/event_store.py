#!/usr/bin/env python3
"""
File-backed Event Store
=======================

Reads the scorekeeper's event collections (games, goals, penalties,
attendance, rosters) from JSON files under the storage root and returns
them as immutable models. A collection that cannot be read fails loudly
with EventStoreError; a single record that does not fit its model is
skipped with a warning.
"""

import json
import logging
import os
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Type

from pydantic import BaseModel, ValidationError

from config.league_config import LeagueConfig
from src.model.events import AttendanceRecord, Game, Goal, Penalty, RosterEntry
from src.utils.errors import EventStoreError

COLLECTION_MODELS: Dict[str, Type[BaseModel]] = {
    'games': Game,
    'goals': Goal,
    'penalties': Penalty,
    'attendance': AttendanceRecord,
    'rosters': RosterEntry,
}


def group_roster_documents(documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Turn flat per-player roster documents into one roster per team.

    Documents that already carry a `players` list pass through unchanged;
    the rest are grouped by team name in first-seen order.
    """
    grouped: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    rosters = []
    for document in documents:
        if 'players' in document:
            rosters.append(document)
            continue
        team_name = document.get('teamName') or document.get('team_name')
        if not team_name:
            rosters.append(document)
            continue
        roster = grouped.setdefault(team_name, {
            'teamName': team_name,
            'teamId': document.get('teamId'),
            'division': document.get('division'),
            'season': document.get('season'),
            'players': [],
        })
        roster['players'].append(document)
    return rosters + list(grouped.values())


class EventStore:
    """Loads event collections from the configured JSON files."""

    def __init__(self, config: LeagueConfig):
        """Initialize the event store."""
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def read_documents(self, collection: str) -> List[Dict[str, Any]]:
        """Raw documents of a collection."""
        try:
            path = self.config.get_collection_path(collection)
        except KeyError as e:
            raise EventStoreError(str(e)) from e

        if not os.path.exists(path):
            raise EventStoreError(f"Collection '{collection}' not found at {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                documents = json.load(f)
        except json.JSONDecodeError as e:
            raise EventStoreError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise EventStoreError(f"Cannot read {path}: {e}") from e

        if not isinstance(documents, list):
            raise EventStoreError(f"Collection '{collection}' must be a JSON list of documents")
        return documents

    def load_collection(self, collection: str) -> List[BaseModel]:
        """Documents of a collection parsed into their event model."""
        model = COLLECTION_MODELS.get(collection)
        if model is None:
            raise EventStoreError(f"Unknown event collection: {collection}")

        documents = self.read_documents(collection)
        if collection == 'rosters':
            documents = group_roster_documents(documents)

        records = []
        for index, document in enumerate(documents):
            try:
                records.append(model.model_validate(document))
            except ValidationError as e:
                self.logger.warning(
                    f"Skipping malformed {collection} record #{index}: {e.error_count()} validation errors"
                )
        self.logger.debug(f"Loaded {len(records)}/{len(documents)} {collection} records")
        return records

    def load_all(self) -> Dict[str, List[BaseModel]]:
        """
        Load every event collection.

        The reads are independent, so they run in a thread pool. Any
        collection failing to load fails the whole call.
        """
        collections: Dict[str, List[BaseModel]] = {}
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            future_to_collection = {
                executor.submit(self.load_collection, collection): collection
                for collection in COLLECTION_MODELS
            }
            for future in as_completed(future_to_collection):
                collection = future_to_collection[future]
                collections[collection] = future.result()
                self.logger.info(f"Loaded {len(collections[collection])} {collection}")
        return collections

    def attendance_for_team(self, team_name: str) -> List[AttendanceRecord]:
        """Attendance records whose roster section includes the team."""
        return [record for record in self.load_collection('attendance') if record.involves_team(team_name)]
