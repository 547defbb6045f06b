#!/usr/bin/env python3
"""
Event Validator for the Rink Stats Engine
=========================================

Business-rule checks for a batch of scorekeeper events before they feed
the aggregations: required fields, period and clock format, penalty
length, team participation in the referenced game, and scorer presence
on the team roster.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from config.league_config import LeagueConfig
from src.model.events import Game, RosterEntry

GOAL_REQUIRED_FIELDS = ['gameId', 'teamName', 'playerName', 'period', 'timeRemaining']
PENALTY_REQUIRED_FIELDS = ['gameId', 'teamName', 'playerName', 'period', 'timeRemaining', 'penaltyType', 'penaltyLength']

TIME_REMAINING_PATTERN = re.compile(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$')
OVERTIME_PERIODS = {'OT', 'ot'}
MIN_PENALTY_LENGTH = 1
MAX_PENALTY_LENGTH = 10


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip()) or value == []


def valid_period(period: Any) -> bool:
    """Periods 1-3, or overtime."""
    if isinstance(period, str) and period.strip() in OVERTIME_PERIODS:
        return True
    try:
        return 1 <= int(period) <= 3
    except (TypeError, ValueError):
        return False


def valid_time_remaining(value: Any) -> bool:
    return bool(TIME_REMAINING_PATTERN.match(str(value)))


def valid_penalty_length(value: Any) -> bool:
    try:
        minutes = int(str(value).strip())
    except ValueError:
        return False
    return MIN_PENALTY_LENGTH <= minutes <= MAX_PENALTY_LENGTH


class EventValidator:
    """
    Validates goal and penalty documents against games and rosters.

    Errors make a record invalid; warnings (player not on roster) do not.
    The validator reports problems, it never raises on bad data.
    """

    def __init__(self, config: LeagueConfig):
        """Initialize the event validator."""
        self.config = config
        self.logger = logging.getLogger('EventValidator')

    def _normalize_penalty(self, document: Any) -> Any:
        if not isinstance(document, dict):
            return document
        document = dict(document)
        if _missing(document.get('penaltyLength')) and not _missing(document.get('length')):
            document['penaltyLength'] = document['length']
        return document

    def _roster_names(self, rosters: Sequence[RosterEntry]) -> Dict[str, set]:
        names: Dict[str, set] = {}
        for roster in rosters:
            names.setdefault(roster.team_name, set()).update(player.name for player in roster.players)
        return names

    def validate_event(self, document: Dict[str, Any], required_fields: Sequence[str],
                       games_by_id: Dict[str, Game], roster_names: Dict[str, set]) -> Dict[str, List[str]]:
        """
        Validate one goal or penalty document.

        Returns:
            {'errors': [...], 'warnings': [...]}
        """
        if not isinstance(document, dict):
            return {'errors': ["Record is not an object"], 'warnings': []}

        errors = [f"Missing required field: {field}" for field in required_fields if _missing(document.get(field))]
        warnings = []

        period = document.get('period')
        if not _missing(period) and not valid_period(period):
            errors.append("Period must be between 1 and 3 or OT")

        time_remaining = document.get('timeRemaining')
        if not _missing(time_remaining) and not valid_time_remaining(time_remaining):
            errors.append("Time remaining must be in MM:SS format")

        if 'penaltyLength' in required_fields:
            length = document.get('penaltyLength')
            if not _missing(length) and not valid_penalty_length(length):
                errors.append(
                    f"Penalty length must be between {MIN_PENALTY_LENGTH} and {MAX_PENALTY_LENGTH} minutes"
                )

        game_id = document.get('gameId')
        team_name = document.get('teamName')
        if not _missing(game_id):
            game = games_by_id.get(str(game_id))
            if game is None:
                errors.append("Game not found")
            elif team_name and team_name not in game.teams:
                errors.append("Team is not participating in this game")

        player_name = document.get('playerName')
        if team_name and player_name and team_name in roster_names:
            if player_name not in roster_names[team_name]:
                warnings.append(f"Player {player_name} is not on the {team_name} roster")

        return {'errors': errors, 'warnings': warnings}

    def _completeness(self, documents: Sequence[Dict[str, Any]], required_fields: Sequence[str]) -> float:
        """Share of required cells that are filled in."""
        if not documents:
            return 1.0
        records = [document if isinstance(document, dict) else {} for document in documents]
        frame = pd.DataFrame(records).reindex(columns=list(required_fields))
        total_cells = frame.shape[0] * frame.shape[1]
        missing_cells = int((frame.isnull() | (frame == '')).sum().sum())
        return (total_cells - missing_cells) / total_cells if total_cells > 0 else 1.0

    def validate_batch(self, goals: Sequence[Dict[str, Any]], penalties: Sequence[Dict[str, Any]],
                       games: Sequence[Game], rosters: Optional[Sequence[RosterEntry]] = None) -> Dict[str, Any]:
        """
        Validate a batch of goal and penalty documents.

        Args:
            goals: Raw goal documents
            penalties: Raw penalty documents
            games: Games the events refer to
            rosters: Team rosters for the player check (optional)

        Returns:
            Dictionary containing validation results
        """
        result = {
            'timestamp': datetime.now().isoformat(),
            'valid': True,
            'errors': [],
            'warnings': [],
            'data_quality_score': 1.0,
            'validation_details': {}
        }

        games_by_id = {game.game_id: game for game in games}
        games_by_id.update({game.id: game for game in games if game.id and game.id not in games_by_id})
        roster_names = self._roster_names(rosters or [])
        penalties = [self._normalize_penalty(document) for document in penalties]

        checked = 0
        clean = 0
        for label, documents, required_fields in (
            ('goal', goals, GOAL_REQUIRED_FIELDS),
            ('penalty', penalties, PENALTY_REQUIRED_FIELDS),
        ):
            invalid = 0
            for index, document in enumerate(documents):
                outcome = self.validate_event(document, required_fields, games_by_id, roster_names)
                game_id = document.get('gameId') if isinstance(document, dict) else None
                prefix = f"{label.capitalize()} #{index} (game {game_id})"
                result['errors'].extend(f"{prefix}: {error}" for error in outcome['errors'])
                result['warnings'].extend(f"{prefix}: {warning}" for warning in outcome['warnings'])
                if outcome['errors']:
                    invalid += 1
            checked += len(documents)
            clean += len(documents) - invalid
            result['validation_details'][label] = {
                'records': len(documents),
                'invalid_records': invalid,
                'completeness': self._completeness(documents, required_fields)
            }

        result['valid'] = not result['errors']
        result['data_quality_score'] = clean / checked if checked > 0 else 1.0

        if result['valid']:
            self.logger.info(f"Validated {checked} events: no errors, {len(result['warnings'])} warnings")
        else:
            self.logger.warning(
                f"Validated {checked} events: {len(result['errors'])} errors, "
                f"{len(result['warnings'])} warnings (quality {result['data_quality_score']:.2f})"
            )
        return result
