#!/usr/bin/env python3
"""
Test goal and penalty validation against games and rosters
"""

from config.league_config import LeagueConfig
from src.model.events import Game, RosterEntry
from src.validate.validator import (
    EventValidator,
    valid_penalty_length,
    valid_period,
    valid_time_remaining,
)

GAMES = [Game.model_validate({'id': 'g1', 'homeTeam': 'Sharks', 'awayTeam': 'Bears', 'division': 'Gold'})]
ROSTERS = [RosterEntry.model_validate({'teamName': 'Sharks', 'players': ['Ann', 'Bo']})]


def valid_goal(**overrides):
    document = {'gameId': 'g1', 'teamName': 'Sharks', 'playerName': 'Ann', 'period': 2, 'timeRemaining': '08:15'}
    document.update(overrides)
    return document


def valid_penalty(**overrides):
    document = valid_goal(penaltyType='Hooking', penaltyLength=2)
    document.update(overrides)
    return document


def test_clean_batch_is_valid():
    result = EventValidator(LeagueConfig()).validate_batch([valid_goal()], [valid_penalty()], GAMES, ROSTERS)

    assert result['valid'] is True
    assert result['errors'] == []
    assert result['warnings'] == []
    assert result['data_quality_score'] == 1.0
    assert result['validation_details']['goal']['completeness'] == 1.0


def test_missing_fields_are_errors():
    result = EventValidator(LeagueConfig()).validate_batch(
        [valid_goal(playerName='', timeRemaining=None)], [], GAMES, ROSTERS
    )

    assert result['valid'] is False
    assert 'Goal #0 (game g1): Missing required field: playerName' in result['errors']
    assert 'Goal #0 (game g1): Missing required field: timeRemaining' in result['errors']
    assert result['validation_details']['goal']['completeness'] == 0.6


def test_period_clock_and_length_rules():
    validator = EventValidator(LeagueConfig())
    result = validator.validate_batch(
        [valid_goal(period=4), valid_goal(timeRemaining='8:5'), valid_goal(period='OT')],
        [valid_penalty(penaltyLength=12), valid_penalty(penaltyLength=None, length='5')],
        GAMES, ROSTERS
    )

    assert 'Goal #0 (game g1): Period must be between 1 and 3 or OT' in result['errors']
    assert 'Goal #1 (game g1): Time remaining must be in MM:SS format' in result['errors']
    assert not any(error.startswith('Goal #2') for error in result['errors'])
    assert 'Penalty #0 (game g1): Penalty length must be between 1 and 10 minutes' in result['errors']
    assert not any(error.startswith('Penalty #1') for error in result['errors'])
    assert result['data_quality_score'] == 0.4


def test_game_and_team_participation():
    result = EventValidator(LeagueConfig()).validate_batch(
        [valid_goal(gameId='g404'), valid_goal(teamName='Wolves', playerName='Eve')], [], GAMES, ROSTERS
    )

    assert 'Goal #0 (game g404): Game not found' in result['errors']
    assert 'Goal #1 (game g1): Team is not participating in this game' in result['errors']


def test_player_off_roster_is_only_a_warning():
    result = EventValidator(LeagueConfig()).validate_batch(
        [valid_goal(playerName='Walk On'), valid_goal(teamName='Bears', playerName='Dee')], [], GAMES, ROSTERS
    )

    assert result['valid'] is True
    assert result['warnings'] == ['Goal #0 (game g1): Player Walk On is not on the Sharks roster']


def test_non_object_records_are_reported():
    result = EventValidator(LeagueConfig()).validate_batch(['junk', valid_goal()], [42], GAMES, ROSTERS)

    assert result['valid'] is False
    assert result['errors'] == [
        'Goal #0 (game None): Record is not an object',
        'Penalty #0 (game None): Record is not an object',
    ]
    assert result['validation_details']['goal']['invalid_records'] == 1
    assert result['validation_details']['goal']['completeness'] == 0.5
    assert result['data_quality_score'] == 1 / 3


def test_empty_batch():
    result = EventValidator(LeagueConfig()).validate_batch([], [], [], None)
    assert result['valid'] is True
    assert result['data_quality_score'] == 1.0


def test_field_checks():
    assert valid_period(1) and valid_period('3') and valid_period('OT')
    assert not valid_period(0) and not valid_period('4') and not valid_period('second')
    assert valid_time_remaining('15:00') and valid_time_remaining('0:59')
    assert not valid_time_remaining('15:60') and not valid_time_remaining('1500')
    assert valid_penalty_length('2') and valid_penalty_length(10)
    assert not valid_penalty_length(0) and not valid_penalty_length('abc') and not valid_penalty_length(11)


if __name__ == "__main__":
    test_clean_batch_is_valid()
    test_missing_fields_are_errors()
    test_period_clock_and_length_rules()
    test_game_and_team_participation()
    test_player_off_roster_is_only_a_warning()
    test_non_object_records_are_reported()
    test_empty_batch()
    test_field_checks()
    print("Validator tests passed")
