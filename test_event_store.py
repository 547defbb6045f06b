#!/usr/bin/env python3
"""
Test loading event collections from the file-backed event store
"""

import json
import tempfile
from pathlib import Path

import pytest

from config.league_config import LeagueConfig
from src.aggregate.player_stats_calculator import PlayerStatsCalculator
from src.utils.errors import AttendanceDataError, EventStoreError
from src.utils.event_store import EventStore, group_roster_documents

COLLECTIONS = {
    'games': [
        {'id': 'g1', 'homeTeam': 'Sharks', 'awayTeam': 'Bears', 'division': 'Gold',
         'eventType': 'game-submission', 'submittedAt': '2025-02-11T21:00:00',
         'gameSummary': {'goalsByTeam': {'Sharks': 2, 'Bears': 1}}},
    ],
    'goals': [
        {'gameId': 'g1', 'teamName': 'Sharks', 'playerName': 'Ann', 'assistedBy': ['Bo', 'Cy', 'Dee'],
         'period': 1, 'timeRemaining': '12:00'},
        {'gameId': 'g1', 'scoringTeam': 'Bears', 'scorer': 'Eve', 'assist': 'Fay'},
        {'teamName': 'Sharks', 'playerName': 'No Game'},
    ],
    'penalties': [
        {'gameId': 'g1', 'penalizedTeam': 'Bears', 'penalizedPlayer': 'Eve', 'length': '2'},
    ],
    'attendance': [
        {'gameId': 'g1', 'recordedAt': '2025-02-11T19:00:00',
         'roster': [{'teamName': 'Sharks', 'totalPlayers': ['Ann', 'Bo']},
                    {'teamName': 'Bears', 'players': [{'name': 'Eve'}]}],
         'attendance': [{'teamName': 'Sharks', 'playersPresent': ['Ann']},
                        {'teamName': 'Bears', 'playersPresent': ['Eve']}]},
    ],
    'rosters': [
        {'firstName': 'Ann', 'lastName': 'Lee', 'teamName': 'Sharks', 'jerseyNumber': '10', 'division': 'Gold'},
        {'firstName': 'Bo', 'lastName': 'Diaz', 'teamName': 'Sharks', 'jerseyNumber': '11', 'division': 'Gold'},
        {'teamName': 'Bears', 'division': 'Gold', 'players': [{'name': 'Eve', 'position': 'Goalie'}]},
    ],
}


def write_collections(root, collections=COLLECTIONS):
    config = LeagueConfig({'storage_root': str(root)})
    for name, documents in collections.items():
        path = Path(config.get_collection_path(name))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(documents))
    return config


def test_load_all_parses_every_collection(tmp_path):
    events = EventStore(write_collections(tmp_path)).load_all()

    assert set(events) == {'games', 'goals', 'penalties', 'attendance', 'rosters'}
    assert events['games'][0].game_id == 'g1'
    assert events['penalties'][0].penalty_minutes == 2
    assert events['penalties'][0].team_name == 'Bears'


def test_goal_shapes_are_normalized_and_bad_records_skipped(tmp_path):
    goals = EventStore(write_collections(tmp_path)).load_collection('goals')

    assert len(goals) == 2
    assert goals[0].assisted_by == ['Bo', 'Cy']
    assert goals[1].team_name == 'Bears'
    assert goals[1].player_name == 'Eve'
    assert goals[1].assisted_by == ['Fay']


def test_flat_roster_documents_are_grouped_by_team(tmp_path):
    rosters = EventStore(write_collections(tmp_path)).load_collection('rosters')
    by_team = {roster.team_name: roster for roster in rosters}

    assert [p.name for p in by_team['Sharks'].players] == ['Ann Lee', 'Bo Diaz']
    assert by_team['Sharks'].players[0].jersey_number == '10'
    assert by_team['Bears'].players[0].position == 'Goalie'


def test_group_roster_documents_keeps_grouped_entries():
    grouped = group_roster_documents([
        {'teamName': 'Sharks', 'players': []},
        {'teamName': 'Bears', 'name': 'Eve'},
        {'teamName': 'Bears', 'name': 'Fay'},
    ])
    assert grouped[0] == {'teamName': 'Sharks', 'players': []}
    assert grouped[1]['teamName'] == 'Bears'
    assert len(grouped[1]['players']) == 2


def test_attendance_for_team(tmp_path):
    store = EventStore(write_collections(tmp_path))
    assert len(store.attendance_for_team('Bears')) == 1
    assert store.attendance_for_team('Wolves') == []


def test_missing_collection_raises(tmp_path):
    collections = dict(COLLECTIONS)
    del collections['penalties']
    store = EventStore(write_collections(tmp_path, collections))

    with pytest.raises(EventStoreError):
        store.load_collection('penalties')
    with pytest.raises(EventStoreError):
        store.load_all()


def test_invalid_json_raises(tmp_path):
    config = write_collections(tmp_path)
    Path(config.get_collection_path('attendance')).write_text('{not json')

    with pytest.raises(EventStoreError):
        EventStore(config).load_collection('attendance')


def test_unreadable_attendance_surfaces_through_calculator(tmp_path):
    config = write_collections(tmp_path)
    Path(config.get_collection_path('attendance')).write_text('{"not": "a list"}')
    calculator = PlayerStatsCalculator(config, EventStore(config).attendance_for_team)

    with pytest.raises(AttendanceDataError):
        calculator.calculate_player_stats('Ann', 'Sharks')


if __name__ == "__main__":
    test_group_roster_documents_keeps_grouped_entries()
    for test in (
        test_load_all_parses_every_collection,
        test_goal_shapes_are_normalized_and_bad_records_skipped,
        test_flat_roster_documents_are_grouped_by_team,
        test_attendance_for_team,
        test_missing_collection_raises,
        test_invalid_json_raises,
        test_unreadable_attendance_surfaces_through_calculator,
    ):
        with tempfile.TemporaryDirectory() as tmp_dir:
            test(Path(tmp_dir))
    print("Event store tests passed")
