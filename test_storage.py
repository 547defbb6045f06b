#!/usr/bin/env python3
"""
Test document upserts, report publishing and the player stats CSV export
"""

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from config.league_config import LeagueConfig
from src.aggregate.player_stats_calculator import PlayerStatsCalculator
from src.model.events import AttendanceRecord
from src.report.rink_report_generator import RinkReportGenerator
from src.utils.errors import ReportPublishError
from src.utils.storage import DocumentStore, RinkReportPublisher, export_player_stats_csv


def make_store(root):
    return DocumentStore(LeagueConfig({'storage_root': str(root)}))


def sample_player_stats():
    record = AttendanceRecord.model_validate({
        'gameId': 'g1',
        'roster': [{'teamName': 'Sharks', 'totalPlayers': ['Ann', 'Bo']}],
        'attendance': [{'teamName': 'Sharks', 'playersPresent': ['Ann']}],
    })
    calculator = PlayerStatsCalculator(LeagueConfig(), [record])
    return [
        calculator.calculate_player_stats('Bo', 'Sharks', timestamp='2025-02-01T00:00:00'),
        calculator.calculate_player_stats('Ann', 'Sharks', timestamp='2025-02-01T00:00:00'),
    ]


def test_upsert_replaces_by_id(tmp_path):
    store = make_store(tmp_path)
    store.upsert('rink_reports', {'id': 'Gold-current', 'title': 'first'})
    store.upsert('rink_reports', {'id': 'Silver-current', 'title': 'other'})
    store.upsert('rink_reports', {'id': 'Gold-current', 'title': 'second'})

    documents = store.read_all('rink_reports')
    assert [d['id'] for d in documents] == ['Gold-current', 'Silver-current']
    assert store.get('rink_reports', 'Gold-current')['title'] == 'second'
    assert store.get('rink_reports', 'Bronze-current') is None


def test_empty_collection_reads_as_empty(tmp_path):
    assert make_store(tmp_path).read_all('player_stats') == []


def test_document_without_id_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        make_store(tmp_path).upsert('player_stats', {'playerName': 'Ann'})


def test_player_stats_are_stored_once_per_player(tmp_path):
    store = make_store(tmp_path)
    stats = sample_player_stats()
    store.save_player_stats(stats)
    store.save_player_stats(stats)

    documents = store.read_all('player_stats')
    assert sorted(d['id'] for d in documents) == ['sharks-ann-stats', 'sharks-bo-stats']
    assert documents[0]['attendance']['totalTeamGames'] == 1


def test_publisher_upserts_reports(tmp_path):
    store = make_store(tmp_path)
    publisher = RinkReportPublisher(store)
    generator = RinkReportGenerator(LeagueConfig())

    publisher.publish(generator.generate_basic_report('Gold'))
    publisher.publish(generator.generate_basic_report('Gold'))

    documents = store.read_all('rink_reports')
    assert len(documents) == 1
    assert documents[0]['id'] == 'Gold-all-submitted'
    assert documents[0]['generatedBy'] == 'auto'


def test_publish_failure_is_wrapped(tmp_path):
    blocker = tmp_path / 'blocked'
    blocker.write_text('not a directory')
    store = make_store(blocker)
    publisher = RinkReportPublisher(store)

    with pytest.raises(ReportPublishError):
        publisher.publish(RinkReportGenerator(LeagueConfig()).generate_basic_report('Gold'))


def test_export_player_stats_csv(tmp_path):
    output = export_player_stats_csv(sample_player_stats(), str(tmp_path / 'csv' / 'player_stats.csv'))
    frame = pd.read_csv(output)

    assert list(frame['player_name']) == ['Ann', 'Bo']
    assert list(frame['attendance_percentage']) == [100, 0]
    assert list(frame['reliability_rating']) == ['Highly Reliable', 'Unreliable']


def test_export_with_no_players_writes_header(tmp_path):
    output = export_player_stats_csv([], str(tmp_path / 'empty.csv'))
    frame = pd.read_csv(output)

    assert frame.empty
    assert 'player_id' in frame.columns


if __name__ == "__main__":
    for test in (
        test_upsert_replaces_by_id,
        test_empty_collection_reads_as_empty,
        test_document_without_id_is_rejected,
        test_player_stats_are_stored_once_per_player,
        test_publisher_upserts_reports,
        test_publish_failure_is_wrapped,
        test_export_player_stats_csv,
        test_export_with_no_players_writes_header,
    ):
        with tempfile.TemporaryDirectory() as tmp_dir:
            test(Path(tmp_dir))
    print("Storage tests passed")
