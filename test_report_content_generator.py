#!/usr/bin/env python3
"""
Test rink report narrative content: highlights, standouts, league updates
and the article HTML
"""

from config.league_config import LeagueConfig
from src.aggregate.game_stats_aggregator import aggregate_game_stats
from src.model.events import Game, Goal, Penalty
from src.report.report_content_generator import (
    ReportContentGenerator,
    generate_article_html,
    generate_highlights,
    generate_league_updates,
    generate_standout_players,
    generate_upcoming_predictions,
)


def game(game_id, home, away, scores=None, penalties=None):
    document = {'id': game_id, 'homeTeam': home, 'awayTeam': away, 'division': 'Gold'}
    if scores is not None:
        summary = {'goalsByTeam': scores}
        if penalties is not None:
            summary['totalPenalties'] = penalties
        document['gameSummary'] = summary
    return Game.model_validate(document)


def goal(game_id, team, scorer, *assists):
    return Goal.model_validate({'gameId': game_id, 'teamName': team, 'playerName': scorer, 'assistedBy': list(assists)})


def penalty(game_id, team, player, length=2):
    return Penalty.model_validate({'gameId': game_id, 'teamName': team, 'playerName': player, 'penaltyLength': length})


def test_high_scoring_thriller():
    stats = aggregate_game_stats([game('g1', 'Sharks', 'Bears', {'Sharks': 6, 'Bears': 3})], [], [])
    highlights = generate_highlights(stats)

    assert 'High-scoring thriller: Sharks vs Bears combines for 9 goals' in highlights


def test_nail_biter_only_for_one_goal_games():
    stats = aggregate_game_stats(
        [
            game('g1', 'Sharks', 'Bears', {'Sharks': 4, 'Bears': 3}),
            game('g2', 'Wolves', 'Hawks', {'Wolves': 5, 'Hawks': 1}),
        ],
        [], []
    )
    highlights = generate_highlights(stats)
    nail_biters = [line for line in highlights if line.startswith('Nail-biter')]

    assert nail_biters == ['Nail-biter: Sharks edges Bears 4-3 in one-goal thriller']


def test_one_nil_game_is_a_nail_biter():
    stats = aggregate_game_stats([game('g1', 'Wolves', 'Hawks', {'Hawks': 1})], [], [])

    assert 'Nail-biter: Hawks edges Wolves 1-0 in one-goal thriller' in generate_highlights(stats)


def test_hat_trick_requires_three_goals_in_one_game():
    spread = aggregate_game_stats(
        [game(f'g{i}', 'Sharks', 'Bears', {'Sharks': 1, 'Bears': 0}) for i in range(3)],
        [goal(f'g{i}', 'Sharks', 'Ann') for i in range(3)],
        []
    )
    assert not any('hat trick' in line for line in generate_highlights(spread))
    standout = generate_standout_players(spread)[0]
    assert standout.stats == '3 goals, 0 assists'
    assert standout.highlight == 'Solid contributor with 3G, 0A'

    single = aggregate_game_stats(
        [game('g1', 'Sharks', 'Bears', {'Sharks': 3, 'Bears': 0})],
        [goal('g1', 'Sharks', 'Ann') for _ in range(3)],
        []
    )
    assert 'Ann records hat trick with 3 goals' in generate_highlights(single)
    assert generate_standout_players(single)[0].highlight == 'Hat trick hero with 3 goals'


def test_physical_matchup():
    stats = aggregate_game_stats([game('g1', 'Sharks', 'Bears', {'Sharks': 1, 'Bears': 1}, penalties=8)], [], [])
    assert 'Physical matchup: Sharks vs Bears accumulates 8 penalties' in generate_highlights(stats)


def test_fallback_highlights():
    stats = aggregate_game_stats(
        [game('g1', 'Sharks', 'Bears', {'Sharks': 2, 'Bears': 0})],
        [goal('g1', 'Sharks', 'Ann', 'Bo'), goal('g1', 'Sharks', 'Ann')],
        []
    )
    assert generate_highlights(stats) == [
        '1 exciting games played this week',
        'Players combined for 2 goals across all matchups',
        'Ann leads weekly scoring with 2 points',
    ]

    empty = aggregate_game_stats([], [], [])
    assert generate_highlights(empty) == [
        '0 exciting games played this week',
        'Players combined for 0 goals across all matchups',
    ]


def test_highlights_are_capped_at_six():
    games = [game(f'g{i}', f'Home{i}', f'Away{i}', {f'Home{i}': 5, f'Away{i}': 4}, penalties=9) for i in range(4)]
    stats = aggregate_game_stats(games, [], [])
    highlights = generate_highlights(stats)

    assert len(highlights) == 6
    assert all(line.startswith('High-scoring thriller') for line in highlights[:4])
    assert len(generate_highlights(stats, limit=50)) == 6


def test_standout_priority():
    stats = aggregate_game_stats(
        [game('g1', 'Sharks', 'Bears', {'Sharks': 5, 'Bears': 2}), game('g2', 'Sharks', 'Bears', {'Sharks': 2, 'Bears': 0})],
        [
            goal('g1', 'Sharks', 'Ann', 'Bo'), goal('g1', 'Sharks', 'Cy', 'Bo'), goal('g1', 'Sharks', 'Cy', 'Bo'),
            goal('g2', 'Sharks', 'Cy', 'Ann'), goal('g2', 'Sharks', 'Ann', 'Cy'),
            goal('g1', 'Bears', 'Dee'), goal('g1', 'Bears', 'Dee'),
        ],
        []
    )
    standouts = generate_standout_players(stats)

    assert [s.name for s in standouts] == ['Cy', 'Ann', 'Bo']
    assert standouts[0].highlight == 'Consistent performer with 4 points'
    assert standouts[1].highlight == 'Solid contributor with 2G, 1A'
    assert standouts[2].highlight == 'Playmaker extraordinaire with 3 assists'
    assert standouts[2].stats == '0 goals, 3 assists'
    assert standouts[0].team == 'Sharks'
    assert len(generate_standout_players(stats, limit=10)) == 3


def test_league_updates():
    stats = aggregate_game_stats(
        [game('g1', 'Sharks', 'Bears', {'Sharks': 3, 'Bears': 1}), game('g2', 'Wolves', 'Hawks', {'Wolves': 1, 'Hawks': 0})],
        [goal('g1', 'Sharks', 'Ann'), goal('g1', 'Sharks', 'Ann'), goal('g2', 'Wolves', 'Eve')],
        [penalty('g1', 'Bears', 'Dee', 2), penalty('g1', 'Bears', 'Dee', 5)]
    )
    assert generate_league_updates('Gold', stats) == [
        'Gold division completed 2 games this week',
        'Players scored 3 goals across all matchups',
        '7 penalty minutes assessed this week',
        'Average of 1.5 goals per game this week',
        'Playoff race continues to intensify as season progresses',
        'Teams preparing for upcoming championship tournament',
    ]

    quiet = generate_league_updates('Silver', aggregate_game_stats([], [], []))
    assert quiet == [
        'Silver division completed 0 games this week',
        'Players scored 0 goals across all matchups',
        'Playoff race continues to intensify as season progresses',
        'Teams preparing for upcoming championship tournament',
    ]


def test_predictions_are_static():
    predictions = generate_upcoming_predictions()
    assert [p.matchup for p in predictions] == ['Top Teams Face Off', 'Divisional Showdowns']


def test_article_sections_are_omitted_without_data():
    empty = generate_article_html('Gold', 'This Week', aggregate_game_stats([], [], []))
    assert 'The Gold Division showcased exceptional hockey during This Week with 0 thrilling matchups' in empty
    assert 'Scoring Leader' not in empty
    assert 'Team Performance' not in empty
    assert 'Physical Play' not in empty
    assert 'Week Highlights' not in empty
    assert 'Looking Forward' in empty


def test_article_names_leaders():
    stats = aggregate_game_stats(
        [game('g1', 'Sharks', 'Bears', {'Sharks': 3, 'Bears': 1}), game('g2', 'Sharks', 'Wolves', {'Sharks': 2, 'Wolves': 2})],
        [
            goal('g1', 'Sharks', 'Ann <Ace>', 'Bo'), goal('g1', 'Sharks', 'Ann <Ace>'),
            goal('g2', 'Sharks', 'Cy'), goal('g2', 'Sharks', 'Cy'), goal('g2', 'Sharks', 'Dan'),
            goal('g2', 'Wolves', 'Eve'),
        ],
        [penalty('g1', 'Bears', 'Dee', 4)]
    )
    html = generate_article_html('Gold', 'Last Week', stats)

    assert '<h3>Scoring Leader</h3>' in html
    assert 'Ann &lt;Ace&gt; led all Gold division players with 2 points (2G, 0A)' in html
    assert 'Sharks showcased strong offensive capabilities, averaging 2.5 goals per game' in html
    assert 'The intensity was evident with 1 penalties totaling 4 minutes' in html
    assert '\n\n\n' not in html


def test_generation_is_repeatable():
    games = [game('g1', 'Sharks', 'Bears', {'Sharks': 5, 'Bears': 4}, penalties=8)]
    goals = [goal('g1', 'Sharks', 'Ann', 'Bo') for _ in range(5)] + [goal('g1', 'Bears', 'Dee') for _ in range(4)]
    penalties = [penalty('g1', 'Bears', 'Dee') for _ in range(8)]
    generator = ReportContentGenerator(LeagueConfig())

    first = generator.generate('Gold', aggregate_game_stats(games, goals, penalties), 'This Week')
    second = generator.generate('Gold', aggregate_game_stats(games, goals, penalties), 'This Week')

    assert first.highlights == second.highlights
    assert first.standout_players == second.standout_players
    assert first.league_updates == second.league_updates
    assert first.html == second.html
    assert len(first.highlights) <= 6


if __name__ == "__main__":
    test_high_scoring_thriller()
    test_nail_biter_only_for_one_goal_games()
    test_one_nil_game_is_a_nail_biter()
    test_hat_trick_requires_three_goals_in_one_game()
    test_physical_matchup()
    test_fallback_highlights()
    test_highlights_are_capped_at_six()
    test_standout_priority()
    test_league_updates()
    test_predictions_are_static()
    test_article_sections_are_omitted_without_data()
    test_article_names_leaders()
    test_generation_is_repeatable()
    print("Report content generator tests passed")
