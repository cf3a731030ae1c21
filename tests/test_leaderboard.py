"""Tests for leaderboard recalculation and the live standings view."""

import pytest
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from conftest import assign, make_criterion, make_team
from extensions import db
from logic import build_leaderboard, read_leaderboard, record_scores
from models import Event, LeaderboardEntry, Score, Team


def _score(team, judge, criterion, value):
    db.session.add(Score(team_id=team.id, judge_id=judge.id, criteria_id=criterion.id, score=value))
    db.session.commit()


def test_leaderboard_sums_raw_scores_ignoring_weights(event, users):
    a = make_criterion(event, 'Innovation', weight=2)
    b = make_criterion(event, 'Execution', weight=1)
    team = make_team(event, 'T1')
    assign(team, users.judge)
    record_scores(team.id, users.judge.id, [
        {'criterionId': a.id, 'score': 10},
        {'criterionId': b.id, 'score': 4},
    ])
    assert db.session.get(Team, team.id).total_score == 12

    rankings = build_leaderboard(event.id)

    assert rankings[0]['total_score'] == 14
    # The plain sum overwrites the weighted value on the team row
    assert db.session.get(Team, team.id).total_score == 14


def test_tied_teams_get_consecutive_ranks(event, users):
    c = make_criterion(event, 'Overall')
    first = make_team(event, 'First')
    second = make_team(event, 'Second')
    third = make_team(event, 'Third')
    _score(third, users.judge, c, 30)
    _score(first, users.judge, c, 50)
    _score(second, users.judge, c, 50)

    rankings = build_leaderboard(event.id)

    assert [(r['team_name'], r['rank'], r['total_score']) for r in rankings] == [
        ('First', 1, 50),
        ('Second', 2, 50),
        ('Third', 3, 30),
    ]


def test_recalculating_twice_keeps_one_row_per_team(event, users):
    c = make_criterion(event, 'Overall')
    t1 = make_team(event, 'T1')
    make_team(event, 'T2')
    _score(t1, users.judge, c, 10)

    build_leaderboard(event.id)
    build_leaderboard(event.id)

    entries = LeaderboardEntry.query.filter_by(event_id=event.id).order_by(LeaderboardEntry.rank).all()
    assert len(entries) == 2
    assert [(e.team_name, e.rank) for e in entries] == [('T1', 1), ('T2', 2)]


def test_snapshot_copies_team_details(event, users):
    c = make_criterion(event, 'Overall')
    team = make_team(event, 'T1', school='School of Design')
    _score(team, users.judge, c, 25)

    build_leaderboard(event.id)

    entry = LeaderboardEntry.query.one()
    assert entry.team_id == team.id
    assert entry.school_name == 'School of Design'
    assert entry.team_size == 3
    assert entry.total_score == 25


def test_event_without_teams_is_not_found(event):
    with pytest.raises(NotFound):
        build_leaderboard(event.id)
    assert LeaderboardEntry.query.count() == 0


def test_event_without_teams_keeps_previous_snapshot(event):
    other = Event(name='Other', status='active')
    db.session.add(other)
    db.session.commit()
    make_team(other, 'T1')
    build_leaderboard(other.id)

    with pytest.raises(NotFound):
        build_leaderboard(event.id)
    assert LeaderboardEntry.query.filter_by(event_id=other.id).count() == 1


def test_missing_event_id_is_bad_request(app):
    with pytest.raises(BadRequest):
        build_leaderboard(None)


def test_read_leaderboard_hidden_from_students(event):
    make_team(event, 'T1')

    with pytest.raises(Forbidden):
        read_leaderboard(event.id, 'student')

    # Staff always see it
    assert len(read_leaderboard(event.id, 'mentor')) == 1


def test_read_leaderboard_lists_criterion_totals(event, users):
    event.leaderboard_visible = True
    db.session.commit()
    a = make_criterion(event, 'Innovation')
    b = make_criterion(event, 'Execution')
    t1 = make_team(event, 'T1')
    t2 = make_team(event, 'T2')
    _score(t1, users.judge, a, 6)
    _score(t1, users.other_judge, a, 4)
    _score(t1, users.judge, b, 3)
    _score(t2, users.judge, a, 20)
    build_leaderboard(event.id)

    board = read_leaderboard(event.id, 'student')

    assert [(row['team_name'], row['rank']) for row in board] == [('T2', 1), ('T1', 2)]
    assert board[1]['criterion_scores'] == [
        {'criteria_id': a.id, 'name': 'Innovation', 'total': 10},
        {'criteria_id': b.id, 'name': 'Execution', 'total': 3},
    ]


def test_read_leaderboard_unknown_event(app):
    with pytest.raises(NotFound):
        read_leaderboard(999)
