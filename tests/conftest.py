from types import SimpleNamespace

import pytest

from app import create_app
from config import TestConfig
from extensions import db
from models import Criterion, Event, Team, TeamJudge, User


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app):
    people = SimpleNamespace(
        admin=User(code='000001', full_name='Admin', role='admin'),
        judge=User(code='200001', full_name='Judge J', role='mentor'),
        other_judge=User(code='200002', full_name='Judge K', role='mentor'),
        student=User(code='100001', full_name='Student S', role='student'),
    )
    db.session.add_all(vars(people).values())
    db.session.commit()
    return people


@pytest.fixture
def event(app):
    event = Event(name='Project Expo', status='active')
    db.session.add(event)
    db.session.commit()
    return event


@pytest.fixture
def login(client):
    """Puts a user in the session the same way /login does."""

    def _login(user):
        with client.session_transaction() as sess:
            sess['user_id'] = user.id
            sess['user_role'] = user.role

    return _login


def make_team(event, name, school='School of Engineering'):
    team = Team(event_id=event.id, team_name=name, school_name=school, team_size=3)
    db.session.add(team)
    db.session.commit()
    return team


def make_criterion(event, name, weight=1, max_score=100, order=None):
    if order is None:
        order = Criterion.query.filter_by(event_id=event.id).count() + 1
    criterion = Criterion(event_id=event.id, criteria_name=name, weight=weight,
                          max_score=max_score, display_order=order)
    db.session.add(criterion)
    db.session.commit()
    return criterion


def assign(team, judge):
    assignment = TeamJudge(team_id=team.id, judge_id=judge.id, event_id=team.event_id)
    db.session.add(assignment)
    db.session.commit()
    return assignment
