# seed_data.py
# Demo data for local development: `flask --app app seed-demo`

from datetime import date
import click
from flask import current_app
from flask.cli import with_appcontext
from extensions import db
from models import User, Event, Team, Criterion, Score, TeamJudge, LeaderboardEntry


def clear_data():
    # Reverse dependency order
    db.session.query(LeaderboardEntry).delete()
    db.session.query(Score).delete()
    db.session.query(TeamJudge).delete()
    db.session.query(Criterion).delete()
    db.session.query(Team).delete()
    db.session.query(Event).delete()
    db.session.query(User).delete()
    db.session.commit()


def seed_demo_data():
    """Creates one event with three teams, two mentors and a three-criterion rubric."""
    admin = User(code='000001', full_name='Event Admin', email='admin@example.edu', role='admin')
    mentor_1 = User(code='200001', full_name='Mentor One', email='mentor1@example.edu', role='mentor')
    mentor_2 = User(code='200002', full_name='Mentor Two', email='mentor2@example.edu', role='mentor')
    student = User(code='100001', full_name='Student One', email='student1@example.edu', role='student')
    db.session.add_all([admin, mentor_1, mentor_2, student])

    event = Event(name='Project Expo', event_date=date.today(), status='active')
    db.session.add(event)
    db.session.flush()

    teams = [
        Team(event_id=event.id, team_name='Team Alpha', school_name='School of Engineering', team_size=4),
        Team(event_id=event.id, team_name='Team Beta', school_name='School of Design', team_size=3),
        Team(event_id=event.id, team_name='Team Gamma', school_name='School of Business', team_size=5),
    ]
    criteria = [
        Criterion(event_id=event.id, criteria_name='Innovation', max_score=10, weight=2, display_order=1),
        Criterion(event_id=event.id, criteria_name='Execution', max_score=10, weight=1, display_order=2),
        Criterion(event_id=event.id, criteria_name='Presentation', max_score=10, weight=1, display_order=3),
    ]
    db.session.add_all(teams + criteria)
    db.session.flush()

    assignments = [TeamJudge(team_id=t.id, judge_id=mentor_1.id, event_id=event.id) for t in teams]
    assignments.append(TeamJudge(team_id=teams[0].id, judge_id=mentor_2.id, event_id=event.id))
    db.session.add_all(assignments)
    db.session.commit()
    return event


@click.command('seed-demo')
@with_appcontext
def seed_demo_command():
    """Wipe the database and load the demo event."""
    db.create_all()
    current_app.logger.info('Clearing old data...')
    clear_data()
    event = seed_demo_data()
    click.echo(f'Demo event "{event.name}" created (id={event.id}).')
