# routes/admin.py

from datetime import datetime
from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from extensions import db
from logic import (add_criterion, build_leaderboard, get_event_or_404, judging_progress,
                   parse_int, parse_text, replace_criteria)
from models import Event, Team, TeamJudge, User
from routes.auth import json_body, role_required

EVENT_STATUSES = ('draft', 'active', 'completed', 'archived')

admin_bp = Blueprint('admin', __name__, url_prefix='/api')

admin_required = role_required('admin')


def _failure(message):
    db.session.rollback()
    current_app.logger.exception(message)
    return jsonify({'error': message}), 500


# --- Events and teams ---
@admin_bp.route('/events', methods=['POST'])
@admin_required
def create_event():
    data = json_body()
    name = parse_text(data.get('name'), 'name')
    status = data.get('status') or 'draft'
    if not name:
        return jsonify({'error': 'Event name is required'}), 400
    if status not in EVENT_STATUSES:
        return jsonify({'error': f'Unknown event status "{status}"'}), 400

    event_date = None
    if data.get('eventDate'):
        try:
            event_date = datetime.strptime(data['eventDate'], '%Y-%m-%d').date()
        except (TypeError, ValueError):
            return jsonify({'error': 'eventDate must use the YYYY-MM-DD format'}), 400

    event = Event(name=name, event_date=event_date, status=status,
                  leaderboard_visible=bool(data.get('leaderboardVisible', False)))
    db.session.add(event)
    try:
        db.session.commit()
    except SQLAlchemyError:
        return _failure('Failed to create event')
    return jsonify(event.to_dict()), 201


@admin_bp.route('/events/<int:event_id>', methods=['PATCH'])
@admin_required
def update_event(event_id):
    event = get_event_or_404(event_id)
    data = json_body()

    if 'status' in data:
        if data['status'] not in EVENT_STATUSES:
            return jsonify({'error': f'Unknown event status "{data["status"]}"'}), 400
        event.status = data['status']
    if 'leaderboardVisible' in data:
        event.leaderboard_visible = bool(data['leaderboardVisible'])

    try:
        db.session.commit()
    except SQLAlchemyError:
        return _failure('Failed to update event')
    return jsonify(event.to_dict())


@admin_bp.route('/events/<int:event_id>/teams', methods=['POST'])
@admin_required
def create_team(event_id):
    get_event_or_404(event_id)
    data = json_body()
    team_name = parse_text(data.get('teamName'), 'teamName')
    if not team_name:
        return jsonify({'error': 'Team name is required'}), 400

    team_size = data.get('teamSize')
    team_size = parse_int(team_size, 'teamSize') if team_size not in (None, '') else 0
    if team_size < 0:
        return jsonify({'error': 'teamSize cannot be negative'}), 400

    team = Team(event_id=event_id, team_name=team_name,
                school_name=parse_text(data.get('schoolName'), 'schoolName') or None,
                team_size=team_size)
    db.session.add(team)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': f'Team "{team_name}" already exists in this event'}), 400
    except SQLAlchemyError:
        return _failure('Failed to create team')
    return jsonify(team.to_dict()), 201


@admin_bp.route('/events/<int:event_id>/progress')
@admin_required
def event_progress(event_id):
    return jsonify(judging_progress(event_id))


# --- Criteria ---
@admin_bp.route('/events/<int:event_id>/criteria', methods=['POST'])
@admin_required
def create_criterion(event_id):
    try:
        criterion = add_criterion(event_id, json_body())
    except SQLAlchemyError:
        return _failure('Failed to create criteria')
    return jsonify(criterion.to_dict()), 201


@admin_bp.route('/events/<int:event_id>/criteria', methods=['PUT'])
@admin_required
def import_criteria(event_id):
    data = json_body()
    try:
        criteria = replace_criteria(event_id, data.get('criteria'))
    except SQLAlchemyError:
        return _failure('Failed to save criteria')
    return jsonify([c.to_dict() for c in criteria])


# --- Judge assignments ---
@admin_bp.route('/teams/assign-judge', methods=['POST'])
@admin_required
def assign_judge():
    data = json_body()
    if not data.get('team_id') or not data.get('judge_id'):
        return jsonify({'error': 'Team and judge are required'}), 400
    team_id = parse_int(data['team_id'], 'team_id')
    judge_id = parse_int(data['judge_id'], 'judge_id')

    team = db.session.get(Team, team_id)
    if not team:
        return jsonify({'error': 'Team not found'}), 404
    judge = db.session.get(User, judge_id)
    if not judge or judge.role != 'mentor':
        return jsonify({'error': 'Only mentors can be assigned as judges'}), 400

    assignment = TeamJudge(team_id=team.id, judge_id=judge.id, event_id=team.event_id)
    db.session.add(assignment)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'This judge is already assigned to the team'}), 400
    except SQLAlchemyError:
        return _failure('Failed to assign mentor')

    current_app.logger.info('Judge %s assigned to team %s', judge.id, team.id)
    return jsonify(assignment.to_dict()), 201


@admin_bp.route('/teams/assign-judge', methods=['DELETE'])
@admin_required
def unassign_judge():
    assignment = db.session.get(TeamJudge, request.args.get('id', type=int) or 0)
    if not assignment:
        return jsonify({'error': 'Assignment not found'}), 404
    try:
        db.session.delete(assignment)
        db.session.commit()
    except SQLAlchemyError:
        return _failure('Failed to remove assignment')
    return jsonify({'success': True})


@admin_bp.route('/teams/<int:team_id>/judges')
@admin_required
def team_judges(team_id):
    assignments = TeamJudge.query.filter_by(team_id=team_id).order_by(TeamJudge.id).all()
    return jsonify([a.to_dict() for a in assignments])


# --- Leaderboard ---
@admin_bp.route('/leaderboard/calculate', methods=['POST'])
@admin_required
def calculate_leaderboard():
    data = json_body()
    try:
        rankings = build_leaderboard(data.get('eventId'))
    except SQLAlchemyError:
        return _failure('Failed to calculate leaderboard')
    return jsonify({'success': True, 'rankings': rankings})
