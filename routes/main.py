# routes/main.py
# Endpoints used by judges (mentors) and by every logged-in user

from flask import Blueprint, current_app, jsonify, request, session
from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from logic import assigned_teams, judge_scores, list_criteria, read_leaderboard, record_scores
from routes.auth import json_body, login_required, role_required

main_bp = Blueprint('main', __name__)


def _int_or_none(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@main_bp.route('/api/judging/scores', methods=['POST'])
@login_required
def submit_scores():
    data = json_body()
    # The judge is always the session user, never a field of the body
    judge_id = session['user_id']
    try:
        record_scores(_int_or_none(data.get('teamId')), judge_id, data.get('scores'))
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Error submitting scores for team %s', data.get('teamId'))
        return jsonify({'error': 'Failed to submit scores'}), 500
    return jsonify({'success': True})


@main_bp.route('/api/judging/scores/<int:team_id>')
@login_required
def get_scores(team_id):
    scores = judge_scores(team_id, session['user_id'])
    return jsonify([s.to_dict() for s in scores])


@main_bp.route('/api/judging/assignments')
@role_required('mentor')
def get_assignments():
    event_id = request.args.get('eventId', type=int)
    return jsonify(assigned_teams(session['user_id'], event_id))


@main_bp.route('/api/events/<int:event_id>/criteria')
@login_required
def get_criteria(event_id):
    return jsonify([c.to_dict() for c in list_criteria(event_id)])


@main_bp.route('/api/leaderboard')
@login_required
def get_leaderboard():
    event_id = request.args.get('eventId', type=int)
    if event_id is None:
        return jsonify({'error': 'Event ID is required'}), 400

    board = read_leaderboard(event_id, session.get('user_role'))
    response = jsonify(board)
    response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate'
    return response
