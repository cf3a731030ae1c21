# routes/auth.py
# Session login: the rest of the app only reads session['user_id'] / session['user_role']

from functools import wraps
from flask import Blueprint, request, session, jsonify
from werkzeug.exceptions import BadRequest
from extensions import db
from models.user import User

auth_bp = Blueprint('auth', __name__)


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({'error': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated_function


def role_required(*roles):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if 'user_id' not in session:
                return jsonify({'error': 'Unauthorized'}), 401
            if session.get('user_role') not in roles:
                return jsonify({'error': 'Forbidden'}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def json_body():
    """JSON object of the request, {} when there is no JSON body at all."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest('Invalid request data')
    return data


@auth_bp.route('/login', methods=['POST'])
def login():
    code = request.form.get('code') or json_body().get('code')
    if not code or not isinstance(code, str):
        return jsonify({'error': 'code is required'}), 400

    user = User.query.filter_by(code=code).first()
    if not user:
        return jsonify({'error': 'Invalid access code'}), 401

    session.clear()
    session['user_id'] = user.id
    session['user_role'] = user.role
    return jsonify({'message': 'Login successful', 'user_id': user.id, 'role': user.role})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'message': 'Logout successful'})


@auth_bp.route('/api/auth/me')
@login_required
def me():
    user = db.session.get(User, session['user_id'])
    if not user:
        session.clear()
        return jsonify({'error': 'Unauthorized'}), 401
    return jsonify(user.to_dict())
