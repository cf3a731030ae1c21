# logic.py
# Scoring pipeline: criteria, score recording, team totals and leaderboard

import math
from collections import defaultdict
from flask import current_app
from sqlalchemy import func
from werkzeug.exceptions import BadRequest, Forbidden, NotFound, Unauthorized
from extensions import db
from models import ASSIGNMENT_STATUSES, Criterion, Event, LeaderboardEntry, Score, Team, TeamJudge


def _number(value, field, default=None):
    if value is None or value == '':
        if default is None:
            raise BadRequest(f'"{field}" is required.')
        return default
    if isinstance(value, bool):
        raise BadRequest(f'"{field}" must be a number.')
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise BadRequest(f'"{field}" must be a number.')
    # NaN and infinities would poison totals and rank ordering
    if not math.isfinite(result):
        raise BadRequest(f'"{field}" must be a number.')
    return result


def parse_int(value, field):
    if isinstance(value, bool):
        raise BadRequest(f'"{field}" must be an integer.')
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise BadRequest(f'"{field}" must be an integer.')


def parse_text(value, field):
    if value is None:
        return ''
    if not isinstance(value, str):
        raise BadRequest(f'"{field}" must be a string.')
    return value.strip()


def get_event_or_404(event_id):
    event = db.session.get(Event, event_id) if event_id is not None else None
    if not event:
        raise NotFound('Event not found')
    return event


# --- Criteria ---

def list_criteria(event_id):
    return Criterion.query.filter_by(event_id=event_id).order_by(
        Criterion.display_order, Criterion.id
    ).all()


def _parse_criterion(item):
    if not isinstance(item, dict):
        raise BadRequest('Each criterion must be an object.')
    name = parse_text(item.get('criteriaName', item.get('name')), 'criteriaName')
    if not name:
        raise BadRequest('Criterion name is required.')
    max_score = _number(item.get('maxScore', item.get('max_score')), 'maxScore', default=100)
    weight = _number(item.get('weight'), 'weight', default=1)
    if max_score <= 0 or weight <= 0:
        raise BadRequest(f'Criterion "{name}" needs a positive max score and weight.')
    return {
        'criteria_name': name,
        'description': parse_text(item.get('description'), 'description') or None,
        'max_score': max_score,
        'weight': weight,
    }


def add_criterion(event_id, item):
    """Appends one criterion after the event's current last one."""
    get_event_or_404(event_id)
    fields = _parse_criterion(item)
    max_order = db.session.query(func.max(Criterion.display_order)).filter(
        Criterion.event_id == event_id
    ).scalar()
    criterion = Criterion(event_id=event_id, display_order=(max_order or 0) + 1, **fields)
    db.session.add(criterion)
    db.session.commit()
    return criterion


def replace_criteria(event_id, items):
    """
    Replaces the whole rubric of an event.

    There is no single-criterion update: the old criteria (and, as with the
    ON DELETE CASCADE of the schema, every score given against them) are
    deleted and the new batch is inserted with display_order 1..n.
    """
    get_event_or_404(event_id)
    if not isinstance(items, list):
        raise BadRequest('"criteria" must be a list.')
    parsed = [_parse_criterion(item) for item in items]

    old_ids = [c.id for c in Criterion.query.filter_by(event_id=event_id)]
    if old_ids:
        Score.query.filter(Score.criteria_id.in_(old_ids)).delete(synchronize_session=False)
        Criterion.query.filter(Criterion.id.in_(old_ids)).delete(synchronize_session=False)

    criteria = [
        Criterion(event_id=event_id, display_order=order, **fields)
        for order, fields in enumerate(parsed, start=1)
    ]
    db.session.add_all(criteria)
    db.session.commit()
    current_app.logger.info('Replaced criteria for event %s: %d item(s)', event_id, len(criteria))
    return criteria


# --- Score recording and team totals ---

def _parse_score_items(items):
    if not isinstance(items, list):
        raise BadRequest('Invalid request data')
    entries = []
    for item in items:
        if not isinstance(item, dict):
            raise BadRequest('Invalid request data')
        criterion_id = item.get('criterionId', item.get('criteriaId'))
        if criterion_id is None:
            raise BadRequest('Each score needs a criterionId.')
        entries.append((
            parse_int(criterion_id, 'criterionId'),
            _number(item.get('score'), 'score', default=0),
            parse_text(item.get('feedback'), 'feedback') or None,
        ))
    return entries


def recompute_team_total(team_id, commit=True):
    """
    Recomputes a team's total from every score it has received.

    total = sum(score * criterion weight) / number of score rows

    The divisor is the row count across all judges and criteria, not the sum
    of weights, so the value only matches a weighted average when every
    weight is 1.
    """
    team = db.session.get(Team, team_id)
    if not team:
        raise NotFound('Team not found')

    rows = db.session.query(Score.score, Criterion.weight).outerjoin(
        Criterion, Score.criteria_id == Criterion.id
    ).filter(Score.team_id == team_id).all()

    weighted = sum(score * (weight if weight is not None else 1) for score, weight in rows)
    team.total_score = weighted / len(rows) if rows else 0

    if commit:
        db.session.commit()
    current_app.logger.info('Team %s total recomputed: %s (%d score rows)', team_id, team.total_score, len(rows))
    return team.total_score


def record_scores(team_id, judge_id, items):
    """
    Stores one judge's scores for a team.

    Scores are upserted on (team, judge, criterion), so sending the same
    payload twice leaves the same rows behind. The team total is then
    recomputed and the judge's assignment is marked completed, whatever
    subset of the rubric was sent. Everything is committed together.
    """
    entries = _parse_score_items(items)

    if team_id is None or judge_id is None:
        raise Unauthorized('Unauthorized')

    assignment = TeamJudge.query.filter_by(team_id=team_id, judge_id=judge_id).first()
    if not assignment:
        current_app.logger.warning('Judge %s tried to score unassigned team %s', judge_id, team_id)
        raise Unauthorized('You are not assigned to judge this team.')

    team = db.session.get(Team, team_id)
    event_criteria = {c.id for c in Criterion.query.filter_by(event_id=team.event_id)}
    unknown = [cid for cid, _, _ in entries if cid not in event_criteria]
    if unknown:
        raise BadRequest(f'Unknown criteria for this event: {", ".join(map(str, unknown))}')

    for criterion_id, value, feedback in entries:
        existing = Score.query.filter_by(team_id=team_id, judge_id=judge_id, criteria_id=criterion_id).first()
        if existing:
            existing.score = value
            existing.feedback = feedback
        else:
            db.session.add(Score(team_id=team_id, judge_id=judge_id, criteria_id=criterion_id,
                                 score=value, feedback=feedback))

    recompute_team_total(team_id, commit=False)
    assignment.status = 'completed'
    db.session.commit()
    current_app.logger.info('Judge %s submitted %d score(s) for team %s', judge_id, len(entries), team_id)


def judge_scores(team_id, judge_id):
    return Score.query.filter_by(team_id=team_id, judge_id=judge_id).order_by(Score.criteria_id).all()


def assigned_teams(judge_id, event_id=None):
    """Teams a judge has to score, with the event rubric and the judge's current scores."""
    query = TeamJudge.query.filter_by(judge_id=judge_id)
    if event_id is not None:
        query = query.filter_by(event_id=event_id)

    result = []
    for assignment in query.order_by(TeamJudge.team_id).all():
        team = assignment.team
        team_data = team.to_dict()
        team_data['status'] = assignment.status
        team_data['criteria'] = [c.to_dict() for c in list_criteria(team.event_id)]
        team_data['scores'] = [
            {'criteria_id': s.criteria_id, 'score': s.score, 'feedback': s.feedback}
            for s in judge_scores(team.id, judge_id)
        ]
        result.append(team_data)
    return result


# --- Leaderboard ---

def build_leaderboard(event_id):
    """
    Recalculates every team total of an event as the plain sum of its raw
    scores (weights ignored), writes it back to the team, and replaces the
    event's leaderboard snapshot.

    Ranks follow sorted position: tied teams get consecutive ranks in team id
    order. The delete and the re-insert are committed in one transaction.
    """
    if event_id is None or event_id == '':
        raise BadRequest('Event ID is required')
    event_id = parse_int(event_id, 'eventId')

    teams = Team.query.filter_by(event_id=event_id).order_by(Team.id).all()
    if not teams:
        raise NotFound('No teams found')

    sums = dict(
        db.session.query(Score.team_id, func.sum(Score.score))
        .filter(Score.team_id.in_([t.id for t in teams]))
        .group_by(Score.team_id)
        .all()
    )

    team_sizes = {t.id: t.team_size for t in teams}
    rankings = []
    for team in teams:
        total = float(sums.get(team.id) or 0)
        team.total_score = total
        rankings.append({
            'team_id': team.id,
            'team_name': team.team_name,
            'school_name': team.school_name,
            'total_score': total,
        })

    # sorted() is stable, equal totals keep team id order
    rankings = sorted(rankings, key=lambda r: r['total_score'], reverse=True)
    for position, row in enumerate(rankings, start=1):
        row['rank'] = position

    LeaderboardEntry.query.filter_by(event_id=event_id).delete(synchronize_session=False)
    db.session.add_all([
        LeaderboardEntry(
            event_id=event_id,
            team_id=row['team_id'],
            rank=row['rank'],
            total_score=row['total_score'],
            team_name=row['team_name'],
            school_name=row['school_name'],
            team_size=team_sizes[row['team_id']],
        )
        for row in rankings
    ])
    db.session.commit()

    current_app.logger.info('Leaderboard rebuilt for event %s: %d team(s)', event_id, len(rankings))
    return rankings


def read_leaderboard(event_id, viewer_role=None):
    """Live standings from the stored team totals, with per-criterion sums."""
    event = get_event_or_404(event_id)
    if not event.leaderboard_visible and viewer_role == 'student':
        raise Forbidden('Leaderboard is not visible for this event')

    teams = Team.query.filter_by(event_id=event_id).order_by(
        Team.total_score.desc(), Team.id
    ).all()

    criterion_rows = db.session.query(
        Score.team_id, Criterion.id, Criterion.criteria_name, func.sum(Score.score)
    ).join(Criterion, Score.criteria_id == Criterion.id).filter(
        Criterion.event_id == event_id
    ).group_by(Score.team_id, Criterion.id, Criterion.criteria_name, Criterion.display_order).order_by(
        Criterion.display_order
    ).all()

    per_team = defaultdict(list)
    for team_id, criterion_id, name, total in criterion_rows:
        per_team[team_id].append({'criteria_id': criterion_id, 'name': name, 'total': float(total or 0)})

    board = []
    for position, team in enumerate(teams, start=1):
        row = team.to_dict()
        row['criterion_scores'] = per_team.get(team.id, [])
        row['rank'] = position
        board.append(row)
    return board


def judging_progress(event_id):
    """
    Assignment counts by status for an event and the share already completed.
    """
    get_event_or_404(event_id)
    counts = dict(
        db.session.query(TeamJudge.status, func.count(TeamJudge.id))
        .filter(TeamJudge.event_id == event_id)
        .group_by(TeamJudge.status)
        .all()
    )
    total = sum(counts.values())
    completed = counts.get('completed', 0)

    return {
        'event_id': event_id,
        'total_teams': Team.query.filter_by(event_id=event_id).count(),
        'total_judges': db.session.query(func.count(func.distinct(TeamJudge.judge_id)))
                        .filter(TeamJudge.event_id == event_id).scalar(),
        'judging_progress': {status: counts.get(status, 0) for status in ASSIGNMENT_STATUSES},
        'completion_rate': round(completed / total * 100) if total else 0,
    }
