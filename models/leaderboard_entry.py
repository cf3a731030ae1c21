# models/leaderboard_entry.py

from extensions import db
from sqlalchemy import CheckConstraint

class LeaderboardEntry(db.Model):
    """Ranked snapshot row; thrown away and rebuilt on every recalculation."""
    __tablename__ = 'leaderboard'
    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    rank = db.Column(db.Integer, nullable=False)
    total_score = db.Column(db.Float, nullable=False, default=0)

    # Copied from the team at calculation time
    team_name = db.Column(db.String(255), nullable=True)
    school_name = db.Column(db.String(255), nullable=True)
    team_size = db.Column(db.Integer, nullable=True)
    updated_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    __table_args__ = (
        db.UniqueConstraint('event_id', 'team_id', name='unique_leaderboard_team'),
        CheckConstraint("rank >= 1", name="check_leaderboard_rank"),
    )
