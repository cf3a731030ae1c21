# models/event.py

from extensions import db
from sqlalchemy import CheckConstraint

class Event(db.Model):
    __tablename__ = 'events'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    event_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='draft')
    # Students only see the leaderboard once an admin publishes it
    leaderboard_visible = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    teams = db.relationship('Team', backref='event', lazy=True, cascade="all, delete-orphan")
    criteria = db.relationship('Criterion', backref='event', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'active', 'completed', 'archived')", name="check_event_status"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'event_date': self.event_date.isoformat() if self.event_date else None,
            'status': self.status,
            'leaderboard_visible': self.leaderboard_visible,
        }
