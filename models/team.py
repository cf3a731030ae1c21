# models/team.py

from extensions import db

class Team(db.Model):
    __tablename__ = 'teams'
    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True)
    team_name = db.Column(db.String(255), nullable=False)
    school_name = db.Column(db.String(255), nullable=True)
    team_size = db.Column(db.Integer, nullable=False, default=0)

    # Derived value, rewritten by both the aggregator and the leaderboard builder
    total_score = db.Column(db.Float, nullable=False, default=0)

    scores = db.relationship('Score', backref='team', lazy=True, cascade="all, delete-orphan")
    judge_assignments = db.relationship('TeamJudge', backref='team', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        db.UniqueConstraint('event_id', 'team_name', name='unique_event_team_name'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'team_name': self.team_name,
            'school_name': self.school_name,
            'team_size': self.team_size,
            'total_score': self.total_score,
        }
