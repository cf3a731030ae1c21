from extensions import db
from sqlalchemy import CheckConstraint

ASSIGNMENT_STATUSES = ('pending', 'in_progress', 'completed')

class TeamJudge(db.Model):
    __tablename__ = 'team_judges'
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    judge_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pending')
    updated_at = db.Column(db.DateTime, server_default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())

    judge = db.relationship('User')

    __table_args__ = (
        db.UniqueConstraint('team_id', 'judge_id', name='unique_team_judge'),
        CheckConstraint("status IN ('pending', 'in_progress', 'completed')", name="check_team_judge_status"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'team_id': self.team_id,
            'judge_id': self.judge_id,
            'event_id': self.event_id,
            'status': self.status,
            'judge_name': self.judge.full_name if self.judge else None,
        }
