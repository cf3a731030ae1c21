from extensions import db

class Score(db.Model):
    __tablename__ = 'scores'
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False, index=True)
    judge_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    criteria_id = db.Column(db.Integer, db.ForeignKey('evaluation_criteria.id', ondelete='CASCADE'), nullable=False, index=True)
    # 0 <= score <= criterion.max_score is only checked by the judging form
    score = db.Column(db.Float, nullable=False)
    feedback = db.Column(db.Text, nullable=True)
    submitted_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, server_default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())

    judge = db.relationship('User')
    criterion = db.relationship('Criterion')

    __table_args__ = (
        db.UniqueConstraint('team_id', 'judge_id', 'criteria_id', name='unique_score'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'team_id': self.team_id,
            'judge_id': self.judge_id,
            'criteria_id': self.criteria_id,
            'score': self.score,
            'feedback': self.feedback,
        }
