# models/criterion.py

from extensions import db
from sqlalchemy import CheckConstraint

class Criterion(db.Model):
    __tablename__ = 'evaluation_criteria'
    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True)
    criteria_name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    max_score = db.Column(db.Float, nullable=False, default=100)
    weight = db.Column(db.Float, nullable=False, default=1)
    display_order = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("max_score > 0", name="check_criterion_max_score"),
        CheckConstraint("weight > 0", name="check_criterion_weight"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'criteria_name': self.criteria_name,
            'description': self.description,
            'max_score': self.max_score,
            'weight': self.weight,
            'display_order': self.display_order,
        }
