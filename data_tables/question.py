from datetime import datetime

from database import db
"""
this is one prompt inside a section, it can have at most one answer

"""
class Question(db.Model):
    __tablename__ = 'questions'

    id = db.Column(db.Integer, primary_key=True)
    section_id = db.Column(db.Integer, db.ForeignKey('sections.id'), nullable=False)
    prompt = db.Column(db.Text, nullable=False)
    order_idx = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # one to one, the unique question_id on answers keeps it that way
    answer = db.relationship('Answer', backref='question', uselist=False, lazy=True, cascade='all, delete-orphan')
    history = db.relationship('AnswerHistory', backref='question', lazy=True, cascade='all, delete-orphan')

    @property
    def answer_status(self):
        """'final', 'draft' or None when nobody has answered yet."""
        if self.answer is None:
            return None
        return self.answer.status

    def to_dict(self):
        return {
            'id': self.id,
            'section_id': self.section_id,
            'prompt': self.prompt,
            'order_idx': self.order_idx,
            'created_at': self.created_at,
            'answer': self.answer.to_dict() if self.answer else None,
        }

    def __repr__(self):
        return f'<Question {self.order_idx}: {self.prompt[:50]}...'
