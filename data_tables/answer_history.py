from datetime import datetime

from database import db


class AnswerHistory(db.Model):
    """
    append only log of every save and delete of a question's answer,
    newest rows are shown first in the history view
    """

    __tablename__ = 'answer_history'

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id'), nullable=False, index=True)
    action = db.Column(db.String(10), nullable=False)  # 'upsert' or 'delete'
    status = db.Column(db.String(10))
    content_type = db.Column(db.String(20))
    payload = db.Column(db.JSON)
    changed_by = db.Column(db.String(200))
    changed_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'question_id': self.question_id,
            'action': self.action,
            'status': self.status,
            'content_type': self.content_type,
            'payload': self.payload,
            'changed_by': self.changed_by,
            'changed_at': self.changed_at,
        }

    def __repr__(self):
        return f'<AnswerHistory {self.action} for Question {self.question_id}>'
