from datetime import datetime

from database import db


class Answer(db.Model):
    """
    the single answer to one question. status is 'draft' or 'final' and the
    payload columns hold whichever kind of content content_type says
    """

    __tablename__ = 'answers'

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id'), nullable=False, unique=True)
    status = db.Column(db.String(10), nullable=False, default='draft')  # 'draft' or 'final'
    content_type = db.Column(db.String(20), nullable=False, default='text')

    content = db.Column(db.JSON)  # rich text document
    chart_config = db.Column(db.JSON)
    media_urls = db.Column(db.JSON)  # list of urls
    interactive_data = db.Column(db.JSON)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by = db.Column(db.String(200))

    def replace_payload(self, payload):
        """Swap in a new payload, every column of the old one is cleared."""
        self.content_type = payload.content_type
        self.content = payload.content
        self.chart_config = payload.chart_config
        self.media_urls = payload.media_urls
        self.interactive_data = payload.interactive_data

    def payload_dict(self):
        return {
            'content': self.content,
            'chart_config': self.chart_config,
            'media_urls': self.media_urls,
            'interactive_data': self.interactive_data,
        }

    def to_dict(self):
        data = {
            'id': self.id,
            'question_id': self.question_id,
            'status': self.status,
            'content_type': self.content_type,
            'updated_at': self.updated_at,
            'updated_by': self.updated_by,
        }
        data.update(self.payload_dict())
        return data

    def __repr__(self):
        return f'<Answer: {self.status} for Question {self.question_id}>'
