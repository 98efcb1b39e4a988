from datetime import datetime

from database import db


class Section(db.Model):
    """
    A section is a top level grouping of questions in the blueprint outline.

    For example:
    - Section 1: "Performance Standards Definition"
    - Section 2: "Robot Configuration & Experience"

    order_idx decides where the section shows up in the outline and in exports.
    """

    __tablename__ = 'sections'

    # Columns
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)  # Optional
    order_idx = db.Column(db.Integer, nullable=False)  # Order: 1, 2, 3...
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    # This section owns its questions, deleting it removes them and their answers
    questions = db.relationship('Question', backref='section', lazy=True, cascade='all, delete-orphan')

    def to_dict(self, include_questions=True):
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'order_idx': self.order_idx,
            'created_at': self.created_at,
        }

        if include_questions:
            from services.ordering import sort_siblings

            data['questions'] = [question.to_dict() for question in sort_siblings(self.questions)]

        return data

    def __repr__(self):
        return f'<Section {self.order_idx}: {self.title}>'
