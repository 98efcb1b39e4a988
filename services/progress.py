"""
Completion scores for one section and for the whole outline.

Nothing is stored, the numbers are worked out again from the current answers
every time they are read. A final answer counts 1, a draft counts 0.5 and an
unanswered question counts 0.
"""
import math
from dataclasses import dataclass

from services.answer_state import STATUS_WEIGHTS, DRAFT, FINAL


@dataclass(frozen=True)
class Progress:
    final: int = 0
    draft: int = 0
    total: int = 0

    @property
    def score(self):
        return self.final * STATUS_WEIGHTS[FINAL] + self.draft * STATUS_WEIGHTS[DRAFT]

    @property
    def unanswered(self):
        return self.total - self.final - self.draft

    @property
    def percent(self):
        # empty sections are 0% rather than a division by zero
        if self.total <= 0:
            return 0
        return round((self.score / self.total) * 100)

    def __add__(self, other):
        return Progress(
            final=self.final + other.final,
            draft=self.draft + other.draft,
            total=self.total + other.total,
        )

    @classmethod
    def from_score(cls, score, total):
        """
        Rebuild the counts from a single weighted score.

        Only for callers that never got the counts. With weights of 1 and 0.5
        the split is exact unless the score was read mid update.
        """
        final = math.floor(score)
        draft = round((score - final) * 2)
        return cls(final=final, draft=draft, total=total)

    def to_dict(self):
        return {
            'score': self.score,
            'total': self.total,
            'final': self.final,
            'draft': self.draft,
            'unanswered': self.unanswered,
            'percent': self.percent,
        }


def _status_of(question):
    if isinstance(question, str) or question is None:
        return question

    if isinstance(question, dict):
        if 'status' in question:
            return question['status']
        answer = question.get('answer')
        return answer.get('status') if answer else None

    return question.answer_status


def section_progress(questions):
    """
    Score the questions of one section.

    questions can be Question rows, question dicts carrying an 'answer', or
    just the answer statuses (None for unanswered).
    """
    final = 0
    draft = 0
    total = 0

    for question in questions:
        total += 1
        status = _status_of(question)

        if status == FINAL:
            final += 1
        elif status == DRAFT:
            draft += 1

    return Progress(final=final, draft=draft, total=total)


def _questions_of(section):
    if isinstance(section, (list, tuple)):
        return section
    if isinstance(section, dict):
        return section.get('questions') or []
    return section.questions


def document_progress(sections):
    """
    Sum of section_progress over every section.

    A section is a Section row, a dict with 'questions', or a plain list of
    whatever section_progress accepts.
    """
    result = Progress()

    for section in sections:
        result = result + section_progress(_questions_of(section))

    return result
