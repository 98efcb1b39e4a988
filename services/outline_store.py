"""
The one place the routes read and change the outline through.

Every write validates first, runs in a single transaction, and on success
invalidates the cached queries it affected so the next read sees it. A failed
write rolls the session back and raises PersistenceError, leaving the cache
alone.

Reorders are optimistic: the new order is written into the cache straight
away, and if saving the plan fails only that outline entry is dropped so the
next read comes from the database again.
"""
import copy
import logging
from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from database import db
from data_tables.answer import Answer
from data_tables.answer_history import AnswerHistory
from data_tables.question import Question
from data_tables.section import Section
from services.answer_state import ABSENT, DRAFT, build_payload, can_transition, state_of, validate_status
from services.cache import QueryCache
from services.errors import DegradedReadError, NotFoundError, OutlineError, PersistenceError, ValidationError
from services.ordering import apply_order, next_append_index, reorder
from services.progress import Progress, document_progress, section_progress
from services.validation import (
    validate_id,
    validate_index,
    validate_question_prompt,
    validate_section_description,
    validate_section_title,
)

logger = logging.getLogger(__name__)

# cache key names
OUTLINE = 'outline'
SECTION_PROGRESS = 'section-progress'
DOC_PROGRESS = 'doc-progress'
ANSWER = 'answer'

ALL_KEYS = (OUTLINE, SECTION_PROGRESS, DOC_PROGRESS, ANSWER)


def init_app(app):
    app.extensions['outline_cache'] = QueryCache()


def get_store():
    """Store for the current app, every store of one app shares its cache."""
    return OutlineStore(
        current_app.extensions['outline_cache'],
        history_limit=current_app.config.get('HISTORY_LIMIT', 10),
    )


class OutlineStore:

    def __init__(self, cache, history_limit=10):
        self.cache = cache
        self.history_limit = history_limit

    # helpers

    @contextmanager
    def _write(self, action, *names):
        """Commit everything done inside the block, or roll it all back."""
        try:
            yield
            db.session.commit()
        except OutlineError:
            db.session.rollback()
            raise
        except SQLAlchemyError as error:
            db.session.rollback()
            logger.error('could not %s: %s', action, error)
            raise PersistenceError(f'Could not {action}. Please try again.') from error

        logger.info('%s: done', action)
        self.cache.invalidate(*names)

    def _read(self, action, query):
        try:
            return query()
        except SQLAlchemyError as error:
            db.session.rollback()
            logger.error('could not %s: %s', action, error)
            raise PersistenceError(f'Could not {action}. Please try again.') from error

    def _get_section(self, section_id):
        section = db.session.get(Section, section_id)
        if section is None:
            raise NotFoundError(f'Section {section_id} not found')
        return section

    def _get_question(self, question_id):
        question = db.session.get(Question, question_id)
        if question is None:
            raise NotFoundError(f'Question {question_id} not found')
        return question

    def _record_history(self, question_id, action, answer, changed_by):
        db.session.add(AnswerHistory(
            question_id=question_id,
            action=action,
            status=answer.status,
            content_type=answer.content_type,
            payload=answer.payload_dict(),
            changed_by=changed_by,
        ))

    def _apply_plan(self, model, plan):
        for update in plan:
            row = db.session.get(model, update.id)
            if row is None:
                raise NotFoundError(f'{model.__name__} {update.id} not found')
            row.order_idx = update.order_idx

    # reads

    def _load_outline(self):
        sections = (
            Section.query
            .options(selectinload(Section.questions).selectinload(Question.answer))
            .order_by(Section.order_idx, Section.created_at, Section.id)
            .all()
        )
        return [section.to_dict() for section in sections]

    def list_sections(self):
        """Every section in order, each with its ordered questions and their answers."""
        outline = self.cache.get((OUTLINE,), lambda: self._read('load the outline', self._load_outline))
        return copy.deepcopy(outline)

    def get_section(self, section_id):
        for section in self.list_sections():
            if section['id'] == section_id:
                return section
        raise NotFoundError(f'Section {section_id} not found')

    def get_answer(self, question_id):
        """Answer dict for the question, or None when it has not been answered."""
        def load():
            question = self._get_question(question_id)
            return question.answer.to_dict() if question.answer else None

        answer = self.cache.get((ANSWER, question_id), lambda: self._read('load the answer', load))
        return copy.deepcopy(answer)

    def get_answer_history(self, question_id, limit=None):
        """Newest entries first, at most history_limit of them."""
        limit = min(max(limit or self.history_limit, 1), self.history_limit)

        def load():
            self._get_question(question_id)
            rows = (
                AnswerHistory.query
                .filter_by(question_id=question_id)
                .order_by(AnswerHistory.changed_at.desc(), AnswerHistory.id.desc())
                .limit(limit)
                .all()
            )
            return [row.to_dict() for row in rows]

        return self._read('load the answer history', load)

    def _read_statuses(self, section_id=None):
        """(section_id, answer status) for every question, status is None when unanswered."""
        try:
            query = (
                db.session.query(Question.section_id, Answer.status)
                .outerjoin(Answer, Answer.question_id == Question.id)
            )
            if section_id is not None:
                query = query.filter(Question.section_id == section_id)
            return query.all()
        except SQLAlchemyError as error:
            db.session.rollback()
            raise DegradedReadError('Could not read answers for progress') from error

    def get_section_progress(self, section_id):
        """Progress of one section. Falls back to zero if the read fails."""
        def load():
            return section_progress(status for _, status in self._read_statuses(section_id))

        try:
            return self.cache.get((SECTION_PROGRESS, section_id), load)
        except DegradedReadError as error:
            logger.warning('section %s progress unavailable, showing zero: %s', section_id, error.__cause__)
            return Progress()

    def get_document_progress(self):
        """Progress of the whole outline. Falls back to zero if the read fails."""
        def load():
            by_section = {}
            for section_id, status in self._read_statuses():
                by_section.setdefault(section_id, []).append(status)
            return document_progress(by_section.values())

        try:
            return self.cache.get((DOC_PROGRESS,), load)
        except DegradedReadError as error:
            logger.warning('document progress unavailable, showing zero: %s', error.__cause__)
            return Progress()

    def outline_json(self):
        """The outline in the import format: titles, descriptions and prompts only."""
        sections = []
        for section in self.list_sections():
            entry = {'title': section['title']}
            if section['description']:
                entry['description'] = section['description']
            entry['questions'] = [question['prompt'] for question in section['questions']]
            sections.append(entry)
        return {'sections': sections}

    def export_snapshot(self):
        """Everything an export needs, sections and questions already in order."""
        sections = self.list_sections()
        for section in sections:
            section['progress'] = section_progress(section['questions'])
        return {
            'sections': sections,
            'progress': document_progress(sections),
        }

    # sections

    def create_section(self, title, description=None):
        title = validate_section_title(title)
        description = validate_section_description(description)

        with self._write('create the section', OUTLINE, DOC_PROGRESS):
            section = Section(
                title=title,
                description=description,
                order_idx=next_append_index(Section.query.all()),
            )
            db.session.add(section)

        return self.get_section(section.id)

    def update_section(self, section_id, **changes):
        """Edit title and/or description. Last write wins."""
        validate_id(section_id, 'Section ID')
        unknown = set(changes) - {'title', 'description'}
        if unknown:
            raise ValidationError(f'Unknown section fields: {", ".join(sorted(unknown))}')
        if not changes:
            raise ValidationError('At least one field must be provided for update')

        if 'title' in changes:
            changes['title'] = validate_section_title(changes['title'])
        if 'description' in changes:
            changes['description'] = validate_section_description(changes['description'])

        with self._write('update the section', OUTLINE):
            section = self._get_section(section_id)
            for field, value in changes.items():
                setattr(section, field, value)

        return self.get_section(section_id)

    def delete_section(self, section_id):
        """Delete a section along with its questions, answers and their history."""
        validate_id(section_id, 'Section ID')

        with self._write('delete the section', *ALL_KEYS):
            db.session.delete(self._get_section(section_id))

    def reorder_sections(self, from_index, to_index):
        validate_index(from_index, 'from_index')
        validate_index(to_index, 'to_index')

        sections = self._read('load the outline', self._load_outline)
        plan = reorder(sections, from_index, to_index)
        if not plan:
            return []

        self.cache.set((OUTLINE,), apply_order(sections, plan))

        try:
            with self._write('reorder the sections', OUTLINE):
                self._apply_plan(Section, plan)
        except OutlineError:
            # drop the speculative order only
            self.cache.invalidate(OUTLINE)
            raise

        return plan

    # questions

    def create_question(self, section_id, prompt):
        validate_id(section_id, 'Section ID')
        prompt = validate_question_prompt(prompt)

        with self._write('create the question', OUTLINE, SECTION_PROGRESS, DOC_PROGRESS):
            section = self._get_section(section_id)
            question = Question(
                section_id=section.id,
                prompt=prompt,
                order_idx=next_append_index(section.questions),
            )
            db.session.add(question)

        return self._get_question(question.id).to_dict()

    def update_question(self, question_id, prompt):
        validate_id(question_id, 'Question ID')
        prompt = validate_question_prompt(prompt)

        with self._write('update the question', OUTLINE):
            self._get_question(question_id).prompt = prompt

        return self._get_question(question_id).to_dict()

    def delete_question(self, question_id):
        validate_id(question_id, 'Question ID')

        with self._write('delete the question', *ALL_KEYS):
            db.session.delete(self._get_question(question_id))

    def reorder_questions(self, section_id, from_index, to_index):
        validate_id(section_id, 'Section ID')
        validate_index(from_index, 'from_index')
        validate_index(to_index, 'to_index')

        sections = self._read('load the outline', self._load_outline)
        section = next((s for s in sections if s['id'] == section_id), None)
        if section is None:
            raise NotFoundError(f'Section {section_id} not found')

        plan = reorder(section['questions'], from_index, to_index)
        if not plan:
            return []

        section['questions'] = apply_order(section['questions'], plan)
        self.cache.set((OUTLINE,), sections)

        try:
            with self._write('reorder the questions', OUTLINE):
                self._apply_plan(Question, plan)
        except OutlineError:
            self.cache.invalidate(OUTLINE)
            raise

        return plan

    # answers

    def upsert_answer(self, question_id, status=DRAFT, content_type='text', data=None, changed_by=None):
        """
        Create or replace the answer to a question.

        The new payload replaces the old one completely, switching content
        type throws the previous type's payload away.
        """
        validate_id(question_id, 'Question ID')
        status = validate_status(status or DRAFT)
        payload = build_payload(content_type, data)

        with self._write('save the answer', OUTLINE, SECTION_PROGRESS, DOC_PROGRESS, ANSWER):
            question = self._get_question(question_id)
            answer = question.answer

            if answer is None:
                answer = Answer(question_id=question.id)
                question.answer = answer

            answer.replace_payload(payload)
            answer.status = status
            answer.updated_by = changed_by
            self._record_history(question.id, 'upsert', answer, changed_by)

        return self.get_answer(question_id)

    def set_answer_status(self, question_id, status, changed_by=None):
        """Flip an existing answer between draft and final, content untouched."""
        validate_id(question_id, 'Question ID')
        status = validate_status(status)

        with self._write('update the answer status', OUTLINE, SECTION_PROGRESS, DOC_PROGRESS, ANSWER):
            question = self._get_question(question_id)
            if question.answer is None:
                raise NotFoundError(f'Question {question_id} has no answer')

            question.answer.status = status
            question.answer.updated_by = changed_by
            self._record_history(question.id, 'upsert', question.answer, changed_by)

        return self.get_answer(question_id)

    def delete_answer(self, question_id, changed_by=None):
        """
        Remove the answer so the question counts as unanswered again.

        Returns False when there was no answer to delete.
        """
        validate_id(question_id, 'Question ID')

        with self._write('delete the answer', OUTLINE, SECTION_PROGRESS, DOC_PROGRESS, ANSWER):
            question = self._get_question(question_id)
            answer = question.answer

            if not can_transition(state_of(answer), ABSENT):
                return False

            self._record_history(question.id, 'delete', answer, changed_by)
            question.answer = None

        return True

    # import

    def import_outline(self, data):
        """
        Append sections and questions from {'sections': [{'title', 'description', 'questions': [...]}]}.

        Everything is checked before anything is written and it all goes in
        one transaction. Returns how many sections and questions were added.
        """
        sections = validate_outline(data)

        question_count = 0
        with self._write('import the outline', *ALL_KEYS):
            order_idx = next_append_index(Section.query.all())

            for entry in sections:
                section = Section(title=entry['title'], description=entry['description'], order_idx=order_idx)
                db.session.add(section)

                for position, prompt in enumerate(entry['questions']):
                    section.questions.append(Question(prompt=prompt, order_idx=position + 1))
                    question_count += 1

                order_idx += 1

        return {'sections': len(sections), 'questions': question_count}


def validate_outline(data):
    """Check the import format and return cleaned section entries."""
    if not isinstance(data, dict) or not isinstance(data.get('sections'), list):
        raise ValidationError("JSON must have a 'sections' array")
    if not data['sections']:
        raise ValidationError('There are no sections to import')

    cleaned = []
    for number, section in enumerate(data['sections'], start=1):
        if not isinstance(section, dict) or not isinstance(section.get('title'), str) or not section['title'].strip():
            raise ValidationError(f'Section {number} must have a title')

        title = validate_section_title(section['title'])

        if section.get('description') is not None and not isinstance(section['description'], str):
            raise ValidationError(f'Section {number} description must be a string')
        description = validate_section_description(section.get('description'))

        questions = section.get('questions')
        if not isinstance(questions, list):
            raise ValidationError(f'Section "{title}" must have a questions array')
        if not questions:
            raise ValidationError(f'Section "{title}" must have at least one question')

        prompts = []
        for question_number, prompt in enumerate(questions, start=1):
            if not isinstance(prompt, str) or not prompt.strip():
                raise ValidationError(f'Question {question_number} in section "{title}" must be a non-empty string')
            prompts.append(validate_question_prompt(prompt))

        cleaned.append({'title': title, 'description': description, 'questions': prompts})

    return cleaned
