"""
The states an answer can be in and the kinds of content it can carry.

A question is either unanswered (no row), or has one answer that is a draft or
final. Saving again can flip between draft and final freely, deleting goes
back to unanswered.

The payload is a tagged union: content_type says which one of content,
chart_config, media_urls or interactive_data is in use and the others are
always empty.
"""
from dataclasses import dataclass
from typing import Any, Optional

from services.errors import ValidationError
from services.validation import ANSWER_TEXT_MAX, validate_media_url

ABSENT = 'absent'
DRAFT = 'draft'
FINAL = 'final'

ANSWER_STATUSES = (DRAFT, FINAL)
ANSWER_STATES = (ABSENT, DRAFT, FINAL)

STATUS_WEIGHTS = {
    FINAL: 1.0,
    DRAFT: 0.5,
    ABSENT: 0.0,
}

TEXT = 'text'
CHART = 'chart'
MEDIA = 'media'
INTERACTIVE = 'interactive'

CONTENT_TYPES = (TEXT, CHART, MEDIA, INTERACTIVE)

# which payload column belongs to each content type
PAYLOAD_FIELDS = {
    TEXT: 'content',
    CHART: 'chart_config',
    MEDIA: 'media_urls',
    INTERACTIVE: 'interactive_data',
}


@dataclass(frozen=True)
class AnswerPayload:
    content_type: str
    content: Optional[Any] = None
    chart_config: Optional[dict] = None
    media_urls: Optional[list] = None
    interactive_data: Optional[dict] = None

    @property
    def value(self):
        return getattr(self, PAYLOAD_FIELDS[self.content_type])

    def to_dict(self):
        return {
            'content_type': self.content_type,
            'content': self.content,
            'chart_config': self.chart_config,
            'media_urls': self.media_urls,
            'interactive_data': self.interactive_data,
        }


def validate_status(status):
    if status not in ANSWER_STATUSES:
        raise ValidationError('Status must be either "draft" or "final"')
    return status


def validate_content_type(content_type):
    if content_type not in CONTENT_TYPES:
        raise ValidationError('Content type must be one of: text, chart, media, interactive')
    return content_type


def can_transition(current, new):
    """
    Whether an answer may move from state current to state new.

    Anything between absent, draft and final is allowed except deleting
    something that is already absent.
    """
    if current not in ANSWER_STATES or new not in ANSWER_STATES:
        return False
    if current == ABSENT and new == ABSENT:
        return False
    return True


def state_of(answer):
    if answer is None:
        return ABSENT
    return answer.status


def _text_length(content):
    if isinstance(content, str):
        return len(content)

    from utils.rich_text import to_plain_text

    return len(to_plain_text(content))


def build_payload(content_type, data):
    """
    Build the payload for content_type out of a request body.

    Only the field that matches content_type is read, whatever else is in
    data gets dropped.
    """
    content_type = validate_content_type(content_type or TEXT)
    data = data or {}
    field = PAYLOAD_FIELDS[content_type]
    value = data.get(field)

    if value is None or value == '' or value == [] or value == {}:
        raise ValidationError('Answer must have some content')

    if content_type == TEXT:
        if not isinstance(value, (str, dict)):
            raise ValidationError('Text answers must be a string or a rich text document')
        if _text_length(value) > ANSWER_TEXT_MAX:
            raise ValidationError(f'Answer content must be less than {ANSWER_TEXT_MAX} characters')

    elif content_type == MEDIA:
        if not isinstance(value, list):
            raise ValidationError('media_urls must be a list of URLs')
        value = [validate_media_url(url) for url in value]

    elif not isinstance(value, dict):
        raise ValidationError(f'{field} must be an object')

    return AnswerPayload(content_type=content_type, **{field: value})
