"""
Field checks for everything a user can type into the outline.

They all raise ValidationError and return the cleaned value, so the store can
call them before it touches the session.
"""
from urllib.parse import urlparse

from services.errors import ValidationError

SECTION_TITLE_MAX = 200
SECTION_DESCRIPTION_MAX = 1000
QUESTION_PROMPT_MAX = 500
ANSWER_TEXT_MAX = 10000


def require_text(value, field_name, max_length, min_length=1):
    """Trim value and check it is present and within the length limits."""
    if value is None or not isinstance(value, str):
        raise ValidationError(f'{field_name} is required')

    trimmed = value.strip()

    if len(trimmed) < min_length:
        if min_length == 1:
            raise ValidationError(f'{field_name} is required')
        raise ValidationError(f'{field_name} must be at least {min_length} characters')

    if len(trimmed) > max_length:
        raise ValidationError(f'{field_name} must be less than {max_length} characters')

    return trimmed


def optional_text(value, field_name, max_length):
    """Like require_text but blank turns into None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field_name} must be a string')

    trimmed = value.strip()
    if trimmed == '':
        return None

    if len(trimmed) > max_length:
        raise ValidationError(f'{field_name} must be less than {max_length} characters')

    return trimmed


def validate_section_title(title):
    return require_text(title, 'Section title', SECTION_TITLE_MAX)


def validate_section_description(description):
    return optional_text(description, 'Section description', SECTION_DESCRIPTION_MAX)


def validate_question_prompt(prompt):
    return require_text(prompt, 'Question prompt', QUESTION_PROMPT_MAX)


def validate_id(value, field_name):
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f'{field_name} is required')
    return value


def validate_index(value, field_name):
    """Positions from a drag and drop. Range is checked by the ordering engine."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f'{field_name} must be an integer')
    return value


def validate_media_url(url):
    if not isinstance(url, str):
        raise ValidationError('Media URLs must be strings')

    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValidationError(f'Please enter a valid URL: {url}')

    return url.strip()
