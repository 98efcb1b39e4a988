"""Unit tests for answer states and payloads."""
import pytest

from data_tables.answer import Answer
from services.answer_state import (
    ABSENT,
    DRAFT,
    FINAL,
    AnswerPayload,
    build_payload,
    can_transition,
    state_of,
    validate_status,
)
from services.errors import ValidationError


class TestTransitions:

    @pytest.mark.parametrize('current, new', [
        (ABSENT, DRAFT), (ABSENT, FINAL),
        (DRAFT, FINAL), (FINAL, DRAFT),
        (DRAFT, DRAFT), (FINAL, FINAL),
        (DRAFT, ABSENT), (FINAL, ABSENT),
    ])
    def test_can_transition_when_legal_then_true(self, current, new):
        assert can_transition(current, new)

    def test_can_transition_when_deleting_absent_then_false(self):
        assert not can_transition(ABSENT, ABSENT)

    @pytest.mark.parametrize('current, new', [('archived', DRAFT), (DRAFT, 'published')])
    def test_can_transition_when_unknown_state_then_false(self, current, new):
        assert not can_transition(current, new)

    def test_state_of_when_no_answer_then_absent(self):
        assert state_of(None) == ABSENT
        assert state_of(Answer(status=FINAL)) == FINAL

    def test_validate_status_when_invalid_then_raises(self):
        with pytest.raises(ValidationError, match='draft'):
            validate_status('done')


class TestBuildPayload:

    def test_build_payload_when_text_then_only_content_kept(self):
        payload = build_payload('text', {
            'content': 'Fleet uptime above 95%',
            'chart_config': {'type': 'bar'},
        })

        assert payload == AnswerPayload(content_type='text', content='Fleet uptime above 95%')
        assert payload.value == 'Fleet uptime above 95%'

    def test_build_payload_when_no_type_then_text(self):
        assert build_payload(None, {'content': 'x'}).content_type == 'text'

    def test_build_payload_when_chart_then_content_dropped(self):
        payload = build_payload('chart', {'content': 'old text', 'chart_config': {'type': 'line'}})

        assert payload.content is None
        assert payload.chart_config == {'type': 'line'}

    def test_build_payload_when_media_then_urls_checked(self):
        payload = build_payload('media', {'media_urls': [' https://example.com/a.png ']})
        assert payload.media_urls == ['https://example.com/a.png']

        with pytest.raises(ValidationError, match='valid URL'):
            build_payload('media', {'media_urls': ['ftp://example.com/a.png']})

    def test_build_payload_when_interactive_not_object_then_raises(self):
        with pytest.raises(ValidationError, match='must be an object'):
            build_payload('interactive', {'interactive_data': ['a']})

    def test_build_payload_when_empty_then_raises(self):
        with pytest.raises(ValidationError, match='some content'):
            build_payload('text', {'content': ''})

    def test_build_payload_when_unknown_type_then_raises(self):
        with pytest.raises(ValidationError, match='Content type'):
            build_payload('video', {'content': 'x'})

    def test_build_payload_when_rich_text_too_long_then_raises(self):
        doc = {'type': 'doc', 'content': [
            {'type': 'paragraph', 'content': [{'type': 'text', 'text': 'a' * 10001}]},
        ]}
        with pytest.raises(ValidationError, match='less than'):
            build_payload('text', {'content': doc})


class TestReplacePayload:

    def test_replace_payload_when_type_switches_then_old_payload_cleared(self):
        answer = Answer(status=DRAFT)
        answer.replace_payload(build_payload('text', {'content': 'first'}))
        answer.replace_payload(build_payload('chart', {'chart_config': {'type': 'pie'}}))

        assert answer.content_type == 'chart'
        assert answer.content is None
        assert answer.chart_config == {'type': 'pie'}
        assert answer.media_urls is None
        assert answer.interactive_data is None
