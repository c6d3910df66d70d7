"""
tests/test_parsers.py
Unit tests for the export parser.
Builds synthetic export JSON in-test — no real chat history needed.
"""

import json
from datetime import datetime, timezone

import pytest

from exposure.parsers.export_parser import (
    INVALID_EXPORT_MESSAGE,
    InvalidExportError,
    decode_export_bytes,
    extract_messages,
    load_export_bytes,
    load_export_file,
    parse_export_file,
)


# ── FIXTURE: Synthetic export ─────────────────────────────────

def _node(role, parts, create_time=1700000000):
    message = {'author': {'role': role}, 'content': {'parts': parts}}
    if create_time is not None:
        message['create_time'] = create_time
    return {'message': message}


SAMPLE_CONVERSATION = {
    'title': 'Test chat',
    'mapping': {
        'root':  {'message': None, 'children': ['n1']},
        'n1':    _node('user', ['Hello there', 'second part'], 1700000000),
        'n2':    _node('assistant', ['Hi! How can I help?'], 1700000060),
        'sys':   _node('system', [''], 1700000001),
    },
}


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / 'conversations.json'
    path.write_text(json.dumps([SAMPLE_CONVERSATION]), encoding='utf-8')
    return path


# ── FLATTENING ───────────────────────────────────────────────

class TestExtractMessages:

    def test_single_conversation(self):
        messages = extract_messages(SAMPLE_CONVERSATION)
        assert len(messages) == 3
        assert [m.role for m in messages] == ['user', 'assistant', 'system']

    def test_parts_joined_with_space(self):
        messages = extract_messages(SAMPLE_CONVERSATION)
        assert messages[0].content == 'Hello there second part'

    def test_list_of_conversations(self):
        other = {'mapping': {'x': _node('user', ['Another chat'])}}
        messages = extract_messages([SAMPLE_CONVERSATION, other])
        assert len(messages) == 4
        assert messages[-1].content == 'Another chat'

    def test_create_time_is_unix_seconds(self):
        messages = extract_messages(SAMPLE_CONVERSATION)
        assert messages[0].timestamp == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert messages[0].timestamp.hour == datetime.fromtimestamp(1700000000).hour

    def test_missing_create_time_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        messages = extract_messages({'mapping': {'n': _node('user', ['hi'], None)}})
        after = datetime.now(timezone.utc)
        assert len(messages) == 1
        assert before <= messages[0].timestamp <= after

    def test_empty_mapping(self):
        assert extract_messages({'mapping': {}}) == []

    def test_export_order_preserved(self):
        mapping = {
            'late':  _node('user', ['second'], 1700009999),
            'early': _node('user', ['first'], 1700000000),
        }
        messages = extract_messages({'mapping': mapping})
        assert [m.content for m in messages] == ['second', 'first']

    def test_non_text_parts_contribute_nothing(self):
        node = _node('user', ['look at this', {'content_type': 'image_asset_pointer'}])
        messages = extract_messages({'mapping': {'n': node}})
        assert messages[0].content == 'look at this '


class TestMalformedExports:

    @pytest.mark.parametrize('data', [None, 'text', 42, {'title': 'no mapping'}, {}])
    def test_wrong_top_level_shape_yields_empty(self, data):
        assert extract_messages(data) == []

    def test_node_without_parts_skipped(self):
        mapping = {
            'a': {'message': {'author': {'role': 'user'}, 'content': {'text': 'x'}}},
            'b': _node('user', ['kept']),
        }
        messages = extract_messages({'mapping': mapping})
        assert [m.content for m in messages] == ['kept']

    def test_node_with_string_parts_skipped(self):
        node = {'message': {'author': {'role': 'user'}, 'content': {'parts': 'oops'}}}
        assert extract_messages({'mapping': {'n': node}}) == []

    def test_node_without_author_skipped(self):
        node = {'message': {'content': {'parts': ['no author']}}}
        assert extract_messages({'mapping': {'n': node}}) == []

    def test_non_dict_nodes_skipped(self):
        mapping = {'a': 'junk', 'b': None, 'c': _node('user', ['ok'])}
        assert len(extract_messages({'mapping': mapping})) == 1

    def test_bad_conversation_does_not_abort_others(self):
        good = {'mapping': {'n': _node('user', ['still here'])}}
        messages = extract_messages([{'mapping': None}, 'junk', good])
        assert [m.content for m in messages] == ['still here']

    def test_unusable_create_time_falls_back(self):
        node = _node('user', ['hi'], 'not-a-number')
        messages = extract_messages({'mapping': {'n': node}})
        assert len(messages) == 1
        assert messages[0].timestamp.tzinfo is not None


# ── LOADING ──────────────────────────────────────────────────

class TestLoading:

    def test_decode_strips_utf8_bom(self):
        assert decode_export_bytes(b'\xef\xbb\xbf{"a": 1}') == '{"a": 1}'

    def test_decode_utf16_le(self):
        raw = b'\xff\xfe' + '{"a": "é"}'.encode('utf-16-le')
        assert json.loads(decode_export_bytes(raw)) == {'a': 'é'}

    def test_load_bytes_valid(self):
        assert load_export_bytes(b'{"mapping": {}}') == {'mapping': {}}

    def test_load_bytes_invalid_json(self):
        with pytest.raises(InvalidExportError) as exc:
            load_export_bytes(b'{not json')
        assert str(exc.value) == INVALID_EXPORT_MESSAGE

    def test_load_bytes_deeply_nested(self):
        raw = ('[' * 200000 + ']' * 200000).encode('utf-8')
        with pytest.raises(InvalidExportError):
            load_export_bytes(raw)

    def test_invalid_export_is_value_error(self):
        with pytest.raises(ValueError):
            load_export_bytes(b'')

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(InvalidExportError):
            load_export_file(tmp_path / 'nope.json')

    def test_parse_export_file(self, export_file):
        messages = parse_export_file(export_file)
        assert len(messages) == 3
        assert messages[0].content == 'Hello there second part'
