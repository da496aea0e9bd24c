"""Unit tests for request message handling."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from relay.core.messages import (
    ChatMessage,
    ensure_system_prompt,
    extract_messages,
    has_system_message,
    load_body,
)
from relay.core.prompt import SYSTEM_PROMPT

non_system = st.fixed_dictionaries(
    {"role": st.sampled_from(["user", "assistant"]), "content": st.text()}
)
any_message = st.fixed_dictionaries(
    {"role": st.sampled_from(["system", "user", "assistant"]), "content": st.text()}
)


class TestEnsureSystemPrompt:
    """Tests for the default system message."""

    @given(st.lists(non_system))
    def test_prepends_exactly_one_system_message(self, messages):
        """Property test: a list without a system message gains one at index 0."""
        original = list(messages)

        result = ensure_system_prompt(messages)

        assert result is messages
        assert result[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert result[1:] == original
        assert sum(1 for m in result if m["role"] == "system") == 1

    @given(st.lists(any_message).filter(has_system_message))
    def test_existing_system_message_is_kept(self, messages):
        """Property test: nothing is added when a system message exists anywhere."""
        original = list(messages)

        assert ensure_system_prompt(messages) == original

    def test_system_message_at_end_is_not_duplicated(self):
        messages = [
            {"role": "user", "content": "hi"},
            {"role": "system", "content": "be terse"},
        ]

        ensure_system_prompt(messages)

        assert [m["role"] for m in messages] == ["user", "system"]

    def test_empty_list(self):
        assert ensure_system_prompt([]) == [{"role": "system", "content": SYSTEM_PROMPT}]


class TestLoadBody:
    """Tests for lenient body decoding."""

    @pytest.mark.parametrize("raw", [None, b"", "", b"not json", b"[1, 2]", b'"text"', b"\xff\xfe"])
    def test_unusable_body_is_empty_object(self, raw):
        assert load_body(raw) == {}

    def test_object_body(self):
        assert load_body(b'{"messages": []}') == {"messages": []}


class TestExtractMessages:
    """Tests for message validation."""

    def test_missing_messages_defaults_to_empty(self):
        assert extract_messages({}) == []
        assert extract_messages([{"role": "user", "content": "hi"}]) == []

    def test_messages_are_normalised(self):
        payload = {"messages": [{"role": "user", "content": "hi", "id": 7}]}

        assert extract_messages(payload) == [{"role": "user", "content": "hi"}]

    def test_unknown_role_fails(self):
        with pytest.raises(ValidationError):
            extract_messages({"messages": [{"role": "tool", "content": "x"}]})

    def test_chat_message_requires_content(self):
        with pytest.raises(ValidationError):
            ChatMessage(role="user")

    def test_null_payload_fails(self):
        with pytest.raises(ValueError):
            extract_messages(None)

    def test_null_messages_fails(self):
        with pytest.raises(ValidationError):
            extract_messages({"messages": None})
