"""Tests for the Prompt Builder."""

import json

from microsim.models.conversation import ConversationTurn, Role
from microsim.parsing.parser import parse_response
from microsim.prompting.builder import (
    build_messages,
    compose_user_message,
    seed_exchange,
    to_payload,
)
from microsim.world.seed import (
    INITIAL_NARRATIVE,
    NARRATIVE_MARKER,
    SEED_USER_PROMPT,
    STATE_MARKER,
    SYSTEM_INSTRUCTION,
    initial_state,
)


def _make_history() -> list:
    return [
        ConversationTurn(role=Role.USER, content="earlier input"),
        ConversationTurn(role=Role.ASSISTANT, content="earlier reply"),
    ]


class TestSeedExchange:
    def test_seed_pair_shape(self):
        seed = seed_exchange()
        assert [t.role for t in seed] == [Role.USER, Role.ASSISTANT]
        assert seed[0].content == SEED_USER_PROMPT

    def test_seed_reply_is_parseable(self):
        reply = seed_exchange()[1].content
        parsed = parse_response(reply)
        assert parsed.narrative == INITIAL_NARRATIVE
        assert parsed.state == initial_state()


class TestBuildMessages:
    def test_fresh_history_injects_seed(self):
        messages = build_messages([], initial_state(), "媽媽叫大家吃早餐")

        assert [m.role for m in messages] == [
            Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.USER,
        ]
        assert messages[0].content == SYSTEM_INSTRUCTION
        assert messages[1].content == SEED_USER_PROMPT
        assert "媽媽叫大家吃早餐" in messages[-1].content

    def test_prior_history_replayed_verbatim(self):
        history = _make_history()
        messages = build_messages(history, initial_state(), "next")

        assert len(messages) == 4
        assert messages[1:3] == history
        assert SEED_USER_PROMPT not in [m.content for m in messages]

    def test_system_turn_not_taken_from_history(self):
        messages = build_messages(_make_history(), initial_state(), "x")
        assert sum(1 for m in messages if m.role == Role.SYSTEM) == 1

    def test_input_history_not_mutated(self):
        history = _make_history()
        build_messages(history, initial_state(), "x")
        assert len(history) == 2

    def test_deterministic(self):
        state = initial_state()
        assert build_messages([], state, "x") == build_messages([], state, "x")


class TestUserMessage:
    def test_embeds_state_json_and_input(self):
        state = initial_state()
        content = compose_user_message(state, "下雨了")

        assert "下雨了" in content
        embedded = content.split("：", 1)[1].split("\n", 1)[0]
        assert json.loads(embedded) == state

    def test_non_ascii_preserved(self):
        content = compose_user_message(initial_state(), "x")
        assert "爸爸" in content
        assert "\\u" not in content


class TestSystemInstruction:
    def test_names_both_markers(self):
        assert NARRATIVE_MARKER in SYSTEM_INSTRUCTION
        assert STATE_MARKER in SYSTEM_INSTRUCTION

    def test_json_example_braces_rendered(self):
        assert '"time": "HH:MM"' in SYSTEM_INSTRUCTION
        assert "{{" not in SYSTEM_INSTRUCTION


def test_to_payload():
    payload = to_payload(_make_history())
    assert payload == [
        {"role": "user", "content": "earlier input"},
        {"role": "assistant", "content": "earlier reply"},
    ]
