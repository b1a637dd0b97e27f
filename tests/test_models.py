"""Tests for core data models."""

from datetime import datetime

import pytest

from microsim.models import (
    Character,
    ConfigStatus,
    ConversationTurn,
    ModelInfo,
    PersistedRecord,
    Role,
    StatusSnapshot,
    WorldState,
)
from microsim.world.seed import initial_state


class TestWorldState:
    def test_initial_state_validates(self):
        state = WorldState.model_validate(initial_state())
        assert state.time == "07:00"
        assert len(state.characters) == 5
        assert [c.name for c in state.characters] == ["爸爸", "媽媽", "哥哥", "大妹", "小妹"]
        assert state.environment.weather == "晴朗"

    def test_notes_optional(self):
        character = Character(
            name="小妹", role="小學生", location="客廳",
            current_action="看電視", mood="開心",
        )
        assert character.notes is None

    def test_extra_fields_preserved(self):
        raw = initial_state()
        raw["events"] = ["停電"]
        dumped = WorldState.model_validate(raw).model_dump(exclude_none=True)
        assert dumped["events"] == ["停電"]

    def test_missing_field_rejected(self):
        raw = initial_state()
        del raw["environment"]
        with pytest.raises(Exception):
            WorldState.model_validate(raw)

    def test_initial_state_is_a_copy(self):
        first = initial_state()
        first["characters"].clear()
        assert len(initial_state()["characters"]) == 5


class TestConversation:
    def test_roles(self):
        assert {r.value for r in Role} == {"system", "user", "assistant"}

    def test_to_message(self):
        turn = ConversationTurn(role=Role.USER, content="hi")
        assert turn.to_message() == {"role": "user", "content": "hi"}

    def test_role_from_string(self):
        turn = ConversationTurn.model_validate({"role": "assistant", "content": "x"})
        assert turn.role == Role.ASSISTANT

    def test_unknown_role_rejected(self):
        with pytest.raises(Exception):
            ConversationTurn(role="narrator", content="x")


class TestSimulationModels:
    def test_record_defaults_to_empty_history(self):
        record = PersistedRecord(world_state=initial_state(), updated_at=datetime.utcnow())
        assert record.chat_history == []

    def test_status_snapshot_alias(self):
        snapshot = StatusSnapshot(state={}, narrative_history=["a"])
        assert snapshot.model_dump(by_alias=True) == {"state": {}, "narrativeHistory": ["a"]}

    def test_config_status_alias(self):
        status = ConfigStatus(model="m", has_api_key=False)
        assert status.model_dump(by_alias=True) == {"ok": True, "model": "m", "hasApiKey": False}

    def test_model_info_optional_fields(self):
        info = ModelInfo.model_validate({"id": "a/b", "name": "B", "top_provider": {}})
        assert info.context_length is None
        assert info.pricing is None
