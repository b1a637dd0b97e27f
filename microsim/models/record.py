"""Persisted Record — the single durable unit of the simulation."""

from datetime import datetime
from typing import List

from pydantic import BaseModel

from microsim.models.conversation import ConversationTurn


class PersistedRecord(BaseModel):
    """
    World state plus the conversation that produced it.

    Created once at first startup, mutated by every successful action or
    reset, never deleted. `world_state` is kept as the decoded JSON object
    so whatever the model emitted round-trips exactly.
    """

    world_state: dict
    chat_history: List[ConversationTurn] = []
    updated_at: datetime
