"""
Prompt Builder — composes the message sequence for one act cycle.

Output ordering is fixed:
  system instruction, [seed exchange if history is empty], prior turns,
  new user turn.

The system turn is rebuilt on every call and never persisted; prior
history is replayed verbatim.
"""

from typing import List

from microsim.models.conversation import ConversationHistory, ConversationTurn, Role
from microsim.world.seed import (
    SEED_USER_PROMPT,
    SYSTEM_INSTRUCTION,
    dump_state,
    seed_reply,
)


def system_turn() -> ConversationTurn:
    return ConversationTurn(role=Role.SYSTEM, content=SYSTEM_INSTRUCTION)


def seed_exchange() -> List[ConversationTurn]:
    """One example of a well-formed reply, shown before the first real turn."""
    return [
        ConversationTurn(role=Role.USER, content=SEED_USER_PROMPT),
        ConversationTurn(role=Role.ASSISTANT, content=seed_reply()),
    ]


def compose_user_message(current_state: dict, user_input: str) -> str:
    """Embed the current state and the new event in one user message."""
    return (
        f"【當前世界絕對狀態】：{dump_state(current_state)}\n"
        f"【使用者輸入/新事件】：{user_input}\n"
        "請根據上述「當前狀態」與「新事件」，推演下一步，並輸出新的 JSON。"
    )


def history_base(prior_history: ConversationHistory) -> ConversationHistory:
    """Prior history, or the seed exchange when starting fresh."""
    if not prior_history:
        return seed_exchange()
    return list(prior_history)


def build_messages(
    prior_history: ConversationHistory,
    current_state: dict,
    user_input: str,
) -> List[ConversationTurn]:
    """Build the full message sequence sent to the inference endpoint."""
    return [
        system_turn(),
        *history_base(prior_history),
        ConversationTurn(
            role=Role.USER,
            content=compose_user_message(current_state, user_input),
        ),
    ]


def to_payload(turns: List[ConversationTurn]) -> List[dict]:
    return [t.to_message() for t in turns]
