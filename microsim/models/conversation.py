"""Conversation turns exchanged with the inference endpoint."""

from enum import Enum
from typing import List

from pydantic import BaseModel


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """A single chat message. Assistant turns hold the raw, unparsed reply."""

    role: Role
    content: str

    def to_message(self) -> dict:
        return {"role": self.role.value, "content": self.content}


ConversationHistory = List[ConversationTurn]
