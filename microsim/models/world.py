"""World State — the canonical simulation snapshot."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Character(BaseModel):
    """One household member. All fields are free-form text chosen by the model."""

    model_config = ConfigDict(extra="allow")

    name: str                               # Unique within the household
    role: str                               # e.g., "工程師"
    location: str                           # Room name
    current_action: str
    mood: str
    notes: Optional[str] = None


class Environment(BaseModel):
    model_config = ConfigDict(extra="allow")

    weather: str
    temperature: str
    notes: str


class WorldState(BaseModel):
    """The whole simulated household at one point in time."""

    model_config = ConfigDict(extra="allow")

    time: str                               # "HH:MM", advanced by the model only
    characters: List[Character]
    environment: Environment
