"""MicroSim data models."""

from microsim.models.conversation import ConversationHistory, ConversationTurn, Role
from microsim.models.record import PersistedRecord
from microsim.models.simulation import (
    ConfigStatus,
    ModelInfo,
    ModelPricing,
    SimulationResult,
    StatusSnapshot,
)
from microsim.models.world import Character, Environment, WorldState

__all__ = [
    "Character",
    "ConfigStatus",
    "ConversationHistory",
    "ConversationTurn",
    "Environment",
    "ModelInfo",
    "ModelPricing",
    "PersistedRecord",
    "Role",
    "SimulationResult",
    "StatusSnapshot",
    "WorldState",
]
