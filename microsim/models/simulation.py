"""Results returned by the simulation engine to its callers."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SimulationResult(BaseModel):
    """Outcome of bootstrap, reset, or one act cycle."""

    narrative: str
    state: dict


class StatusSnapshot(BaseModel):
    """Current state plus every narrative re-derived from history."""

    model_config = ConfigDict(populate_by_name=True)

    state: dict
    narrative_history: List[str] = Field(alias="narrativeHistory")


class ConfigStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    model: str
    has_api_key: bool = Field(alias="hasApiKey")


class ModelPricing(BaseModel):
    model_config = ConfigDict(extra="allow")

    prompt: Optional[str] = None
    completion: Optional[str] = None


class ModelInfo(BaseModel):
    """One entry of the upstream provider's model catalogue."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    context_length: Optional[int] = None
    description: Optional[str] = None
    pricing: Optional[ModelPricing] = None
