"""
Simulation Engine — the orchestration core.

Coordinates store, prompt builder, inference client and parser for the
three lifecycle operations:

  bootstrap / reset : restore the initial world, no inference call
  act(input)        : read -> build -> complete -> parse -> write

Behavioral Contract:
- Every lifecycle operation runs under one engine lock, so act cycles are
  serialized and never interleave their read and write.
- Input and credential checks happen before any side effect.
- If inference or parsing raises, nothing is written.
- World state and history are always written together.
- Status queries take no engine lock; they see the store's last completed write.
"""

import logging
import threading
from typing import List, Optional

from microsim.config import RuntimeSettings
from microsim.errors import EmptyInputError, MissingCredentialError
from microsim.inference.client import InferenceClient
from microsim.models.conversation import ConversationTurn, Role
from microsim.models.simulation import (
    ConfigStatus,
    ModelInfo,
    SimulationResult,
    StatusSnapshot,
)
from microsim.parsing.parser import extract_narrative, parse_response
from microsim.prompting.builder import (
    build_messages,
    history_base,
    to_payload,
)
from microsim.state.store import StateStore
from microsim.world.seed import INITIAL_NARRATIVE, initial_state

logger = logging.getLogger("SimulationEngine")


class SimulationEngine:
    """Owns the simulation record and drives every change to it."""

    def __init__(
        self,
        store: StateStore,
        client: InferenceClient,
        settings: Optional[RuntimeSettings] = None,
    ):
        self.store = store
        self.client = client
        self.settings = settings or RuntimeSettings()
        self._lock = threading.Lock()

    # --- Lifecycle ---

    def bootstrap(self) -> SimulationResult:
        """Clear the record to the initial world and return the opening scene."""
        with self._lock:
            self.store.reset()
        logger.info("Simulation initialised")
        return SimulationResult(narrative=INITIAL_NARRATIVE, state=initial_state())

    def reset(self) -> SimulationResult:
        """Explicit reset; same effect as bootstrap."""
        return self.bootstrap()

    def act(self, user_input: str) -> SimulationResult:
        """Advance the simulation by one user action."""
        if not user_input or not user_input.strip():
            raise EmptyInputError("input is required")

        api_key = self.settings.api_key
        model = self.settings.model
        if not api_key:
            raise MissingCredentialError(
                "No API key configured. Set it via POST /api/config."
            )

        with self._lock:
            record = self.store.read()
            history = record.chat_history
            messages = build_messages(history, record.world_state, user_input)

            logger.info(
                "Act cycle: model=%s history=%d messages=%d",
                model, len(history), len(messages),
            )
            raw_reply = self.client.complete(to_payload(messages), model, api_key)
            parsed = parse_response(raw_reply)

            new_history = history_base(history) + [
                messages[-1],
                ConversationTurn(role=Role.ASSISTANT, content=raw_reply),
            ]
            self.store.write(parsed.state, new_history)

        logger.info("Act cycle complete: history=%d", len(new_history))
        return SimulationResult(narrative=parsed.narrative, state=parsed.state)

    # --- Queries ---

    def get_status(self) -> StatusSnapshot:
        """Current world state and every narrative re-derived from history."""
        record = self.store.read()
        narratives = [
            extract_narrative(turn.content)
            for turn in record.chat_history
            if turn.role == Role.ASSISTANT
        ]
        return StatusSnapshot(
            state=record.world_state,
            narrative_history=narratives or [INITIAL_NARRATIVE],
        )

    # --- Runtime configuration ---

    def configure(
        self, api_key: Optional[str] = None, model: Optional[str] = None
    ) -> ConfigStatus:
        """Update the in-memory credential and model. Never persisted."""
        self.settings.update(api_key=api_key, model=model)
        logger.info(
            "Configuration updated: model=%s has_api_key=%s",
            self.settings.model, self.settings.has_api_key,
        )
        return self.config_status()

    def config_status(self) -> ConfigStatus:
        return ConfigStatus(
            ok=True,
            model=self.settings.model,
            has_api_key=self.settings.has_api_key,
        )

    def list_models(self) -> List[ModelInfo]:
        """Model catalogue from the provider, using the configured credential."""
        api_key = self.settings.api_key
        if not api_key:
            raise MissingCredentialError("No API key configured.")
        return self.client.list_models(api_key)
