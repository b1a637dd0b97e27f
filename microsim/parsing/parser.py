"""
Response Parser — splits a raw model reply into narrative and world state.

A well-formed reply carries two sections in fixed order:

    === 📝 敘事推演 ===
    <narrative>

    === 💾 當前世界狀態庫 (JSON) ===
    <JSON world state, optionally fenced in ```json ... ```>

The scanner locates the first occurrence of each marker and treats the two
sections independently. Fallback table:

    narrative marker absent               -> narrative = placeholder
    state marker before narrative marker  -> narrative = placeholder
    state marker absent                   -> narrative runs to end of input
    state section absent                  -> state = initial world state
    state section not valid JSON          -> state = initial world state

The state fallback is the *initial* world state, never the previous turn's.
"""

import json
import logging
from typing import NamedTuple, Optional

from pydantic import ValidationError

from microsim.models.world import WorldState
from microsim.world.seed import (
    NARRATIVE_MARKER,
    PARSE_ERROR_NARRATIVE,
    STATE_MARKER,
    initial_state,
)

logger = logging.getLogger("ResponseParser")

_FENCE = "```"
_JSON_FENCE = "```json"


class ParsedReply(NamedTuple):
    narrative: str
    state: dict


class _Sections(NamedTuple):
    narrative: Optional[str]
    state: Optional[str]


def scan_sections(text: str) -> _Sections:
    """Locate both marker tokens and cut out the raw section bodies."""
    narrative_at = text.find(NARRATIVE_MARKER)
    state_at = text.find(STATE_MARKER)

    narrative = None
    if narrative_at != -1:
        body_start = narrative_at + len(NARRATIVE_MARKER)
        if state_at == -1:
            narrative = text[body_start:]
        elif state_at >= body_start:
            narrative = text[body_start:state_at]

    state = None
    if state_at != -1:
        state = text[state_at + len(STATE_MARKER):]

    return _Sections(narrative=narrative, state=state)


def strip_code_fence(section: str) -> str:
    """Remove a ```json / ``` fence wrapped around a section, if present."""
    if section.startswith(_JSON_FENCE):
        section = section[len(_JSON_FENCE):]
    elif section.startswith(_FENCE):
        section = section[len(_FENCE):]
    else:
        return section
    if section.endswith(_FENCE):
        section = section[: -len(_FENCE)]
    return section.strip()


def check_schema(state: dict) -> bool:
    """
    Validate a decoded state against the WorldState schema.
    An incomplete state is still accepted as the new world; the gap is only logged.
    """
    try:
        WorldState.model_validate(state)
    except ValidationError as e:
        logger.warning("JSON state does not match the world schema: %d problem(s)", e.error_count())
        return False
    return True


def decode_state(section: Optional[str]) -> dict:
    """Decode the state section, falling back to the initial world state."""
    if section is None:
        return initial_state()

    payload = strip_code_fence(section.strip())
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse JSON state: %s", e)
        return initial_state()

    if not isinstance(decoded, dict):
        logger.warning("JSON state is a %s, not an object", type(decoded).__name__)
        return initial_state()

    check_schema(decoded)
    return decoded


def extract_narrative(text: str) -> str:
    """Narrative section of a reply, or the parse-error placeholder."""
    narrative = scan_sections(text).narrative
    if narrative is None:
        return PARSE_ERROR_NARRATIVE
    return narrative.strip()


def parse_response(text: str) -> ParsedReply:
    """Parse a raw model reply into its narrative and world state."""
    sections = scan_sections(text)
    narrative = (
        sections.narrative.strip()
        if sections.narrative is not None
        else PARSE_ERROR_NARRATIVE
    )
    return ParsedReply(narrative=narrative, state=decode_state(sections.state))
