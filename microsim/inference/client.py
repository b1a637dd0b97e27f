"""
Inference Client — thin transport to the OpenRouter chat API.

Behavioral Contract:
- One synchronous request/response exchange per call.
- Model and credential are supplied per call; the transport holds no
  default for either.
- Any non-success status raises UpstreamError carrying status and body.
- A timeout or connection failure raises InferenceError, as does a
  success response whose body is not a JSON object.
- No retry is attempted at this layer.
"""

import logging
from typing import List, Optional, Protocol

import requests
from pydantic import ValidationError

from microsim.errors import InferenceError, InferenceTimeoutError, UpstreamError
from microsim.models.simulation import ModelInfo

logger = logging.getLogger("OpenRouterClient")

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
NO_RESPONSE = "(no response)"


class InferenceClient(Protocol):
    """Protocol for the completion backend — pluggable for tests."""

    def complete(self, messages: List[dict], model_id: str, credential: str) -> str: ...

    def list_models(self, credential: str) -> List[ModelInfo]: ...


class OpenRouterClient:
    """Chat completion and model listing against an OpenRouter-compatible API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        referer: str = "http://localhost:3000",
        title: str = "MicroSim Family",
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.referer = referer
        self.title = title
        self._session = session or requests.Session()

    def chat_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def models_url(self) -> str:
        return f"{self.base_url}/models"

    def complete(self, messages: List[dict], model_id: str, credential: str) -> str:
        """Send the message sequence and return the raw assistant text."""
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.referer,
            "X-Title": self.title,
        }
        payload = {"model": model_id, "messages": messages}

        logger.debug("POST %s model=%s messages=%d", self.chat_url(), model_id, len(messages))
        data = self._send("POST", self.chat_url(), headers=headers, json=payload)

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return NO_RESPONSE
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        return content if content is not None else NO_RESPONSE

    def list_models(self, credential: str) -> List[ModelInfo]:
        """Fetch the provider's model catalogue, sorted by display name.

        Entries that do not describe a usable model are skipped with a warning.
        """
        headers = {"Authorization": f"Bearer {credential}"}
        data = self._send("GET", self.models_url(), headers=headers)

        entries = data.get("data", [])
        if not isinstance(entries, list):
            raise InferenceError(f"Malformed model list from {self.models_url()}")

        models = []
        for entry in entries:
            try:
                models.append(ModelInfo.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping malformed model entry %r: %s", entry, e)
        return sorted(models, key=lambda m: m.name.lower())

    def _send(self, method: str, url: str, **kwargs) -> dict:
        """Perform one request and return the decoded JSON object body."""
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.error("%s %s timed out after %ss", method, url, self.timeout)
            raise InferenceTimeoutError(self.timeout) from e
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise InferenceError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            logger.error("%s %s returned %d", method, url, response.status_code)
            raise UpstreamError(response.status_code, response.text)

        # requests' JSONDecodeError subclasses ValueError
        try:
            data = response.json()
        except ValueError as e:
            logger.error("%s %s returned a non-JSON body", method, url)
            raise InferenceError(f"Invalid JSON from {url}: {e}") from e
        if not isinstance(data, dict):
            raise InferenceError(f"Unexpected {type(data).__name__} body from {url}")
        return data
