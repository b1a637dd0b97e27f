"""
Shared pytest fixtures for the MicroSim test suite.

The API module builds a default application at import time; pointing the
store at an in-memory database keeps test runs from creating files.
"""

import os

os.environ["MICROSIM_DB_PATH"] = ":memory:"
os.environ["OPENROUTER_API_KEY"] = ""

import pytest

from microsim.errors import InferenceError
from microsim.models.simulation import ModelInfo
from microsim.world.seed import format_reply


class StubInferenceClient:
    """Inference client that returns canned replies and records every call.

    Usage:
        client = StubInferenceClient(["reply 1", "reply 2"])
        client.complete(messages, "model", "key")  # -> "reply 1"
    """

    def __init__(self, replies=None, error: InferenceError = None):
        self._replies = list(replies or [])
        self.error = error
        self.calls = []
        self.models = []

    def complete(self, messages, model_id, credential):
        self.calls.append({
            "messages": messages,
            "model": model_id,
            "credential": credential,
        })
        if self.error is not None:
            raise self.error
        if self._replies:
            return self._replies.pop(0)
        return format_reply("平靜的一刻。", {"time": "07:05", "characters": [], "environment": {}})

    def list_models(self, credential):
        self.calls.append({"credential": credential})
        if self.error is not None:
            raise self.error
        return sorted(self.models, key=lambda m: m.name.lower())


@pytest.fixture
def stub_client():
    return StubInferenceClient()


@pytest.fixture
def sample_models():
    return [
        ModelInfo(id="z/zeta", name="Zeta", context_length=8192),
        ModelInfo(id="a/alpha", name="alpha", context_length=32768),
        ModelInfo(id="m/mid", name="Mid", context_length=4096),
    ]
