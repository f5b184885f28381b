from __future__ import annotations

import importlib
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from nurture_core.models import AudioResult  # noqa: E402
from nurture_providers.speech import voice_for_index  # noqa: E402
from sample_texts import GENERAL_OK_TEXT  # noqa: E402


@pytest.fixture
def required_env(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-openrouter-key")
    monkeypatch.setenv("AZURE_SPEECH_KEY", "test-speech-key")
    monkeypatch.setenv("AZURE_SPEECH_REGION", "eastus")


@pytest.fixture
def backend_module(required_env, monkeypatch):
    monkeypatch.setenv("SHE_NURTURES_ENV", "test")
    monkeypatch.setenv("SHE_NURTURES_TAILORED_FALLBACK", "false")
    monkeypatch.setenv("SHE_NURTURES_LOG_LEVEL", "WARNING")

    if "main" in sys.modules:
        module = importlib.reload(sys.modules["main"])
    else:
        module = importlib.import_module("main")
    return module


@pytest.fixture
def client(backend_module):
    with TestClient(backend_module.app) as test_client:
        yield test_client


@pytest.fixture
def stub_providers(backend_module, monkeypatch):
    """Replace both upstream calls; a value that is an exception gets raised."""
    calls = SimpleNamespace(prompts=[], speech=[])

    def _stub(*, completion=GENERAL_OK_TEXT, speech=b"fake-mp3-bytes"):
        async def fake_complete(prompt):
            calls.prompts.append(prompt)
            if isinstance(completion, Exception):
                raise completion
            return completion

        async def fake_synthesize(text, voice_index=0):
            calls.speech.append((text, voice_index))
            if isinstance(speech, Exception):
                raise speech
            return AudioResult(
                audio_bytes=speech,
                mime_type="audio/mpeg",
                voice_label=voice_for_index(voice_index).name,
            )

        monkeypatch.setattr(backend_module.container.completion, "complete", fake_complete)
        monkeypatch.setattr(backend_module.container.speech, "synthesize", fake_synthesize)
        return calls

    return _stub
