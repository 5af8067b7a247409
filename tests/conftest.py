import base64
import threading

import pytest

from providers.base import ModelProvider


class FakeProvider(ModelProvider):
    """Provider returning canned outputs and recording every call."""

    def __init__(self, responder=None):
        self.responder = responder
        self.calls = []
        self._lock = threading.Lock()

    @property
    def name(self):
        return "Fake"

    def generate(self, prompt, output_schema, media=None):
        with self._lock:
            self.calls.append({"prompt": prompt, "schema": output_schema, "media": media})
        if self.responder is None:
            return None
        result = self.responder(prompt, output_schema, media)
        if isinstance(result, Exception):
            raise result
        if isinstance(result, dict):
            return output_schema.model_validate(result)
        return result


def make_data_uri(data=b"RIFF....WAVEfmt ", mime="audio/wav"):
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def audio_uri():
    return make_data_uri()


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "sessions.json")
