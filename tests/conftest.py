"""
Pytest Configuration and Fixtures

Shared fixtures for all tests.
"""

from typing import List

import pytest

from fakes import SleepRecorder
from svg_app.models import Scene


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def sample_scenes() -> List[Scene]:
    return [
        Scene("The Sun", "A blazing sun", "Pulse the corona", 69, "top"),
        Scene("Hammers Earth", "Sun rays hitting the planet", "Shake the planet", 90, "bottom"),
        Scene("With Energy", "Glowing energetic waves", "Scale up the waves", 60, "center"),
    ]


@pytest.fixture
def api_settings(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
    monkeypatch.setenv("GEMINI_TEXT_MODEL", "gemini-test")
    from svg_app.config import Settings

    return Settings()
