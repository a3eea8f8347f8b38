"""Shared test fixtures for the migration test suite."""

from typing import Any

import pytest

from core.settings import SettingsStore, register_system_settings
from tests.factories import FakeNotifier, make_legacy_character


@pytest.fixture
def legacy_character() -> dict[str, Any]:
    return make_legacy_character()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def settings() -> SettingsStore:
    store = SettingsStore()
    register_system_settings(store)
    return store
