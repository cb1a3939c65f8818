"""Test fixtures for ur_scaffold tests."""

from __future__ import annotations

import pytest

from ur_scaffold.model.registry import ModelRegistry
from ur_scaffold.scaffold.provider import ScaffoldProvider
from ur_scaffold.telemetry import InMemoryTelemetrySink
from ur_scaffold.transport.mock import MockTransport

DOGS_URL = "http://api/dogs"
CATS_URL = "http://api/cats"

ALL_DOGS = [
    {"id": 1, "name": "Rex", "breed": "boxer"},
    {"id": 2, "name": "Fido", "breed": "pug"},
    {"id": 3, "name": "Max", "breed": "boxer"},
]
BOXERS = [dog for dog in ALL_DOGS if dog["breed"] == "boxer"]
PUGS = [dog for dog in ALL_DOGS if dog["breed"] == "pug"]
NEW_DOG = {"name": "Bella", "breed": "beagle"}
SAVED_DOG = {"id": 4, "name": "Bella", "breed": "beagle"}


def make_test_models() -> ModelRegistry:
    """Registry with the Dogs and Cats models used throughout the tests."""
    return ModelRegistry().define("Dogs", DOGS_URL).define("Cats", CATS_URL)


def make_test_provider(
    transport: MockTransport | None = None,
    models: ModelRegistry | None = None,
    telemetry_sink: InMemoryTelemetrySink | None = None,
) -> ScaffoldProvider:
    return ScaffoldProvider(
        models or make_test_models(),
        transport or MockTransport(),
        telemetry_sink=telemetry_sink,
    )


@pytest.fixture()
def models() -> ModelRegistry:
    return make_test_models()


@pytest.fixture()
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture()
def held_transport() -> MockTransport:
    """Transport that keeps requests in flight until flush()."""
    return MockTransport(auto_respond=False)


@pytest.fixture()
def sink() -> InMemoryTelemetrySink:
    return InMemoryTelemetrySink()


@pytest.fixture()
def provider(models, transport, sink) -> ScaffoldProvider:
    return make_test_provider(transport, models, sink)
