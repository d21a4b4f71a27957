"""Shared fakes for the bridge tests."""

import inspect
import json
from types import SimpleNamespace
from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest


class FakeRemoteDevice:
    """In-memory stand-in for a device announced on the bus."""

    def __init__(self, topic: str, name: str = "Device", kind: str = "outlet", features=()):
        self.topic = topic
        self.name = name
        self.kind = kind
        self.features: Dict[str, dict] = {feature: {} for feature in features}
        self.callbacks: Dict[str, List] = {}
        self.sets: List[tuple] = []

    def topic_name(self) -> str:
        return self.topic

    def get_name(self) -> str:
        return self.name

    def get_type(self) -> str:
        return self.kind

    def get_features(self) -> Dict[str, dict]:
        return self.features

    def on_update(self, feature, callback):
        self.callbacks.setdefault(feature, []).append(callback)

    async def set(self, feature, value):
        self.sets.append((feature, value))

    async def push(self, feature, value):
        for callback in self.callbacks.get(feature, []):
            result = callback(self, feature, value)
            if inspect.isawaitable(result):
                await result


def make_msg(subject: str, payload) -> SimpleNamespace:
    if isinstance(payload, dict):
        payload = json.dumps(payload)
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return SimpleNamespace(subject=subject, data=payload)


@pytest.fixture
def fake_bus() -> MagicMock:
    """A bus with the NATSClient surface; subscriptions are mocks."""
    bus = MagicMock()
    bus.publish = AsyncMock()
    bus.publish_json = AsyncMock()
    bus.subscribe = AsyncMock(side_effect=lambda subject, handler: MagicMock(
        subject=subject, handler=handler, unsubscribe=AsyncMock()
    ))
    return bus


@pytest.fixture
def fake_gateway() -> MagicMock:
    gateway = MagicMock()
    gateway.handle_device_added = AsyncMock()
    return gateway


@pytest.fixture
def outlet() -> FakeRemoteDevice:
    return FakeRemoteDevice(
        "outlet/kitchen",
        name="Kitchen outlet",
        kind="outlet",
        features=("on", "currentPower", "firmwareVersion"),
    )
