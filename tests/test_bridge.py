"""End-to-end flow through the bridge with an in-memory bus."""

import asyncio
import json

import pytest

from conftest import make_msg
from htbridge.application.bridge import Bridge
from htbridge.application.sync_controller import SyncController
from htbridge.core.bus_topics import GatewaySubjects
from htbridge.infrastructure.gateway.gateway_registry import GatewayRegistry
from htbridge.interfaces.handlers import gateway_command_handler as handler_module

SETTLE = 0.05

PLUG_META = {
    "topic": "outlet/livingroom/tv",
    "name": "TV plug",
    "type": "outlet",
    "feature": {"on": {}, "currentPower": {}, "currentVoltage": {}, "firmwareVersion": {}},
}


@pytest.fixture
def bridge(fake_bus) -> Bridge:
    registry = GatewayRegistry(bus=fake_bus)
    controller = SyncController(gateway=registry, settle_delay=SETTLE)
    return Bridge(bus=fake_bus, registry=registry, controller=controller)


def events(bus, event_type):
    return [
        c.args[1]
        for c in bus.publish_json.await_args_list
        if c.args[0] == GatewaySubjects.event() and c.args[1].get("event_type") == event_type
    ]


async def test_discovery_to_ready(bridge, fake_bus):
    await bridge.start(discover=True)
    await bridge.server.handle_announce(json.dumps(PLUG_META).encode())

    device = bridge.controller.get_device("HT-outlet-livingroom-tv")
    assert device.type.value == "smartPlug"
    assert list(device.properties) == ["on", "instantaneousPower", "voltage"]
    assert bridge.ready is False

    await asyncio.sleep(SETTLE * 3)

    assert bridge.ready is True
    assert len(events(fake_bus, "device_added")) == 1
    assert events(fake_bus, "adapter_ready") == [
        {"event_type": "adapter_ready", "payload": {"device_count": 1}}
    ]
    await bridge.stop()


async def test_values_flow_both_ways(bridge, fake_bus):
    await bridge.start(discover=False)
    await bridge.server.handle_announce(json.dumps(PLUG_META).encode())

    await bridge.server.handle_feature_value("outlet.livingroom.tv.on.get", "false")
    await bridge.server.handle_feature_value("outlet.livingroom.tv.currentVoltage.get", "229.8")

    device = bridge.controller.get_device("HT-outlet-livingroom-tv")
    assert device.get_property_value("on") is False
    assert device.get_property_value("voltage") == 229.8

    echoed = await bridge.controller.request_set("HT-outlet-livingroom-tv", "on", True)

    assert echoed is True
    fake_bus.publish.assert_any_await("outlet.livingroom.tv.on.set", "1")
    assert device.get_property_value("on") is False
    await bridge.stop()


async def test_set_property_command(bridge, fake_bus, monkeypatch):
    monkeypatch.setattr(handler_module, "bridge", bridge)
    await bridge.start(discover=False)
    await bridge.server.handle_announce(json.dumps(PLUG_META).encode())

    await handler_module.gateway_command_handler(make_msg(
        GatewaySubjects.command(),
        {"action": "set_property", "device_id": "HT-outlet-livingroom-tv", "property": "on", "value": False},
    ))

    fake_bus.publish.assert_any_await("outlet.livingroom.tv.on.set", "0")
    ack = events(fake_bus, "property_set")[-1]
    assert ack["ok"] is True
    assert ack["value"] is False
    await bridge.stop()


async def test_set_property_command_unknown_device(bridge, fake_bus, monkeypatch):
    monkeypatch.setattr(handler_module, "bridge", bridge)

    await handler_module.gateway_command_handler(make_msg(
        GatewaySubjects.command(),
        {"action": "set_property", "device_id": "HT-missing", "property": "on", "value": True},
    ))

    ack = events(fake_bus, "property_set")[-1]
    assert ack["ok"] is False
    assert "HT-missing" in ack["error"]


async def test_invalid_command_is_dropped(bridge, fake_bus, monkeypatch):
    monkeypatch.setattr(handler_module, "bridge", bridge)

    await handler_module.gateway_command_handler(make_msg(GatewaySubjects.command(), {"action": "reboot"}))
    await handler_module.gateway_command_handler(make_msg(GatewaySubjects.command(), "{{{"))

    fake_bus.publish_json.assert_not_awaited()


async def test_get_status_command(bridge, fake_bus, monkeypatch):
    monkeypatch.setattr(handler_module, "bridge", bridge)

    await handler_module.gateway_command_handler(make_msg(GatewaySubjects.command(), {"action": "get_status"}))

    subject, payload = fake_bus.publish_json.await_args.args
    assert subject == GatewaySubjects.status()
    assert payload["ready"] is False
    assert payload["device_count"] == 0
