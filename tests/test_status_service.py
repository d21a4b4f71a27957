import asyncio
from unittest.mock import MagicMock

import pytest

from htbridge.application.sync_controller import AdapterState
from htbridge.core.bus_topics import GatewaySubjects
from htbridge.core.config import settings
from htbridge.core.status_service import StatusPublishTrigger, StatusService


@pytest.fixture
def controller() -> MagicMock:
    controller = MagicMock()
    controller.ready = True
    controller.state = AdapterState.READY
    return controller


@pytest.fixture
def registry() -> MagicMock:
    registry = MagicMock()
    registry.get_devices_status.return_value = [{"id": "HT-lamp"}]
    return registry


@pytest.fixture
def service(controller, registry, fake_bus) -> StatusService:
    return StatusService(controller, registry, bus=fake_bus, interval=1)


def test_payload(service):
    payload = service.build_status_payload()

    assert payload["ready"] is True
    assert payload["state"] == "READY"
    assert payload["device_count"] == 1
    assert payload["devices"] == [{"id": "HT-lamp"}]
    assert isinstance(payload["timestamp"], int)


async def test_publish_now(service, fake_bus):
    assert await service.publish_now(trigger=StatusPublishTrigger.MANUAL) is True

    subject, payload = fake_bus.publish_json.await_args.args
    assert subject == GatewaySubjects.status()
    assert payload["adapter"] == settings.ADAPTER_ID


async def test_publish_now_reports_failure(service, fake_bus):
    fake_bus.publish_json.side_effect = ConnectionError("bus down")

    assert await service.publish_now() is False


async def test_loop_publishes_until_stopped(service, fake_bus):
    await service.start()
    await asyncio.sleep(0.01)
    await service.stop()

    fake_bus.publish_json.assert_awaited_once()
    assert service._task is None


async def test_loop_survives_publish_errors(service, fake_bus):
    fake_bus.publish_json.side_effect = ConnectionError("bus down")

    await service.start()
    await asyncio.sleep(0.01)

    assert service._task is not None and not service._task.done()
    await service.stop()
