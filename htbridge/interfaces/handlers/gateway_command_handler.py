# htbridge/interfaces/handlers/gateway_command_handler.py
import json
import logging

from pydantic import ValidationError

from htbridge.application.bridge import bridge
from htbridge.core.bus_topics import GatewayEvents, GatewaySubjects
from htbridge.core.status_service import StatusPublishTrigger
from htbridge.domain.errors import BridgeError
from htbridge.domain.events.device_events import GatewayCommand, GatewayCommandAction, PropertySetAck

logger = logging.getLogger(__name__)


async def gateway_command_handler(msg):
    try:
        raw = json.loads(msg.data.decode())

        logger.info(f"Received gateway command: {raw}")

        try:
            command = GatewayCommand(**raw)
        except ValidationError:
            logger.error(f"Invalid gateway command: {raw}")
            return

        match command.action:
            case GatewayCommandAction.SET_PROPERTY:
                await _handle_set_property(command)

            case GatewayCommandAction.GET_STATUS:
                await bridge.status_service.publish_now(trigger=StatusPublishTrigger.MANUAL)

    except Exception:
        logger.exception("Unhandled error while processing gateway command")


async def _handle_set_property(command: GatewayCommand):
    ok = False
    error = None
    value = None
    try:
        value = await bridge.controller.request_set(command.device_id, command.property, command.value)
        ok = True
    except (BridgeError, ValueError) as exc:
        logger.error(f"Set request rejected: {exc}")
        error = str(exc)

    ack = PropertySetAck(
        event_type=GatewayEvents.PROPERTY_SET,
        device_id=command.device_id,
        property=command.property,
        value=value,
        ok=ok,
        error=error,
    )
    await bridge.bus.publish_json(GatewaySubjects.event(), ack.model_dump())
    logger.info(f"✔ Gateway ACK sent: {ack.model_dump()}")
