# htbridge/main.py

import asyncio
import logging

from htbridge.core.logging_config import logger
from htbridge.application.bridge import bridge
from htbridge.core.bus_topics import GatewaySubjects
from htbridge.core.nats_client import nats_client
from htbridge.interfaces.handlers.gateway_command_handler import gateway_command_handler


async def main():

    try:
        await nats_client.connect()

        await nats_client.subscribe(GatewaySubjects.command(), gateway_command_handler)
        await bridge.start()

        logger.info("🚀 Hemtjanst bridge started")

        await asyncio.Future()

    except asyncio.CancelledError:
        pass

    finally:
        try:
            await bridge.stop()
        except Exception:
            logging.exception("Bridge shutdown failed")

        await nats_client.close()

        logger.info("Hemtjanst bridge stopped.")


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bridge stopping due to keyboard interrupt.")


if __name__ == "__main__":
    run()
