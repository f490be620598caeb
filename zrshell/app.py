"""One-shot status reader: connect to the configured room and print its status as JSON."""

from __future__ import annotations

import json
import logging
import sys

from zrshell.core.config import load_settings
from zrshell.core.controller import RoomController
from zrshell.core.errors import ZoomRoomsError

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        settings = load_settings()
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Invalid configuration: %s", e)
        return 2

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    controller = RoomController(settings)
    try:
        status = controller.get_status()
    except ZoomRoomsError as e:
        logger.error("Unable to read room status from %s: %s", settings.host, e)
        return 1
    finally:
        controller.close()

    json.dump(status.to_dict(), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
