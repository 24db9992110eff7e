"""
Logging infrastructure.

Installs the service-wide log format on the root logger.
"""
import logging
from typing import Union

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """
    Install a single stream handler on the root logger.

    Safe to call more than once; the previous handler installed here is
    replaced rather than duplicated.

    Args:
        level: Log level name or number
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_order_service_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._order_service_handler = True
    root.addHandler(handler)
    root.setLevel(level)

    # aiohttp access logs are noisy at INFO
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
