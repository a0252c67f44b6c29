"""
Logging configuration.

Importing this module configures the root logger once for the whole service.
"""

import logging

from pettrack.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=LOG_FORMAT,
)

# httpx logs every request at INFO, which drowns the poll loop
logging.getLogger("httpx").setLevel(logging.WARNING)
