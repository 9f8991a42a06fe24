import logging
import sys

from likeable.config import settings

logger = logging.getLogger("likeable")
logger.setLevel(logging.DEBUG if settings.DEBUG_LOGS else logging.INFO)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s | %(name)s | %(message)s"))
    logger.addHandler(handler)
