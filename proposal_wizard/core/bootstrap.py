import logging
from typing import Optional

from .config import log_level

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Root handler for apps embedding the wizard; no-op if one is already set."""
    logging.basicConfig(level=(level or log_level()).upper(), format=LOG_FORMAT)
