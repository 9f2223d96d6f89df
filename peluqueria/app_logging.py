import logging
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'

_handler: Optional[logging.Handler] = None


def setup_logger(level: int = logging.INFO, json: bool = False) -> None:
    """Attach a single stream handler to the ``peluqueria`` logger."""
    global _handler
    logger = logging.getLogger('peluqueria')
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler()
    if json:
        formatter: logging.Formatter = JsonFormatter(
            FORMAT,
            rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
        )
    else:
        formatter = logging.Formatter(FORMAT)
    _handler.setFormatter(formatter)
    logger.addHandler(_handler)
    logger.setLevel(level)
