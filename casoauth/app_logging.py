"""Log configuration for the bridge."""

import logging

from flask import Flask
from pythonjsonlogger import jsonlogger


def setup_logger(app: Flask) -> None:
    """Attach a JSON handler to the root logger, per the app config."""
    level = int(app.config.get('LOGLEVEL', logging.INFO))
    logger = logging.getLogger()
    logger.setLevel(level)
    if not app.config.get('LOG_JSON'):
        return
    if any(isinstance(h.formatter, jsonlogger.JsonFormatter)
           for h in logger.handlers):
        return
    logHandler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(levelname)s %(name)s %(message)s',
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    )
    logHandler.setFormatter(formatter)
    logger.addHandler(logHandler)
