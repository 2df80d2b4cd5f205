# utils/logger.py

import logging

LOGGER_NAME = "EpidemicSimulation"

def get_logger(level=None):
    """
    Logger compartido por la grilla y el driver. El handler se instala una sola vez.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        formatter = logging.Formatter('[%(levelname)s] %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    if level is not None:
        logger.setLevel(level)
    return logger
