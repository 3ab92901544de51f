"""logging setup for scripts and notebooks using skillrate"""
import sys
import logging

FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_console_logging(level=logging.INFO, name='skillrate'):
    """attach a stdout handler to the package logger, once"""
    logger = logging.getLogger(name)
    for handler in logger.handlers:
        if getattr(handler, '_skillrate_console', False):
            handler.setLevel(level)
            logger.setLevel(level)
            return logger
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter(FORMAT))
    stream_handler.setLevel(level)
    stream_handler._skillrate_console = True
    logger.addHandler(stream_handler)
    logger.setLevel(level)
    return logger
