import logging
import sys

logger = logging.getLogger('launchpad')
logger.setLevel(logging.DEBUG)

handler = logging.StreamHandler(sys.stdout)
handler.setLevel(logging.DEBUG)
handler.setFormatter(
    logging.Formatter('%(asctime)s %(levelname)s [%(module)s] %(message)s')
)
logger.addHandler(handler)


def log_event(name: str, **params):
    """Record a usage event (check-in, check-out) in the application log."""
    logger.info('Event: %s - Params: %s', name, params)


def log_error(msg):
    logger.error(msg)
