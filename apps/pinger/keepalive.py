"""Process-wide PingScheduler shared by views, commands and app startup."""

import logging
import threading

from django.conf import settings

from .services import AlreadyRunning, PingScheduler, load_targets_or_empty

logger = logging.getLogger(__name__)

_scheduler = None
_started = False
_lock = threading.Lock()


def get_scheduler():
    """Return the shared scheduler, building it from PINGER_TARGETS_FILE on first use."""
    global _scheduler

    with _lock:
        if _scheduler is None:
            targets_file = getattr(settings, 'PINGER_TARGETS_FILE', 'targets.json')
            _scheduler = PingScheduler(targets=load_targets_or_empty(targets_file))
            logger.info(
                "Pinger initialised with %d targets from %s",
                len(_scheduler.list_targets()), targets_file,
            )
        return _scheduler


def start():
    """Build the scheduler once and start pinging if PINGER_AUTOSTART is set."""
    global _started

    with _lock:
        if _started:
            return
        _started = True

    scheduler = get_scheduler()
    if not getattr(settings, 'PINGER_AUTOSTART', False):
        logger.info("Pinger idle: POST /start to begin pinging")
        return

    try:
        scheduler.start()
    except AlreadyRunning:
        return
    logger.info("Pinger autostarted")


def reset():
    """Close and drop the shared scheduler."""
    global _scheduler, _started

    with _lock:
        scheduler = _scheduler
        _scheduler = None
        _started = False

    if scheduler is not None:
        scheduler.close()
