"""
Ping scheduling core.

PingScheduler owns the shared ServiceState (targets, running flag, loop
registry and log buffer) and is the only thing that mutates it. Each target
gets its own PingLoop running in a daemon thread:

    poll running/generation -> draw delay -> sleep -> GET url -> log -> repeat

Cancellation is cooperative. Stopping or restarting never interrupts a loop
that is sleeping or mid-request; the loop finishes that cycle and exits at
its next poll, when it sees the scheduler stopped or its generation replaced.
Until then an old loop can still ping its target once more, even if the
target was removed, and briefly overlap with the new loop for the same URL.

All access to ServiceState happens under its single lock. The lock is never
held across a sleep or an HTTP request.
"""

import logging
import random
import threading
import time
from typing import Dict, List, Optional

import httpx
from django.conf import settings
from django.utils import timezone

from .exceptions import (
    AlreadyRunning,
    AlreadyStopped,
    DuplicateTarget,
    NetworkFailure,
    ReloadFailed,
    TargetConfigError,
    TargetNotFound,
)
from .log_buffer import DEFAULT_TAIL, LogBuffer
from .targets import Target, load_targets

logger = logging.getLogger(__name__)

# Every log buffer entry is also emitted here; PINGER_LOG_FILE attaches a file handler
activity_logger = logging.getLogger("apps.pinger.activity")


class ServiceState:
    """Mutable aggregate shared by the scheduler and every ping loop."""

    def __init__(self, targets: List[Target], logs: LogBuffer):
        self.lock = threading.Lock()
        self.targets = list(targets)
        self.running = False
        # Bumped whenever the current set of loops is replaced or stopped
        self.generation = 0
        self.loops: Dict[str, threading.Thread] = {}
        self.logs = logs


class PingLoop:
    """Sleep-then-request cycle for one target, bound to one generation."""

    ACTIVE = 'active'
    STOPPED = 'stopped'

    def __init__(self, scheduler: 'PingScheduler', target: Target, generation: int):
        self.scheduler = scheduler
        self.target = target
        self.generation = generation
        self.status = self.ACTIVE

    def is_current(self) -> bool:
        state = self.scheduler.state
        with state.lock:
            return state.running and state.generation == self.generation

    def step(self) -> bool:
        """Run one cycle. Returns False once the loop has stopped."""
        if not self.is_current():
            self.status = self.STOPPED
            return False

        url = self.target.url
        delay = self.target.draw_delay(self.scheduler.rng)
        self.scheduler.log(f"🛌 Sleeping {delay} minutes before pinging {url}")
        self.scheduler.sleep(delay * self.scheduler.delay_unit)

        try:
            response = self.scheduler.ping_once(self.target)
        except NetworkFailure as e:
            self.scheduler.log(f"❌ Failed to ping {url}: {e.reason}", logging.WARNING)
        else:
            self.scheduler.log(
                f"✅ {url} responded with status {response.status_code} {response.reason_phrase}"
            )
        return True

    def run(self):
        logger.debug(f"Ping loop for {self.target.url} started (generation {self.generation})")
        while self.status == self.ACTIVE:
            try:
                self.step()
            except Exception:
                logger.exception(f"Ping loop error for {self.target.url}")
        logger.debug(f"Ping loop for {self.target.url} stopped (generation {self.generation})")


class PingScheduler:
    """Start/stop/reconfigure the ping loops and answer status queries."""

    def __init__(
        self,
        targets: Optional[List[Target]] = None,
        client: Optional[httpx.Client] = None,
        sleep=time.sleep,
        rng=None,
    ):
        self.targets_file = getattr(settings, 'PINGER_TARGETS_FILE', 'targets.json')
        self.delay_unit = getattr(settings, 'PINGER_DELAY_UNIT_SECONDS', 60)
        self.request_timeout = getattr(settings, 'PINGER_REQUEST_TIMEOUT', 30.0)
        self.user_agent = getattr(settings, 'PINGER_USER_AGENT', 'NoNap/1.0')

        logs = LogBuffer(capacity=getattr(settings, 'PINGER_LOG_CAPACITY', 100))
        self.state = ServiceState(targets or [], logs)

        self._owns_client = client is None
        if client is None:
            client = httpx.Client(
                timeout=self.request_timeout,
                follow_redirects=True,
                headers={'User-Agent': self.user_agent},
            )
        self.client = client
        self.sleep = sleep
        self.rng = rng or random.Random()

    # Logging

    def _record(self, message: str) -> None:
        """Append to the log buffer. Caller must hold the state lock."""
        stamp = timezone.now().strftime('%Y-%m-%d %H:%M:%S')
        self.state.logs.append(f"[{stamp}] {message}")

    def _emit(self, message: str, level: int = logging.INFO) -> None:
        """Send an entry to logging. Never called with the state lock held."""
        activity_logger.log(level, message)

    def log(self, message: str, level: int = logging.INFO) -> None:
        with self.state.lock:
            self._record(message)
        self._emit(message, level)

    # Network

    def ping_once(self, target: Target) -> httpx.Response:
        """Single GET without retry. Transport failures raise NetworkFailure."""
        try:
            return self.client.get(target.url)
        except (httpx.RequestError, httpx.InvalidURL, UnicodeError) as e:
            raise NetworkFailure(str(e) or e.__class__.__name__)

    # Loop management (caller holds the state lock)

    def _spawn_loops(self) -> None:
        state = self.state
        state.generation += 1
        state.loops = {}
        for target in state.targets:
            loop = PingLoop(self, target, state.generation)
            state.loops[target.url] = self._start_loop(loop)

    def _start_loop(self, loop: PingLoop) -> threading.Thread:
        thread = threading.Thread(
            target=loop.run,
            name=f"ping {loop.target.url}",
            daemon=True,
        )
        thread.start()
        return thread

    def _restart(self) -> None:
        state = self.state
        state.running = False
        state.loops = {}
        state.running = True
        self._spawn_loops()

    # Controller operations

    def start(self) -> None:
        with self.state.lock:
            if self.state.running:
                raise AlreadyRunning("Already running")
            self.state.running = True
            self._spawn_loops()
            message = f"▶️ Started pinging {len(self.state.targets)} targets"
            self._record(message)
        self._emit(message)

    def stop(self) -> None:
        with self.state.lock:
            if not self.state.running:
                raise AlreadyStopped("Already stopped")
            self.state.running = False
            self.state.generation += 1
            self.state.loops = {}
            message = "⏹️ Stopped pinging"
            self._record(message)
        self._emit(message)

    def add_target(self, target: Target) -> None:
        with self.state.lock:
            if any(t.url == target.url for t in self.state.targets):
                raise DuplicateTarget(target.url)
            self.state.targets.append(target)
            if self.state.running:
                self._restart()
            message = f"➕ Added target {target.url} ({target.min_delay}-{target.max_delay} min)"
            self._record(message)
        self._emit(message)

    def remove_target(self, url: str) -> None:
        with self.state.lock:
            remaining = [t for t in self.state.targets if t.url != url]
            if len(remaining) == len(self.state.targets):
                raise TargetNotFound(url)
            self.state.targets = remaining
            if self.state.running:
                self._restart()
            message = f"➖ Removed target {url}"
            self._record(message)
        self._emit(message)

    def reload(self, source=None) -> List[Target]:
        """Replace the target list from a targets file (default PINGER_TARGETS_FILE)."""
        source = source or self.targets_file
        # File I/O happens before taking the lock
        try:
            targets = load_targets(source)
        except TargetConfigError as e:
            logger.warning(f"Reload from {source} failed: {e.reason}")
            raise ReloadFailed(e.reason)

        with self.state.lock:
            self.state.targets = list(targets)
            if self.state.running:
                self._restart()
            message = f"🔄 Reloaded {len(targets)} targets from {source}"
            self._record(message)
        self._emit(message)
        return targets

    def close(self) -> None:
        """Stop the loops (if running) and release the HTTP client."""
        with self.state.lock:
            self.state.running = False
            self.state.generation += 1
            self.state.loops = {}
        if self._owns_client:
            self.client.close()

    # Queries

    def status(self) -> dict:
        with self.state.lock:
            return {
                'running': self.state.running,
                'targets': [t.to_dict() for t in self.state.targets],
                'logs_count': len(self.state.logs),
            }

    def is_running(self) -> bool:
        with self.state.lock:
            return self.state.running

    def list_targets(self) -> List[Target]:
        with self.state.lock:
            return list(self.state.targets)

    def tail_logs(self, n: int = DEFAULT_TAIL) -> List[str]:
        with self.state.lock:
            return self.state.logs.tail(n)

    def active_loops(self) -> List[str]:
        with self.state.lock:
            return list(self.state.loops)
