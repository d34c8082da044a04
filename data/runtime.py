"""
data/runtime.py
Runs dashboard Controllers on a dedicated asyncio event loop thread.

Each browser session gets its own Controller (own AppState, own renderer),
built on first contact by the factory passed in. Dash serves callbacks from
worker threads; they hand events to the loop with dispatch() so every state
mutation happens on that one thread, one event at a time.
"""

import asyncio
import logging
import threading
from collections import OrderedDict
from concurrent.futures import Future
from typing import Callable

from data.controller import Controller

logger = logging.getLogger(__name__)

DISPATCH_TIMEOUT_SECONDS = 5.0
MAX_SESSIONS = 256   # least recently used sessions are dropped past this


def log_load_failure(future: Future) -> None:
    """Done-callback for background loads nobody waits on."""
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error(f"Background load crashed: {exc!r}", exc_info=exc)


class ControllerRuntime:
    def __init__(self, make_controller: Callable[[], Controller], max_sessions: int = MAX_SESSIONS):
        """
        Args:
            make_controller: Builds a fresh Controller for a new session.
            max_sessions:    Sessions kept before the least recently used is dropped.
        """
        self.make_controller = make_controller
        self.max_sessions = max_sessions
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="controller-loop", daemon=True)
        self._sessions: OrderedDict[str, Controller] = OrderedDict()
        self._lock = threading.Lock()

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def start(self) -> None:
        """Start the loop thread. Catalogs load per session, on first page view."""
        self._thread.start()
        logger.info("Controller loop started.")

    # ── Sessions ──────────────────────────────────────────────────────────────

    def session(self, session_id: str) -> Controller:
        """The Controller for a session, created on first use."""
        with self._lock:
            controller = self._sessions.get(session_id)
            if controller is not None:
                self._sessions.move_to_end(session_id)
                return controller

            controller = self.make_controller()
            self._sessions[session_id] = controller
            logger.info(f"New session {session_id[:8]} ({len(self._sessions)} active).")

            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info(f"Dropped idle session {evicted[:8]}.")
            return controller

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def open_page(self, session_id: str) -> Future:
        """
        A page (re)load for a session. Loads the catalog in the background if
        this session has none yet, so a reload retries a failed first load.
        """
        controller = self.session(session_id)
        future = asyncio.run_coroutine_threadsafe(controller.ensure_catalog(), self.loop)
        future.add_done_callback(log_load_failure)
        return future

    # ── Events ────────────────────────────────────────────────────────────────

    def dispatch(self, handler, *args, timeout: float = DISPATCH_TIMEOUT_SECONDS):
        """
        Run a controller event handler on the loop and wait for it to return.

        Handlers return as soon as state is updated; any fetch they start keeps
        running on the loop after dispatch() returns.
        """
        async def _call():
            return handler(*args)

        return asyncio.run_coroutine_threadsafe(_call(), self.loop).result(timeout)

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=DISPATCH_TIMEOUT_SECONDS)
