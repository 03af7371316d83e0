"""
Frame scheduler.

Calls a function at a fixed rate on a background thread until stopped. The
wait between frames is an Event wait, so stop() cancels the pending frame
right away instead of sleeping it out.
"""

import logging
import threading
import time
from typing import Callable, Optional

from observatory.constants import DEFAULT_FPS

logger = logging.getLogger(__name__)


class FrameScheduler:

    def __init__(self, callback: Callable[[], None], interval: float = 1.0 / DEFAULT_FPS,
                 name: str = "frame-scheduler"):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.callback = callback
        self.interval = interval
        self.name = name
        self.frames = 0
        self.error: Optional[BaseException] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self.error = None
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"{self.name} started at {1.0 / self.interval:.0f} fps")

    def stop(self, timeout: Optional[float] = 1.0):
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None
        logger.debug(f"{self.name} stopped after {self.frames} frames")

    def _loop(self):
        next_frame = time.monotonic()
        while not self._stop_event.is_set():
            try:
                self.callback()
            except Exception as e:
                # a broken frame would just fail again every 16ms
                self.error = e
                logger.exception(f"{self.name} callback failed, stopping")
                break
            self.frames += 1

            next_frame += self.interval
            delay = next_frame - time.monotonic()
            if delay < 0:
                # fell behind, don't try to catch up with a burst of frames
                next_frame = time.monotonic()
                delay = 0
            self._stop_event.wait(delay)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
