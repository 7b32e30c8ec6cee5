"""
Periodic progress publisher.
Copies the run counters into the job record every few seconds on its own
thread, and once more when the run ends.
"""

import logging
import threading

from prewarm.config import PROGRESS_INTERVAL

logger = logging.getLogger(__name__)


class ProgressReporter:
    """
    FLOW: start() launches a timer thread -> every `interval` seconds it
    writes aggregator.snapshot() into the job record -> stop() ends the
    thread and performs the final write.

    The final write happens exactly once per reporter, whether or not
    start() was ever called.
    """

    def __init__(self, aggregator, job_file, interval=PROGRESS_INTERVAL):
        self.aggregator = aggregator
        self.job_file = job_file
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread = None
        self._lock = threading.Lock()
        self._finished = False
        self.writes = 0

    def publish(self):
        """Write the current snapshot; never raises."""
        try:
            if self.job_file.update(self.aggregator.snapshot()):
                self.writes += 1
        except Exception as e:
            logger.debug(f"progress update failed: {e}")

    def start(self):
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="ProgressReporter", daemon=True)
        self._thread.start()

    def _run(self):
        # wait() returns True once stop() sets the event
        while not self._stop_event.wait(self.interval):
            self.publish()

    def stop(self):
        with self._lock:
            if self._finished:
                return
            self._finished = True

        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
        self.publish()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
