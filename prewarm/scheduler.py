"""
Bounded-concurrency probe scheduler.
"""

import logging
from queue import Queue

from prewarm.config import DEFAULT_PARALLEL
from prewarm.worker import STOP, ProbeWorker

logger = logging.getLogger(__name__)


class RequestScheduler:
    """
    FLOW: Loads every URL into a pending queue -> starts min(parallelism, len(urls))
    ProbeWorker threads -> yields outcomes from the results queue as they
    complete -> stops and joins the workers once every URL has reported.

    Workers refill greedily: whichever finishes first takes the next URL,
    so a stalled probe only ever holds its own slot.
    """

    def __init__(self, probe, parallelism=DEFAULT_PARALLEL):
        if parallelism < 1:
            raise ValueError(f"parallelism must be >= 1, got {parallelism}")
        self.probe = probe
        self.parallelism = parallelism

    def run(self, urls):
        """
        Generator of ProbeOutcome, one per input URL, in completion order.
        Closing the generator early stops the workers after their current probe.
        """
        urls = list(urls)
        if not urls:
            return

        pending = Queue()
        results = Queue()
        for url in urls:
            pending.put(url)

        workers = [
            ProbeWorker(pending, results, self.probe, name=f"Probe-{i}")
            for i in range(min(self.parallelism, len(urls)))
        ]
        for _ in workers:
            pending.put(STOP)
        for worker in workers:
            worker.start()
        logger.debug(f"started {len(workers)} probe workers for {len(urls)} URLs")

        try:
            for _ in range(len(urls)):
                yield results.get()
        finally:
            for worker in workers:
                worker.stop()
            for worker in workers:
                worker.join()
