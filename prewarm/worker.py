"""
Probe worker thread.
Each worker takes one URL at a time from the shared pending queue, probes
it, and hands the outcome to the results queue. A worker never has more
than one probe outstanding, so the number of workers is the in-flight cap.
"""

import logging
import threading

from prewarm.models import CacheStatus, ProbeOutcome, UNKNOWN_EDGE

logger = logging.getLogger(__name__)

# Queued once per worker after the last URL
STOP = object()


class ProbeWorker(threading.Thread):
    """
    Runs in a loop: dequeue URL, probe, publish outcome.
    Exits on the STOP sentinel. After stop() it keeps draining the queue
    without probing so the sentinel is still reached.
    """

    def __init__(self, pending, results, probe, name="Probe"):
        super().__init__(name=name, daemon=True)
        self.pending = pending
        self.results = results
        self.probe = probe
        self.running = True
        self.probed = 0

    def run(self):
        logger.debug(f"[{self.name}] started")
        while True:
            url = self.pending.get()
            try:
                if url is STOP:
                    break
                if not self.running:
                    continue
                self.results.put(self._probe_one(url))
                self.probed += 1
            finally:
                self.pending.task_done()
        logger.debug(f"[{self.name}] finished after {self.probed} probes")

    def _probe_one(self, url):
        try:
            return self.probe(url)
        except Exception as e:
            # The scheduler owes one outcome per URL, so a crashing probe still reports
            logger.error(f"[{self.name}] Probe error for {url}: {e}", exc_info=True)
            return ProbeOutcome(
                url=url,
                status_code=0,
                cache_status=CacheStatus.ERROR.value,
                edge_location=UNKNOWN_EDGE,
                error=str(e) or e.__class__.__name__,
            )

    def stop(self):
        self.running = False
