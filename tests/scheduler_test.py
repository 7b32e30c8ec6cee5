"""
Concurrency behaviour of the probe pool, driven by fake probe callables.
"""

import threading
import time
import unittest

from prewarm.models import ProbeOutcome
from prewarm.scheduler import RequestScheduler


class TrackingProbe:
    """Probe stand-in that records how many calls are in flight at once."""

    def __init__(self, delay=0.02, blockers=None):
        self.delay = delay
        self.blockers = blockers or {}
        self.lock = threading.Lock()
        self.in_flight = 0
        self.max_in_flight = 0
        self.started = []

    def __call__(self, url):
        with self.lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            self.started.append(url)
        try:
            blocker = self.blockers.get(url)
            if blocker is not None:
                blocker.wait(timeout=5)
            else:
                time.sleep(self.delay)
            return ProbeOutcome(url=url, status_code=200, cache_status="HIT", elapsed_ms=1)
        finally:
            with self.lock:
                self.in_flight -= 1


class TestRequestScheduler(unittest.TestCase):
    def test_every_url_reports_once(self):
        urls = [f"https://cdn.example.com/seg_{i:03d}.ts" for i in range(25)]
        probe = TrackingProbe()

        outcomes = list(RequestScheduler(probe, parallelism=4).run(urls))

        self.assertEqual(len(outcomes), 25)
        self.assertEqual(sorted(o.url for o in outcomes), sorted(urls))

    def test_in_flight_never_exceeds_parallelism(self):
        urls = [f"https://cdn.example.com/seg_{i:03d}.ts" for i in range(30)]
        probe = TrackingProbe(delay=0.01)

        list(RequestScheduler(probe, parallelism=3).run(urls))

        self.assertLessEqual(probe.max_in_flight, 3)
        self.assertGreater(probe.max_in_flight, 1)

    def test_stalled_probe_does_not_block_refill(self):
        urls = [f"https://cdn.example.com/seg_{i}.ts" for i in range(5)]
        release = threading.Event()
        probe = TrackingProbe(delay=0.01, blockers={urls[0]: release})

        run = RequestScheduler(probe, parallelism=2).run(urls)
        first_four = [next(run) for _ in range(4)]

        # the stalled probe still holds one of the two slots
        self.assertNotIn(urls[0], [o.url for o in first_four])
        self.assertEqual(len(probe.started), 5)
        self.assertLessEqual(probe.max_in_flight, 2)

        release.set()
        rest = list(run)
        self.assertEqual([o.url for o in rest], [urls[0]])

    def test_third_probe_waits_for_a_free_slot(self):
        urls = [f"https://cdn.example.com/seg_{i}.ts" for i in range(5)]
        gates = {url: threading.Event() for url in urls}
        probe = TrackingProbe(blockers=gates)

        run = RequestScheduler(probe, parallelism=2).run(urls)
        consumer = threading.Thread(target=lambda: self.collected.extend(run))
        self.collected = []
        consumer.start()

        deadline = time.time() + 5
        while len(probe.started) < 2 and time.time() < deadline:
            time.sleep(0.005)
        time.sleep(0.05)
        self.assertEqual(len(probe.started), 2)

        gates[probe.started[0]].set()
        while len(probe.started) < 3 and time.time() < deadline:
            time.sleep(0.005)
        self.assertEqual(len(probe.started), 3)

        for gate in gates.values():
            gate.set()
        consumer.join(timeout=5)
        self.assertEqual(len(self.collected), 5)
        self.assertLessEqual(probe.max_in_flight, 2)

    def test_crashing_probe_becomes_degraded_outcome(self):
        def probe(url):
            if url.endswith("bad.ts"):
                raise RuntimeError("boom")
            return ProbeOutcome(url=url, status_code=200, cache_status="MISS")

        urls = ["https://cdn.example.com/good.ts", "https://cdn.example.com/bad.ts"]
        with self.assertLogs("prewarm.worker", level="ERROR"):
            outcomes = {o.url: o for o in RequestScheduler(probe, parallelism=2).run(urls)}

        self.assertEqual(outcomes[urls[0]].status_code, 200)
        self.assertEqual(outcomes[urls[1]].status_code, 0)
        self.assertEqual(outcomes[urls[1]].cache_status, "ERR")
        self.assertEqual(outcomes[urls[1]].error, "boom")

    def test_fewer_urls_than_workers(self):
        probe = TrackingProbe()
        outcomes = list(RequestScheduler(probe, parallelism=10).run(["https://cdn.example.com/a.ts"]))
        self.assertEqual(len(outcomes), 1)

    def test_empty_input(self):
        self.assertEqual(list(RequestScheduler(TrackingProbe(), parallelism=2).run([])), [])

    def test_invalid_parallelism(self):
        with self.assertRaises(ValueError):
            RequestScheduler(TrackingProbe(), parallelism=0)

    def test_closing_early_stops_workers(self):
        urls = [f"https://cdn.example.com/seg_{i}.ts" for i in range(50)]
        probe = TrackingProbe(delay=0.01)

        run = RequestScheduler(probe, parallelism=2).run(urls)
        next(run)
        run.close()

        self.assertLess(len(probe.started), 50)
        alive = [t for t in threading.enumerate() if t.name.startswith("Probe-")]
        self.assertEqual(alive, [])


if __name__ == "__main__":
    unittest.main()
