"""
Run statistics for the prewarm worker.
Folds probe outcomes into the counters mirrored to the job record, keeps a
per-variant and per-edge breakdown, and renders the per-result log line and
the end-of-run summary.
"""

import os
import time
from collections import defaultdict
from datetime import timedelta
from threading import Lock

import psutil
from tabulate import tabulate

from prewarm.config import MANIFEST_EXTENSION, SEGMENT_EXTENSIONS
from prewarm.models import CacheStatus, Stats
from prewarm.url_utils import basename, variant_of

RULE = "=" * 42


def result_variant(url):
    """Variant label shown next to a probe result; the master playlist has none."""
    return variant_of(url, (MANIFEST_EXTENSION,) + tuple(SEGMENT_EXTENSIONS)) or "master"


def format_result(outcome, variant):
    """
    One line per completed probe:
    ✓ 200 | HIT | FRA | 42ms | 720p | seg_001.ts
    """
    marker = "✓" if outcome.ok else "✗"
    code = outcome.status_code or "ERR"
    return (f"{marker} {code} | {outcome.cache_status} | {outcome.edge_location} | "
            f"{outcome.elapsed_ms}ms | {variant} | {basename(outcome.url)}")


class StatsAggregator:
    """
    Single update path for the run counters.

    on_outcome() is called by the one thread draining the scheduler, so the
    counters have a single writer; the lock only keeps snapshot() taken by
    the progress reporter from seeing half of an update.
    """

    def __init__(self, label_for=result_variant):
        self.lock = Lock()
        self.stats = Stats()
        self.label_for = label_for
        self.start_time = time.time()

        self.variant_stats = defaultdict(lambda: {
            'probes': 0,
            'hit': 0,
            'miss': 0,
            'expired': 0,
            'failed': 0,
            'elapsed_ms': 0,
        })
        self.edge_counts = defaultdict(int)

    def start(self, total):
        """Fix the total once discovery is done, before the first outcome."""
        with self.lock:
            self.stats.total = total

    def on_outcome(self, outcome):
        variant = self.label_for(outcome.url)
        with self.lock:
            self.stats.progress += 1
            vs = self.variant_stats[variant]
            vs['probes'] += 1
            vs['elapsed_ms'] += outcome.elapsed_ms

            if outcome.ok:
                if outcome.cache_status == CacheStatus.HIT.value:
                    self.stats.hit += 1
                    vs['hit'] += 1
                elif outcome.cache_status == CacheStatus.MISS.value:
                    self.stats.miss += 1
                    vs['miss'] += 1
                elif outcome.cache_status == CacheStatus.EXPIRED.value:
                    self.stats.expired += 1
                    vs['expired'] += 1
                self.edge_counts[outcome.edge_location] += 1
            else:
                self.stats.failed += 1
                vs['failed'] += 1
        return variant

    def snapshot(self):
        """Plain dict copy of the counters, safe to hand to another thread."""
        with self.lock:
            return self.stats.as_dict()

    def hit_rate(self):
        """Percentage of discovered URLs served from cache, or None for an empty run."""
        with self.lock:
            if self.stats.total == 0:
                return None
            return round(self.stats.hit / self.stats.total * 100, 1)

    def summary_lines(self):
        s = self.snapshot()
        lines = [
            "",
            RULE,
            f"Summary: {s['total']} total | HIT {s['hit']} | MISS {s['miss']} | "
            f"EXPIRED {s['expired']} | FAILED {s['failed']}",
        ]
        rate = self.hit_rate()
        if rate is not None:
            lines.append(f"Hit Rate: {rate:.1f}%")
        lines.append(RULE)
        return lines

    def breakdown_lines(self):
        """Per-variant and per-edge tables plus run duration and memory."""
        elapsed = time.time() - self.start_time
        memory_mb = psutil.Process(os.getpid()).memory_info().rss / 1024 / 1024
        lines = [f"Duration: {timedelta(seconds=int(elapsed))} | Memory: {memory_mb:.2f} MB"]

        with self.lock:
            variant_rows = [
                [variant, vs['probes'], vs['hit'], vs['miss'], vs['expired'], vs['failed'],
                 f"{vs['elapsed_ms'] / max(1, vs['probes']):.0f}ms"]
                for variant, vs in sorted(self.variant_stats.items())
            ]
            edge_rows = sorted(self.edge_counts.items(), key=lambda item: (-item[1], item[0]))

        if variant_rows:
            table = tabulate(variant_rows,
                             headers=['Variant', 'Probes', 'HIT', 'MISS', 'EXPIRED', 'FAILED', 'Avg'],
                             tablefmt='simple')
            lines.extend(table.splitlines())
        if edge_rows:
            table = tabulate(edge_rows, headers=['Edge', 'Probes'], tablefmt='simple')
            lines.extend(table.splitlines())
        return lines
