import logging

from prewarm.config import DEFAULT_PARALLEL, PROGRESS_INTERVAL
from prewarm.fetcher import FetchError, HttpClient
from prewarm.job_store import JobFile
from prewarm.metrics import StatsAggregator, format_result
from prewarm.reporter import ProgressReporter
from prewarm.scheduler import RequestScheduler
from prewarm.walker import ManifestWalker

logger = logging.getLogger(__name__)


class PrewarmSession:
    """
    Runs one prewarm job end to end:
    discovery -> probing with live progress -> summary.
    The final job record write and the connection pool release happen on
    every exit path, including a failed master manifest fetch.
    """

    def __init__(self, job_id, master_url, parallel=DEFAULT_PARALLEL, client=None, job_file=None,
                 progress_interval=PROGRESS_INTERVAL):
        self.job_id = job_id
        self.master_url = master_url
        self.parallel = parallel

        self.client = client if client is not None else HttpClient(pool_size=parallel)
        self.job_file = job_file if job_file is not None else JobFile(job_id)

        self.aggregator = StatsAggregator()
        self.reporter = ProgressReporter(self.aggregator, self.job_file, interval=progress_interval)
        self.walker = ManifestWalker(self.client)
        self.scheduler = RequestScheduler(self.client.probe, parallelism=parallel)

    def run(self):
        """Returns the process exit code: 0 on completion, 1 if discovery failed."""
        logger.info(f"Starting prewarm: {self.master_url} (parallel: {self.parallel})")
        try:
            with self.client:
                try:
                    discovery = self.walker.discover(self.master_url)
                except FetchError as e:
                    logger.error(f"Failed to fetch master playlist: {e.reason}")
                    return 1

                self.aggregator.start(len(discovery))
                logger.info(f"Found {len(discovery)} unique URLs")
                logger.info(f"Variants: {', '.join(discovery.variants) if discovery.variants else 'none'}")

                self.reporter.publish()
                with self.reporter:
                    logger.info(f"Pre-warming with {self.parallel} parallel connections...")
                    for outcome in self.scheduler.run(discovery.urls):
                        variant = self.aggregator.on_outcome(outcome)
                        logger.info(format_result(outcome, variant))

            for line in self.aggregator.summary_lines():
                logger.info(line)
            for line in self.aggregator.breakdown_lines():
                logger.info(line)
            logger.info("Completed!")
            return 0
        finally:
            # No-op once the reporter block above has exited
            self.reporter.stop()
