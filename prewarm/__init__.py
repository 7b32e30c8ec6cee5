from prewarm.models import CacheStatus, DiscoveryResult, ProbeOutcome, Stats
from prewarm.fetcher import FetchError, HttpClient
from prewarm.walker import ManifestWalker
from prewarm.scheduler import RequestScheduler
from prewarm.metrics import StatsAggregator
from prewarm.reporter import ProgressReporter
from prewarm.job_store import JobFile
from prewarm.orchestrator import PrewarmSession
