from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class CacheStatus(str, Enum):
    """Edge cache verdicts the aggregator knows how to count."""
    HIT = "HIT"
    MISS = "MISS"
    EXPIRED = "EXPIRED"
    NONE = "NONE"
    ERROR = "ERR"


# Edge location reported when the CDN did not say who served the probe
UNKNOWN_EDGE = "UNK"


@dataclass(frozen=True)
class ProbeOutcome:
    """
    Result of probing one discovered URL.

    status_code is 0 when the request never produced a response
    (connection error, timeout); cache_status is then CacheStatus.ERROR.
    cache_status otherwise holds the raw upper-cased header value, so it may
    be something other than the CacheStatus members (BYPASS, DYNAMIC, ...).
    """
    url: str
    status_code: int
    cache_status: str
    edge_location: str = UNKNOWN_EDGE
    elapsed_ms: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status_code in (200, 206)


@dataclass(frozen=True)
class DiscoveryResult:
    """
    Output of the manifest walk.
    urls keeps first-seen order, starting with the root manifest itself.
    """
    root_url: str
    urls: Tuple[str, ...]
    variants: Tuple[str, ...]

    def __len__(self):
        return len(self.urls)


@dataclass
class Stats:
    total: int = 0
    progress: int = 0
    hit: int = 0
    miss: int = 0
    expired: int = 0
    failed: int = 0

    def as_dict(self):
        return {
            "progress": self.progress,
            "total": self.total,
            "hit": self.hit,
            "miss": self.miss,
            "expired": self.expired,
            "failed": self.failed,
        }
