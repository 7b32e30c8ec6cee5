"""
HTTP access for the prewarm worker.
Fetches manifest bodies and probes resources for their edge cache status.
One pooled session is shared by every probe worker and closed at exit.
"""

import logging
import threading
import time

import requests
import urllib3
from requests.adapters import HTTPAdapter

from prewarm.config import (
    CACHE_STATUS_HEADER,
    DEFAULT_PARALLEL,
    EDGE_HEADER,
    HEAD_FALLBACK_GET,
    REQUEST_TIMEOUT,
    USER_AGENT,
    VERIFY_SSL_CERTIFICATE,
)
from prewarm.models import CacheStatus, ProbeOutcome, UNKNOWN_EDGE

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A manifest could not be retrieved or read."""

    def __init__(self, url, reason):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


def parse_edge_location(value):
    """
    Edge POP from a ray-id style header: "8a1b2c3d4e5f-FRA" -> "FRA".
    Anything without a second token is UNK.
    """
    if not value:
        return UNKNOWN_EDGE
    parts = value.split("-")
    if len(parts) < 2 or not parts[1].strip():
        return UNKNOWN_EDGE
    return parts[1].strip()


class HttpClient:
    """
    FLOW: Builds one requests.Session with a connection pool sized to the
    probe parallelism -> serves manifest GETs (fetch_text) and cache probes
    (probe) -> close() releases pooled connections.
    """

    def __init__(self, pool_size=DEFAULT_PARALLEL, timeout=REQUEST_TIMEOUT, user_agent=USER_AGENT,
                 verify=VERIFY_SSL_CERTIFICATE, cache_status_header=CACHE_STATUS_HEADER,
                 edge_header=EDGE_HEADER, head_fallback_get=HEAD_FALLBACK_GET, session=None):
        self.timeout = timeout
        self.verify = verify
        self.cache_status_header = cache_status_header
        self.edge_header = edge_header
        self.head_fallback_get = head_fallback_get

        if not verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        session.headers.update({"User-Agent": user_agent})
        self.session = session

    def fetch_text(self, url):
        """
        GET a manifest and return its body as text.
        Raises FetchError on transport errors and non-2xx responses.
        """
        try:
            r = self.session.get(url, timeout=self.timeout, verify=self.verify)
            r.raise_for_status()
            return r.text
        except requests.exceptions.Timeout:
            raise FetchError(url, f"timed out after {self.timeout}s")
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            raise FetchError(url, f"http error: {status}")
        except requests.exceptions.RequestException as e:
            raise FetchError(url, str(e))

    def probe(self, url):
        """
        HEAD a resource and classify the edge response.
        Every HTTP status is a valid outcome; only transport failures and
        timeouts degrade to status_code=0 / ERR.

        `timeout` bounds the whole probe, not each socket read: a server
        trickling its response is abandoned once the deadline passes.
        """
        start_time = time.monotonic()
        box = {}
        request = threading.Thread(
            target=self._request_headers, args=(url, box), name="HeadRequest", daemon=True)
        request.start()
        request.join(self.timeout)
        elapsed_ms = int((time.monotonic() - start_time) * 1000)

        if request.is_alive():
            logger.debug(f"probe deadline passed for {url}")
            return self._failed_outcome(url, min(elapsed_ms, int(self.timeout * 1000)),
                                        f"timed out after {self.timeout}s")
        if "crash" in box:
            raise box["crash"]
        if "error" in box:
            e = box["error"]
            logger.debug(f"probe failed for {url}: {e}")
            return self._failed_outcome(url, elapsed_ms, str(e) or e.__class__.__name__)

        r = box["response"]
        cache_status = (r.headers.get(self.cache_status_header) or "").strip().upper()
        return ProbeOutcome(
            url=url,
            status_code=r.status_code,
            cache_status=cache_status or CacheStatus.NONE.value,
            edge_location=parse_edge_location(r.headers.get(self.edge_header)),
            elapsed_ms=elapsed_ms,
        )

    def _request_headers(self, url, box):
        """Runs on the deadline thread; leaves a response, an error or a crash in `box`."""
        try:
            r = self.session.head(url, timeout=self.timeout, verify=self.verify, allow_redirects=False)
            if self.head_fallback_get and r.status_code in (405, 501):
                r.close()
                r = self.session.get(url, timeout=self.timeout, verify=self.verify,
                                     allow_redirects=False, stream=True)
                # Headers are all we need; never pull the segment body
                r.close()
            box["response"] = r
        except requests.exceptions.RequestException as e:
            box["error"] = e
        except Exception as e:
            box["crash"] = e

    @staticmethod
    def _failed_outcome(url, elapsed_ms, error):
        return ProbeOutcome(
            url=url,
            status_code=0,
            cache_status=CacheStatus.ERROR.value,
            edge_location=UNKNOWN_EDGE,
            elapsed_ms=elapsed_ms,
            error=error,
        )

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
