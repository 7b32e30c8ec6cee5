"""
Manifest tree walker.
Turns one master manifest URL into the full, deduplicated list of URLs to
probe: the master itself, its variant manifests and their media segments.
Depth is fixed at master -> variants -> segments; variant manifests that
list further manifests are not followed.
"""

import logging

from prewarm.config import MANIFEST_EXTENSION, SEGMENT_EXTENSIONS
from prewarm.fetcher import FetchError
from prewarm.frontier import UrlFrontier
from prewarm.models import DiscoveryResult
from prewarm.parser import extract_manifests, extract_segments
from prewarm.url_utils import directory_of, resolve, variant_of

logger = logging.getLogger(__name__)


class ManifestWalker:
    """
    FLOW: Fetches the master manifest (fatal on failure) -> finds variant
    manifest lines -> for each variant: records it, derives its label,
    fetches it (skipped on failure) and records its segments -> falls back
    to reading segments straight from the master when it has no variants.
    """

    def __init__(self, client, manifest_extension=MANIFEST_EXTENSION, segment_extensions=SEGMENT_EXTENSIONS):
        self.client = client
        self.manifest_extension = manifest_extension
        self.segment_extensions = segment_extensions

    def discover(self, root_url):
        """
        Returns a DiscoveryResult; raises FetchError if the master manifest
        cannot be fetched.
        """
        body = self.client.fetch_text(root_url)
        base_url = directory_of(root_url)

        frontier = UrlFrontier([root_url])
        variants = UrlFrontier()

        children = extract_manifests(body, self.manifest_extension)
        if children:
            for child in children:
                child_url = resolve(child, base_url)
                frontier.add(child_url)

                label = variant_of(child_url, (self.manifest_extension,))
                if label:
                    variants.add(label)

                self._collect_child_segments(child_url, frontier)
        else:
            for segment in extract_segments(body, self.segment_extensions):
                frontier.add(resolve(segment, base_url))

        return DiscoveryResult(
            root_url=root_url,
            urls=frontier.as_tuple(),
            variants=variants.as_tuple(),
        )

    def _collect_child_segments(self, child_url, frontier):
        try:
            body = self.client.fetch_text(child_url)
        except FetchError as e:
            logger.warning(f"Skipping variant manifest {child_url}: {e.reason}")
            return

        child_base = directory_of(child_url)
        added = frontier.extend(
            resolve(segment, child_base)
            for segment in extract_segments(body, self.segment_extensions)
        )
        logger.debug(f"{child_url}: {added} new segment URLs")
