"""
Line-level parsing of HLS manifests.
Only URI lines matter here: tags and comments (#...) are skipped, so
EXT-X attributes are never interpreted.
"""

import logging

from prewarm.config import MANIFEST_EXTENSION, SEGMENT_EXTENSIONS
from prewarm.url_utils import has_scheme, is_parseable, path_endswith

logger = logging.getLogger(__name__)


def significant_lines(text):
    """
    Stripped, non-blank lines that are not tags or comments, in file order.
    Lines that cannot be read as a URL are dropped with a warning.
    """
    lines = []
    for raw_line in text.lstrip("\ufeff").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if not is_parseable(line):
            logger.warning(f"Skipping malformed manifest line: {line}")
            continue
        lines.append(line)
    return lines


def is_manifest_ref(line, manifest_extension=MANIFEST_EXTENSION):
    return path_endswith(line, (manifest_extension,))


def is_segment_ref(line, segment_extensions=SEGMENT_EXTENSIONS):
    """Absolute URLs are always taken; relative lines need a media extension."""
    return has_scheme(line) or path_endswith(line, segment_extensions)


def extract_manifests(text, manifest_extension=MANIFEST_EXTENSION):
    """Child manifest references of a multi-variant playlist."""
    return [line for line in significant_lines(text) if is_manifest_ref(line, manifest_extension)]


def extract_segments(text, segment_extensions=SEGMENT_EXTENSIONS):
    """Media segment references of a media playlist."""
    return [line for line in significant_lines(text) if is_segment_ref(line, segment_extensions)]
