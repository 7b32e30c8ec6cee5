import posixpath
import re
from urllib.parse import urljoin, urlparse

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")


def has_scheme(reference: str) -> bool:
    return bool(_SCHEME_RE.match(reference))


def is_parseable(reference: str) -> bool:
    """False for lines urllib cannot split, e.g. an unclosed IPv6 bracket."""
    try:
        urlparse(reference)
    except ValueError:
        return False
    return True


def directory_of(url: str) -> str:
    """Everything up to and including the last '/' of the URL."""
    return url[:url.rfind("/") + 1]


def resolve(reference: str, base_url: str) -> str:
    """
    Turn a manifest line into an absolute URL.

    - already absolute (scheme://...)  -> unchanged
    - protocol-relative (//host/...)   -> base scheme + ':' + reference
    - root-relative (/path)            -> base origin + reference
    - anything else                    -> relative to the base directory
    """
    if has_scheme(reference):
        return reference

    base = urlparse(base_url)
    if reference.startswith("//"):
        return f"{base.scheme}:{reference}"
    if reference.startswith("/"):
        return f"{base.scheme}://{base.netloc}{reference}"
    return urljoin(directory_of(base_url), reference)


def path_endswith(reference: str, extensions) -> bool:
    """Extension check on the path only, so '?token=...' suffixes don't hide it."""
    path = urlparse(reference).path.lower()
    return path.endswith(tuple(extensions))


def variant_of(url: str, extensions=None):
    """
    Label of the rendition a URL belongs to: the path segment right before
    the filename (".../720p/index.m3u8" -> "720p").
    Returns None when the path has no parent segment, or when extensions
    are given and the filename doesn't end with one of them.
    """
    path = urlparse(url).path
    if extensions and not path.lower().endswith(tuple(extensions)):
        return None
    segments = [s for s in path.split("/") if s]
    if len(segments) < 2:
        return None
    return segments[-2]


def basename(url: str) -> str:
    p = urlparse(url)
    return posixpath.basename(p.path) or p.netloc
