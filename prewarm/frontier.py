"""
Discovered-URL frontier for the manifest walk.
Keeps every URL once, in the order it was first seen, so that a walk over
identical manifests always yields the same probe order.
"""


class UrlFrontier:
    """
    Ordered set of absolute URLs: a list for order plus a set for membership.
    Identity is exact string equality; no normalization happens here.
    """

    def __init__(self, urls=()):
        self.ordered = []
        self.discovered = set()
        for url in urls:
            self.add(url)

    def add(self, url):
        """Returns True if the URL was new, False for a duplicate."""
        if url in self.discovered:
            return False
        self.discovered.add(url)
        self.ordered.append(url)
        return True

    def extend(self, urls):
        return sum(1 for url in urls if self.add(url))

    def __contains__(self, url):
        return url in self.discovered

    def __iter__(self):
        return iter(self.ordered)

    def __len__(self):
        return len(self.ordered)

    def as_tuple(self):
        return tuple(self.ordered)
