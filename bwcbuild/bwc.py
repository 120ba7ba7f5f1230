"""
Backwards compatibility windows.

Index compatibility: prior releases whose on-disk data the current release
can read. Wire compatibility: prior releases the current release can still
talk to over the network, starting at the last minor of the previous major.
"""

import logging

from bwcbuild.version import Version

logger = logging.getLogger(__name__)


__all__ = [
    "CompatWindows",
    "mark_unreleased",
    "derive_windows",
]


class CompatWindows(object):

    def __init__(self, index_compat, wire_start=0):
        super(CompatWindows, self).__init__()
        self._versions = tuple(index_compat)
        if not 0 <= wire_start <= len(self._versions):
            raise ValueError("Wire compat window start out of range: %d"
                             % wire_start)
        self.wire_start = wire_start

    @property
    def index_compat(self):
        return list(self._versions)

    @property
    def wire_compat(self):
        return list(self._versions[self.wire_start:])

    def released(self):
        return [v for v in self._versions if not v.snapshot]

    def unreleased(self):
        return [v for v in self._versions if v.snapshot]

    def __repr__(self):
        return ('CompatWindows(index_compat={0!r}, wire_start={1})'
                .format(list(self._versions), self.wire_start))


def mark_unreleased(versions, current):
    """Returns a copy of versions with the newest one or two of them flagged
    as snapshots.

    Unless on a release branch after its initial release (that is, the
    bugfix number of the current version is 0), bwc tests should run against
    the unreleased head of the closest branch rather than against a stale
    released artifact. If the closest branch has not had a release yet
    itself, its predecessor is unreleased too.
    """
    versions = list(versions)
    if Version.coerce(current).bugfix != 0 or not versions:
        return versions

    last = versions[-1]
    versions[-1] = last.as_snapshot()
    if last.bugfix == 0 and len(versions) > 1:
        versions[-2] = versions[-2].as_snapshot()

    return versions


def derive_windows(version_log, current=None):
    if current is None:
        current = version_log.current

    versions = mark_unreleased(version_log.versions, current)
    windows = CompatWindows(versions, version_log.prev_minor_index)

    logger.debug("index compat: %s", ', '.join(map(str, windows.index_compat)))
    logger.debug("wire compat: %s", ', '.join(map(str, windows.wire_compat)))

    return windows
