"""
Version identifiers.
"""

import re

from collections import namedtuple as _namedtuple


__all__ = [
    "Version",
]


_version_re = re.compile(r'^(\d+)\.(\d+)\.(\d+)'
                         r'(?:-(?:alpha|beta|rc)\d+)?'
                         r'(-SNAPSHOT)?$')


def _not_comparable(version, other):
    # tuple comparison would let the snapshot flag in
    return TypeError("Cannot compare {0!r} with {1!r}".format(version, other))


class Version(_namedtuple('_Version', 'major minor bugfix snapshot')):
    """Three-part version: major.minor.bugfix.

    The snapshot flag marks an unreleased build. It is carried along as
    metadata only and takes no part in comparisons or hashing, so that
    a snapshot of 5.1.0 and the released 5.1.0 denote the same version.

    >>> Version(5, 1, 0) == Version(5, 1, 0, snapshot=True)
    True
    >>> sorted([Version(5, 1, 0), Version(5, 0, 1)])
    [Version(5, 0, 1), Version(5, 1, 0)]
    """
    __slots__ = ()

    def __new__(cls, major, minor, bugfix, snapshot=False):
        return super(Version, cls).__new__(cls, int(major), int(minor),
                                           int(bugfix), bool(snapshot))

    @classmethod
    def from_string(cls, s):
        """Parses 'X.Y.Z', optionally followed by a pre-release qualifier
        (which is dropped) and a '-SNAPSHOT' suffix."""
        match = _version_re.match(s)
        if match is None:
            raise ValueError("Invalid version format: {0!r}".format(s))
        major, minor, bugfix, snapshot = match.groups()
        return cls(major, minor, bugfix, snapshot is not None)

    @classmethod
    def coerce(cls, version):
        if isinstance(version, cls):
            return version
        return cls.from_string(version)

    @property
    def _key(self):
        return (self.major, self.minor, self.bugfix)

    @property
    def id(self):
        return self.major * 1000000 + self.minor * 10000 + self.bugfix * 100

    def as_snapshot(self):
        return self._replace(snapshot=True)

    def before(self, other):
        return self._key < Version.coerce(other)._key

    def on_or_after(self, other):
        return self._key >= Version.coerce(other)._key

    def __eq__(self, other):
        if not isinstance(other, Version):
            return False
        return self._key == other._key

    def __ne__(self, other):
        if not isinstance(other, Version):
            return True
        return self._key != other._key

    def __lt__(self, other):
        if not isinstance(other, Version):
            raise _not_comparable(self, other)
        return self._key < other._key

    def __le__(self, other):
        if not isinstance(other, Version):
            raise _not_comparable(self, other)
        return self._key <= other._key

    def __gt__(self, other):
        if not isinstance(other, Version):
            raise _not_comparable(self, other)
        return self._key > other._key

    def __ge__(self, other):
        if not isinstance(other, Version):
            raise _not_comparable(self, other)
        return self._key >= other._key

    def __hash__(self):
        return hash(self._key)

    def __str__(self):
        s = '{0}.{1}.{2}'.format(self.major, self.minor, self.bugfix)
        if self.snapshot:
            s += '-SNAPSHOT'
        return s

    def __repr__(self):
        args = '{0}, {1}, {2}'.format(self.major, self.minor, self.bugfix)
        if self.snapshot:
            args += ', snapshot=True'
        return 'Version({0})'.format(args)
