"""
Discovery of historical versions declared in a version log.

A version log is a source file declaring one constant per version, in
ascending order. Only final releases (major.minor.bugfix) are considered:
alphas, betas and release candidates have no backwards compatibility
guarantees, and their constants simply do not match any declaration format
defined here.
"""

import abc
import io
import logging
import re

from bwcbuild.errors import VersionOrderError
from bwcbuild.lex import DeclarationLexer
from bwcbuild.version import Version

logger = logging.getLogger(__name__)


__all__ = [
    "DeclarationFormat",
    "JavaConstantFormat",
    "PatternFormat",
    "VersionLog",
    "scan_versions",
    "read_version_log",
]


class DeclarationFormat(abc.ABC):
    """Recognizes a version declaration in a single line of text."""

    @abc.abstractmethod
    def match(self, line):
        """Returns a (major, minor, bugfix) triple, or None if the line
        does not declare a version."""


class JavaConstantFormat(DeclarationFormat):
    """'public static final Version V_<major>_<minor>_<bugfix> ...'"""

    def __init__(self, type_name='Version'):
        super(JavaConstantFormat, self).__init__()
        self.type_name = type_name
        self._lexer = DeclarationLexer()

    def match(self, line):
        toks = self._lexer.tokenize(line)
        if len(toks) < 5:
            return None

        head = [tok.type for tok in toks[:5]]
        if head != ['PUBLIC', 'STATIC', 'FINAL', 'ID', 'VERSION_ID']:
            return None
        if toks[3].value != self.type_name:
            return None

        return toks[4].value

    def __repr__(self):
        return '{0}({1!r})'.format(type(self).__name__, self.type_name)


class PatternFormat(DeclarationFormat):
    """Any regex with three integer groups, searched within a line."""

    def __init__(self, pattern):
        super(PatternFormat, self).__init__()
        self.regex = re.compile(pattern)
        if self.regex.groups != 3:
            raise ValueError("Declaration pattern must have exactly three "
                             "groups, got {0}: {1!r}"
                             .format(self.regex.groups, pattern))

    def match(self, line):
        m = self.regex.search(line)
        if m is not None:
            return tuple(int(group) for group in m.groups())

    def __repr__(self):
        return '{0}({1!r})'.format(type(self).__name__, self.regex.pattern)


class VersionLog(object):
    """Historical versions discovered in a version log.

    `prev_minor_index` is the index in `versions` of the most recent minor
    release of the previous major. That is where wire compatibility begins.
    """

    def __init__(self, current, versions, prev_minor_index=0):
        super(VersionLog, self).__init__()
        self.current = current
        self.versions = list(versions)
        self.prev_minor_index = prev_minor_index

    def __iter__(self):
        return iter(self.versions)

    def __len__(self):
        return len(self.versions)

    def __repr__(self):
        return ('VersionLog(current={0}, versions={1!r}, '
                'prev_minor_index={2})'
                .format(self.current, self.versions, self.prev_minor_index))


def scan_versions(lines, current, fmt=None):
    """Extracts historical versions from lines of a version log.

    The current version is never part of the result. Raises VersionOrderError
    unless the versions are declared in ascending order.
    """
    if fmt is None:
        fmt = JavaConstantFormat()
    current = Version.coerce(current)
    prev_major = current.major - 1

    versions = []
    prev_minor_index = -1
    last_prev_minor = -1

    for lineno, line in enumerate(lines, 1):
        triple = fmt.match(line)
        if triple is None:
            continue

        found = Version(*triple)
        if found != current:
            versions.append(found)
        logger.debug("line %d: found %s", lineno, found)

        major, minor, _ = triple
        if major == prev_major and minor > last_prev_minor:
            prev_minor_index = len(versions) - 1
            last_prev_minor = minor

    if sorted(versions) != versions:
        raise VersionOrderError(versions)

    if prev_minor_index < 0:
        logger.debug("no %d.x versions found, wire compat covers all",
                     prev_major)
        prev_minor_index = 0

    return VersionLog(current, versions, prev_minor_index)


def read_version_log(path, current, fmt=None):
    logger.debug("reading version log %s", path)
    with io.open(path, encoding='utf-8') as f:
        return scan_versions(f, current, fmt)
