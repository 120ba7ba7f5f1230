"""
Per-build configuration.

`configure()` assembles a `BuildConfig` once, at the very beginning of a
build. The object is then passed explicitly to whatever needs it.
"""

import io
import os.path
import re

from bwcbuild.bwc import derive_windows
from bwcbuild.errors import BuildConfigError
from bwcbuild.metadata import build_metadata_from_env
from bwcbuild.registry import DEFAULT_REGISTRY_URL
from bwcbuild.util import get_extended_logger
from bwcbuild.version import Version
from bwcbuild.versionlog import read_version_log

logger = get_extended_logger(__name__)


DEFAULT_GROUP = 'org.elasticsearch'
DEFAULT_VERSION_PROPERTIES = os.path.join('buildSrc', 'version.properties')
DEFAULT_VERSION_FILE = os.path.join('core', 'src', 'main', 'java', 'org',
                                    'elasticsearch', 'Version.java')
VERSION_PROPERTY = 'elasticsearch'

# When adding backcompat behavior that spans major versions, temporarily
# disabling the backcompat tests is necessary. This flag controls the enabled
# state of every bwc task and must be set back to True after the backport of
# the backcompat code is complete.
BWC_TESTS_ENABLED = True

ECLIPSE_TASKS = ('eclipse', 'cleanEclipse')
IDEA_TASKS = ('idea', 'cleanIdea')

# the key ends at whichever separator comes first
_separator_re = re.compile(r'[=:]')


class BuildConfig(object):

    _dump_attrs = ('root_dir', 'version_string', 'current_version',
                   'index_compat_versions', 'wire_compat_versions',
                   'build_metadata', 'is_eclipse', 'is_idea', 'offline')

    def __init__(self, root_dir, version_string, windows,
                 group=DEFAULT_GROUP, build_metadata=None, task_names=(),
                 system_properties=None, offline=False,
                 registry_url=DEFAULT_REGISTRY_URL,
                 bwc_tests_enabled=BWC_TESTS_ENABLED):
        super(BuildConfig, self).__init__()
        self.root_dir = root_dir
        self.group = group
        self.version_string = version_string
        self.current_version = Version.from_string(version_string)
        self.windows = windows
        self.build_metadata = dict(build_metadata or {})
        self.task_names = list(task_names)
        self.system_properties = dict(system_properties or {})
        self.offline = offline
        self.registry_url = registry_url
        self.bwc_tests_enabled = bwc_tests_enabled

    @property
    def is_snapshot_build(self):
        return self.version_string.endswith('-SNAPSHOT')

    @property
    def index_compat_versions(self):
        return self.windows.index_compat

    @property
    def wire_compat_versions(self):
        return self.windows.wire_compat

    @property
    def is_eclipse(self):
        return ('eclipse.launcher' in self.system_properties or
                any(name in self.task_names for name in ECLIPSE_TASKS))

    @property
    def is_idea(self):
        return ('idea.active' in self.system_properties or
                any(name in self.task_names for name in IDEA_TASKS))

    def __repr__(self):
        return 'BuildConfig({0!r}, {1!r})'.format(self.root_dir,
                                                  self.version_string)


def read_properties(path):
    """Reads a simple Java properties file: 'key = value' or 'key: value'
    lines, with '#' and '!' comments."""
    props = {}
    with io.open(path, encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line[0] in '#!':
                continue
            parts = _separator_re.split(line, 1)
            key, value = parts if len(parts) == 2 else (line, '')
            props[key.strip()] = value.strip()
    return props


def read_version_string(root_dir, properties_file=DEFAULT_VERSION_PROPERTIES):
    path = os.path.join(root_dir, properties_file)
    props = read_properties(path)
    try:
        return props[VERSION_PROPERTY]
    except KeyError:
        raise BuildConfigError("No '{0}' property in {1}"
                       .format(VERSION_PROPERTY, path))


def configure(root_dir, version_string=None, version_file=None, fmt=None,
              environ=None, **kwargs):
    """Does all the reading and computing needed to set up a build."""
    if version_string is None:
        version_string = read_version_string(root_dir)
    if version_file is None:
        version_file = DEFAULT_VERSION_FILE

    # Strip -SNAPSHOT: the current version itself is never a bwc candidate.
    current = Version.from_string(version_string)._replace(snapshot=False)

    version_log = read_version_log(os.path.join(root_dir, version_file),
                                   current, fmt)
    windows = derive_windows(version_log, current)

    kwargs.setdefault('build_metadata', build_metadata_from_env(environ))

    config = BuildConfig(root_dir, version_string, windows, **kwargs)
    logger.dump(config)

    return config
