"""
Project substitutions.

Some artifacts built as part of this build are depended upon as if they
were external (so that the very same build plugins can be used to build
plugins outside of the source tree). Substitutions map their coordinates
back to the projects producing them.
"""

import logging

from collections import OrderedDict

logger = logging.getLogger(__name__)


INTERNAL_ARTIFACTS = (
    ('org.elasticsearch.gradle:build-tools',                         ':build-tools'),
    ('org.elasticsearch:rest-api-spec',                              ':rest-api-spec'),
    ('org.elasticsearch:elasticsearch',                              ':core'),
    ('org.elasticsearch.client:elasticsearch-rest-client',           ':client:rest'),
    ('org.elasticsearch.client:elasticsearch-rest-client-sniffer',   ':client:sniffer'),
    ('org.elasticsearch.client:elasticsearch-rest-high-level-client', ':client:rest-high-level'),
    ('org.elasticsearch.client:test',                                ':client:test'),
    ('org.elasticsearch.client:transport',                           ':client:transport'),
    ('org.elasticsearch.test:framework',                             ':test:framework'),
    ('org.elasticsearch.distribution.integ-test-zip:elasticsearch',  ':distribution:integ-test-zip'),
    ('org.elasticsearch.distribution.zip:elasticsearch',             ':distribution:zip'),
    ('org.elasticsearch.distribution.tar:elasticsearch',             ':distribution:tar'),
    ('org.elasticsearch.distribution.rpm:elasticsearch',             ':distribution:rpm'),
    ('org.elasticsearch.distribution.deb:elasticsearch',             ':distribution:deb'),
    ('org.elasticsearch.test:logger-usage',                          ':test:logger-usage'),
    # for transport client
    ('org.elasticsearch.plugin:transport-netty4-client',             ':modules:transport-netty4'),
    ('org.elasticsearch.plugin:reindex-client',                      ':modules:reindex'),
    ('org.elasticsearch.plugin:lang-mustache-client',                ':modules:lang-mustache'),
    ('org.elasticsearch.plugin:parent-join-client',                  ':modules:parent-join'),
    ('org.elasticsearch.plugin:aggs-matrix-stats-client',            ':modules:aggs-matrix-stats'),
    ('org.elasticsearch.plugin:percolator-client',                   ':modules:percolator'),
)

BWC_DISTRIBUTIONS = ('deb', 'rpm', 'zip')

BWC_STABLE_SNAPSHOT = ':distribution:bwc-stable-snapshot'
BWC_RELEASE_SNAPSHOT = ':distribution:bwc-release-snapshot'


def bwc_distribution(kind, version):
    return ('org.elasticsearch.distribution.{0}:elasticsearch:{1}'
            .format(kind, version))


class Substitutions(object):
    """Artifact coordinate to project path mapping."""

    def __init__(self, mapping=()):
        super(Substitutions, self).__init__()
        self._mapping = OrderedDict(mapping)

    def __setitem__(self, coordinate, project_path):
        self._mapping[coordinate] = project_path

    def __getitem__(self, coordinate):
        return self._mapping[coordinate]

    def __contains__(self, coordinate):
        return coordinate in self._mapping

    def __len__(self):
        return len(self._mapping)

    def items(self):
        return self._mapping.items()

    def get(self, coordinate, default=None):
        return self._mapping.get(coordinate, default)

    def resolve(self, dependency):
        """Project path substituting a dependency, if any."""
        if dependency.is_project:
            return dependency.project
        return self._mapping.get(dependency.coordinate)

    def __repr__(self):
        return 'Substitutions({0!r})'.format(dict(self._mapping))


def project_substitutions(version, index_compat_versions):
    substitutions = Substitutions(
        ('{0}:{1}'.format(artifact, version), project_path)
        for artifact, project_path in INTERNAL_ARTIFACTS)

    if not index_compat_versions or not index_compat_versions[-1].snapshot:
        return substitutions

    # The last and second to last versions can be snapshots. Rather than use
    # snapshots built by CI these versions are connected to projects that
    # build them from the head of the appropriate branch.
    last = index_compat_versions[-1]
    if last.bugfix == 0 and len(index_compat_versions) > 1:
        prev = index_compat_versions[-2]
        for kind in BWC_DISTRIBUTIONS:
            substitutions[bwc_distribution(kind, last)] = BWC_STABLE_SNAPSHOT
            substitutions[bwc_distribution(kind, prev)] = BWC_RELEASE_SNAPSHOT
    else:
        for kind in BWC_DISTRIBUTIONS:
            substitutions[bwc_distribution(kind, last)] = BWC_RELEASE_SNAPSHOT

    return substitutions


def javadoc_artifacts_host(version_string):
    if version_string.endswith('-SNAPSHOT'):
        return 'https://snapshots.elastic.co'
    return 'https://artifacts.elastic.co'


def link_javadocs(project, substitutions, version_string):
    """Cross-project javadoc links.

    Order matters: the link for the core artifact must go last, or links
    for the other packages (eg org.elasticsearch.client) would point to
    core rather than to their own artifacts. Sorting by descending group
    takes care of that."""
    host = javadoc_artifacts_host(version_string)
    javadoc = project.tasks.find('javadoc')
    deps = sorted((dep for dep in project.dependencies if not dep.is_project),
                  key=lambda dep: dep.group, reverse=True)

    for dep in deps:
        if not dep.group.startswith('org.elasticsearch'):
            continue
        substitution = substitutions.get(dep.coordinate)
        if substitution is None:
            continue

        if javadoc is not None:
            javadoc.depends(substitution + ':javadoc')

        artifact_path = '/'.join([dep.group.replace('.', '/'),
                                  dep.name.replace('.', '/'),
                                  dep.version])
        upstream = project.project(substitution)
        project.javadoc.links_offline.append(
                (host + '/javadoc/' + artifact_path,
                 upstream.build_dir + '/docs/javadoc/'))
        logger.debug("%s: javadoc link to %s", project, substitution)
