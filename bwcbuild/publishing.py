"""
Publication metadata shared by all artifacts of the distribution.
"""

import logging
import os.path

from types import SimpleNamespace

logger = logging.getLogger(__name__)


INCEPTION_YEAR = '2009'

LICENSE = SimpleNamespace(
    name='The Apache Software License, Version 2.0',
    url='http://www.apache.org/licenses/LICENSE-2.0.txt',
    distribution='repo',
)

DEVELOPER = SimpleNamespace(
    name='Elastic',
    url='http://www.elastic.co',
)


def configure_project_metadata(build, config):
    for project in build.subprojects:
        project.group = config.group
        project.version = config.version_string
        project.description = ("Elasticsearch subproject {0}"
                               .format(project.path))


def is_inside(path, root):
    path = os.path.normpath(os.path.abspath(path))
    root = os.path.normpath(os.path.abspath(root))
    return path == root or path.startswith(root + os.sep)


def add_publication_metadata(project):
    project.publication = SimpleNamespace(
        inception_year=INCEPTION_YEAR,
        licenses=[LICENSE],
        developers=[DEVELOPER],
    )


def add_license_files(project):
    root = project.root_project
    project.ext['license_file'] = root.file('LICENSE.txt')
    project.ext['notice_file'] = root.file('NOTICE.txt')


def configure_javadoc(project):
    # ignore missing javadocs
    project.javadoc.encoding = 'UTF8'
    project.javadoc.options['Xdoclint:all,-missing'] = '-quiet'


def configure_publishing(build):
    """Only artifacts that are part of the distribution itself (that is,
    living under the root directory) get the license info."""
    for project in build.subprojects:
        if not is_inside(project.project_dir, build.root_dir):
            logger.debug("%s: outside of the root, not published", project)
            continue

        project.with_plugin('maven-publish', add_publication_metadata)
        project.with_plugin('build', add_license_files)

    for project in build.subprojects:
        project.with_plugin('java', configure_javadoc)
