"""
IntelliJ IDEA and Eclipse project settings.

Both IDEs get build directories of their own so that command line builds
and IDE builds do not step on each other.
"""

import io
import logging
import os
import os.path
import shutil

from collections import OrderedDict
from types import SimpleNamespace

from bwcbuild.errors import IdeNotConfiguredError

logger = logging.getLogger(__name__)


IDEA_BUILD_DIR = 'build-idea'
IDEA_MARKER = '.local-idea-is-configured'

ECLIPSE_BUILD_DIR = 'build-eclipse'
ECLIPSE_SETTINGS_DIR = '.settings'
ECLIPSE_SETTINGS_SOURCE = os.path.join('buildSrc', 'src', 'main', 'resources',
                                       'eclipse.settings')

RESOURCE_FOLDER_TYPES = OrderedDict([
    ('src/main/resources', 'java-resource'),
    ('src/test/resources', 'java-test-resource'),
])

SOURCE_FOLDERS = (
    'src/main/java',
    'src/main/resources',
    'src/test/java',
    'src/test/resources',
)


def delete_dir(path):
    if os.path.isdir(path):
        logger.info("deleting %s", path)
        shutil.rmtree(path)


# IntelliJ IDEA

def configure_idea_module(project, config):
    project.apply_plugin('idea')

    if config.is_idea:
        project.build_dir = project.file(IDEA_BUILD_DIR)

    project.idea = SimpleNamespace(
        inherit_output_dirs=False,
        output_dir=project.file(IDEA_BUILD_DIR, 'classes', 'main'),
        test_output_dir=project.file(IDEA_BUILD_DIR, 'classes', 'test'),
        # also ignore other possible build dirs
        exclude_dirs=[project.file('build'), project.file(ECLIPSE_BUILD_DIR)],
        source_folder_types=OrderedDict(RESOURCE_FOLDER_TYPES),
        vcs=None,
    )

    clean_build_dir = project.tasks.create('cleanIdeaBuildDir', group='ide',
            description="Deletes the IDEA build directory.")
    clean_build_dir.do_last(
            lambda task: delete_dir(task.project.file(IDEA_BUILD_DIR)))
    project.tasks['cleanIdea'].depends(clean_build_dir)


def idea_marker(build):
    return build.root_project.file(IDEA_MARKER)


def check_idea_configured(build, config):
    """IntelliJ must not import the project before the idea task was run
    from the root."""
    if ('idea.active' in config.system_properties and
            not os.path.exists(idea_marker(build))):
        raise IdeNotConfiguredError("You must run the idea task from the "
                                    "root before importing into IntelliJ")


def configure_idea(build, config):
    for project in build.all_projects:
        configure_idea_module(project, config)

    root = build.root_project
    root.idea.vcs = 'Git'

    @root.tasks['idea'].do_last
    def write_marker(task):
        with io.open(idea_marker(build), 'w', encoding='utf-8') as f:
            f.write(u'')

    check_idea_configured(build, config)


# Eclipse

def eclipse_project_name(project, windows=None):
    """Non-root projects are named after their path, so that paths get
    grouped together when imported."""
    if windows is None:
        windows = (os.name == 'nt')
    if project.is_root:
        return project.name
    name = project.path
    if windows:
        name = name.replace(':', '_')
    return name


def assign_source_outputs(source_folders):
    """Gives each source folder a unique output folder.

    Outputs are relative to the project dir and always use forward slashes:
    that's what goes into the classpath, it is not a real path."""
    return OrderedDict((folder, '{0}/{1}'.format(ECLIPSE_BUILD_DIR, i))
                       for i, folder in enumerate(source_folders, 1))


def merge_classpath(task):
    project = task.project
    folders = [folder for folder in SOURCE_FOLDERS
               if os.path.isdir(project.file(*folder.split('/')))]
    project.eclipse.source_outputs = assign_source_outputs(folders)
    logger.debug("%s: %d source folders", project, len(folders))


def configure_eclipse_java(project, config):
    eclipse_build = project.file(ECLIPSE_BUILD_DIR)
    project.eclipse.default_output_dir = eclipse_build
    if config.is_eclipse:
        # generated dirs are relative to the eclipse build
        project.build_dir = eclipse_build

    project.tasks['eclipse'].do_last(merge_classpath)


def copy_eclipse_settings(task):
    project = task.project
    source = project.root_project.file(ECLIPSE_SETTINGS_SOURCE)
    if not os.path.isdir(source):
        logger.debug("%s: no eclipse settings at %s", project, source)
        return

    target = project.file(ECLIPSE_SETTINGS_DIR)

    if not os.path.isdir(target):
        os.makedirs(target)
    for name in sorted(os.listdir(source)):
        path = os.path.join(source, name)
        if os.path.isfile(path):
            shutil.copy2(path, os.path.join(target, name))


def configure_eclipse_project(project, config, windows=None):
    project.apply_plugin('eclipse')
    project.eclipse = SimpleNamespace(
        name=eclipse_project_name(project, windows),
        default_output_dir=None,
        source_outputs=OrderedDict(),
    )

    project.with_plugin('java',
                        lambda p: configure_eclipse_java(p, config))

    copy_settings = project.tasks.create('copyEclipseSettings')
    copy_settings.do_last(copy_eclipse_settings)

    # otherwise .settings is not nuked entirely
    wipe_settings = project.tasks.create('wipeEclipseSettings')
    wipe_settings.do_last(
            lambda task: delete_dir(task.project.file(ECLIPSE_SETTINGS_DIR)))

    clean_eclipse = project.tasks['cleanEclipse']
    clean_eclipse.depends(wipe_settings)

    # otherwise the eclipse merging is *super confusing*
    eclipse = project.tasks['eclipse']
    eclipse.depends(clean_eclipse, copy_settings)
    eclipse.run_after(clean_eclipse)
    copy_settings.run_after(clean_eclipse)


def configure_eclipse(build, config, windows=None):
    for project in build.all_projects:
        configure_eclipse_project(project, config, windows)
