"""
Build layout: which projects make up the build and how each of them is set
up (plugins, dependencies, extra tasks and properties).

The layout is described in a YAML file at the root of the build:

    version_file: core/src/main/java/org/elasticsearch/Version.java
    projects:
      ':core':
        plugins: [build, maven-publish]
        dependencies:
          - org.elasticsearch.test:framework:{version}
      ':qa:smoke-test':
        plugins: [integ-test]
        dependencies: [':core']
        ext:
          bwc_tests_enabled: false

Only `projects` is required. Project entries may be empty.
"""

import io
import logging
import os.path

from collections import OrderedDict

import yaml

try:
    from yaml import CSafeLoader as YamlLoader
except ImportError:
    from yaml import SafeLoader as YamlLoader

from bwcbuild.errors import BuildConfigError
from bwcbuild.project import Build
from bwcbuild.script import configure_build

logger = logging.getLogger(__name__)


FILENAME = 'bwcbuild.yaml'

PROJECT_KEYS = ('dir', 'plugins', 'dependencies', 'tasks', 'ext')
LAYOUT_KEYS = ('version_file', 'version_properties', 'registry_url', 'group',
               'projects')


class LayoutError(BuildConfigError):
    pass


class ProjectSpec(object):

    def __init__(self, path, project_dir=None, plugins=(), dependencies=(),
                 tasks=(), ext=None):
        super(ProjectSpec, self).__init__()
        self.path = path
        self.project_dir = project_dir
        self.plugins = list(plugins)
        self.dependencies = list(dependencies)
        self.tasks = list(tasks)
        self.ext = dict(ext or {})

    def __repr__(self):
        return 'ProjectSpec({0!r})'.format(self.path)


class Layout(object):

    def __init__(self, projects=(), **settings):
        super(Layout, self).__init__()
        self.projects = OrderedDict((spec.path, spec) for spec in projects)
        self.settings = settings

    def __getattr__(self, name):
        if name in LAYOUT_KEYS:
            return self.settings.get(name)
        raise AttributeError(name)


def _check_keys(what, mapping, allowed):
    unknown = sorted(set(mapping) - set(allowed))
    if unknown:
        raise LayoutError("Unknown key(s) in {0}: {1}"
                          .format(what, ', '.join(map(str, unknown))))


def _as_list(what, value):
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if not isinstance(value, list):
        raise LayoutError("{0} must be a list".format(what))
    return value


def parse_layout(data):
    if not isinstance(data, dict):
        raise LayoutError("Layout must be a mapping")
    _check_keys('layout', data, LAYOUT_KEYS)

    projects = data.get('projects') or {}
    if not isinstance(projects, dict):
        raise LayoutError("'projects' must be a mapping of project paths")

    specs = []
    for path, entry in projects.items():
        path = str(path)
        if not path.startswith(':'):
            raise LayoutError("Project path must start with ':': {0!r}"
                              .format(path))
        entry = entry or {}
        if not isinstance(entry, dict):
            raise LayoutError("Project {0} must be a mapping".format(path))
        _check_keys('project ' + path, entry, PROJECT_KEYS)

        specs.append(ProjectSpec(path,
            project_dir=entry.get('dir'),
            plugins=_as_list(path + ' plugins', entry.get('plugins')),
            dependencies=_as_list(path + ' dependencies',
                                  entry.get('dependencies')),
            tasks=_as_list(path + ' tasks', entry.get('tasks')),
            ext=entry.get('ext')))

    settings = dict((key, value) for key, value in data.items()
                    if key != 'projects')
    return Layout(specs, **settings)


def load_layout(stream_or_path):
    if isinstance(stream_or_path, str):
        logger.debug("loading layout from %s", stream_or_path)
        with io.open(stream_or_path, encoding='utf-8') as f:
            return load_layout(f)

    try:
        data = yaml.load(stream_or_path, Loader=YamlLoader)
    except yaml.YAMLError as e:
        raise LayoutError("Malformed layout: {0}".format(e))
    return parse_layout(data or {})


def include_projects(build, layout):
    """The equivalent of a settings file: decides what projects there are."""
    for spec in layout.projects.values():
        project_dir = None
        if spec.project_dir is not None:
            project_dir = os.path.join(build.root_dir, spec.project_dir)
        build.add_project(spec.path, project_dir)


def apply_project_spec(project, spec):
    """The equivalent of a project's own build script."""
    for plugin in spec.plugins:
        project.apply_plugin(plugin)
    for notation in spec.dependencies:
        try:
            project.depend_on(notation)
        except ValueError as e:
            raise LayoutError("{0}: {1}".format(project.path, e))
    for task_name in spec.tasks:
        if task_name not in project.tasks:
            project.tasks.create(task_name)
    project.ext.update(spec.ext)


def load_build(config, layout, session=None):
    build = Build(config.root_dir)
    include_projects(build, layout)

    configure_build(build, config, session)

    for spec in layout.projects.values():
        apply_project_spec(build.project(spec.path), spec)

    build.evaluate()
    return build
