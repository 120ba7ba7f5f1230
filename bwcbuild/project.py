"""
Projects, tasks and extension points of a build.

A build is a tree of projects addressed by colon-separated paths (':' being
the root, ':client:rest' a nested subproject). Projects own tasks; tasks are
ordered by hard dependencies (`depends_on`) and soft ordering constraints
(`must_run_after`), the latter only taking effect among tasks that are going
to run anyway.

Build scripts attach behavior at a few named extension points:

  * `Build.with_plugin(name, callback)`: called for every project having the
    plugin, both for projects that already have it applied and for projects
    it gets applied to later on.

  * `Project.after_evaluate(callback)`: called once the project has been
    fully configured.

  * `Build.on_projects_evaluated(callback)`: called after all projects have
    been evaluated.

Callbacks run eagerly, in the order of registration.
"""

import logging
import os.path

from collections import deque
from collections import namedtuple as _namedtuple
from collections import OrderedDict
from types import SimpleNamespace

from bwcbuild.errors import BuildConfigError
from bwcbuild.errors import CompoundError
from bwcbuild.errors import TaskError
from bwcbuild.util import pop_iter

logger = logging.getLogger(__name__)


__all__ = [
    "Build",
    "Project",
    "Task",
    "Dependency",
]


PLUGIN_TASKS = OrderedDict([
    ('base',       ('assemble', 'build', 'clean')),
    ('java',       ('compileJava', 'javadoc', 'test')),
    ('integ-test', ('integTest',)),
    ('idea',       ('idea', 'cleanIdea')),
    ('eclipse',    ('eclipse', 'cleanEclipse')),
])

# Plugins applying other plugins.
PLUGIN_IMPLIES = {
    'java':       ('base',),
    'build':      ('java',),
    'integ-test': ('java',),
}


class Dependency(_namedtuple('_Dependency', 'group name version project')):
    """Either a dependency on another project of the build (only `project`
    is set), or on an external artifact identified by its coordinate."""
    __slots__ = ()

    def __new__(cls, group=None, name=None, version=None, project=None):
        return super(Dependency, cls).__new__(cls, group, name, version,
                                              project)

    @classmethod
    def parse(cls, notation, version=None):
        """':path' for a project, 'group:name:version' for an artifact.

        A '{version}' placeholder is expanded to the given version."""
        if version is not None:
            notation = notation.replace('{version}', str(version))

        if notation.startswith(':'):
            return cls(project=notation)

        parts = notation.split(':')
        if len(parts) != 3 or not all(parts):
            raise ValueError("Invalid dependency notation: {0!r}"
                             .format(notation))
        return cls(*parts)

    @property
    def is_project(self):
        return self.project is not None

    @property
    def coordinate(self):
        if self.is_project:
            return None
        return '{0}:{1}:{2}'.format(self.group, self.name, self.version)

    def __str__(self):
        return self.project if self.is_project else self.coordinate


class Task(object):

    def __init__(self, project, name, group=None, description=None):
        super(Task, self).__init__()
        self.project = project
        self.name = name
        self.group = group
        self.description = description

        self.depends_on = []  # tasks or task paths (absolute or relative)
        self.must_run_after = []
        self.actions = []

    @property
    def path(self):
        if self.project.is_root:
            return ':' + self.name
        return self.project.path + ':' + self.name

    def depends(self, *tasks):
        for task in tasks:
            if task not in self.depends_on:
                self.depends_on.append(task)

    def remove_dependency(self, task_or_name):
        self.depends_on = [dep for dep in self.depends_on
                           if dep != task_or_name and
                              getattr(dep, 'name', None) != task_or_name]

    def run_after(self, *tasks):
        for task in tasks:
            if task not in self.must_run_after:
                self.must_run_after.append(task)

    def do_last(self, action):
        """Appends an action. Actions are called with the task instance.
        Can be used as a decorator."""
        self.actions.append(action)
        return action

    def execute(self):
        for action in self.actions:
            try:
                action(self)
            except OSError as e:
                raise TaskError("Task '{0}' failed: {1}"
                                .format(self.path, e)) from e

    def __repr__(self):
        return "<Task '{0}'>".format(self.path)


class TaskContainer(object):

    def __init__(self, project):
        super(TaskContainer, self).__init__()
        self.project = project
        self._tasks = OrderedDict()

    def create(self, name, task_type=Task, **kwargs):
        if name in self._tasks:
            raise TaskError("Task '{0}' already exists in project '{1}'"
                            .format(name, self.project.path))
        task = self._tasks[name] = task_type(self.project, name, **kwargs)
        return task

    def find(self, name):
        return self._tasks.get(name)

    def remove(self, name):
        return self._tasks.pop(name, None)

    def __getitem__(self, name):
        try:
            return self._tasks[name]
        except KeyError:
            raise TaskError("Task '{0}' not found in project '{1}'"
                            .format(name, self.project.path))

    def __contains__(self, name):
        return name in self._tasks

    def __iter__(self):
        return iter(list(self._tasks.values()))

    def __len__(self):
        return len(self._tasks)


class Project(object):

    def __init__(self, build, path, project_dir):
        super(Project, self).__init__()
        self.build = build
        self.path = path
        self.project_dir = project_dir
        self.build_dir = os.path.join(project_dir, 'build')

        self.group = None
        self.version = None
        self.description = None

        self.ext = dict()  # extra properties set by build scripts
        self.plugins = []
        self.dependencies = []
        self.tasks = TaskContainer(self)

        self.publication = None
        self.javadoc = SimpleNamespace(encoding=None, options=OrderedDict(),
                                       links_offline=[])
        self.idea = None
        self.eclipse = None

        self._after_evaluate = []

    @property
    def name(self):
        if self.is_root:
            return os.path.basename(os.path.normpath(self.project_dir))
        return self.path.rpartition(':')[2]

    @property
    def is_root(self):
        return self.path == ':'

    @property
    def root_project(self):
        return self.build.root_project

    def file(self, *parts):
        return os.path.join(self.project_dir, *parts)

    def project(self, path):
        return self.build.project(path)

    def apply_plugin(self, name):
        if name in self.plugins:
            return
        for implied in PLUGIN_IMPLIES.get(name, ()):
            self.apply_plugin(implied)

        self.plugins.append(name)
        for task_name in PLUGIN_TASKS.get(name, ()):
            if task_name not in self.tasks:
                self.tasks.create(task_name)
        if name == 'base':
            self.tasks['build'].depends('assemble')

        logger.debug("%s: applied plugin '%s'", self.path, name)
        self.build._plugin_applied(self, name)

    def has_plugin(self, name):
        return name in self.plugins

    def with_plugin(self, name, callback):
        self.build.with_plugin(name, callback, projects=[self])

    def after_evaluate(self, callback):
        self._after_evaluate.append(callback)

    def depend_on(self, notation):
        if not isinstance(notation, Dependency):
            notation = Dependency.parse(notation, self.version)
        self.dependencies.append(notation)
        return notation

    def __repr__(self):
        return "<Project '{0}'>".format(self.path)


class Build(object):

    def __init__(self, root_dir):
        super(Build, self).__init__()
        self.root_dir = root_dir

        self._projects = OrderedDict()
        self._plugin_hooks = []  # [(plugin, callback, projects or None)]
        self._evaluated_hooks = []
        self.evaluated = False

        self.root_project = Project(self, ':', root_dir)
        self._projects[':'] = self.root_project

    def add_project(self, path, project_dir=None):
        """Includes a project, along with any missing parents of it."""
        if not path.startswith(':') or path.endswith(':') and path != ':':
            raise ValueError("Invalid project path: {0!r}".format(path))
        if path in self._projects:
            return self._projects[path]

        parent_path = path.rpartition(':')[0] or ':'
        self.add_project(parent_path)

        if project_dir is None:
            project_dir = os.path.join(self.root_dir, *path.split(':')[1:])

        project = self._projects[path] = Project(self, path, project_dir)
        logger.debug("included %s", project)
        return project

    def find_project(self, path):
        return self._projects.get(path)

    def project(self, path):
        try:
            return self._projects[path]
        except KeyError:
            raise TaskError("Project with path '{0}' could not be found"
                            .format(path))

    @property
    def all_projects(self):
        return list(self._projects.values())

    @property
    def subprojects(self):
        return [p for p in self._projects.values() if not p.is_root]

    def with_plugin(self, name, callback, projects=None):
        if projects is not None:
            projects = list(projects)
        self._plugin_hooks.append((name, callback, projects))

        for project in (projects or self.all_projects):
            if project.has_plugin(name):
                callback(project)

    def _plugin_applied(self, project, name):
        for plugin, callback, projects in list(self._plugin_hooks):
            if plugin != name:
                continue
            if projects is None or project in projects:
                callback(project)

    def on_projects_evaluated(self, callback):
        self._evaluated_hooks.append(callback)

    def evaluate(self):
        if self.evaluated:
            raise TaskError("Build has already been evaluated")

        for project in self.all_projects:
            for callback in project._after_evaluate:
                callback(project)

        for callback in self._evaluated_hooks:
            callback(self)

        self.evaluated = True

    def find_task(self, path, relative_to=None):
        if not path.startswith(':'):
            if relative_to is None:
                relative_to = self.root_project
            return relative_to.tasks.find(path)

        project_path, _, name = path.rpartition(':')
        project = self.find_project(project_path or ':')
        if project is not None:
            return project.tasks.find(name)

    def task(self, path, relative_to=None):
        if isinstance(path, Task):
            return path

        task = self.find_task(path, relative_to)
        if task is None:
            raise TaskError("Task '{0}' not found".format(path))
        return task

    def _dependencies_of(self, task):
        return [self.task(dep, task.project) for dep in task.depends_on]

    def task_graph(self, tasks):
        """Requested tasks along with everything they depend on."""
        scheduled = OrderedDict()
        queue = deque(self.task(task) for task in tasks)

        for task in pop_iter(queue, pop_meth='popleft'):
            if task in scheduled:
                continue
            scheduled[task] = None
            queue.extend(self._dependencies_of(task))

        return list(scheduled)

    def execution_plan(self, tasks):
        scheduled = set(self.task_graph(tasks))
        order = []
        state = dict()  # task -> False (visiting) or True (done)

        def visit(task, chain):
            if state.get(task):
                return
            if task in state:
                cycle = chain[chain.index(task):] + [task]
                raise TaskError("Circular dependency between the following "
                                "tasks: " + ' -> '.join(t.path for t in cycle))

            state[task] = False
            after = [self.task(t, task.project) for t in task.must_run_after
                     if self.find_task_ref(t, task.project) in scheduled]
            for predecessor in self._dependencies_of(task) + after:
                visit(predecessor, chain + [task])
            state[task] = True

            order.append(task)

        for task in tasks:
            visit(self.task(task), [])

        return order

    def find_task_ref(self, ref, relative_to=None):
        if isinstance(ref, Task):
            return ref
        return self.find_task(ref, relative_to)

    def execute(self, tasks, keep_going=False):
        """Runs tasks in order. With keep_going, a failing task only stops
        the tasks depending on it; the failures are reported all at once."""
        plan = self.execution_plan(tasks)
        failures = []
        failed = set()

        for task in plan:
            if any(dep in failed for dep in self._dependencies_of(task)):
                logger.info("> Task %s SKIPPED", task.path)
                failed.add(task)
                continue

            logger.info("> Task %s", task.path)
            try:
                task.execute()
            except BuildConfigError as e:
                if not keep_going:
                    raise
                logger.error("> Task %s FAILED: %s", task.path, e)
                failed.add(task)
                failures.append(e)

        CompoundError.raise_if_any(failures, "Multiple tasks failed")
        return plan
