"""
Ordering of similar tasks across dependent projects.
"""

import logging

logger = logging.getLogger(__name__)


ORDERED_TASKS = ('test', 'integTest')

# :test:framework:test cannot run before and after :core:test
UNORDERED_PROJECTS = (':test:framework',)


def upstream_projects(project, substitutions):
    """Projects the given one depends on, substituted artifacts included
    (substitutions are not applied to the dependencies themselves)."""
    for dep in project.dependencies:
        path = substitutions.resolve(dep)
        if path is None:
            continue
        upstream = project.build.find_project(path)
        if upstream is None:
            continue
        if upstream is project:
            # distribution integ tests depend on themselves
            continue
        yield upstream


def order_project_tasks(project, substitutions):
    if project.path in UNORDERED_PROJECTS:
        return

    for upstream in upstream_projects(project, substitutions):
        for task_name in ORDERED_TASKS:
            task = project.tasks.find(task_name)
            upstream_task = upstream.tasks.find(task_name)
            if task is not None and upstream_task is not None:
                task.run_after(upstream_task)
                logger.debug("%s must run after %s", task, upstream_task)


def order_tasks(build, substitutions):
    """Ensures similar tasks in dependent projects run first."""
    for project in build.all_projects:
        order_project_tasks(project, substitutions)


def remove_qa_assemble(build):
    """Nothing is published for qa projects, no need to assemble them."""
    for project in build.subprojects:
        if not project.path.startswith(':qa'):
            continue
        if project.tasks.remove('assemble') is None:
            continue

        build_task = project.tasks.find('build')
        if build_task is not None:
            build_task.remove_dependency('assemble')
        logger.debug("%s: removed assemble", project)
