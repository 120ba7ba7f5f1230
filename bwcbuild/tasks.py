"""
Branch consistency checks and other root-level tasks.
"""

import logging

from bwcbuild import registry
from bwcbuild.errors import BwcTestsDisabledError
from bwcbuild.errors import TaskError
from bwcbuild.project import Task

logger = logging.getLogger(__name__)


VERIFICATION = 'Verification'


def bwc_disabled_projects(build):
    return [project for project in build.all_projects
            if not project.ext.get('bwc_tests_enabled', True)]


def check_bwc_tests_enabled(build):
    disabled = bwc_disabled_projects(build)
    if disabled:
        raise BwcTestsDisabledError(p.path for p in disabled)


def create_verification_tasks(build, config, session=None):
    root = build.root_project

    verify_versions = root.tasks.create('verifyVersions', group=VERIFICATION,
            description="Checks released versions against the registry.")
    verify_versions.do_last(
            lambda task: registry.verify_versions(config, session))

    verify_bwc = root.tasks.create('verifyBwcTestsEnabled',
            group=VERIFICATION,
            description="Fails unless bwc tests are enabled.")
    verify_bwc.do_last(lambda task: check_bwc_tests_enabled(build))

    consistency = root.tasks.create('branchConsistency', group=VERIFICATION,
            description="Ensures this branch is internally consistent. "
                        "For example, that versions constants match "
                        "released versions.")
    consistency.depends(verify_versions, verify_bwc)

    return consistency


class RunTask(Task):
    """Runs the distribution in the foreground.

    Takes the same debug option as the distribution run task does, so it
    can be passed through."""

    def __init__(self, project, name, **kwargs):
        super(RunTask, self).__init__(project, name, **kwargs)
        self._debug = False

    @property
    def debug(self):
        return self._debug

    @debug.setter
    def debug(self, enabled):
        self._debug = bool(enabled)
        distribution = self.project.project(':distribution')
        cluster_config = distribution.ext.setdefault('cluster_config', {})
        cluster_config['debug'] = self._debug


def create_run_task(build):
    if build.find_project(':distribution') is None:
        logger.debug("no distribution project, no run task")
        return None

    run = build.root_project.tasks.create('run', task_type=RunTask,
            group=VERIFICATION,
            description="Runs elasticsearch in the foreground")
    run.depends(':distribution:run')
    return run


def set_task_option(task, option, value):
    """Command line task options, eg --debug-jvm for the run task."""
    attr = option.replace('-jvm', '').replace('-', '_')
    if not isinstance(task, RunTask) or attr != 'debug':
        raise TaskError("Unknown option '--{0}' for task {1}"
                        .format(option, task.path))
    setattr(task, attr, value)
