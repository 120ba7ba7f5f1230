"""
The root build script.

Wires the build configuration into the project model. Everything here runs
once per build, in the order it is written.
"""

import logging

from bwcbuild import ide
from bwcbuild import ordering
from bwcbuild import publishing
from bwcbuild import substitutions as subst
from bwcbuild import tasks

logger = logging.getLogger(__name__)


def set_ext_properties(build, config):
    """Properties every project can rely on."""
    for project in build.all_projects:
        project.ext.update(
            # for ide hacks...
            is_eclipse=config.is_eclipse,
            is_idea=config.is_idea,
            # for backcompat testing
            index_compat_versions=config.index_compat_versions,
            wire_compat_versions=config.wire_compat_versions,
            build_metadata=config.build_metadata,
            bwc_tests_enabled=config.bwc_tests_enabled,
        )


def configure_substitutions(build, config):
    substitutions = subst.project_substitutions(config.version_string,
                                                config.index_compat_versions)

    def link_javadocs(project):
        if project.has_plugin('build'):
            subst.link_javadocs(project, substitutions, config.version_string)

    for project in build.subprojects:
        project.ext['project_substitutions'] = substitutions
        project.after_evaluate(link_javadocs)

    return substitutions


def configure_build(build, config, session=None):
    """Applies the root build script to a build whose projects have all been
    included, but not yet configured themselves."""
    publishing.configure_project_metadata(build, config)
    publishing.configure_publishing(build)

    set_ext_properties(build, config)
    tasks.create_verification_tasks(build, config, session)

    substitutions = configure_substitutions(build, config)

    def projects_evaluated(build):
        ordering.order_tasks(build, substitutions)
        ordering.remove_qa_assemble(build)
    build.on_projects_evaluated(projects_evaluated)

    ide.configure_idea(build, config)
    ide.configure_eclipse(build, config)

    tasks.create_run_task(build)

    logger.debug("configured %d projects", len(build.all_projects))
    return build
