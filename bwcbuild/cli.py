"""
Command line interface.
"""

import argparse
import logging
import os
import os.path
import sys

import bwcbuild
from bwcbuild import config as _config
from bwcbuild.errors import BuildConfigError
from bwcbuild.errors import TaskError
from bwcbuild.layout import FILENAME as LAYOUT_FILENAME
from bwcbuild.layout import Layout
from bwcbuild.layout import load_build
from bwcbuild.layout import load_layout
from bwcbuild.tasks import set_task_option
from bwcbuild.util import init_logging

logger = logging.getLogger(__name__)


def property_arg(s):
    key, sep, value = s.partition('=')
    if not key:
        raise argparse.ArgumentTypeError("expected key[=value]: %r" % s)
    return key, value if sep else 'true'


def build_parser():
    parser = argparse.ArgumentParser(prog='bwcbuild',
            description="Backwards compatibility bookkeeping and build "
                        "configuration for multi-module distributions.")
    parser.add_argument('--root', default=os.curdir,
            help="root directory of the build (default: current directory)")
    parser.add_argument('--layout',
            help="build layout file (default: ROOT/%s)" % LAYOUT_FILENAME)
    parser.add_argument('--version', dest='version_string',
            help="version being built, eg 6.0.0-SNAPSHOT "
                 "(default: read from buildSrc/version.properties)")
    parser.add_argument('--version-file',
            help="version log to discover released versions from")
    parser.add_argument('--offline', action='store_true',
            help="do not access the network")
    parser.add_argument('-D', dest='properties', action='append',
            type=property_arg, default=[], metavar='KEY=VALUE',
            help="set a system property, eg -Didea.active=true")
    parser.add_argument('--log', metavar='FILE',
            help="write the log to a file instead of stderr")
    parser.add_argument('-v', '--verbose', action='count', default=0)
    parser.add_argument('-V', action='version',
            version='%(prog)s ' + bwcbuild.__version__)

    commands = parser.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True

    commands.add_parser('versions',
            help="print index and wire compatible versions")
    commands.add_parser('metadata',
            help="print build metadata of the previous build")
    commands.add_parser('tasks',
            help="list tasks of all projects")

    run = commands.add_parser('run', help="run tasks")
    run.add_argument('task_names', nargs='+', metavar='TASK')
    run.add_argument('--continue', dest='keep_going', action='store_true',
            help="keep running tasks not depending on failed ones")
    run.add_argument('--debug-jvm', action='store_true',
            help="enable debugging of the distribution started by 'run'")

    return parser


def make_config(args):
    layout_path = args.layout
    if layout_path is None:
        layout_path = os.path.join(args.root, LAYOUT_FILENAME)
    if os.path.exists(layout_path):
        layout = load_layout(layout_path)
    else:
        logger.debug("no layout at %s, assuming single project build",
                     layout_path)
        layout = Layout()

    version_string = args.version_string
    if version_string is None and layout.version_properties is not None:
        version_string = _config.read_version_string(args.root,
                                                     layout.version_properties)

    kwargs = dict(
        task_names=getattr(args, 'task_names', ()),
        system_properties=dict(args.properties),
        offline=args.offline,
    )
    if layout.registry_url is not None:
        kwargs['registry_url'] = layout.registry_url
    if layout.group is not None:
        kwargs['group'] = layout.group

    config = _config.configure(args.root, version_string,
                               args.version_file or layout.version_file,
                               **kwargs)
    return config, layout


def select_tasks(build, names):
    """Qualified names select one task, bare names select the task of that
    name in every project."""
    selected = []
    for name in names:
        if name.startswith(':'):
            selected.append(build.task(name))
            continue

        found = [project.tasks.find(name) for project in build.all_projects]
        found = [task for task in found if task is not None]
        if not found:
            raise TaskError("Task '{0}' not found in any project"
                            .format(name))
        selected.extend(found)
    return selected


def cmd_versions(args, config, layout, out):
    print('current:      {0}'.format(config.version_string), file=out)
    print('index compat: {0}'.format(
            ' '.join(map(str, config.index_compat_versions))), file=out)
    print('wire compat:  {0}'.format(
            ' '.join(map(str, config.wire_compat_versions))), file=out)


def cmd_metadata(args, config, layout, out):
    for key, value in sorted(config.build_metadata.items()):
        print('{0}={1}'.format(key, value), file=out)


def cmd_tasks(args, config, layout, out):
    build = load_build(config, layout)
    for project in build.all_projects:
        for task in project.tasks:
            line = task.path
            if task.description:
                line += ' - ' + task.description
            print(line, file=out)


def cmd_run(args, config, layout, out):
    build = load_build(config, layout)
    selected = select_tasks(build, args.task_names)

    if args.debug_jvm:
        for task in selected:
            if task.name == 'run':
                set_task_option(task, 'debug-jvm', True)

    plan = build.execute(selected, keep_going=args.keep_going)
    print('BUILD SUCCESSFUL: {0} tasks'.format(len(plan)), file=out)


COMMANDS = {
    'versions': cmd_versions,
    'metadata': cmd_metadata,
    'tasks':    cmd_tasks,
    'run':      cmd_run,
}


def main(argv=None, out=None):
    if out is None:
        out = sys.stdout
    args = build_parser().parse_args(argv)

    level = (logging.WARNING, logging.INFO)[min(args.verbose, 1)]
    if args.verbose > 1:
        level = logging.DEBUG
    init_logging(args.log if args.log else sys.stderr, level=level)

    try:
        config, layout = make_config(args)
        COMMANDS[args.command](args, config, layout, out)

    except BuildConfigError as e:
        print('BUILD FAILED: {0}'.format(e), file=sys.stderr)
        logger.debug('details', exc_info=True)
        return 1

    except (IOError, OSError) as e:
        print('BUILD FAILED: {0}'.format(e), file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
