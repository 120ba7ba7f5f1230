"""
Tests for IDE settings.
"""

import os
import os.path
import shutil
import tempfile
import unittest
from types import SimpleNamespace
from unittest import TestCase

from bwcbuild import ide
from bwcbuild.errors import IdeNotConfiguredError
from bwcbuild.project import Build


def ide_config(is_eclipse=False, is_idea=False, system_properties=None):
    return SimpleNamespace(is_eclipse=is_eclipse, is_idea=is_idea,
                           system_properties=system_properties or {})


def touch(*parts):
    path = os.path.join(*parts)
    if not os.path.isdir(os.path.dirname(path)):
        os.makedirs(os.path.dirname(path))
    with open(path, 'w') as f:
        f.write(parts[-1])
    return path


class IdeTestCase(TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmpdir)

        self.build = Build(self.tmpdir)
        self.core = self.build.add_project(':core')


class EclipseTestCase(IdeTestCase):

    def test_project_name(self):
        rest = self.build.add_project(':client:rest')
        self.assertEqual(ide.eclipse_project_name(rest, windows=False),
                         ':client:rest')
        self.assertEqual(ide.eclipse_project_name(rest, windows=True),
                         '_client_rest')
        self.assertEqual(ide.eclipse_project_name(self.build.root_project),
                         os.path.basename(self.tmpdir))

    def test_assign_source_outputs(self):
        outputs = ide.assign_source_outputs(['src/main/java',
                                             'src/test/java'])
        self.assertEqual(list(outputs.items()),
                         [('src/main/java', 'build-eclipse/1'),
                          ('src/test/java', 'build-eclipse/2')])

    def test_java_project(self):
        ide.configure_eclipse(self.build, ide_config(), windows=False)
        self.core.apply_plugin('java')

        self.assertEqual(self.core.eclipse.name, ':core')
        self.assertEqual(self.core.eclipse.default_output_dir,
                         self.core.file('build-eclipse'))
        self.assertEqual(self.core.build_dir, self.core.file('build'))

    def test_eclipse_build_dir(self):
        self.core.apply_plugin('java')
        ide.configure_eclipse(self.build, ide_config(is_eclipse=True))
        self.assertEqual(self.core.build_dir, self.core.file('build-eclipse'))

    def test_non_java_project(self):
        ide.configure_eclipse(self.build, ide_config())
        self.assertIsNone(self.core.eclipse.default_output_dir)
        self.assertEqual(self.core.tasks['eclipse'].actions, [])

    def test_eclipse_task(self):
        touch(self.tmpdir, 'buildSrc', 'src', 'main', 'resources',
              'eclipse.settings', 'org.eclipse.jdt.core.prefs')
        touch(self.core.project_dir, '.settings', 'stale.prefs')
        os.makedirs(self.core.file('src', 'main', 'java'))
        os.makedirs(self.core.file('src', 'test', 'resources'))

        ide.configure_eclipse(self.build, ide_config())
        self.core.apply_plugin('java')

        plan = self.build.execute([':core:eclipse'])

        self.assertEqual([t.name for t in plan],
                         ['wipeEclipseSettings', 'cleanEclipse',
                          'copyEclipseSettings', 'eclipse'])
        self.assertEqual(os.listdir(self.core.file('.settings')),
                         ['org.eclipse.jdt.core.prefs'])
        self.assertEqual(list(self.core.eclipse.source_outputs.items()),
                         [('src/main/java', 'build-eclipse/1'),
                          ('src/test/resources', 'build-eclipse/2')])


    def test_eclipse_task_without_settings(self):
        ide.configure_eclipse(self.build, ide_config())

        plan = self.build.execute([':eclipse', ':core:eclipse'])

        names = [t.name for t in plan]
        self.assertEqual(names.count('copyEclipseSettings'), 2)
        self.assertFalse(os.path.exists(self.core.file('.settings')))
        self.assertFalse(os.path.exists(
                self.build.root_project.file('.settings')))


class IdeaTestCase(IdeTestCase):

    def test_module_settings(self):
        ide.configure_idea(self.build, ide_config())

        idea = self.core.idea
        self.assertFalse(idea.inherit_output_dirs)
        self.assertEqual(idea.output_dir,
                         self.core.file('build-idea', 'classes', 'main'))
        self.assertEqual(idea.test_output_dir,
                         self.core.file('build-idea', 'classes', 'test'))
        self.assertEqual(idea.exclude_dirs, [self.core.file('build'),
                                             self.core.file('build-eclipse')])
        self.assertEqual(idea.source_folder_types['src/test/resources'],
                         'java-test-resource')
        self.assertIsNone(idea.vcs)
        self.assertEqual(self.build.root_project.idea.vcs, 'Git')
        self.assertEqual(self.core.build_dir, self.core.file('build'))

    def test_idea_build_dir(self):
        ide.configure_idea(self.build, ide_config(is_idea=True))
        self.assertEqual(self.core.build_dir, self.core.file('build-idea'))

    def test_idea_task_writes_marker(self):
        ide.configure_idea(self.build, ide_config())
        self.build.execute([':idea'])
        self.assertTrue(os.path.exists(ide.idea_marker(self.build)))

    def test_clean_idea(self):
        ide.configure_idea(self.build, ide_config())
        touch(self.core.project_dir, 'build-idea', 'classes', 'Foo.class')

        plan = self.build.execute([':core:cleanIdea'])

        self.assertEqual([t.name for t in plan],
                         ['cleanIdeaBuildDir', 'cleanIdea'])
        self.assertEqual(plan[0].group, 'ide')
        self.assertFalse(os.path.exists(self.core.file('build-idea')))

    def test_not_configured(self):
        config = ide_config(is_idea=True,
                            system_properties={'idea.active': 'true'})
        with self.assertRaises(IdeNotConfiguredError):
            ide.configure_idea(self.build, config)

    def test_configured(self):
        touch(self.tmpdir, ide.IDEA_MARKER)
        config = ide_config(is_idea=True,
                            system_properties={'idea.active': 'true'})
        ide.configure_idea(self.build, config)


if __name__ == '__main__':
    unittest.main()
