"""
Tests for the project model: projects, plugins, extension points and task
execution.
"""

import unittest
from unittest import TestCase

from bwcbuild.errors import BuildConfigError
from bwcbuild.errors import CompoundError
from bwcbuild.errors import TaskError
from bwcbuild.project import Build
from bwcbuild.project import Dependency


class DependencyTestCase(TestCase):

    def test_project(self):
        dep = Dependency.parse(':client:rest')
        self.assertTrue(dep.is_project)
        self.assertIsNone(dep.coordinate)
        self.assertEqual(str(dep), ':client:rest')

    def test_artifact(self):
        dep = Dependency.parse('org.elasticsearch:elasticsearch:{version}',
                               '6.0.0-SNAPSHOT')
        self.assertFalse(dep.is_project)
        self.assertEqual(dep.coordinate,
                         'org.elasticsearch:elasticsearch:6.0.0-SNAPSHOT')

    def test_invalid(self):
        for notation in ('junit', 'junit:junit', 'a::b', 'a:b:c:d'):
            with self.assertRaises(ValueError):
                Dependency.parse(notation)


class BuildTestCase(TestCase):

    def setUp(self):
        self.build = Build('/src/es')

    def test_root_project(self):
        root = self.build.root_project
        self.assertTrue(root.is_root)
        self.assertEqual(root.name, 'es')
        self.assertEqual(self.build.subprojects, [])

    def test_add_project_adds_parents(self):
        rest = self.build.add_project(':client:rest')

        self.assertEqual([p.path for p in self.build.all_projects],
                         [':', ':client', ':client:rest'])
        self.assertEqual(rest.name, 'rest')
        self.assertEqual(rest.project_dir, '/src/es/client/rest')
        self.assertIs(self.build.add_project(':client:rest'), rest)

    def test_project_dir(self):
        p = self.build.add_project(':docs', '/elsewhere/docs')
        self.assertEqual(p.file('build.gradle'), '/elsewhere/docs/build.gradle')

    def test_invalid_path(self):
        for path in ('core', ':core:'):
            with self.assertRaises(ValueError):
                self.build.add_project(path)

    def test_unknown_project(self):
        self.assertIsNone(self.build.find_project(':nope'))
        with self.assertRaises(TaskError):
            self.build.project(':nope')


class PluginTestCase(TestCase):

    def setUp(self):
        self.build = Build('/src/es')
        self.core = self.build.add_project(':core')

    def test_plugin_tasks(self):
        self.core.apply_plugin('build')

        self.assertEqual(self.core.plugins, ['base', 'java', 'build'])
        for name in ('assemble', 'build', 'clean', 'javadoc', 'test'):
            self.assertIn(name, self.core.tasks)
        self.assertEqual(self.core.tasks['build'].depends_on, ['assemble'])

    def test_apply_twice(self):
        self.core.apply_plugin('java')
        self.core.apply_plugin('java')
        self.assertEqual(self.core.plugins, ['base', 'java'])

    def test_with_plugin_applied_later(self):
        seen = []
        self.build.with_plugin('java', seen.append)
        self.assertEqual(seen, [])

        self.core.apply_plugin('java')
        self.assertEqual(seen, [self.core])

    def test_with_plugin_already_applied(self):
        self.core.apply_plugin('java')
        seen = []
        self.build.with_plugin('java', seen.append)
        self.assertEqual(seen, [self.core])

    def test_with_plugin_implied(self):
        seen = []
        self.build.with_plugin('base', seen.append)
        self.core.apply_plugin('integ-test')
        self.assertEqual(seen, [self.core])

    def test_project_with_plugin(self):
        other = self.build.add_project(':other')
        seen = []
        self.core.with_plugin('java', seen.append)

        other.apply_plugin('java')
        self.core.apply_plugin('java')
        self.assertEqual(seen, [self.core])

    def test_callbacks_run_in_registration_order(self):
        seen = []
        self.build.with_plugin('java', lambda p: seen.append(1))
        self.build.with_plugin('java', lambda p: seen.append(2))
        self.core.apply_plugin('java')
        self.assertEqual(seen, [1, 2])


class EvaluateTestCase(TestCase):

    def test_evaluate(self):
        build = Build('/src/es')
        core = build.add_project(':core')
        seen = []

        build.on_projects_evaluated(lambda b: seen.append(('all', b)))
        core.after_evaluate(lambda p: seen.append(('after', p)))
        build.evaluate()

        self.assertEqual(seen, [('after', core), ('all', build)])
        self.assertTrue(build.evaluated)

        with self.assertRaises(TaskError):
            build.evaluate()


class TaskTestCase(TestCase):

    def setUp(self):
        self.build = Build('/src/es')
        self.root = self.build.root_project
        self.core = self.build.add_project(':core')
        self.log = []

    def task(self, project, name):
        task = project.tasks.create(name)
        task.do_last(lambda t: self.log.append(t.path))
        return task

    def test_paths(self):
        self.assertEqual(self.task(self.root, 'run').path, ':run')
        self.assertEqual(self.task(self.core, 'test').path, ':core:test')
        self.assertIs(self.build.task(':core:test'),
                      self.core.tasks['test'])
        self.assertIs(self.build.task('run'), self.root.tasks['run'])

    def test_duplicate(self):
        self.task(self.core, 'test')
        with self.assertRaises(TaskError):
            self.core.tasks.create('test')

    def test_unknown(self):
        with self.assertRaises(TaskError):
            self.build.task(':core:nope')
        with self.assertRaises(TaskError):
            self.core.tasks['nope']

    def test_depends_on(self):
        compile_ = self.task(self.core, 'compile')
        test = self.task(self.core, 'test')
        check = self.task(self.root, 'check')
        test.depends('compile')
        check.depends(':core:test')

        plan = self.build.execute(['check'])

        self.assertEqual(plan, [compile_, test, check])
        self.assertEqual(self.log, [':core:compile', ':core:test', ':check'])

    def test_must_run_after_only_orders(self):
        a = self.task(self.core, 'a')
        b = self.task(self.core, 'b')
        b.run_after(a)

        self.assertEqual(self.build.execution_plan([b]), [b])
        self.assertEqual(self.build.execution_plan([b, a]), [a, b])

    def test_remove_dependency(self):
        a = self.task(self.core, 'a')
        b = self.task(self.core, 'b')
        c = self.task(self.core, 'c')
        c.depends('a', b)

        c.remove_dependency('a')
        self.assertEqual(c.depends_on, [b])
        c.remove_dependency('b')
        self.assertEqual(c.depends_on, [])
        self.assertEqual(self.build.execution_plan([c]), [c])

    def test_cycle(self):
        a = self.task(self.core, 'a')
        b = self.task(self.core, 'b')
        a.depends(b)
        b.depends(a)

        with self.assertRaises(TaskError) as cm:
            self.build.execute([a])
        self.assertIn(':core:a -> :core:b -> :core:a', str(cm.exception))
        self.assertEqual(self.log, [])

    def test_failure_stops_the_build(self):
        a = self.core.tasks.create('a')

        @a.do_last
        def fail(task):
            raise BuildConfigError('a failed')

        b = self.task(self.core, 'b')
        b.run_after(a)

        with self.assertRaises(BuildConfigError):
            self.build.execute([a, b])
        self.assertEqual(self.log, [])

    def test_keep_going(self):
        for name in ('a', 'b'):
            task = self.core.tasks.create(name)
            task.do_last(lambda t: self.fail_task(t))
        c = self.task(self.core, 'c')
        c.depends('a')
        d = self.task(self.core, 'd')

        with self.assertRaises(CompoundError) as cm:
            self.build.execute([':core:c', ':core:b', ':core:d'],
                               keep_going=True)

        self.assertEqual(len(cm.exception.causes), 2)
        self.assertEqual(self.log, [':core:d'])

    def test_keep_going_single_failure(self):
        a = self.core.tasks.create('a')
        a.do_last(self.fail_task)
        self.task(self.core, 'b')

        with self.assertRaises(BuildConfigError) as cm:
            self.build.execute([':core:a', ':core:b'], keep_going=True)
        self.assertNotIsInstance(cm.exception, CompoundError)
        self.assertEqual(self.log, [':core:b'])

    def test_io_error_becomes_task_error(self):
        a = self.core.tasks.create('a')
        a.do_last(self.fail_io)

        with self.assertRaises(TaskError) as cm:
            self.build.execute([':core:a'])
        self.assertIsInstance(cm.exception.__cause__, OSError)
        self.assertIn(":core:a", str(cm.exception))

    def test_keep_going_io_error(self):
        a = self.core.tasks.create('a')
        a.do_last(self.fail_io)
        self.task(self.core, 'b').depends('a')
        self.task(self.core, 'c')
        self.core.tasks.create('d').do_last(self.fail_task)

        with self.assertRaises(CompoundError) as cm:
            self.build.execute([':core:b', ':core:c', ':core:d'],
                               keep_going=True)
        self.assertIsInstance(cm.exception.causes[0], TaskError)
        self.assertEqual(self.log, [':core:c'])

    def fail_io(self, task):
        raise FileNotFoundError(2, 'No such file or directory', 'missing')

    def fail_task(self, task):
        raise BuildConfigError(task.path + ' failed')


if __name__ == '__main__':
    unittest.main()
