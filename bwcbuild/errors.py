"""
Exceptions for error handling.

Every error raised while configuring a build is fatal: it aborts the whole
run, there is no partial success and nothing is retried.
"""

import traceback as _traceback


class BuildConfigError(Exception):

    def print_error(self, tb=None):
        _traceback.print_exception(type(self), self, tb)


class VersionOrderError(BuildConfigError):

    def __init__(self, versions):
        super(VersionOrderError, self).__init__(
                "Version log contains out of order version constants: "
                "{0}".format(', '.join(map(str, versions))))
        self.versions = tuple(versions)


class OfflineError(BuildConfigError):
    pass


class RegistryError(BuildConfigError):
    pass


class VersionMismatchError(BuildConfigError):

    def __init__(self, actual, expected):
        actual = sorted(actual)
        expected = sorted(expected)
        super(VersionMismatchError, self).__init__(
                "out-of-date released versions\n"
                "Actual  :{0}\n"
                "Expected:{1}\n"
                "Update the version log. Note that the current version "
                "doesn't count because it is not released."
                .format(_format_versions(actual), _format_versions(expected)))
        self.actual = actual
        self.expected = expected

    @property
    def missing(self):
        """Published, but not marked as released locally."""
        return sorted(set(self.expected) - set(self.actual))

    @property
    def unexpected(self):
        """Marked as released locally, but never published."""
        return sorted(set(self.actual) - set(self.expected))


class BwcTestsDisabledError(BuildConfigError):

    def __init__(self, projects=()):
        super(BwcTestsDisabledError, self).__init__(
                "Bwc tests are disabled. They must be re-enabled after "
                "completing backcompat behavior backporting.")
        self.projects = tuple(projects)


class BuildMetadataError(BuildConfigError, ValueError):
    pass


class IdeNotConfiguredError(BuildConfigError):
    pass


class TaskError(BuildConfigError):
    pass


class CompoundError(BuildConfigError):

    def __init__(self, causes, message="Multiple errors"):
        causes = tuple(causes)
        super(CompoundError, self).__init__(
                '\n'.join([message + ':'] +
                          ['  ' + str(cause) for cause in causes]))
        self.causes = causes

    def print_error(self, tb=None):
        super(CompoundError, self).print_error(tb)
        for cause in self.causes:
            cause.print_error()

    @classmethod
    def raise_if_any(cls, errors, message="Multiple errors"):
        errors = tuple(errors)

        if len(errors) == 1:
            raise errors[0]
        if len(errors) > 1:
            raise cls(errors, message)


def _format_versions(versions):
    return '[' + ', '.join(map(str, versions)) + ']'
