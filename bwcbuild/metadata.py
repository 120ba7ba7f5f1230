"""
Build metadata left by a previous build, eg hashes for bwc builds.
"""

import os

from bwcbuild.errors import BuildMetadataError


ENV_VAR = 'BUILD_METADATA'


def parse_build_metadata(value):
    """
    >>> parse_build_metadata('a=1;b=2') == {'a': '1', 'b': '2'}
    True
    >>> parse_build_metadata('')
    {}
    """
    metadata = {}
    if not value:
        return metadata

    for token in value.split(';'):
        if not token:
            continue
        try:
            key, val = token.split('=')
        except ValueError:
            raise BuildMetadataError("Malformed build metadata entry {0!r} "
                                     "in {1!r}".format(token, value))
        metadata[key] = val

    return metadata


def build_metadata_from_env(environ=None):
    if environ is None:
        environ = os.environ
    return parse_build_metadata(environ.get(ENV_VAR))
