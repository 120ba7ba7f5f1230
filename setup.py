#!/usr/bin/env python
import setuptools


def dict_of(cls):
    """Decorator that converts a class into a dict of its public members."""
    return {k: v for k, v in cls.__dict__.items() if not k.startswith('_')}


@dict_of
class setup_params:
    name = 'bwcbuild'
    version = '0.5'

    description = ('Backwards compatibility bookkeeping and build '
                   'configuration for multi-module distributions')

    license = 'MIT'

    classifiers = [
        'Private :: Do Not Upload',

        'Development Status :: 3 - Alpha',

        'Intended Audience :: Developers',
        'Topic :: Software Development :: Build Tools',

        'License :: OSI Approved :: MIT License',

        'Programming Language :: Python :: 3',
    ]
    keywords = 'build configuration backwards compatibility versions'

    packages = setuptools.find_packages(include=['bwcbuild', 'bwcbuild.*'])
    python_requires = '>=3.6'

    install_requires = [
        'ply>=3.4',
        'PyYAML>=3.10',
        'requests>=2.0',
    ]

    @dict_of
    class extras_require:
        test = [
            'pytest',
        ]

        dev = test + [
            'pytest-cov',
        ]

    @dict_of
    class entry_points:
        console_scripts = [
            'bwcbuild = bwcbuild.cli:main',
        ]


if __name__ == '__main__':
    # Guarded to make the module importable by tools like pytest.
    setuptools.setup(**setup_params)
