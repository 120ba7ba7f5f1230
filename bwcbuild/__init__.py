"""Build configuration for a large multi-module distribution.

The heart of it is backwards compatibility (bwc) bookkeeping: the release
history is read from a version log (a source file declaring one constant per
released version), checked for consistency and turned into two testing
windows, index compatibility and wire compatibility. The rest wires these
results into a small project/task model used by the build: publication
metadata, project substitutions, inter-module task ordering and IDE settings.

Here is a high-level overview of modules of the `bwcbuild` package:

  * `bwcbuild.version`: The `Version` value type.

  * `bwcbuild.versionlog` and `bwcbuild.lex`: Discover historical versions
    from declarations found in the version log.

  * `bwcbuild.bwc`: Derives index and wire compatibility windows.

  * `bwcbuild.registry`: Reconciles released versions against the artifact
    registry.

  * `bwcbuild.config`: The `BuildConfig` object assembled once per build and
    handed to everything else.

  * `bwcbuild.project`: Projects, tasks and the extension points the build
    script hooks into.

  * `bwcbuild.script`: The root build script itself.
"""

__license__ = "MIT"
__version__ = "0.5"
