"""
Reconciliation of the locally known release line against the versions
actually published to the artifact registry.
"""

import logging
import re
import xml.etree.ElementTree as ElementTree

import requests

from bwcbuild.errors import OfflineError
from bwcbuild.errors import RegistryError
from bwcbuild.errors import VersionMismatchError
from bwcbuild.version import Version

logger = logging.getLogger(__name__)


DEFAULT_REGISTRY_URL = ('https://repo1.maven.org/maven2/org/elasticsearch/'
                        'elasticsearch/maven-metadata.xml')

_release_re = re.compile(r'^\d+\.\d+\.\d+$')


def parse_published_versions(document):
    """Picks final releases out of a maven-metadata.xml document."""
    try:
        root = ElementTree.fromstring(document)
    except ElementTree.ParseError as e:
        raise RegistryError("Malformed registry document: {0}".format(e))

    texts = [(el.text or '').strip()
             for el in root.findall('./versioning/versions/version')]
    return sorted(set(Version.from_string(text)
                      for text in texts if _release_re.match(text)))


def fetch_published_versions(url=DEFAULT_REGISTRY_URL, session=None,
                             timeout=30):
    http = session if session is not None else requests

    logger.info("fetching published versions from %s", url)
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise RegistryError("Unable to fetch {0}: {1}".format(url, e))

    versions = parse_published_versions(response.content)
    logger.debug("%d published versions", len(versions))
    return versions


def reconcile(published, windows, current):
    """Published versions that should be index compatible (and are not
    future ones) must be exactly those marked as released locally."""
    current = Version.coerce(current)
    prev_major = current.major - 1

    expected = set(v for v in published
                   if v.major >= prev_major and v.before(current))
    actual = set(windows.released())

    if expected != actual:
        raise VersionMismatchError(actual, expected)

    logger.info("%d released versions match the registry", len(actual))
    return sorted(actual)


def verify_versions(config, session=None):
    if config.offline:
        raise OfflineError("Must run in online mode to verify versions")

    published = fetch_published_versions(config.registry_url, session)
    return reconcile(published, config.windows, config.current_version)
