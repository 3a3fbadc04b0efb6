"""Maven version discovery from maven-metadata.xml."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Set

from constants import Constants
from common import http_client
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from versioning import InvalidVersionFormat, Version, parse_version

from .coordinates import Coordinates, artifact_dir_url

logger = logging.getLogger(__name__)


def metadata_url(maven_repo: str, coords: Coordinates) -> str:
    """Construct the maven-metadata.xml URL for a repository base and coordinates."""
    return f"{artifact_dir_url(maven_repo, coords)}/{Constants.METADATA_FILE}"


def _metadata_versions(root: ET.Element) -> List[str]:
    """Return versions listed under versioning/versions in document order."""
    versions = []
    for item in root.findall("versioning/versions/version"):
        if isinstance(item.text, str) and item.text.strip():
            versions.append(item.text.strip())
    return versions


def fetch_remote_versions(maven_repo: str, coords: Coordinates) -> Set[Version]:
    """Fetch all published, non-snapshot versions for ``coords``.

    A non-2xx response, a transport failure or an unparseable document is
    logged and treated as "no candidates this run". The returned set is
    unordered.
    """
    url = metadata_url(maven_repo, coords)
    status_code, body = http_client.get_bytes(url, context="maven-metadata")
    if not http_client.is_success(status_code) or body is None:
        if status_code:
            logger.warning("%s -> HTTP %s", safe_url(url), status_code)
        return set()

    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        logger.warning("Could not parse %s: %s", safe_url(url), exc)
        return set()

    found: Set[Version] = set()
    for raw in _metadata_versions(root):
        try:
            version = parse_version(raw)
        except InvalidVersionFormat as exc:
            logger.info("Skipping invalid version '%s' for %s: %s", raw, coords, exc)
            continue
        if version.is_snapshot:
            continue
        found.add(version)

    if is_debug_enabled(logger):
        logger.debug(
            "Discovered remote versions",
            extra=extra_context(
                event="function_exit",
                component="discovery",
                action="fetch_remote_versions",
                outcome="found" if found else "empty",
                count=len(found),
                target=safe_url(url),
            )
        )
    return found
