"""Per-version artifact inspection: release date and compatibility range."""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional, TypeVar

from constants import Constants
from common import http_client
from common.logging_utils import extra_context, is_debug_enabled, Timer
from versioning import Version

from .coordinates import Coordinates, artifact_dir_url
from .descriptor import read_compatibility

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class VersionInfo:
    """What could be learned about one published version."""
    date: Optional[datetime] = None
    grails_version: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.date is None and self.grails_version is None


def artifact_url(maven_repo: str, coords: Coordinates, version: Version) -> str:
    """Primary jar URL for one version."""
    return f"{artifact_dir_url(maven_repo, coords)}/{version}/{coords.artifact_id}-{version}.jar"


def candidate_urls(maven_repo: str, coords: Coordinates, version: Version) -> List[str]:
    """Primary jar, then "-plain" jar, then the legacy Grails 2 zip."""
    base = artifact_url(maven_repo, coords, version)[:-len(".jar")]
    return [variant.format(base=base) for variant in Constants.ARTIFACT_VARIANTS]


def first_success(candidates: Iterable[str], attempt: Callable[[str], Optional[T]]) -> Optional[T]:
    """Return the first truthy ``attempt(candidate)``, trying strictly in order."""
    for candidate in candidates:
        result = attempt(candidate)
        if result:
            return result
    return None


def fetch_last_modified(url: str) -> Optional[datetime]:
    """Release date of one candidate from its Last-Modified header."""
    return http_client.head_last_modified(url, context="artifact")


def fetch_compatibility(url: str) -> Optional[str]:
    """Download one candidate archive and read its compatibility declaration.

    The download lives in a temporary directory removed on every exit path.
    """
    with tempfile.TemporaryDirectory(prefix="plugin-") as tmpdir:
        target = os.path.join(tmpdir, os.path.basename(url) or "artifact")
        logger.info("Downloading plugin artifact from %s to extract grailsVersion...", url)
        if not http_client.download(url, target, context="artifact"):
            return None
        return read_compatibility(target, source=url)


def fetch_version_info(maven_repo: str, coords: Coordinates, version: Version) -> VersionInfo:
    """Query the artifact candidates of one version for date and compatibility.

    The two lookups walk the candidate list independently; each stops at its
    own first success.
    """
    candidates = candidate_urls(maven_repo, coords, version)
    with Timer() as t:
        date = first_success(candidates, fetch_last_modified)
        grails_version = first_success(candidates, fetch_compatibility)

    if not grails_version:
        logger.warning("Could not find plugin artifact for %s:%s", coords, version)

    if is_debug_enabled(logger):
        logger.debug(
            "Fetched version info",
            extra=extra_context(
                event="function_exit",
                component="artifact",
                action="fetch_version_info",
                outcome="found" if date or grails_version else "empty",
                duration_ms=t.duration_ms(),
            )
        )
    return VersionInfo(date=date, grails_version=grails_version)
