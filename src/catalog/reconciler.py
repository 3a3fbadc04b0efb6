"""Merge remote version history into a plugin record and persist it."""
from __future__ import annotations

import logging
from typing import Optional

import yaml

from common.logging_utils import extra_context, is_debug_enabled, Timer
from registry.maven import artifact, discovery
from versioning import sort_descending

from . import store
from .models import PluginRecord, RecordValidationError, VersionEntry

logger = logging.getLogger(__name__)


def merge_remote_versions(record: PluginRecord) -> int:
    """Append an entry for every remote version the record does not know yet.

    Existing entries are never touched. Returns the number of entries added.
    """
    candidates = discovery.fetch_remote_versions(record.maven_repo, record.coords)
    added = 0
    # Newest first only to keep the log readable; the list is re-sorted afterwards
    for version in sorted(candidates, reverse=True):
        if record.has_version(version.text):
            continue

        info = artifact.fetch_version_info(record.maven_repo, record.coords, version)
        if info.is_empty:
            logger.warning("Could not fetch info for version %s of %s", version, record.coords)

        record.versions.append(VersionEntry(
            version=version.text,
            date=info.date,
            grails_version=info.grails_version,
        ))
        added += 1
    return added


def sort_versions(record: PluginRecord) -> None:
    """Order the whole version list newest first.

    Entries whose text no longer parses go last, in their existing order.
    """
    ordered, unparsable = sort_descending(record.versions, lambda entry: entry.version)
    for entry in unparsable:
        logger.warning("Unparsable version '%s' in %s kept at the end", entry.version, record.coords)
    record.versions = ordered + unparsable


def reconcile(record: PluginRecord) -> PluginRecord:
    """Bring ``record`` up to date with its remote repository.

    Records without a ``maven-repo`` are not tracked remotely and come back
    unchanged.
    """
    if not record.maven_repo:
        logger.info("No 'maven-repo' for %s, not syncing versions", record.coords)
        return record

    with Timer() as t:
        added = merge_remote_versions(record)
        sort_versions(record)

    if added:
        logger.info("Added %d new version(s) to %s", added, record.coords)
    if is_debug_enabled(logger):
        logger.debug(
            "Reconciled record",
            extra=extra_context(
                event="function_exit",
                component="reconciler",
                action="reconcile",
                outcome="updated" if added else "unchanged",
                count=added,
                duration_ms=t.duration_ms(),
            )
        )
    return record


def process_plugin_file(path: str) -> Optional[PluginRecord]:
    """Reconcile one record file in place and return the updated record.

    Returns None when the file is skipped: wrong extension, a file that cannot
    be read, content that does not parse, or a record failing validation
    (e.g. missing ``coords``).
    """
    if not store.is_record_file(path):
        logger.info("Skipping non-YAML file: %s", path)
        return None

    logger.info("Processing plugin file: %s", path)
    try:
        data = store.load_mapping(path)
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        logger.warning("File %s could not be parsed as YAML, skipping: %s", path, exc)
        return None
    except OSError as exc:
        logger.warning("File %s could not be read, skipping: %s", path, exc)
        return None
    if not data:
        logger.warning("File %s could not be parsed as YAML, skipping", path)
        return None

    try:
        record = PluginRecord.from_mapping(data)
    except RecordValidationError as exc:
        logger.warning("Invalid record in %s, skipping: %s", path, exc)
        return None

    reconcile(record)
    store.restore_dates(record.versions, context=f"in {path}")
    store.save_record(path, record)
    return record
