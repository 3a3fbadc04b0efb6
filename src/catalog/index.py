"""Walk the record tree, reconcile every record, and build the aggregate index."""
from __future__ import annotations

import logging
import os
from typing import Iterator, List

from .models import PluginRecord
from .reconciler import process_plugin_file
from .store import write_index

logger = logging.getLogger(__name__)


def iter_record_files(root_dir: str) -> Iterator[str]:
    """Yield every regular file below ``root_dir``, depth first, in sorted order.

    Dangling symlinks and other non-regular entries are skipped.
    """
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames.sort()
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if not os.path.isfile(path):
                logger.debug("Skipping non-regular file: %s", path)
                continue
            yield path


def build_index(root_dir: str) -> List[PluginRecord]:
    """Reconcile every record below ``root_dir``; skipped files are left out."""
    records: List[PluginRecord] = []
    for path in iter_record_files(root_dir):
        record = process_plugin_file(path)
        if record is not None:
            records.append(record)
    return records


def update_index(root_dir: str, index_path: str) -> int:
    """Full run: reconcile the tree and write the index. Returns the entry count."""
    records = build_index(root_dir)
    count = write_index(records, index_path)
    logger.info("Wrote index with %d entries to %s", count, index_path)
    return count
