"""Reading the compatibility declaration embedded in a plugin archive.

A Grails plugin jar ships ``META-INF/grails-plugin.xml``; Grails 2 zips ship
``plugin.xml`` at the root. Either declares the supported host range as::

    <plugin grailsVersion="6.0.0 > *"> ... </plugin>

or as a nested element::

    <plugin><grailsVersion>6.0.0 &gt; *</grailsVersion></plugin>

The attribute form wins when both are present.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
import zipfile
import zlib
from typing import Optional

from constants import Constants

logger = logging.getLogger(__name__)


def compatibility_from_xml(document: bytes) -> Optional[str]:
    """Extract the compatibility range from descriptor XML, or None."""
    root = ET.fromstring(document)
    name = Constants.COMPATIBILITY_ATTRIBUTE

    attr_value = (root.get(name) or "").strip()
    if attr_value:
        return attr_value

    elem = root.find(name)
    if elem is not None and elem.text and elem.text.strip():
        return elem.text.strip()
    return None


def read_compatibility(archive_path: str, *, source: str = "") -> Optional[str]:
    """Open a downloaded archive and return its declared compatibility range.

    A corrupt archive, a missing descriptor, malformed descriptor XML and a
    descriptor without a compatibility value all yield None.
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            names = set(archive.namelist())
            entry = next((p for p in Constants.DESCRIPTOR_PATHS if p in names), None)
            if entry is None:
                logger.debug("No plugin descriptor in %s", source or archive_path)
                return None
            document = archive.read(entry)
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError, OSError) as exc:
        logger.warning("Invalid Zip file at %s : %s", source or archive_path, exc)
        return None

    try:
        return compatibility_from_xml(document)
    except ET.ParseError as exc:
        logger.warning("Malformed %s in %s: %s", entry, source or archive_path, exc)
        return None
