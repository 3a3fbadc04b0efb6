"""Version text parsing and ordering utilities."""

import functools
import re
from typing import Callable, List, Optional, Tuple, TypeVar

from .models import InvalidVersionFormat, ModifierKind, Version, VersionModifier

T = TypeVar("T")

# Matches: 1.2.3, 1.2, 1.2.3-RC1, 1.2.3-M1, 1.2.3.RC1, 1.2.3-SNAPSHOT etc.
VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?(?:[.-](.+))?\Z", re.ASCII)

_SNAPSHOT_QUALIFIERS = ("SNAPSHOT", "BUILD-SNAPSHOT")

# Numbered qualifiers; matched against the whole qualifier, case-sensitive
_NUMBERED_QUALIFIERS: Tuple[Tuple[re.Pattern, ModifierKind], ...] = (
    (re.compile(r"M(\d+)", re.ASCII), ModifierKind.MILESTONE),
    (re.compile(r"RC(\d+)", re.ASCII), ModifierKind.RELEASE_CANDIDATE),
    (re.compile(r"ALPHA(\d+)", re.ASCII), ModifierKind.ALPHA),
    (re.compile(r"BETA(\d+)", re.ASCII), ModifierKind.BETA),
)


def parse_modifier(qualifier: Optional[str]) -> Optional[VersionModifier]:
    """Classify a qualifier; unrecognized text yields None rather than an error."""
    if not qualifier:
        return None
    if qualifier in _SNAPSHOT_QUALIFIERS:
        return VersionModifier(kind=ModifierKind.SNAPSHOT, number=None, text=qualifier)
    for pattern, kind in _NUMBERED_QUALIFIERS:
        m = pattern.fullmatch(qualifier)
        if m:
            return VersionModifier(kind=kind, number=int(m.group(1)), text=qualifier)
    return None


def parse_version(text: str) -> Version:
    """Parse version text into a ``Version``.

    Raises:
        InvalidVersionFormat: if ``text`` is not a string or does not match
            ``<major>.<minor>[.<patch>][<sep><qualifier>]``.
    """
    if not isinstance(text, str):
        raise InvalidVersionFormat(f"Version string must be text, got {type(text).__name__}")
    m = VERSION_PATTERN.match(text)
    if not m:
        raise InvalidVersionFormat(f"Invalid version format: {text}")

    patch = m.group(3)
    return Version(
        major=int(m.group(1)),
        minor=int(m.group(2)),
        patch=int(patch) if patch else 0,
        modifier=parse_modifier(m.group(4)),
        text=text,
    )


def try_parse_version(text: str) -> Optional[Version]:
    """Like ``parse_version`` but returns None for unparsable text."""
    try:
        return parse_version(text)
    except InvalidVersionFormat:
        return None


def is_snapshot(text: str) -> bool:
    """Return True when ``text`` names a snapshot build.

    Falls back to a case-insensitive substring check when the text does not
    even parse as a version.
    """
    version = try_parse_version(text)
    if version is not None:
        return version.is_snapshot
    return isinstance(text, str) and "snapshot" in text.lower()


def compare_versions(a: Version, b: Version) -> int:
    """Three-way comparison of two parsed versions."""
    return a.compare(b)


def sort_descending(items: List[T], version_of: Callable[[T], str]) -> Tuple[List[T], List[T]]:
    """Sort ``items`` newest first by the version text ``version_of`` returns.

    Returns ``(sorted_items, unparsable_items)``; items whose text does not
    parse keep their relative order and are not part of ``sorted_items``.
    The sort is stable, so items with identical text keep their order.
    """
    parsed: List[Tuple[Version, T]] = []
    unparsable: List[T] = []
    for item in items:
        version = try_parse_version(version_of(item))
        if version is None:
            unparsable.append(item)
        else:
            parsed.append((version, item))

    parsed.sort(key=functools.cmp_to_key(lambda x, y: compare_versions(y[0], x[0])))
    return [item for _, item in parsed], unparsable
