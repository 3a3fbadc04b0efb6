"""Data models for plugin version parsing and ordering."""

import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class InvalidVersionFormat(ValueError):
    """Raised when text does not look like ``<major>.<minor>[.<patch>][<sep><qualifier>]``."""


class ModifierKind(Enum):
    """Pre-release qualifier kinds; ``rank`` gives their ascending order."""
    SNAPSHOT = "snapshot"
    ALPHA = "alpha"
    BETA = "beta"
    MILESTONE = "milestone"
    RELEASE_CANDIDATE = "release-candidate"

    @property
    def rank(self) -> int:
        """Position in the fixed order snapshot < alpha < beta < milestone < RC."""
        return _KIND_RANK[self]


_KIND_RANK = {kind: idx for idx, kind in enumerate(ModifierKind)}


@dataclass(frozen=True)
class VersionModifier:
    """A recognized pre-release qualifier such as ``RC2`` or ``BUILD-SNAPSHOT``."""
    kind: ModifierKind
    number: Optional[int]  # None only for snapshots
    text: str

    @property
    def is_snapshot(self) -> bool:
        return self.kind is ModifierKind.SNAPSHOT

    def compare(self, other: "VersionModifier") -> int:
        """Order by kind rank, then by numeric suffix within the same kind."""
        if self.kind.rank != other.kind.rank:
            return -1 if self.kind.rank < other.kind.rank else 1
        mine, theirs = self.number or 0, other.number or 0
        return (mine > theirs) - (mine < theirs)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A parsed version; ``text`` is the verbatim source string.

    Comparison follows ``compare_versions``: numeric triple first, then final
    releases above pre-releases, then modifier order, then raw text.
    """
    major: int
    minor: int
    patch: int = 0
    modifier: Optional[VersionModifier] = None
    text: str = field(default="", compare=False)

    @property
    def has_modifier(self) -> bool:
        return self.modifier is not None

    @property
    def is_snapshot(self) -> bool:
        # Some repositories publish non-standard snapshot tags, e.g. "1.0-mysnapshot"
        if self.modifier is not None and self.modifier.is_snapshot:
            return True
        return "snapshot" in self.text.lower()

    def compare(self, other: "Version") -> int:
        """Return -1, 0 or 1 as this version sorts before, with, or after ``other``."""
        for mine, theirs in (
            (self.major, other.major),
            (self.minor, other.minor),
            (self.patch, other.patch),
        ):
            if mine != theirs:
                return -1 if mine < theirs else 1

        if self.has_modifier and not other.has_modifier:
            return -1
        if not self.has_modifier and other.has_modifier:
            return 1
        if self.modifier is not None and other.modifier is not None:
            cmp = self.modifier.compare(other.modifier)
            if cmp != 0:
                return cmp

        return (self.text > other.text) - (self.text < other.text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text
