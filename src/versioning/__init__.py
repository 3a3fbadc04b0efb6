"""Version parsing and ordering for plugin releases."""

from .models import InvalidVersionFormat, ModifierKind, Version, VersionModifier
from .parser import compare_versions, is_snapshot, parse_version, sort_descending, try_parse_version

__all__ = [
    "InvalidVersionFormat",
    "ModifierKind",
    "Version",
    "VersionModifier",
    "compare_versions",
    "is_snapshot",
    "parse_version",
    "sort_descending",
    "try_parse_version",
]
