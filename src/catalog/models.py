"""Typed plugin records as stored in the YAML catalog."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from registry.maven.coordinates import Coordinates, InvalidCoordinates

# Whatever a record file may hold in a ``date`` field before restoration
DateValue = Union[datetime, date, str]


class RecordValidationError(ValueError):
    """Raised when a record field-map does not fit the plugin record schema."""


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise RecordValidationError(f"'{key}' must be text, got {type(value).__name__}")


def _str_list(data: Mapping[str, Any], key: str) -> Optional[List[str]]:
    if key not in data:
        return None
    value = data[key]
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise RecordValidationError(f"'{key}' must be a list, got {type(value).__name__}")
    return [str(item) for item in value]


@dataclass
class VersionEntry:
    """One published version of a plugin. Never modified once written."""
    version: str
    date: Optional[DateValue] = None
    grails_version: Optional[str] = None
    coords: Optional[str] = None
    maven_repo: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    KNOWN_KEYS = ("version", "date", "grailsVersion", "coords", "maven-repo")

    @classmethod
    def from_mapping(cls, data: Any) -> "VersionEntry":
        if not isinstance(data, Mapping):
            raise RecordValidationError(f"version entry must be a mapping, got {type(data).__name__}")
        version = data.get("version")
        if version is None or (isinstance(version, str) and not version.strip()):
            raise RecordValidationError("version entry has no 'version'")
        raw_date = data.get("date")
        if raw_date is not None and not isinstance(raw_date, (datetime, date, str)):
            raise RecordValidationError(f"'date' of {version} must be a timestamp or text")
        return cls(
            version=str(version),
            date=raw_date,
            grails_version=_optional_str(data, "grailsVersion"),
            coords=_optional_str(data, "coords"),
            maven_repo=_optional_str(data, "maven-repo"),
            extra={k: v for k, v in data.items() if k not in cls.KNOWN_KEYS},
        )

    def to_mapping(self) -> Dict[str, Any]:
        """Field-map in canonical key order; absent values are omitted."""
        out: Dict[str, Any] = {"version": self.version}
        for key, value in (
            ("date", self.date),
            ("grailsVersion", self.grails_version),
            ("coords", self.coords),
            ("maven-repo", self.maven_repo),
        ):
            if value is not None:
                out[key] = value
        out.update(self.extra)
        return out


@dataclass
class PluginRecord:
    """A curated plugin entry and its known versions, newest first."""
    coords: Coordinates
    name: Optional[str] = None
    desc: Optional[str] = None
    owner: Optional[str] = None
    vcs: Optional[str] = None
    docs: Optional[str] = None
    maven_repo: Optional[str] = None
    # None when the source record has no such key
    labels: Optional[List[str]] = None
    licenses: Optional[List[str]] = None
    deprecated: Any = None
    versions: List[VersionEntry] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    KNOWN_KEYS = (
        "name", "desc", "coords", "owner", "vcs", "docs", "maven-repo",
        "labels", "licenses", "deprecated", "versions",
    )

    @classmethod
    def from_mapping(cls, data: Any) -> "PluginRecord":
        """Validate a loaded field-map and build a record from it.

        Raises:
            RecordValidationError: missing or malformed ``coords``, or a field
                of the wrong shape.
        """
        if not isinstance(data, Mapping):
            raise RecordValidationError(f"record must be a mapping, got {type(data).__name__}")
        raw_coords = data.get("coords")
        if not raw_coords:
            raise RecordValidationError("record has no 'coords'")
        try:
            coords = Coordinates.parse(raw_coords)
        except InvalidCoordinates as exc:
            raise RecordValidationError(str(exc)) from exc

        raw_versions = data.get("versions")
        if raw_versions is None:
            raw_versions = []
        if not isinstance(raw_versions, list):
            raise RecordValidationError("'versions' must be a list")

        return cls(
            coords=coords,
            name=_optional_str(data, "name"),
            desc=_optional_str(data, "desc"),
            owner=_optional_str(data, "owner"),
            vcs=_optional_str(data, "vcs"),
            docs=_optional_str(data, "docs"),
            maven_repo=_optional_str(data, "maven-repo"),
            labels=_str_list(data, "labels"),
            licenses=_str_list(data, "licenses"),
            deprecated=data.get("deprecated"),
            versions=[VersionEntry.from_mapping(v) for v in raw_versions],
            extra={k: v for k, v in data.items() if k not in cls.KNOWN_KEYS},
        )

    def to_mapping(self) -> Dict[str, Any]:
        """Field-map in canonical key order, as written to disk and to the index."""
        out: Dict[str, Any] = {}
        for key, value in (
            ("name", self.name),
            ("desc", self.desc),
            ("coords", str(self.coords)),
            ("owner", self.owner),
            ("vcs", self.vcs),
            ("docs", self.docs),
            ("maven-repo", self.maven_repo),
        ):
            if value is not None:
                out[key] = value
        if self.labels is not None:
            out["labels"] = list(self.labels)
        if self.licenses is not None:
            out["licenses"] = list(self.licenses)
        if self.deprecated is not None:
            out["deprecated"] = self.deprecated
        out["versions"] = [v.to_mapping() for v in self.versions]
        out.update(self.extra)
        return out

    def has_version(self, text: str) -> bool:
        return any(entry.version == text for entry in self.versions)
