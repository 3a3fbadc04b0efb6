"""Maven coordinates and repository path helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class InvalidCoordinates(ValueError):
    """Raised when text is not a ``groupId:artifactId[:version]`` triple."""


@dataclass(frozen=True)
class Coordinates:
    """A (groupId, artifactId) pair; ``text`` keeps the form it was read from."""
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    text: str = ""

    @classmethod
    def parse(cls, text: str) -> "Coordinates":
        """Parse ``groupId:artifactId[:version]``.

        Raises:
            InvalidCoordinates: when either of the first two parts is missing.
        """
        if not isinstance(text, str):
            raise InvalidCoordinates(f"Coordinates must be text, got {type(text).__name__}")
        parts = [p.strip() for p in text.strip().split(":")]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise InvalidCoordinates(f"Invalid coords '{text}'")
        version = parts[2] if len(parts) > 2 and parts[2] else None
        return cls(group_id=parts[0], artifact_id=parts[1], version=version, text=text)

    @property
    def group_path(self) -> str:
        return self.group_id.replace(".", "/")

    def __str__(self) -> str:
        return self.text or f"{self.group_id}:{self.artifact_id}"


def repository_base(maven_repo: str) -> str:
    """Drop a trailing separator so paths can be joined with a single '/'."""
    if maven_repo.endswith("/"):
        return maven_repo[:-1]
    return maven_repo


def artifact_dir_url(maven_repo: str, coords: Coordinates) -> str:
    """URL of the directory holding every published version of ``coords``."""
    return f"{repository_base(maven_repo)}/{coords.group_path}/{coords.artifact_id}"
