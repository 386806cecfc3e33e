"""Semantic version tags embedded in cached blobs."""

import re
import sys
from dataclasses import dataclass

from cachemigrate.core.result import Result

_VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)", re.ASCII)

# Largest value a single version component may take.
MAX_COMPONENT = sys.maxsize
_MAX_DIGITS = len(str(MAX_COMPONENT))


@dataclass(frozen=True, order=True)
class Version:
    """An immutable ``major.minor.patch`` triple.

    Equality and ordering are structural on the integers, so
    ``0.0.9 < 0.0.10`` holds even though the strings sort the other way.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self):
        for name in ("major", "minor", "patch"):
            component = getattr(self, name)
            if isinstance(component, bool) or not isinstance(component, int):
                raise TypeError(f"Version {name} must be an int")
            if component < 0:
                raise ValueError(f"Version {name} must be non-negative")

    @classmethod
    def parse(cls, text: object) -> Result["Version"]:
        """Parse a canonical version string.

        Args:
            text: The value to parse, normally a string like ``"0.0.28"``

        Returns:
            Ok(Version) on success, Err(reason) if the value is not a
            three-part dotted string of non-negative integers that fit
            the component range
        """
        if not isinstance(text, str):
            return Result.err(
                f"version must be a string, got {type(text).__name__}"
            )

        match = _VERSION_RE.fullmatch(text)
        if match is None:
            return Result.err(f"malformed version string {text!r}")

        groups = match.groups()
        # int() refuses very long digit strings, so check length first
        if any(len(group.lstrip("0")) > _MAX_DIGITS for group in groups):
            return Result.err(f"version component out of range in {text!r}")

        parts = [int(group) for group in groups]
        if any(part > MAX_COMPONENT for part in parts):
            return Result.err(f"version component out of range in {text!r}")

        return Result.ok(cls(*parts))

    def successors(self) -> list["Version"]:
        """Candidate next versions: patch bump, minor bump, major bump."""
        return [
            Version(self.major, self.minor, self.patch + 1),
            Version(self.major, self.minor + 1, 0),
            Version(self.major + 1, 0, 0),
        ]

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
