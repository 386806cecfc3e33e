"""Base classes for cachemigrate migrations."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Union

from cachemigrate.core.exceptions import (
    DuplicateMigrationError,
    InvalidMigrationError,
    MigrationTransformError,
)
from cachemigrate.core.version import Version


@dataclass(frozen=True)
class BlobOperation(ABC):
    """Base class for a single rewrite of a cached blob.

    Operations never mutate their input; they return a new dict.
    """

    @abstractmethod
    def apply(self, data: dict) -> dict:
        """Apply the transformation.

        Args:
            data: The blob to transform

        Returns:
            Transformed copy of the blob
        """
        pass

    def __call__(self, data: dict) -> dict:
        return self.apply(data)


Transform = Union[BlobOperation, Callable[[dict], dict]]


def _require_version(value: str | Version) -> Version:
    if isinstance(value, Version):
        return value
    parsed = Version.parse(value)
    if parsed.is_err():
        raise InvalidMigrationError(value, parsed.reason)
    return parsed.value


@dataclass(frozen=True)
class MigrationStep:
    """A transform taking a blob from one exact version to its target.

    Attributes:
        source: Version the step applies to
        target: Version stamped on the output
        operations: Transforms applied in order before stamping
        description: Human-readable summary of the shape change
    """

    source: Version
    target: Version
    operations: tuple[Transform, ...] = ()
    description: str = ""

    def apply(self, data: dict) -> dict:
        """Run every operation on a copy of ``data`` and stamp the target.

        Raises:
            MigrationTransformError: If an operation raises or returns
                something other than a mapping
        """
        result = dict(data)
        for op in self.operations:
            try:
                result = op(result)
            except Exception as e:
                raise MigrationTransformError(
                    str(self.source), str(self.target), original_error=e
                ) from e
            if not isinstance(result, Mapping):
                raise MigrationTransformError(
                    str(self.source),
                    str(self.target),
                    message=(
                        f"Migration {self.source} -> {self.target} produced "
                        f"{type(result).__name__} instead of a mapping"
                    ),
                )
            result = dict(result)
        result["version"] = str(self.target)
        return result

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"


def migration(
    source: str | Version,
    target: str | Version,
    *operations: Transform,
    description: str = "",
) -> MigrationStep:
    """Declare a migration step from version strings.

    Example:
        migration("0.0.27", "0.0.28", AddField("user", default=None))

    Raises:
        InvalidMigrationError: If either version does not parse
    """
    return MigrationStep(
        source=_require_version(source),
        target=_require_version(target),
        operations=tuple(operations),
        description=description,
    )


@dataclass(frozen=True)
class MigrationTable:
    """An immutable set of migration steps keyed by source version.

    Registration order does not matter: each source version maps to
    exactly one step and lookups are by structural version equality.
    """

    _steps: Mapping[Version, MigrationStep] = field(default_factory=dict)

    @classmethod
    def of(cls, steps: Iterable[MigrationStep]) -> "MigrationTable":
        """Build a table from steps.

        A second step for an already registered source version is an
        error rather than silently replacing the first one, so which
        step runs never depends on the order steps were declared in.

        Raises:
            DuplicateMigrationError: If two steps share a source version
        """
        by_source: dict[Version, MigrationStep] = {}
        for step in steps:
            if step.source in by_source:
                raise DuplicateMigrationError(str(step.source))
            by_source[step.source] = step
        return cls(_steps=dict(sorted(by_source.items())))

    def with_step(self, step: MigrationStep) -> "MigrationTable":
        """Return a new table with ``step`` added."""
        return MigrationTable.of([*self._steps.values(), step])

    def get(self, version: Version) -> MigrationStep | None:
        return self._steps.get(version)

    @property
    def sources(self) -> frozenset[Version]:
        return frozenset(self._steps)

    @property
    def latest(self) -> Version | None:
        """Newest version any step migrates to."""
        if not self._steps:
            return None
        return max(step.target for step in self._steps.values())

    def __contains__(self, version: object) -> bool:
        return version in self._steps

    def __iter__(self) -> Iterator[MigrationStep]:
        return iter(self._steps.values())

    def __len__(self) -> int:
        return len(self._steps)
