"""Migration runner for cachemigrate."""

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from cachemigrate.core.result import Result
from cachemigrate.core.version import Version
from cachemigrate.migrations.base import MigrationStep, MigrationTable

logger = logging.getLogger(__name__)

NO_CACHE = "no cache"


class MigrationState(str, Enum):
    """States of a single migration run."""

    RUNNING = "running"
    STALLED = "stalled"
    FAILED = "failed"


class LookupMode(str, Enum):
    """How the runner finds the next step for a version.

    EXACT only considers a step registered for the blob's own version.
    SUCCESSOR additionally tries the version's patch, minor and major
    successors, in that order, when there is no exact match.
    """

    EXACT = "exact"
    SUCCESSOR = "successor"


@dataclass(frozen=True)
class MigrationOutcome:
    """The result of a run that reached the stalled state.

    Attributes:
        blob: The last-known-good blob
        applied: Steps applied, in order
        latest: Newest version known to the table
    """

    blob: dict
    applied: tuple[MigrationStep, ...] = ()
    latest: Version | None = None
    state: MigrationState = field(default=MigrationState.STALLED)

    @property
    def version(self) -> str:
        return self.blob["version"]

    @property
    def changed(self) -> bool:
        return len(self.applied) > 0

    @property
    def complete(self) -> bool:
        """Whether the blob ended at the table's newest version.

        A table with no steps has nothing to migrate to, so any blob
        counts as complete.
        """
        if self.latest is None:
            return True
        parsed = Version.parse(self.blob["version"])
        return parsed.is_ok() and parsed.value == self.latest


class MigrationRunner:
    """Walks cached blobs forward through a migration table.

    The table is never modified. Each call to ``run`` tracks its own set
    of remaining source versions, so a step is applied at most once per
    run and a run takes at most ``len(table)`` steps even if a step maps
    a version back onto itself or an earlier one.
    """

    def __init__(
        self,
        table: MigrationTable,
        lookup: LookupMode | str = LookupMode.EXACT,
    ):
        """Initialize the runner.

        Args:
            table: The migration steps to apply
            lookup: Step lookup mode, see LookupMode
        """
        self.table = table
        self.lookup = LookupMode(lookup)

    def _find_step(
        self,
        version: Version,
        remaining: set[Version],
    ) -> MigrationStep | None:
        if version in remaining:
            return self.table.get(version)

        if self.lookup is LookupMode.SUCCESSOR:
            for candidate in version.successors():
                if candidate in remaining:
                    return self.table.get(candidate)

        return None

    def initial_state(self, blob: object) -> MigrationState:
        """Classify a blob before any step is applied."""
        if blob is None or not isinstance(blob, Mapping):
            return MigrationState.FAILED
        parsed = Version.parse(blob.get("version"))
        if parsed.is_err():
            return MigrationState.FAILED
        if self._find_step(parsed.value, set(self.table.sources)) is None:
            return MigrationState.STALLED
        return MigrationState.RUNNING

    def run(self, blob: object) -> Result[MigrationOutcome]:
        """Migrate a blob as far as the table allows.

        Args:
            blob: The parsed cache, normally a dict with a "version" key

        Returns:
            Ok(MigrationOutcome) once no further step applies, or
            Err(reason) when the blob is missing, has no version, or its
            version does not parse

        Raises:
            MigrationTransformError: If a registered step fails
        """
        if blob is None or not isinstance(blob, Mapping):
            logger.info("No cache to migrate")
            return Result.err(NO_CACHE)

        raw_version = blob.get("version")
        if raw_version is None:
            logger.info("Cache has no version field")
            return Result.err(NO_CACHE)

        parsed = Version.parse(raw_version)
        if parsed.is_err():
            logger.warning(f"Cannot migrate cache: {parsed.reason}")
            return Result.err(parsed.reason)

        # Steps may rewrite nested values in place; keep them off the caller's blob
        current = copy.deepcopy(dict(blob))
        version = parsed.value
        remaining = set(self.table.sources)
        applied: list[MigrationStep] = []

        while True:
            step = self._find_step(version, remaining)
            if step is None:
                break

            remaining.discard(step.source)
            current = step.apply(current)
            applied.append(step)
            version = step.target
            logger.debug(f"Applied migration {step}")

        outcome = MigrationOutcome(
            blob=current,
            applied=tuple(applied),
            latest=self.table.latest,
        )
        if not outcome.complete:
            logger.info(
                f"Migration stalled at {version} (latest is {self.table.latest})"
            )
        return Result.ok(outcome)

    def migrate(self, blob: object) -> dict | None:
        """Return the migrated blob, or None when there is no usable cache."""
        return self.run(blob).match(
            on_ok=lambda outcome: outcome.blob,
            on_err=lambda reason: None,
        )
