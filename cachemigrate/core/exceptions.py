"""Custom exceptions for cachemigrate.

Input problems (a missing cache, a malformed version tag) are reported
through ``Result`` values and never raised. The exceptions here signal
defects in a migration table, misuse of a ``Result``, or an unusable
store, all of which should fail loudly.
"""


class CacheMigrateError(Exception):
    """Base exception for all cachemigrate errors."""

    def __init__(self, message: str, hint: str | None = None):
        """Initialize the exception.

        Args:
            message: The error message
            hint: Optional hint for resolving the error
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ResultAccessError(CacheMigrateError):
    """Raised when the wrong arm of a Result is read."""

    def __init__(self, message: str):
        super().__init__(
            message,
            "Check is_ok()/is_err() or use match() before reading a Result.",
        )


class InvalidMigrationError(CacheMigrateError):
    """Raised when a migration step is declared with an unusable version."""

    def __init__(self, version: object, reason: str):
        """Initialize the error.

        Args:
            version: The offending version value
            reason: Why the version was rejected
        """
        self.version = version
        super().__init__(
            f"Invalid migration version {version!r}: {reason}",
            "Migration versions must look like 'major.minor.patch'.",
        )


class DuplicateMigrationError(CacheMigrateError):
    """Raised when two steps claim the same source version."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(
            f"A migration from version '{source}' is already registered",
            "Each source version may have exactly one migration step.",
        )


class MigrationTransformError(CacheMigrateError):
    """Raised when a registered step fails while transforming a blob.

    This is a defect in the migration table rather than bad input data,
    so it always propagates to the caller.
    """

    def __init__(
        self,
        source: str,
        target: str,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the transform error.

        Args:
            source: Source version of the failing step
            target: Target version of the failing step
            message: Custom error message (optional)
            original_error: The exception raised by the step, if any
        """
        self.source = source
        self.target = target
        self.original_error = original_error

        if message is None:
            if original_error is not None:
                message = (
                    f"Migration {source} -> {target} failed: {original_error}"
                )
            else:
                message = f"Migration {source} -> {target} failed"

        super().__init__(
            message,
            "Fix the migration step; stored data was not modified.",
        )


class CacheStoreError(CacheMigrateError):
    """Raised when a cache store cannot be read or written."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the store error.

        Args:
            message: The error message
            path: Location of the backing store, if any
            original_error: The original exception
        """
        self.path = path
        self.original_error = original_error

        hint = None
        if isinstance(original_error, PermissionError):
            hint = f"Check file permissions for '{path}'."
        elif isinstance(original_error, IsADirectoryError):
            hint = f"'{path}' is a directory; point the store at a file."

        super().__init__(message, hint)
