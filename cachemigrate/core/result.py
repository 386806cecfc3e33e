"""Two-case outcome type used instead of exceptions for expected failures."""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from cachemigrate.core.exceptions import ResultAccessError

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

_MISSING: Any = object()


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a success carrying a value or a failure carrying a reason.

    Build instances with ``Result.ok`` and ``Result.err``. Reading the
    wrong arm raises ``ResultAccessError``, and a Result cannot be used
    in a boolean context; an ``Ok`` may legitimately hold ``None``,
    ``0`` or an empty dict.

    Example:
        >>> Result.ok(3).match(on_ok=lambda v: v + 1, on_err=len)
        4
    """

    _value: Any = _MISSING
    _reason: str | None = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        """Wrap a successful value."""
        return cls(_value=value)

    @classmethod
    def err(cls, reason: str) -> "Result[T]":
        """Wrap a failure reason."""
        if not isinstance(reason, str):
            raise TypeError(f"Result.err reason must be a str, got {type(reason).__name__}")
        return cls(_reason=reason)

    def is_ok(self) -> bool:
        return self._reason is None

    def is_err(self) -> bool:
        return self._reason is not None

    @property
    def value(self) -> T:
        """The wrapped value.

        Raises:
            ResultAccessError: If this is an Err
        """
        if self._reason is not None:
            raise ResultAccessError(
                f"Cannot read value of Err result ({self._reason})"
            )
        return self._value

    @property
    def reason(self) -> str:
        """The failure reason.

        Raises:
            ResultAccessError: If this is an Ok
        """
        if self._reason is None:
            raise ResultAccessError("Cannot read reason of Ok result")
        return self._reason

    def match(
        self,
        on_ok: Callable[[T], R],
        on_err: Callable[[str], R],
    ) -> R:
        """Dispatch to exactly one handler depending on the arm."""
        if self._reason is None:
            return on_ok(self._value)
        return on_err(self._reason)

    def map(self, func: Callable[[T], U]) -> "Result[U]":
        """Transform the value of an Ok, pass an Err through."""
        if self._reason is None:
            return Result.ok(func(self._value))
        return Result.err(self._reason)

    def unwrap_or(self, default: T) -> T:
        """Return the value of an Ok, or ``default`` for an Err."""
        if self._reason is None:
            return self._value
        return default

    def __bool__(self) -> bool:
        raise TypeError(
            "Result has no truth value; use is_ok(), is_err() or match()"
        )

    def __repr__(self) -> str:
        if self._reason is None:
            return f"Ok({self._value!r})"
        return f"Err({self._reason!r})"
