"""Built-in blob operations that migration steps are composed from."""

from dataclasses import dataclass
from typing import Any, Callable

from cachemigrate.migrations.base import BlobOperation


@dataclass(frozen=True)
class AddField(BlobOperation):
    """Add a field if it is not already present.

    Example:
        AddField("user", default=None)
        AddField("tags", default_factory=list)
    """

    field_name: str
    default: Any = None
    default_factory: Callable[[], Any] | None = None

    def apply(self, data: dict) -> dict:
        result = data.copy()
        if self.field_name not in result:
            if self.default_factory is not None:
                result[self.field_name] = self.default_factory()
            else:
                result[self.field_name] = self.default
        return result


@dataclass(frozen=True)
class RemoveField(BlobOperation):
    """Drop a field that the current shape no longer carries.

    Example:
        RemoveField("posts")
    """

    field_name: str

    def apply(self, data: dict) -> dict:
        result = data.copy()
        result.pop(self.field_name, None)
        return result


@dataclass(frozen=True)
class RenameField(BlobOperation):
    """Move a field's value to a new name.

    Example:
        RenameField("previews", "postPreviews")
    """

    old_name: str
    new_name: str

    def apply(self, data: dict) -> dict:
        result = data.copy()
        if self.old_name in result:
            result[self.new_name] = result.pop(self.old_name)
        return result


@dataclass(frozen=True)
class TransformField(BlobOperation):
    """Rewrite a field's value in place; absent fields are left absent.

    Example:
        TransformField("theme", lambda theme: theme.lower())
    """

    field_name: str
    func: Callable[[Any], Any]

    def apply(self, data: dict) -> dict:
        result = data.copy()
        if self.field_name in result:
            result[self.field_name] = self.func(result[self.field_name])
        return result
