"""Pipeline context (the per-query stash) for carrying state through steps."""

from typing import Any, Dict
from dataclasses import dataclass, field

from ..errors import FieldAlreadySetError, MissingFieldError


@dataclass(frozen=True)
class ContextKey:
    """Type-safe context key identifier."""

    name: str

    def __str__(self) -> str:
        return self.name


_MISSING = object()


@dataclass
class PipelineContext:
    """
    Mutable context owned by a single pipeline run.

    Holds the query text the run was started with (read-only) and the
    stash of fields written by earlier steps. Fields are write-once:
    a step may not replace a value another step produced.
    """

    query: str
    _data: Dict[str, Any] = field(default_factory=dict)
    _metadata: Dict[str, Any] = field(default_factory=dict)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "query" and "query" in self.__dict__:
            raise AttributeError("query is immutable once the pipeline starts")
        super().__setattr__(name, value)

    def get(self, key: ContextKey, default: Any = _MISSING) -> Any:
        """
        Get value from context.

        Raises:
            MissingFieldError: If the field is absent and no default was given
        """
        if str(key) in self._data:
            return self._data[str(key)]
        if default is _MISSING:
            raise MissingFieldError(str(key))
        return default

    def set(self, key: ContextKey, value: Any, overwrite: bool = False) -> None:
        """
        Set a field in the stash.

        Raises:
            FieldAlreadySetError: If the field already holds a value and
                ``overwrite`` is False
        """
        if not overwrite and str(key) in self._data:
            raise FieldAlreadySetError(f"context field '{key}' is already set")
        self._data[str(key)] = value

    def has(self, key: ContextKey) -> bool:
        """Check if key exists in context."""
        return str(key) in self._data

    def keys(self) -> list[str]:
        """Get all data keys, in write order."""
        return list(self._data.keys())

    def get_metadata(self, key: str, default: Any = None) -> Any:
        """Get metadata value (for internal pipeline use)."""
        return self._metadata.get(key, default)

    def set_metadata(self, key: str, value: Any) -> None:
        self._metadata[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dict (for logging and debugging)."""
        return {
            "query": self.query,
            "data": self._data.copy(),
            "metadata": self._metadata.copy(),
        }
