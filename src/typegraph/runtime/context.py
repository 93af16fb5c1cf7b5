"""
Request context for graph resolution.

One RequestContext is created per request and threaded by reference through
every resolver call of that request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.errors import ResolverError

# Position of a node in the resolution tree (child / element indices)
NodePath = tuple[int, ...]


@dataclass
class RequestContext:
    """
    Per-request carrier passed to every resolver.

    Contains:
    - request: The inbound transport request (opaque to the engine)
    - state: Free-form values resolvers may share within one request
    - the error log of failed resolvers
    """
    request: Any = None
    state: dict[str, Any] = field(default_factory=dict)
    _failures: list[tuple[NodePath, ResolverError]] = field(default_factory=list, init=False, repr=False)

    def record_error(self, path: NodePath, error: ResolverError) -> None:
        """Append a failed resolver to the log."""
        self._failures.append((path, error))

    @property
    def failures(self) -> list[ResolverError]:
        """Failures ordered by position in the call tree, not by completion time."""
        return [error for _, error in sorted(self._failures, key=lambda item: item[0])]

    @property
    def errors(self) -> list[list[str]]:
        """Error log as [call_name, message] pairs."""
        return [[error.call_name, str(error)] for error in self.failures]

    @property
    def has_errors(self) -> bool:
        return bool(self._failures)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self.state.get(key, default)


@dataclass(frozen=True)
class ResolveInfo:
    """
    Single argument handed to resolver functions.

    Resolvers read `args` (validated call arguments, {} when none),
    `context` (the RequestContext) and `data` (the parent value).
    """
    args: dict[str, Any]
    context: RequestContext
    data: Any = None

    def __getitem__(self, key: str) -> Any:
        # Allows resolvers written as lambda info: info["data"]["id"]
        if key not in ("args", "context", "data"):
            raise KeyError(key)
        return getattr(self, key)
