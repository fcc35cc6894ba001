# snippet_autocompleter/core/results.py
"""
Error taxonomy and the result value returned across the host boundary.

Host calls (document edits, cursor moves, callback registration) can fail in
ways the engine does not control. They are wrapped by `guarded_call`, which
turns a raised exception into a failed `Result` carrying a typed error, so the
dispatch thread never sees an unexpected exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

logger = logging.getLogger(__name__)


class AutocompleteError(Exception):
    """Base class for every failure the engine reports."""


class HostUnavailable(AutocompleteError):
    """The editor host or its completion API is missing; run in fallback mode."""


class RegistrationFailure(AutocompleteError):
    """The host rejected callback registration."""


class InsertionFailure(AutocompleteError):
    """The atomic text edit failed."""


class ValidationFailure(AutocompleteError):
    """A snippet record is malformed or collides with an existing name."""


class CursorPlacementFailure(AutocompleteError):
    """The navigator could not move the cursor to a tab stop."""


@dataclass(frozen=True)
class Result:
    """
    Outcome of an operation that may be rejected.

    ok=False with error=None is a non-error refusal (e.g. no previous stop);
    ok=False with an error means something was attempted and failed.
    """

    ok: bool
    reason: str = ""
    error: Optional[AutocompleteError] = None
    value: Any = None

    @classmethod
    def success(cls, value: Any = None, reason: str = "") -> "Result":
        return cls(True, reason, None, value)

    @classmethod
    def failure(cls, reason: str, error: Optional[AutocompleteError] = None) -> "Result":
        return cls(False, reason, error)

    def __bool__(self) -> bool:
        return self.ok


def guarded_call(fn: Callable[..., Any], *args: Any,
                 error_type: Type[AutocompleteError] = AutocompleteError,
                 **kwargs: Any) -> Result:
    """Call a host function; any exception becomes a failed Result of `error_type`."""
    try:
        return Result.success(fn(*args, **kwargs))
    except Exception as e:
        reason = f"{getattr(fn, '__name__', 'host call')} failed: {e}"
        logger.warning(reason)
        return Result.failure(reason, error_type(reason))
