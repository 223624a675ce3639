"""Exception hierarchy for locators, convergence waits and resource calls."""

from __future__ import annotations

from typing import Any


class ConvergentError(Exception):
    """Base class for all convergent errors."""


class MalformedLocator(ConvergentError, ValueError):
    """A composite resource identifier could not be decoded."""

    def __init__(self, value: str, expected: str) -> None:
        super().__init__(f"unexpected format of ID ({value!r}), expected {expected}")
        self.value = value
        self.expected = expected


# -- Wait Errors --


class WaitError(ConvergentError):
    """A convergence wait ended without reaching a target state."""

    def __init__(self, message: str, *, description: str = "resource") -> None:
        super().__init__(message)
        self.description = description


class RefreshError(WaitError):
    """The read against the remote system failed."""

    def __init__(self, cause: BaseException, *, description: str = "resource") -> None:
        super().__init__(f"error refreshing {description}: {cause}", description=description)
        self.cause = cause


class UnexpectedState(WaitError):
    """An observed state is neither pending nor target."""

    def __init__(self, state: Any, payload: Any = None, *, description: str = "resource") -> None:
        super().__init__(f"unexpected state '{state}' for {description}", description=description)
        self.state = state
        self.payload = payload


class WaitTimeout(WaitError, TimeoutError):
    """The deadline passed while the observed state was still pending."""

    def __init__(
        self,
        last_state: Any,
        timeout: float,
        *,
        description: str = "resource",
    ) -> None:
        super().__init__(
            f"timeout after {timeout:.1f}s waiting for {description} (last state: '{last_state}')",
            description=description,
        )
        self.last_state = last_state
        self.timeout = timeout


class Cancelled(WaitError):
    """The caller cancelled the wait."""

    def __init__(self, *, description: str = "resource") -> None:
        super().__init__(f"wait for {description} cancelled", description=description)


# -- Resource Errors --


class ResourceError(ConvergentError):
    """A mutating call or one of its preconditions failed."""


class ResourceNotFound(ResourceError):
    """The addressed remote resource does not exist."""
