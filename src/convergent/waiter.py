"""Poll-until-converged engine.

A mutating EC2 call is only visible to the read APIs after some propagation
delay. ``wait_for_state`` repeatedly calls a refresh function, classifies the
state it reports and blocks until a target state is seen, the timeout passes,
an unexpected state shows up, or the caller cancels.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Collection
from typing import Any

from pydantic import BaseModel, Field, model_validator

from .errors import Cancelled, RefreshError, UnexpectedState, WaitTimeout
from .states import Verdict, classify

logger = logging.getLogger(__name__)

BASE_INTERVAL = 0.1
DEFAULT_MAX_INTERVAL = 10.0


class PollSpec(BaseModel):
    """Everything needed to drive one refresh function to convergence."""

    model_config = {"arbitrary_types_allowed": True}

    refresh: Callable[[], tuple[Any, Any]]
    pending: frozenset[Any] = Field(default_factory=frozenset)
    target: frozenset[Any]
    timeout: float = Field(gt=0)
    delay: float = Field(default=0.0, ge=0)
    min_interval: float = Field(default=0.0, ge=0)
    max_interval: float = Field(default=DEFAULT_MAX_INTERVAL, ge=0)
    description: str = "resource"

    @model_validator(mode="after")
    def check_states(self) -> PollSpec:
        if not self.target:
            raise ValueError("target states must not be empty")
        overlap = self.pending & self.target
        if overlap:
            names = ", ".join(sorted(str(s) for s in overlap))
            raise ValueError(f"states cannot be both pending and target: {names}")
        if self.max_interval < self.min_interval:
            self.max_interval = self.min_interval
        return self

    def interval(self, attempt: int) -> float:
        """Wait before the read following ``attempt`` reads (1-based)."""
        backoff = BASE_INTERVAL * (2 ** max(attempt - 1, 0))
        return max(self.min_interval, min(self.max_interval, backoff))


def wait_for_state(
    poll: PollSpec,
    *,
    cancel: threading.Event | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], bool] | None = None,
) -> Any:
    """Poll until a target state is observed and return its payload.

    ``sleep`` receives a duration in seconds and returns True if the wait was
    cancelled; it defaults to waiting on ``cancel``.

    Raises:
        RefreshError: if the refresh function raised.
        UnexpectedState: if a state outside both sets was observed.
        WaitTimeout: if the deadline passed while still pending.
        Cancelled: if ``cancel`` was set.
    """
    cancel = cancel if cancel is not None else threading.Event()
    sleep = sleep if sleep is not None else cancel.wait
    description = poll.description

    deadline = clock() + poll.timeout
    last_state: Any = None

    def pause(seconds: float) -> None:
        seconds = min(seconds, max(deadline - clock(), 0.0))
        if seconds > 0 and sleep(seconds):
            raise Cancelled(description=description)
        if cancel.is_set():
            raise Cancelled(description=description)

    logger.debug(
        "Waiting for %s: pending=%s target=%s timeout=%.1fs",
        description,
        sorted(str(s) for s in poll.pending),
        sorted(str(s) for s in poll.target),
        poll.timeout,
    )

    pause(poll.delay)
    attempt = 0

    while True:
        if cancel.is_set():
            raise Cancelled(description=description)
        if clock() >= deadline:
            raise WaitTimeout(last_state, poll.timeout, description=description)

        try:
            payload, state = poll.refresh()
        except Exception as exc:
            raise RefreshError(exc, description=description) from exc

        attempt += 1
        last_state = state
        verdict = classify(state, poll.pending, poll.target)
        logger.debug("Poll %d for %s: %s (%s)", attempt, description, state, verdict.value)

        if verdict is Verdict.TARGET:
            return payload
        if verdict is Verdict.UNEXPECTED:
            raise UnexpectedState(state, payload, description=description)

        pause(poll.interval(attempt))


def await_convergence(
    refresh: Callable[[], tuple[Any, Any]],
    pending: Collection[Any],
    target: Collection[Any],
    *,
    timeout: float,
    delay: float = 0.0,
    min_interval: float = 0.0,
    max_interval: float = DEFAULT_MAX_INTERVAL,
    description: str = "resource",
    cancel: threading.Event | None = None,
) -> Any:
    """Wait for ``refresh`` to report one of ``target`` and return its payload."""
    poll = PollSpec(
        refresh=refresh,
        pending=frozenset(pending),
        target=frozenset(target),
        timeout=timeout,
        delay=delay,
        min_interval=min_interval,
        max_interval=max_interval,
        description=description,
    )
    return wait_for_state(poll, cancel=cancel)
