"""Symbolic states observed while polling, and their classification."""

from __future__ import annotations

from collections.abc import Collection
from enum import Enum


class PermissionState(str, Enum):
    """Whether an account holds create-volume permission on a snapshot."""

    GRANTED = "granted"
    DENIED = "denied"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class AssociationState(str, Enum):
    """Whether an Elastic IP association is visible."""

    ATTACHED = "attached"
    DETACHED = "detached"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class Verdict(Enum):
    """What the poller should do with an observed state."""

    TARGET = "target"
    PENDING = "pending"
    UNEXPECTED = "unexpected"


def classify[S](state: S, pending: Collection[S], target: Collection[S]) -> Verdict:
    """Classify a state against the pending and target sets."""
    if state in target:
        return Verdict.TARGET
    if state in pending:
        return Verdict.PENDING
    return Verdict.UNEXPECTED
