"""SpecOp strategies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .context import Context
from .spec import Specification

logger = logging.getLogger(__name__)


class SpecOp[P](ABC):
    """Wraps a Specification with conditional execution logic."""

    def __init__(self, spec: Specification[P]) -> None:
        self.spec = spec

    @abstractmethod
    def __call__(self, ctx: Context[P]) -> None: ...


class Present[P](SpecOp[P]):
    """Apply only if resource doesn't exist."""

    def __call__(self, ctx: Context[P]) -> None:
        if self.spec.exists(ctx):
            logger.debug("Skipping %s; already exists", self.spec)
        elif ctx.dry_run:
            logger.info("[DRY RUN] Would apply %s", self.spec)
        else:
            logger.info("Applying %s", self.spec)
            self.spec.apply(ctx)


class Ensure[P](SpecOp[P]):
    """Apply if current state doesn't match, replacing an existing resource.

    Resource attributes cannot be updated in place, so a resource that exists
    but differs is removed before it is applied again.
    """

    def __call__(self, ctx: Context[P]) -> None:
        if self.spec.equals(ctx):
            logger.debug("Skipping %s; up to date", self.spec)
            return

        replace = self.spec.exists(ctx)
        if ctx.dry_run:
            action = "replace" if replace else "apply"
            logger.info("[DRY RUN] Would %s %s", action, self.spec)
            return

        if replace:
            logger.info("Replacing %s", self.spec)
            self.spec.remove(ctx)
        logger.info("Applying %s", self.spec)
        self.spec.apply(ctx)


class Absent[P](SpecOp[P]):
    """Remove if resource exists."""

    def __call__(self, ctx: Context[P]) -> None:
        if self.spec.exists(ctx):
            if ctx.dry_run:
                logger.info("[DRY RUN] Would remove %s", self.spec)
            else:
                logger.info("Removing %s", self.spec)
                self.spec.remove(ctx)
        else:
            logger.debug("Skipping removal of %s; not present", self.spec)
