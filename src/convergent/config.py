"""Configuration models and EC2 client construction."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

MINUTE = 60.0


class Timeouts(BaseModel):
    """Per-operation convergence timeouts, in seconds."""

    create: float = Field(default=5 * MINUTE, gt=0)
    delete: float = Field(default=5 * MINUTE, gt=0)


def coerce_timeouts(value: Timeouts | dict[str, Any] | None, default: Timeouts) -> Timeouts:
    """Accept a Timeouts, a partial dict of overrides, or None."""
    if value is None:
        return default
    if isinstance(value, Timeouts):
        return value
    return Timeouts.model_validate({**default.model_dump(), **value})


def create_client(
    *,
    region: str | None = None,
    profile: str | None = None,
    endpoint_url: str | None = None,
) -> Any:
    """Create an EC2 client; unset values fall back to the boto3 defaults."""
    logger.debug("Creating EC2 client (region=%s, profile=%s)", region, profile)
    session = boto3.Session(profile_name=profile, region_name=region)
    return session.client("ec2", endpoint_url=endpoint_url)
