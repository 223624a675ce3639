"""Provider model: the configured AWS target that blueprints are built against."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from .blueprints import Blueprint
from .config import create_client
from .context import Context

logger = logging.getLogger(__name__)


class Provider(BaseModel):
    """AWS account/region settings plus the blueprints to apply there."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    description: str = ""
    region: str | None = None
    profile: str | None = None
    endpoint_url: str | None = None
    blueprints: list[Blueprint] = Field(default_factory=list)

    def client(self) -> Any:
        """Create an EC2 client for this provider's region and profile."""
        return create_client(
            region=self.region,
            profile=self.profile,
            endpoint_url=self.endpoint_url,
        )

    def build(self, *, client: Any = None, **kwargs) -> None:
        """Build all blueprints. kwargs are passed to Context."""
        if client is None:
            client = self.client()
        ctx = Context(target=self, client=client, **kwargs)
        logger.info("Building provider '%s' (region=%s)", self.name, self.region or "default")
        for blueprint in self.blueprints:
            blueprint.build(ctx)
