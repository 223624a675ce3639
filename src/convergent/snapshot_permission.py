"""Create-volume permission on an EBS snapshot for another AWS account."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from .config import MINUTE, Timeouts, coerce_timeouts
from .context import Context
from .errors import ResourceError, ResourceNotFound
from .locator import SnapshotPermissionId, encode_snapshot_permission_id
from .refresh import CREATE_VOLUME_PERMISSION, snapshot_permission_refresh
from .spec import Specification
from .states import PermissionState
from .waiter import await_convergence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUTS = Timeouts(create=20 * MINUTE, delete=5 * MINUTE)


class SnapshotCreateVolumePermission(Specification[Any]):
    """Grant ``account_id`` permission to create volumes from ``snapshot_id``."""

    poll_delay = 10.0
    poll_interval = 10.0

    def __init__(
        self,
        snapshot_id: str,
        account_id: str,
        *,
        timeouts: Timeouts | dict[str, Any] | None = None,
    ) -> None:
        if not snapshot_id:
            raise ValueError("snapshot_id is required")
        if not account_id:
            raise ValueError("account_id is required")
        encode_snapshot_permission_id(snapshot_id, account_id)
        self.snapshot_id = snapshot_id
        self.account_id = account_id
        self.timeouts = coerce_timeouts(timeouts, DEFAULT_TIMEOUTS)
        self._id: str | None = None

    @classmethod
    def from_id(cls, value: str, **kwargs: Any) -> SnapshotCreateVolumePermission:
        """Import an existing permission from its composite id."""
        locator = SnapshotPermissionId.parse(value)
        perm = cls(locator.snapshot_id, locator.account_id, **kwargs)
        perm._id = str(locator)
        return perm

    @property
    def locator(self) -> SnapshotPermissionId:
        if self._id is not None:
            return SnapshotPermissionId.parse(self._id)
        return SnapshotPermissionId(self.snapshot_id, self.account_id)

    def equals(self, ctx: Context[Any]) -> bool:
        locator = self.locator
        refresh = snapshot_permission_refresh(ctx.client, locator.snapshot_id, locator.account_id)
        _, state = refresh()
        if state is PermissionState.GRANTED:
            self._id = str(locator)
        return state is PermissionState.GRANTED

    def apply(self, ctx: Context[Any]) -> None:
        client = ctx.client

        if self._is_owner(client):
            raise ResourceError(
                f"error adding snapshot {CREATE_VOLUME_PERMISSION}: "
                f"specified account {self.account_id} is the snapshot owner"
            )

        self._modify(client, "Add")
        self._id = str(SnapshotPermissionId(self.snapshot_id, self.account_id))
        logger.info("Granted %s on %s to %s", CREATE_VOLUME_PERMISSION, self.snapshot_id, self.account_id)

        await_convergence(
            snapshot_permission_refresh(client, self.snapshot_id, self.account_id),
            pending={PermissionState.DENIED},
            target={PermissionState.GRANTED},
            timeout=self.timeouts.create,
            delay=self.poll_delay,
            min_interval=self.poll_interval,
            description=f"snapshot {CREATE_VOLUME_PERMISSION} ({self._id}) to be added",
            cancel=ctx.cancel,
        )

    def remove(self, ctx: Context[Any]) -> None:
        client = ctx.client
        locator = self.locator

        self._modify(client, "Remove", locator)
        logger.info(
            "Revoked %s on %s from %s", CREATE_VOLUME_PERMISSION, locator.snapshot_id, locator.account_id
        )

        await_convergence(
            snapshot_permission_refresh(client, locator.snapshot_id, locator.account_id),
            pending={PermissionState.GRANTED},
            target={PermissionState.DENIED},
            timeout=self.timeouts.delete,
            delay=self.poll_delay,
            min_interval=self.poll_interval,
            description=f"snapshot {CREATE_VOLUME_PERMISSION} ({locator}) to be removed",
            cancel=ctx.cancel,
        )
        self._id = None

    def _modify(self, client: Any, action: str, locator: SnapshotPermissionId | None = None) -> None:
        locator = locator or SnapshotPermissionId(self.snapshot_id, self.account_id)
        verb = "adding" if action == "Add" else "removing"
        try:
            client.modify_snapshot_attribute(
                SnapshotId=locator.snapshot_id,
                Attribute=CREATE_VOLUME_PERMISSION,
                CreateVolumePermission={action: [{"UserId": locator.account_id}]},
            )
        except ClientError as exc:
            raise ResourceError(f"error {verb} snapshot {CREATE_VOLUME_PERMISSION}: {exc}") from exc

    def _is_owner(self, client: Any) -> bool:
        """Check whether the grantee account owns the snapshot."""
        try:
            output = client.describe_snapshots(SnapshotIds=[self.snapshot_id])
        except ClientError as exc:
            raise ResourceError(f"error describing snapshot {self.snapshot_id}: {exc}") from exc

        snapshots = output.get("Snapshots", [])
        if not snapshots:
            raise ResourceNotFound(f"error locating snapshot {self.snapshot_id}: not found")
        if len(snapshots) != 1:
            raise ResourceError(
                f"error locating snapshot {self.snapshot_id}: found {len(snapshots)} snapshots, expected 1"
            )
        return snapshots[0].get("OwnerId") == self.account_id
