"""Refresh functions: one EC2 read each, mapped to a symbolic state.

Each factory closes over the EC2 client and a resource locator and returns a
zero-argument callable producing ``(payload, state)``. Read failures are not
caught here; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from botocore.exceptions import ClientError

from .locator import is_association_id
from .states import AssociationState, PermissionState

logger = logging.getLogger(__name__)

type RefreshFunc[S] = Callable[[], tuple[Any, S]]

CREATE_VOLUME_PERMISSION = "createVolumePermission"

ADDRESS_NOT_FOUND_CODES = frozenset(
    {
        "InvalidAssociationID.NotFound",
        "InvalidAddress.NotFound",
        "InvalidAllocationID.NotFound",
    }
)


def error_code(exc: ClientError) -> str:
    """Return the EC2 error code carried by a ClientError."""
    return exc.response.get("Error", {}).get("Code", "")


# -- Snapshot Permissions --


def permission_state(attrs: dict[str, Any], account_id: str) -> PermissionState:
    """Map a DescribeSnapshotAttribute response to a permission state."""
    if "CreateVolumePermissions" not in attrs:
        return PermissionState.UNKNOWN
    for perm in attrs["CreateVolumePermissions"] or []:
        if perm.get("UserId") == account_id:
            return PermissionState.GRANTED
    return PermissionState.DENIED


def snapshot_permission_refresh(
    client: Any,
    snapshot_id: str,
    account_id: str,
) -> RefreshFunc[PermissionState]:
    """Build a refresh function for one account's permission on a snapshot."""

    def refresh() -> tuple[Any, PermissionState]:
        attrs = client.describe_snapshot_attribute(
            SnapshotId=snapshot_id,
            Attribute=CREATE_VOLUME_PERMISSION,
        )
        state = permission_state(attrs, account_id)
        if state is PermissionState.UNKNOWN:
            logger.warning("No permission list returned for snapshot %s", snapshot_id)
        logger.debug("Snapshot %s permission for %s: %s", snapshot_id, account_id, state)
        return attrs, state

    return refresh


# -- EIP Associations --


def association_state(addresses: list[dict[str, Any]], association_id: str) -> AssociationState:
    """Map the addresses returned for an association id or public IP."""
    if not addresses:
        return AssociationState.NOT_FOUND
    if len(addresses) > 1:
        return AssociationState.UNKNOWN

    address = addresses[0]
    if is_association_id(association_id):
        if address.get("AssociationId") == association_id:
            return AssociationState.ATTACHED
        return AssociationState.DETACHED

    if address.get("InstanceId") or address.get("NetworkInterfaceId"):
        return AssociationState.ATTACHED
    return AssociationState.DETACHED


def describe_association(client: Any, association_id: str) -> list[dict[str, Any]]:
    """Describe the addresses for an association id (or public IP)."""
    if is_association_id(association_id):
        output = client.describe_addresses(
            Filters=[{"Name": "association-id", "Values": [association_id]}],
        )
    else:
        output = client.describe_addresses(PublicIps=[association_id])
    return output.get("Addresses", [])


def eip_association_refresh(
    client: Any,
    association_id: str,
) -> RefreshFunc[AssociationState]:
    """Build a refresh function for an EIP association."""

    def refresh() -> tuple[Any, AssociationState]:
        try:
            addresses = describe_association(client, association_id)
        except ClientError as exc:
            if error_code(exc) in ADDRESS_NOT_FOUND_CODES:
                logger.debug("Association %s not found: %s", association_id, error_code(exc))
                return None, AssociationState.NOT_FOUND
            raise

        state = association_state(addresses, association_id)
        if state is AssociationState.UNKNOWN:
            logger.warning("Found %d addresses for association %s", len(addresses), association_id)
        logger.debug("Association %s: %s", association_id, state)
        payload = addresses[0] if len(addresses) == 1 else (addresses or None)
        return payload, state

    return refresh
