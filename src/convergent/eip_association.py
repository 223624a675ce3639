"""Elastic IP association with an instance or network interface."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from .config import Timeouts, coerce_timeouts
from .context import Context
from .errors import ResourceError, ResourceNotFound
from .locator import is_association_id
from .refresh import (
    ADDRESS_NOT_FOUND_CODES,
    association_state,
    describe_association,
    eip_association_refresh,
    error_code,
)
from .spec import Specification
from .states import AssociationState
from .waiter import await_convergence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUTS = Timeouts()

# Declared attribute -> DescribeAddresses / AssociateAddress field
_FIELDS = {
    "allocation_id": "AllocationId",
    "public_ip": "PublicIp",
    "instance_id": "InstanceId",
    "network_interface_id": "NetworkInterfaceId",
    "private_ip_address": "PrivateIpAddress",
}


class EipAssociation(Specification[Any]):
    """Associate an Elastic IP with an instance or network interface.

    The address is named by exactly one of ``allocation_id`` (VPC) or
    ``public_ip`` (EC2-Classic). Once applied, ``id`` holds the association id,
    or the public IP when EC2 returns no association id.
    """

    poll_delay = 0.0
    poll_interval = 2.0

    def __init__(
        self,
        *,
        allocation_id: str | None = None,
        public_ip: str | None = None,
        instance_id: str | None = None,
        network_interface_id: str | None = None,
        private_ip_address: str | None = None,
        allow_reassociation: bool | None = None,
        timeouts: Timeouts | dict[str, Any] | None = None,
    ) -> None:
        if bool(allocation_id) == bool(public_ip):
            raise ValueError("exactly one of allocation_id or public_ip is required")
        if not instance_id and not network_interface_id:
            raise ValueError("one of instance_id or network_interface_id is required")
        self.allocation_id = allocation_id
        self.public_ip = public_ip
        self.instance_id = instance_id
        self.network_interface_id = network_interface_id
        self.private_ip_address = private_ip_address
        self.allow_reassociation = allow_reassociation
        self.timeouts = coerce_timeouts(timeouts, DEFAULT_TIMEOUTS)
        self.associated_public_ip: str | None = None
        self._id: str | None = None

    @classmethod
    def from_id(cls, ctx: Context[Any], value: str, **kwargs: Any) -> EipAssociation:
        """Import an existing association by association id or public IP."""
        address, state = eip_association_refresh(ctx.client, value)()
        if state is not AssociationState.ATTACHED:
            raise ResourceNotFound(f"EC2 EIP association {value} not found ({state})")

        if address.get("AllocationId"):
            kwargs["allocation_id"] = address["AllocationId"]
        else:
            kwargs["public_ip"] = address.get("PublicIp")
        assoc = cls(
            instance_id=address.get("InstanceId"),
            network_interface_id=address.get("NetworkInterfaceId"),
            private_ip_address=address.get("PrivateIpAddress"),
            **kwargs,
        )
        assoc._id = value
        assoc._observe(address)
        return assoc

    def read(self, ctx: Context[Any]) -> dict[str, Any] | None:
        """Return the associated address, or None if nothing is attached."""
        if self._id is not None:
            address, state = eip_association_refresh(ctx.client, self._id)()
        else:
            address, state = self._lookup(ctx.client)

        if state is not AssociationState.ATTACHED:
            logger.debug("%s is %s", self, state)
            return None

        self._id = address.get("AssociationId") or address.get("PublicIp")
        return address

    def exists(self, ctx: Context[Any]) -> bool:
        return self.read(ctx) is not None

    def equals(self, ctx: Context[Any]) -> bool:
        address = self.read(ctx)
        if address is None:
            return False
        for attr in ("instance_id", "network_interface_id", "private_ip_address"):
            desired = getattr(self, attr)
            if desired and address.get(_FIELDS[attr]) != desired:
                logger.debug("%s differs on %s", self, attr)
                return False
        return True

    def apply(self, ctx: Context[Any]) -> None:
        client = ctx.client
        params = self._association_params()

        try:
            output = client.associate_address(**params)
        except ClientError as exc:
            raise ResourceError(f"error associating EC2 EIP ({self._address_name}): {exc}") from exc

        assoc_id = output.get("AssociationId") or self.public_ip
        if not assoc_id:
            raise ResourceError(f"error associating EC2 EIP ({self._address_name}): no association id returned")
        self._id = assoc_id
        logger.info("Associated EC2 EIP %s (%s)", self._address_name, assoc_id)

        address = await_convergence(
            eip_association_refresh(client, assoc_id),
            pending={AssociationState.NOT_FOUND, AssociationState.DETACHED},
            target={AssociationState.ATTACHED},
            timeout=self.timeouts.create,
            delay=self.poll_delay,
            min_interval=self.poll_interval,
            description=f"EC2 EIP association ({assoc_id}) to be attached",
            cancel=ctx.cancel,
        )
        self._observe(address)

    def remove(self, ctx: Context[Any]) -> None:
        client = ctx.client

        if self._id is None and self.read(ctx) is None:
            logger.debug("No association to remove for %s", self._address_name)
            return

        assoc_id = self._id
        if is_association_id(assoc_id):
            params = {"AssociationId": assoc_id}
        else:
            params = {"PublicIp": assoc_id}

        try:
            client.disassociate_address(**params)
        except ClientError as exc:
            if error_code(exc) == "InvalidAssociationID.NotFound":
                logger.debug("EC2 EIP association %s already gone", assoc_id)
                self._id = None
                return
            raise ResourceError(f"error disassociating EC2 EIP association ({assoc_id}): {exc}") from exc

        logger.info("Disassociated EC2 EIP association %s", assoc_id)

        await_convergence(
            eip_association_refresh(client, assoc_id),
            pending={AssociationState.ATTACHED},
            target={AssociationState.DETACHED, AssociationState.NOT_FOUND},
            timeout=self.timeouts.delete,
            delay=self.poll_delay,
            min_interval=self.poll_interval,
            description=f"EC2 EIP association ({assoc_id}) to be detached",
            cancel=ctx.cancel,
        )
        self._id = None

    @property
    def _address_name(self) -> str:
        return self.allocation_id or self.public_ip or ""

    def _association_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.allocation_id:
            params["AllocationId"] = self.allocation_id
        else:
            params["PublicIp"] = self.public_ip
        for attr in ("instance_id", "network_interface_id", "private_ip_address"):
            value = getattr(self, attr)
            if value:
                params[_FIELDS[attr]] = value
        if self.allow_reassociation is not None:
            params["AllowReassociation"] = self.allow_reassociation
        return params

    def _lookup(self, client: Any) -> tuple[Any, AssociationState]:
        """Find the declared address when no association id is known yet.

        The address only counts as attached when it is associated with the
        declared instance or network interface; an association held by
        anything else is reported as detached.
        """
        try:
            if self.allocation_id:
                output = client.describe_addresses(AllocationIds=[self.allocation_id])
                addresses = output.get("Addresses", [])
            else:
                addresses = describe_association(client, self.public_ip)
        except ClientError as exc:
            if error_code(exc) in ADDRESS_NOT_FOUND_CODES:
                logger.debug("Address %s not found: %s", self._address_name, error_code(exc))
                return None, AssociationState.NOT_FOUND
            raise

        if len(addresses) != 1:
            return addresses or None, association_state(addresses, "")

        address = addresses[0]
        if not (address.get("InstanceId") or address.get("NetworkInterfaceId")):
            return address, AssociationState.DETACHED
        if not self._held_by_target(address):
            logger.debug(
                "Address %s is associated with %s, not %s",
                self._address_name,
                address.get("InstanceId") or address.get("NetworkInterfaceId"),
                self.instance_id or self.network_interface_id,
            )
            return address, AssociationState.DETACHED
        return address, AssociationState.ATTACHED

    def _held_by_target(self, address: dict[str, Any]) -> bool:
        if self.instance_id and address.get("InstanceId") != self.instance_id:
            return False
        if self.network_interface_id and address.get("NetworkInterfaceId") != self.network_interface_id:
            return False
        return True

    def _observe(self, address: dict[str, Any]) -> None:
        """Record observed values for target attributes that were not declared.

        The address itself stays named by whichever of allocation_id or
        public_ip was declared; the observed public IP is kept separately.
        """
        self.associated_public_ip = address.get("PublicIp")
        for attr in ("instance_id", "network_interface_id", "private_ip_address"):
            if getattr(self, attr) is None and address.get(_FIELDS[attr]):
                setattr(self, attr, address[_FIELDS[attr]])
