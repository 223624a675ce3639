"""Composite resource identifiers.

A snapshot volume permission has no identifier of its own in EC2; it is
addressed by joining the snapshot id and the grantee account id with ``-``.
Because snapshot ids already contain the delimiter (``snap-<hex>``), decoding
relies on that fixed two-segment prefix. Primary ids of any other shape are
not supported.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MalformedLocator

DELIMITER = "-"
SNAPSHOT_PREFIX = "snap"
ASSOCIATION_PREFIX = "eipassoc-"

_SNAPSHOT_ID_FORMAT = "SNAPSHOT_ID-ACCOUNT_ID"


def encode_snapshot_permission_id(snapshot_id: str, account_id: str) -> str:
    """Join a snapshot id and an account id into one composite id.

    Only ``snap-<segment>`` snapshot ids are accepted, since anything else
    would not decode back to the same pair.
    """
    prefix, _, suffix = snapshot_id.partition(DELIMITER)
    if prefix != SNAPSHOT_PREFIX or not suffix or DELIMITER in suffix or not account_id:
        raise MalformedLocator(f"{snapshot_id}{DELIMITER}{account_id}", _SNAPSHOT_ID_FORMAT)
    return f"{snapshot_id}{DELIMITER}{account_id}"


def decode_snapshot_permission_id(value: str) -> tuple[str, str]:
    """Split a composite id back into ``(snapshot_id, account_id)``."""
    parts = value.split(DELIMITER, 2)
    if len(parts) != 3 or parts[0] != SNAPSHOT_PREFIX or not parts[1] or not parts[2]:
        raise MalformedLocator(value, _SNAPSHOT_ID_FORMAT)
    return f"{parts[0]}{DELIMITER}{parts[1]}", parts[2]


@dataclass(frozen=True)
class SnapshotPermissionId:
    """Locator for a single create-volume permission on a snapshot."""

    snapshot_id: str
    account_id: str

    @classmethod
    def parse(cls, value: str) -> SnapshotPermissionId:
        snapshot_id, account_id = decode_snapshot_permission_id(value)
        return cls(snapshot_id=snapshot_id, account_id=account_id)

    def __str__(self) -> str:
        return encode_snapshot_permission_id(self.snapshot_id, self.account_id)


def is_association_id(value: str) -> bool:
    """EIP associations in a VPC use ``eipassoc-`` ids; others are public IPs."""
    return value.startswith(ASSOCIATION_PREFIX)
