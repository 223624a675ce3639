"""End-to-end integration test for convergent."""

from __future__ import annotations

import threading

import pytest

from convergent import (
    Absent,
    Blueprint,
    Cancelled,
    Present,
    Provider,
    SnapshotCreateVolumePermission,
)

SNAPSHOT = "snap-0123456789abcdef0"


class SnapshotEC2:
    """Minimal EC2 stand-in for snapshot permissions with immediate reads."""

    def __init__(self, granted=()) -> None:
        self.granted = set(granted)
        self.mutations: list[tuple[str, str]] = []

    def describe_snapshots(self, SnapshotIds):
        return {"Snapshots": [{"SnapshotId": SnapshotIds[0], "OwnerId": "111111111111"}]}

    def modify_snapshot_attribute(self, SnapshotId, Attribute, CreateVolumePermission):
        for action, perms in CreateVolumePermission.items():
            for perm in perms:
                self.mutations.append((action, perm["UserId"]))
                if action == "Add":
                    self.granted.add(perm["UserId"])
                else:
                    self.granted.discard(perm["UserId"])

    def describe_snapshot_attribute(self, SnapshotId, Attribute):
        return {"CreateVolumePermissions": [{"UserId": u} for u in sorted(self.granted)]}


def _perm(account_id: str) -> SnapshotCreateVolumePermission:
    perm = SnapshotCreateVolumePermission(SNAPSHOT, account_id)
    perm.poll_delay = 0.0
    perm.poll_interval = 0.0
    return perm


def _provider() -> Provider:
    return Provider(
        name="prod",
        region="us-east-1",
        blueprints=[
            Blueprint(
                name="sharing",
                ops=[
                    Present(_perm("222222222222")),
                    Present(_perm("333333333333")),
                    Absent(_perm("444444444444")),
                ],
            )
        ],
    )


class TestEndToEnd:
    def test_full_build(self):
        client = SnapshotEC2(granted={"333333333333", "444444444444"})

        _provider().build(client=client)

        assert client.granted == {"222222222222", "333333333333"}
        assert client.mutations == [("Add", "222222222222"), ("Remove", "444444444444")]

    def test_dry_run(self):
        client = SnapshotEC2(granted={"444444444444"})

        _provider().build(client=client, dry_run=True)

        assert client.mutations == []
        assert client.granted == {"444444444444"}

    def test_rebuild_is_idempotent(self):
        client = SnapshotEC2()
        provider = _provider()

        provider.build(client=client)
        client.mutations.clear()
        provider.build(client=client)

        assert client.mutations == []

    def test_cancelled_build(self):
        cancel = threading.Event()
        cancel.set()
        client = SnapshotEC2()

        with pytest.raises(Cancelled):
            _provider().build(client=client, cancel=cancel)

        assert client.mutations == [("Add", "222222222222")]
