"""Tests for convergent.states."""

from __future__ import annotations

from convergent.states import AssociationState, PermissionState, Verdict, classify


class TestClassify:
    def test_target(self):
        verdict = classify(PermissionState.GRANTED, {PermissionState.DENIED}, {PermissionState.GRANTED})
        assert verdict is Verdict.TARGET

    def test_pending(self):
        verdict = classify(PermissionState.DENIED, {PermissionState.DENIED}, {PermissionState.GRANTED})
        assert verdict is Verdict.PENDING

    def test_unexpected(self):
        verdict = classify(PermissionState.UNKNOWN, {PermissionState.DENIED}, {PermissionState.GRANTED})
        assert verdict is Verdict.UNEXPECTED

    def test_multiple_targets(self):
        target = {AssociationState.DETACHED, AssociationState.NOT_FOUND}
        pending = {AssociationState.ATTACHED}
        assert classify(AssociationState.NOT_FOUND, pending, target) is Verdict.TARGET
        assert classify(AssociationState.DETACHED, pending, target) is Verdict.TARGET

    def test_plain_strings_match_enum_values(self):
        assert classify("granted", {"denied"}, {"granted"}) is Verdict.TARGET


class TestStateNames:
    def test_permission_state_str(self):
        assert str(PermissionState.GRANTED) == "granted"

    def test_association_state_str(self):
        assert str(AssociationState.NOT_FOUND) == "not_found"

    def test_str_enum_compares_to_value(self):
        assert AssociationState.ATTACHED == "attached"
