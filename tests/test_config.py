"""Tests for convergent.config."""

from __future__ import annotations

import pytest

from convergent.config import MINUTE, Timeouts, coerce_timeouts


class TestTimeouts:
    def test_defaults(self):
        timeouts = Timeouts()
        assert timeouts.create == 5 * MINUTE
        assert timeouts.delete == 5 * MINUTE

    def test_must_be_positive(self):
        with pytest.raises(ValueError):
            Timeouts(create=0)


class TestCoerceTimeouts:
    def test_none_uses_default(self):
        default = Timeouts(create=10, delete=20)
        assert coerce_timeouts(None, default) is default

    def test_instance_passes_through(self):
        timeouts = Timeouts(create=1)
        assert coerce_timeouts(timeouts, Timeouts()) is timeouts

    def test_dict_overrides_default(self):
        result = coerce_timeouts({"delete": 45}, Timeouts(create=10, delete=20))
        assert result.create == 10
        assert result.delete == 45

    def test_dict_validated(self):
        with pytest.raises(ValueError):
            coerce_timeouts({"create": -1}, Timeouts())
