"""Tests for feature flags."""

import pytest

from gridlayout.config.settings import get_all_flags, is_enabled, set_flag


@pytest.fixture
def restore_flags():
    original = get_all_flags()
    yield
    for flag, enabled in original.items():
        set_flag(flag, enabled)


class TestFeatureFlags:
    """Test flag lookup and overrides."""

    def test_known_flags(self):
        assert set(get_all_flags()) == {"use_fast_compaction", "validate_unique_ids"}

    def test_unknown_flag_raises(self):
        with pytest.raises(KeyError, match="Available flags"):
            is_enabled("use_quantum_compaction")

    def test_set_unknown_flag_raises(self):
        with pytest.raises(KeyError):
            set_flag("use_quantum_compaction", True)

    def test_set_flag(self, restore_flags):
        set_flag("use_fast_compaction", True)
        assert is_enabled("use_fast_compaction") is True

    def test_get_all_flags_is_a_copy(self, restore_flags):
        flags = get_all_flags()
        flags["use_fast_compaction"] = not flags["use_fast_compaction"]
        assert get_all_flags()["use_fast_compaction"] != flags["use_fast_compaction"]
