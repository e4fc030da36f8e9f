"""Tests for diff and patch settings."""

import dataclasses

import pytest

from diff.diff_settings import DiffSettings, PatchSettings


class TestDiffSettings:
    """Test DiffSettings."""

    def test_defaults(self):
        """Test the default context size."""
        assert DiffSettings().context_size == 3

    def test_negative_context_size(self):
        """Test that a negative context size is rejected at construction."""
        with pytest.raises(ValueError):
            DiffSettings(context_size=-1)

    def test_with_context_size(self):
        """Test that a copy is returned and the original is unchanged."""
        settings = DiffSettings()

        updated = settings.with_context_size(5)

        assert updated.context_size == 5
        assert settings.context_size == 3

    def test_with_context_size_zero(self):
        """Test that zero context is allowed."""
        assert DiffSettings().with_context_size(0).context_size == 0

    def test_with_negative_context_size_is_ignored(self):
        """Test that negative values leave the settings unchanged."""
        settings = DiffSettings(context_size=2)

        assert settings.with_context_size(-1) is settings

    def test_frozen(self):
        """Test that settings cannot be modified in place."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DiffSettings().context_size = 1


class TestPatchSettings:
    """Test PatchSettings."""

    def test_defaults(self):
        """Test the default fuzz policy."""
        settings = PatchSettings()

        assert settings.eof_fuzz_penalty == 10000
        assert settings.max_fuzz is None

    @pytest.mark.parametrize("kwargs", [{"eof_fuzz_penalty": -1}, {"max_fuzz": -1}])
    def test_negative_values(self, kwargs):
        """Test that negative values are rejected."""
        with pytest.raises(ValueError):
            PatchSettings(**kwargs)

    def test_zero_max_fuzz(self):
        """Test that a zero maximum is allowed."""
        assert PatchSettings(max_fuzz=0).max_fuzz == 0
