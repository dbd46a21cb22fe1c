# =============================================================================
# test_config.py - Configuration Tests
# =============================================================================
# Tests for GrammarOptions and DriverOptions, including environment
# variable overrides.
# =============================================================================

import sys

import pytest
from mvp.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_ERRORS,
    FRAMES_PER_LEVEL,
    STACK_RESERVE,
    DriverOptions,
    GrammarOptions,
    max_supported_depth,
)


class TestGrammarOptions:
    """Test grammar options."""

    def test_defaults(self):
        assert GrammarOptions().max_depth == DEFAULT_MAX_DEPTH == 64

    def test_depth_must_be_positive(self):
        with pytest.raises(ValueError):
            GrammarOptions(max_depth=0)

    def test_depth_bounded_by_recursion_limit(self):
        assert GrammarOptions(max_depth=max_supported_depth()).max_depth >= DEFAULT_MAX_DEPTH
        with pytest.raises(ValueError):
            GrammarOptions(max_depth=max_supported_depth() + 1)

    def test_supported_depth_follows_recursion_limit(self, monkeypatch):
        monkeypatch.setattr(sys, "getrecursionlimit", lambda: 5000)
        assert max_supported_depth() == (5000 - STACK_RESERVE) // FRAMES_PER_LEVEL
        assert GrammarOptions(max_depth=300).max_depth == 300

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MVP_MAX_DEPTH", "10")
        assert GrammarOptions.from_env().max_depth == 10

    def test_from_env_unset(self, monkeypatch):
        monkeypatch.delenv("MVP_MAX_DEPTH", raising=False)
        assert GrammarOptions.from_env() == GrammarOptions()

    @pytest.mark.parametrize("value", ["abc", "0", "-3", "100000"])
    def test_from_env_invalid_ignored(self, monkeypatch, value):
        monkeypatch.setenv("MVP_MAX_DEPTH", value)
        assert GrammarOptions.from_env().max_depth == DEFAULT_MAX_DEPTH


class TestDriverOptions:
    """Test driver options."""

    def test_defaults(self):
        options = DriverOptions()
        assert options.max_errors == DEFAULT_MAX_ERRORS == 100
        assert options.grammar == GrammarOptions()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MVP_MAX_ERRORS", "5")
        monkeypatch.setenv("MVP_MAX_DEPTH", "12")
        options = DriverOptions.from_env()
        assert options.max_errors == 5
        assert options.grammar.max_depth == 12

    def test_from_env_invalid_ignored(self, monkeypatch):
        monkeypatch.setenv("MVP_MAX_ERRORS", "many")
        assert DriverOptions.from_env().max_errors == DEFAULT_MAX_ERRORS
