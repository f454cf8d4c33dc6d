"""Tests for the shared rule configuration and env-driven defaults."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date

import pytest

from config.defaults import DEFAULT_RULE_CONFIG, _env_int
from data.booking_store import InMemoryBookingStore
from data.rule_config import RuleConfigStore
from engine.admission import compute_buffer_quota

TUESDAY = date(2024, 1, 2)


class TestRuleConfigStore:
    def test_starts_from_defaults(self):
        assert RuleConfigStore().get() == DEFAULT_RULE_CONFIG

    def test_update_keeps_other_rules(self):
        rules = RuleConfigStore()
        updated = rules.update({"members_per_batch": 30})
        assert updated["members_per_batch"] == 30
        assert updated["total_seats"] == DEFAULT_RULE_CONFIG["total_seats"]

    def test_every_reader_sees_the_same_rules(self):
        rules = RuleConfigStore()
        store = InMemoryBookingStore()
        rules.update({"members_per_batch": 0})

        session_a = rules.get()
        session_b = rules.get()
        quota_a = compute_buffer_quota(store, TUESDAY, session_a)
        quota_b = compute_buffer_quota(store, TUESDAY, session_b)
        assert quota_a == quota_b
        assert quota_a.base == DEFAULT_RULE_CONFIG["total_seats"]

    def test_readers_get_copies(self):
        rules = RuleConfigStore()
        handed_out = rules.get()
        handed_out["members_per_batch"] = 0
        assert rules.get()["members_per_batch"] == DEFAULT_RULE_CONFIG["members_per_batch"]

    def test_unknown_rule_rejected(self):
        rules = RuleConfigStore()
        with pytest.raises(ValueError):
            rules.update({"free_lunch": 1})
        assert rules.get() == DEFAULT_RULE_CONFIG

    def test_reset(self):
        rules = RuleConfigStore({"max_advance_weeks": 4})
        assert rules.get()["max_advance_weeks"] == 4
        assert rules.reset() == DEFAULT_RULE_CONFIG


class TestEnvInt:
    def test_missing_uses_default(self, monkeypatch):
        monkeypatch.delenv("SEAT_TEST_VALUE", raising=False)
        assert _env_int("SEAT_TEST_VALUE", 7) == 7

    def test_explicit_zero_is_kept(self, monkeypatch):
        monkeypatch.setenv("SEAT_TEST_VALUE", "0")
        assert _env_int("SEAT_TEST_VALUE", 2) == 0

    def test_below_minimum_raises(self, monkeypatch):
        monkeypatch.setenv("SEAT_TEST_VALUE", "0")
        with pytest.raises(ValueError):
            _env_int("SEAT_TEST_VALUE", 50, minimum=1)

    def test_above_maximum_raises(self, monkeypatch):
        monkeypatch.setenv("SEAT_TEST_VALUE", "24")
        with pytest.raises(ValueError):
            _env_int("SEAT_TEST_VALUE", 15, maximum=23)

    def test_not_a_number_raises(self, monkeypatch):
        monkeypatch.setenv("SEAT_TEST_VALUE", "lots")
        with pytest.raises(ValueError):
            _env_int("SEAT_TEST_VALUE", 7)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
