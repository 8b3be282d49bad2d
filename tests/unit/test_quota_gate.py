"""Unit tests for the daily quota gate."""

from datetime import date, timedelta

import pytest

from config import ApplicationConfig
from conftest import FakeClock
from models import QuotaDecision, QuotaRecord
from services import InMemoryQuotaStore, QuotaGate


class TestQuotaGate:
    """Test cases for QuotaGate class."""

    @pytest.fixture
    def clock(self) -> FakeClock:
        return FakeClock(date(2025, 1, 15))

    @pytest.fixture
    def store(self) -> InMemoryQuotaStore:
        return InMemoryQuotaStore()

    @pytest.fixture
    def gate(self, mock_config, store, clock) -> QuotaGate:
        return QuotaGate(mock_config, store, clock=clock)

    def test_allows_up_to_daily_max_then_rejects(self, gate) -> None:
        """Every request up to the cap is allowed, the next one is rejected."""
        for expected_count in range(1, 5):
            result = gate.check_and_consume("198.51.100.7", 4)
            assert result.decision == QuotaDecision.ALLOWED
            assert result.count == expected_count

        result = gate.check_and_consume("198.51.100.7", 4)
        assert result.decision == QuotaDecision.REJECTED
        assert result.allowed is False
        assert result.remaining == 0

    def test_rejection_leaves_record_unchanged(self, gate, store) -> None:
        """A rejected request does not increment the stored count."""
        for _ in range(3):
            gate.check_and_consume("client", 2)

        record = store.get("client")
        assert record.count == 2
        assert record.date_stamp == "2025-01-15"

    def test_first_request_creates_record(self, gate, store) -> None:
        """A client's first request of the day stores a fresh record."""
        result = gate.check_and_consume("new-client", 4)

        assert result.allowed
        assert store.get("new-client") == QuotaRecord(
            client_key="new-client", date_stamp="2025-01-15", count=1
        )

    def test_new_day_resets_exhausted_client(self, gate, store, clock) -> None:
        """A new calendar day replaces the record regardless of prior exhaustion."""
        for _ in range(5):
            gate.check_and_consume("client", 4)
        assert not gate.check_and_consume("client", 4).allowed

        clock.today = clock.today + timedelta(days=1)
        result = gate.check_and_consume("client", 4)

        assert result.allowed
        assert result.count == 1
        assert store.get("client").date_stamp == "2025-01-16"

    def test_clients_are_counted_independently(self, gate) -> None:
        """One client's usage does not affect another's."""
        gate.check_and_consume("a", 1)
        assert not gate.check_and_consume("a", 1).allowed
        assert gate.check_and_consume("b", 1).allowed

    def test_default_limit_from_config(self, gate, mock_config) -> None:
        """Omitting daily_max uses MAX_DAILY_GENERATIONS."""
        results = [gate.check_and_consume("client") for _ in range(mock_config.max_daily_generations + 1)]

        assert [r.allowed for r in results] == [True] * mock_config.max_daily_generations + [False]
        assert results[0].limit == mock_config.max_daily_generations

    def test_empty_client_key_is_a_valid_key(self, gate, store) -> None:
        """A degenerate key is tracked like any other."""
        assert gate.check_and_consume("", 1).allowed
        assert not gate.check_and_consume("", 1).allowed
        assert len(store) == 1

    @pytest.mark.parametrize("daily_max", [0, -1, 2.5, True])
    def test_invalid_daily_max_raises(self, gate, daily_max) -> None:
        """The cap must be a positive integer."""
        with pytest.raises(ValueError):
            gate.check_and_consume("client", daily_max)

    def test_disabled_gate_allows_everything(self, store, clock) -> None:
        """With the quota disabled no request is rejected and nothing is stored."""
        config = ApplicationConfig(quota_enabled=False, max_daily_generations=1)
        gate = QuotaGate(config, store, clock=clock)

        results = [gate.check_and_consume("client") for _ in range(10)]

        assert all(r.allowed for r in results)
        assert len(store) == 0
        assert gate.enabled is False

    def test_default_store_is_in_memory(self, mock_config) -> None:
        """A gate built without a store keeps its own process-local map."""
        gate = QuotaGate(mock_config)

        gate.check_and_consume("client", 4)

        assert isinstance(gate.store, InMemoryQuotaStore)
        assert len(gate.store) == 1
