"""Tests for ranking_api.service and the read CLI."""

import json
from datetime import date, datetime, timezone
from unittest.mock import Mock, patch

import pytest

from common.errors import DecodeFailure, TransportFailure
from ranking_api.cache import RankingCache
from ranking_api.cli import main
from ranking_api.params import RankingQuery
from ranking_api.service import RankingService

TARGET = date(2025, 4, 29)
QUERY = RankingQuery(unit="daily", range=2)
EXPIRES = datetime(2025, 6, 1, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _service(test_config, store, clock=None) -> RankingService:
    cache = RankingCache(ttl_seconds=3600, clock=clock or FakeClock())
    return RankingService(config=test_config, store_factory=lambda unit: store, cache=cache)


class TestRankingService:
    def test_aggregates_from_unit_store(self, test_config, keyed_store) -> None:
        keyed_store.put("2025-04-29", json.dumps({"articles": [{"id": 1}]}), EXPIRES)
        units = []
        service = RankingService(
            config=test_config,
            store_factory=lambda unit: units.append(unit) or keyed_store,
        )

        result = service.get_rankings(RankingQuery(unit="daily", range=2), TARGET)

        assert result == [{"key": "2025-04-29", "articles": [{"id": 1}]}]
        assert units == ["day"]

    def test_uses_injected_empty_cache(self, test_config) -> None:
        store = Mock()
        store.get.return_value = json.dumps({"articles": []})
        clock = FakeClock()
        cache = RankingCache(ttl_seconds=60, clock=clock)

        service = RankingService(config=test_config, store_factory=lambda unit: store, cache=cache)
        service.get_rankings(QUERY, TARGET)

        assert service.cache is cache
        assert len(cache) == 1
        clock.now += 60
        assert cache.get_fresh((QUERY.unit, QUERY.range, QUERY.count, TARGET.isoformat())) is None

    def test_default_cache_follows_config(self, test_config) -> None:
        test_config.cache.ttl_seconds = 120
        test_config.cache.max_stale_seconds = 600

        service = RankingService(config=test_config, store_factory=lambda unit: Mock())

        assert service.cache.ttl_seconds == 120
        assert service.cache.max_stale_seconds == 600

    def test_fresh_cache_skips_store(self, test_config) -> None:
        store = Mock()
        store.get.return_value = json.dumps({"articles": []})
        service = _service(test_config, store)

        first = service.get_rankings(QUERY, TARGET)
        calls = store.get.call_count
        second = service.get_rankings(QUERY, TARGET)

        assert first == second
        assert store.get.call_count == calls

    def test_expired_cache_reads_again(self, test_config) -> None:
        store = Mock()
        store.get.return_value = json.dumps({"articles": []})
        clock = FakeClock()
        service = _service(test_config, store, clock)

        service.get_rankings(QUERY, TARGET)
        calls = store.get.call_count
        clock.now += 3600
        service.get_rankings(QUERY, TARGET)

        assert store.get.call_count == calls * 2

    @pytest.mark.parametrize("error", [TransportFailure("down"), DecodeFailure("bad")])
    def test_serves_stale_on_failure(self, test_config, error) -> None:
        store = Mock()
        store.get.return_value = json.dumps({"articles": [{"id": 1}]})
        clock = FakeClock()
        service = _service(test_config, store, clock)
        first = service.get_rankings(QUERY, TARGET)

        clock.now += 7200
        store.get.side_effect = error

        assert service.get_rankings(QUERY, TARGET) == first

    def test_failure_without_cache_raises(self, test_config) -> None:
        store = Mock()
        store.get.side_effect = TransportFailure("down")

        with pytest.raises(TransportFailure):
            _service(test_config, store).get_rankings(QUERY, TARGET)

    def test_cache_disabled(self, test_config) -> None:
        test_config.cache.enabled = False
        store = Mock()
        store.get.return_value = json.dumps({"articles": []})
        service = _service(test_config, store)

        service.get_rankings(QUERY, TARGET)
        service.get_rankings(QUERY, TARGET)

        assert store.get.call_count == 4
        assert len(service.cache) == 0


class TestCli:
    @patch("ranking_api.cli.RankingService")
    def test_prints_json(self, mock_service_cls, capsys: pytest.CaptureFixture) -> None:
        mock_service_cls.return_value.get_rankings.return_value = [{"key": "2025-04-29", "articles": []}]

        assert main(["--unit", "daily", "--range", "1", "--date", "2025-04-29"]) == 0

        out = json.loads(capsys.readouterr().out)
        assert out == {"data": [{"key": "2025-04-29", "articles": []}]}
        mock_service_cls.return_value.get_rankings.assert_called_once_with(
            RankingQuery(unit="daily", range=1), TARGET
        )

    def test_invalid_params_exit_2(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--unit", "yearly", "--range", "1"])
        assert exc_info.value.code == 2

    @patch("ranking_api.cli.RankingService")
    def test_read_error_returns_1(self, mock_service_cls) -> None:
        mock_service_cls.return_value.get_rankings.side_effect = DecodeFailure("bad")
        assert main(["--unit", "monthly", "--range", "3"]) == 1
