"""Tests for ingest_rankings.fetch_articles module."""

from datetime import date
from unittest.mock import Mock, call, patch

import pytest

from common.datetime import get_timezone
from common.errors import TransportFailure
from ingest_rankings.fetch_articles import fetch_articles
from ingest_rankings.helpers import build_window
from ingest_rankings.models import ArticlePage

TOKYO = get_timezone("Asia/Tokyo")
WINDOW = build_window(date(2025, 4, 29), 7, TOKYO)


def _article(article_id: int, published_at: str, liked_count: int = 5) -> dict:
    return {"id": article_id, "title": f"Article {article_id}", "published_at": published_at, "liked_count": liked_count}


def _source(*pages: ArticlePage) -> Mock:
    source = Mock()
    source.get_page.side_effect = list(pages)
    return source


def _fetch(source: Mock, call_budget: int = 10) -> list[dict]:
    return fetch_articles(WINDOW, source, call_budget=call_budget, page_size=100, tz=TOKYO)


@patch("ingest_rankings.fetch_articles.sleep")
class TestFetchArticles:
    def test_filters_zero_likes_and_keeps_window(self, mock_sleep) -> None:
        source = _source(ArticlePage(
            articles=[
                _article(1, "2025-04-29T12:00:00+09:00", 10),
                _article(2, "2025-04-29T14:00:00+09:00", 0),
                _article(3, "2025-04-28T10:00:00+09:00", 5),
            ],
            next_page=None,
        ))

        result = _fetch(source)

        assert [a["id"] for a in result] == [1, 3]
        source.get_page.assert_called_once_with(1, 100, "latest")
        mock_sleep.assert_not_called()

    def test_skips_newer_and_stops_at_older(self, mock_sleep) -> None:
        source = _source(
            ArticlePage(
                articles=[
                    _article(1, "2025-04-30T00:00:00+09:00"),  # after window end: skipped
                    _article(2, "2025-04-29T12:00:00+09:00"),
                ],
                next_page=2,
            ),
            ArticlePage(
                articles=[
                    _article(10, "2025-04-29T10:00:00+09:00"),
                    _article(11, "2025-04-28T10:00:00+09:00"),
                    _article(12, "2025-04-23T00:00:00+09:00"),  # exactly window start: kept
                    _article(13, "2025-04-22T23:59:59+09:00"),  # before window start: stop
                ],
                next_page=3,
            ),
        )

        result = _fetch(source)

        assert [a["id"] for a in result] == [2, 10, 11, 12]
        assert source.get_page.call_count == 2
        mock_sleep.assert_called_once_with(1.0)

    def test_older_record_stops_even_if_later_records_qualify(self, mock_sleep) -> None:
        source = _source(ArticlePage(
            articles=[
                _article(1, "2025-04-29T12:00:00+09:00"),
                _article(2, "2025-04-01T12:00:00+09:00"),
                _article(3, "2025-04-28T12:00:00+09:00"),
            ],
            next_page=2,
        ))

        result = _fetch(source)

        assert [a["id"] for a in result] == [1]
        assert source.get_page.call_count == 1

    def test_newer_records_do_not_stop_pagination(self, mock_sleep) -> None:
        source = _source(
            ArticlePage(articles=[_article(1, "2025-05-01T00:00:00+09:00")], next_page=2),
            ArticlePage(articles=[_article(2, "2025-04-25T00:00:00+09:00")], next_page=None),
        )

        result = _fetch(source)

        assert [a["id"] for a in result] == [2]
        assert source.get_page.call_count == 2

    def test_null_next_page_ends_pagination(self, mock_sleep) -> None:
        source = _source(
            ArticlePage(articles=[_article(1, "2025-04-29T12:00:00+09:00")], next_page=2),
            ArticlePage(articles=[_article(2, "2025-04-29T13:00:00+09:00")], next_page=None),
            ArticlePage(articles=[_article(3, "2025-04-29T14:00:00+09:00")], next_page=None),
        )

        result = _fetch(source)

        assert source.get_page.call_count == 2
        assert len(result) == 2

    def test_empty_page_ends_pagination(self, mock_sleep) -> None:
        source = _source(
            ArticlePage(articles=[_article(1, "2025-04-29T12:00:00+09:00")], next_page=2),
            ArticlePage(articles=[], next_page=3),
        )

        result = _fetch(source)

        assert len(result) == 1
        assert source.get_page.call_count == 2

    def test_never_exceeds_call_budget(self, mock_sleep) -> None:
        budget = 10
        pages = [
            ArticlePage(articles=[_article(i, "2025-04-29T12:00:00+09:00")], next_page=i + 1)
            for i in range(1, budget + 3)
        ]
        source = _source(*pages)

        result = _fetch(source, call_budget=budget)

        assert source.get_page.call_count == budget
        assert len(result) == budget
        assert source.get_page.call_args_list[-1] == call(budget, 100, "latest")
        assert mock_sleep.call_count == budget - 1

    def test_transport_failure_propagates(self, mock_sleep) -> None:
        source = Mock()
        source.get_page.side_effect = [
            ArticlePage(articles=[_article(1, "2025-04-29T12:00:00+09:00")], next_page=2),
            TransportFailure("API Error"),
        ]

        with pytest.raises(TransportFailure):
            _fetch(source)

    def test_skips_article_without_published_at(self, mock_sleep) -> None:
        source = _source(ArticlePage(
            articles=[{"id": 1, "liked_count": 3}, _article(2, "2025-04-29T12:00:00+09:00")],
            next_page=None,
        ))

        assert [a["id"] for a in _fetch(source)] == [2]

    @pytest.mark.parametrize("published_at", ["yesterday", 1714363200, ["2025-04-29"]])
    def test_skips_article_with_unparseable_published_at(self, mock_sleep, published_at) -> None:
        source = _source(ArticlePage(
            articles=[
                {"id": 1, "published_at": published_at, "liked_count": 3},
                _article(2, "2025-04-29T12:00:00+09:00"),
            ],
            next_page=None,
        ))

        assert [a["id"] for a in _fetch(source)] == [2]
